from .mailer import Mailer, SendResult, build_message, build_subject, is_configured

__all__ = ["Mailer", "SendResult", "build_message", "build_subject", "is_configured"]
