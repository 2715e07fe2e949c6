from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    INVALID_INPUT = "INVALID_INPUT"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
    STATE_ERROR = "STATE_ERROR"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class JackpotWatchError(Exception):
    code: ErrorCode = ErrorCode.INTERNAL_ERROR


class InvalidInputError(JackpotWatchError, ValueError):
    """Malformed arguments handed to a core function by its caller."""

    code = ErrorCode.INVALID_INPUT


class SourceUnavailableError(JackpotWatchError):
    """Feed could not be fetched (transport or upstream status failure)."""

    code = ErrorCode.UPSTREAM_ERROR


class SourceUnparseableError(JackpotWatchError):
    """Feed responded but the jackpot figure could not be located."""

    code = ErrorCode.PARSE_ERROR

    def __init__(self, message: str, *, next_event_label: str | None = None):
        super().__init__(message)
        self.next_event_label = next_event_label
