"""Error taxonomy and response contracts."""

from .errors import (
    ErrorCode,
    InvalidInputError,
    JackpotWatchError,
    SourceUnavailableError,
    SourceUnparseableError,
)

__all__ = [
    "ErrorCode",
    "InvalidInputError",
    "JackpotWatchError",
    "SourceUnavailableError",
    "SourceUnparseableError",
]
