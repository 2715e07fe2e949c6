from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .config import Settings


# $1.5 billion, in millions
DEFAULT_THRESHOLD_MILLIONS = 1500


@dataclass(frozen=True, slots=True)
class MonitorConfig:
    """Resolved inputs for one jackpot run; built from Settings, never from os.environ."""

    threshold_raw: Optional[str] = None
    default_threshold_millions: float = DEFAULT_THRESHOLD_MILLIONS
    email_from: Optional[str] = None
    email_to: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "MonitorConfig":
        return cls(
            threshold_raw=settings.jackpot_threshold,
            email_from=settings.email_from,
            email_to=settings.email_to,
        )
