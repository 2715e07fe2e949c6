from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real

from ...contracts.errors import InvalidInputError


@dataclass(frozen=True, slots=True)
class CrossingDecision:
    feed_id: str
    previous_amount_millions: float
    current_amount_millions: float
    threshold_millions: float
    crossed: bool


def require_finite(name: str, value: object) -> float:
    # bool is a Real subclass but never a valid amount
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidInputError(f"{name} must be a number, got {type(value).__name__}")
    if not math.isfinite(value):
        raise InvalidInputError(f"{name} must be finite, got {value!r}")
    return float(value)


def detect_crossing(
    previous: float,
    current: float,
    threshold: float,
    *,
    feed_id: str = "",
) -> CrossingDecision:
    """Decide whether a feed moved from below the threshold to at-or-above it.

    Only upward movement counts: ``previous < threshold <= current``. Falling
    back under the threshold, or staying above it, never crosses. Both sides at
    zero (first run against a failed fetch) never crosses for a positive
    threshold.

    Raises:
        InvalidInputError: when any amount is not a finite real number.
    """
    previous = require_finite("previous", previous)
    current = require_finite("current", current)
    threshold = require_finite("threshold", threshold)

    return CrossingDecision(
        feed_id=feed_id,
        previous_amount_millions=previous,
        current_amount_millions=current,
        threshold_millions=threshold,
        crossed=previous < threshold and current >= threshold,
    )
