from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Iterable

from ...contracts.schemas.jackpots import AnnotatedResult, FeedResult, ThresholdInfo
from ...settings.monitor import DEFAULT_THRESHOLD_MILLIONS
from .amount import format_jackpot_display

_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


@dataclass(frozen=True, slots=True)
class ThresholdConfig:
    amount_millions: float

    @property
    def display_label(self) -> str:
        return format_jackpot_display(self.amount_millions)


@dataclass(slots=True)
class ThresholdEvaluation:
    results: list[AnnotatedResult]
    threshold: ThresholdInfo
    config: ThresholdConfig

    @property
    def exceeded_any(self) -> bool:
        return self.threshold.exceeded

    @property
    def exceeding_feed_ids(self) -> list[str]:
        return list(self.threshold.exceeding_feed_ids)


def parse_threshold(raw: object) -> float | None:
    """Leading-number parse: ``"1600"`` and ``" 1600 millions"`` both give 1600."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return float(raw)
    match = _LEADING_NUMBER.match(str(raw))
    if not match:
        return None
    return float(match.group(1))


def resolve_threshold(
    raw: object,
    default: float = DEFAULT_THRESHOLD_MILLIONS,
) -> ThresholdConfig:
    value = parse_threshold(raw)
    if value is None or not math.isfinite(value) or value <= 0:
        value = float(default)
    return ThresholdConfig(amount_millions=value)


def exceeds_threshold(result: FeedResult, threshold: ThresholdConfig) -> bool:
    if result.has_error:
        return False
    return result.amount_millions >= threshold.amount_millions


def evaluate(results: Iterable[FeedResult], threshold: ThresholdConfig) -> ThresholdEvaluation:
    annotated: list[AnnotatedResult] = []
    exceeding: list[str] = []
    for result in results:
        flag = exceeds_threshold(result, threshold)
        annotated.append(
            AnnotatedResult.model_validate({**result.model_dump(), "exceeds_threshold": flag})
        )
        if flag:
            exceeding.append(result.feed_id)

    info = ThresholdInfo(
        amount=threshold.amount_millions,
        display=threshold.display_label,
        exceeded=bool(exceeding),
        exceeding_feed_ids=exceeding,
    )
    return ThresholdEvaluation(results=annotated, threshold=info, config=threshold)
