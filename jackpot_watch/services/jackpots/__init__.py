from .amount import BILLION_IN_MILLIONS, format_jackpot_display
from .crossing import CrossingDecision, detect_crossing
from .threshold import ThresholdConfig, ThresholdEvaluation, evaluate, resolve_threshold

__all__ = [
    "BILLION_IN_MILLIONS",
    "CrossingDecision",
    "ThresholdConfig",
    "ThresholdEvaluation",
    "detect_crossing",
    "evaluate",
    "format_jackpot_display",
    "resolve_threshold",
]
