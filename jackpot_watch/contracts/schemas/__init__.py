from .jackpots import AnnotatedResult, ErrorResponse, FeedResult, SnapshotResponse, ThresholdInfo

__all__ = [
    "AnnotatedResult",
    "ErrorResponse",
    "FeedResult",
    "SnapshotResponse",
    "ThresholdInfo",
]
