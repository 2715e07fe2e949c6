from .feed_base import FeedAdapter, unavailable_result, unparseable_result
from .megamillions_api import MegaMillionsApiAdapter
from .powerball_com import PowerballComAdapter

__all__ = [
    "FeedAdapter",
    "MegaMillionsApiAdapter",
    "PowerballComAdapter",
    "unavailable_result",
    "unparseable_result",
]
