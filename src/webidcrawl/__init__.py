"""WebID profile discovery crawler."""

__version__ = "0.1.0"

from .models.frontier_model import FrontierItem, CrawlSummary, DepthResetPolicy
from .models.profile_model import ProfileDocument
from .core.scheduler import BoundedScheduler
from .core.worker import ProfileWorker

__all__ = [
    "FrontierItem",
    "CrawlSummary",
    "DepthResetPolicy",
    "ProfileDocument",
    "BoundedScheduler",
    "ProfileWorker",
]
