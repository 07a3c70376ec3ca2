"""Ports package - defines interfaces for external dependencies.

The flag services only talk to these protocols; concrete stores and sinks
live under ``infrastructure``.
"""

from .listing import ListingService
from .mutation import MutationService
from .notification import NotificationSink

__all__ = [
    "ListingService",
    "MutationService",
    "NotificationSink",
]
