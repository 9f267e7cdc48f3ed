"""Gameplay event accumulation.

- `EventStore` holds session, level, task and metric state.
- `AnalyticsManager` pairs a store with a `DeliveryRouter` and is what hosts
  construct and keep.
"""

from .manager import AnalyticsManager
from .models import Level, Session, Task
from .store import EventStore

__all__ = ["AnalyticsManager", "EventStore", "Level", "Session", "Task"]
