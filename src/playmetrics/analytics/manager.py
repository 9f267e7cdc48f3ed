from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from playmetrics._internal.kv_stores import MemoryKeyValueStore, SQLiteKeyValueStore
from playmetrics.analytics.models import Session
from playmetrics.analytics.store import EventStore
from playmetrics.config import PlaymetricsSettings
from playmetrics.delivery.channels import KeyValueStore
from playmetrics.delivery.host import HostEnvironment
from playmetrics.delivery.router import DeliveryResult, DeliveryRouter
from playmetrics.logging_setup import configure_logging

logger = logging.getLogger(__name__)


def build_storage(settings: PlaymetricsSettings) -> KeyValueStore:
    if settings.queue_backend == "sqlite":
        try:
            store = SQLiteKeyValueStore(path=settings.queue_sqlite_path)
            logger.info("[analytics] sqlite queue enabled path=%s", str(settings.queue_sqlite_path))
            return store
        except Exception as e:
            logger.error("[analytics] sqlite queue init failed, using memory: %s", e, exc_info=True)
    return MemoryKeyValueStore()


class AnalyticsManager:
    """Gameplay analytics: event accumulation plus report delivery.

    Hosts construct one instance and pass it where it is needed. Submitting
    a report leaves the accumulated state in place; call `reset()` to start
    over.
    """

    def __init__(
        self,
        *,
        store: Optional[EventStore] = None,
        router: Optional[DeliveryRouter] = None,
        storage: Optional[KeyValueStore] = None,
    ) -> None:
        self._store = store or EventStore()
        self._storage = storage
        if router is None:
            self._storage = self._storage or MemoryKeyValueStore()
            router = DeliveryRouter.for_host(HostEnvironment(), self._storage)
        self._router = router

    @classmethod
    def from_settings(
        cls,
        settings: Optional[PlaymetricsSettings] = None,
        *,
        host: Optional[HostEnvironment] = None,
        store: Optional[EventStore] = None,
    ) -> "AnalyticsManager":
        s = settings or PlaymetricsSettings()
        configure_logging(s.log_level)
        storage = build_storage(s)
        router = DeliveryRouter.for_host(
            host or HostEnvironment(),
            storage,
            queue_key=s.queue_key,
            target_origin=s.parent_target_origin,
        )
        return cls(store=store, router=router, storage=storage)

    @property
    def store(self) -> EventStore:
        return self._store

    @property
    def router(self) -> DeliveryRouter:
        return self._router

    def initialize(self, game_name: str, session_id: str) -> Session:
        return self._store.initialize(game_name, session_id)

    def start_level(self, level_id: str) -> None:
        self._store.start_level(level_id)

    def record_task(
        self,
        level_id: str,
        task_id: str,
        task_name: str,
        task_type: str,
        result: str,
        time_taken_ms: int,
        points_earned: int,
    ) -> bool:
        return self._store.record_task(
            level_id, task_id, task_name, task_type, result, time_taken_ms, points_earned
        )

    def end_level(self, level_id: str, completed: bool, duration_ms: int, xp_earned: int) -> bool:
        return self._store.end_level(level_id, completed, duration_ms, xp_earned)

    def add_raw_metric(self, key: str, value: Any) -> None:
        self._store.add_raw_metric(key, value)

    def get_report_data(self) -> Dict[str, Any]:
        return self._store.get_report_data()

    def submit_report(self) -> DeliveryResult:
        payload = self._store.get_report_data()
        session = payload.get("session") or {}
        logger.info(
            "[analytics] submitting report session=%s levels=%d metrics=%d",
            session.get("session_id", "-"),
            len(payload["levels"]),
            len(payload["rawData"]),
        )
        return self._router.deliver(payload)

    def reset(self) -> None:
        self._store.reset()

    def close(self) -> None:
        if self._storage is None:
            return
        try:
            self._storage.close()
        except Exception:
            logger.error("[analytics] storage close failed: %s", getattr(self._storage, "name", "unknown"), exc_info=True)
