"""Delivery channels, one per way a report can leave the process.

Every channel answers `is_eligible()` from the host's current capabilities
and raises from `attempt()` when delivery fails. The router never calls a
channel that is not eligible.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, List, Optional, Protocol

from playmetrics.delivery.host import HostEnvironment
from playmetrics.errors import ChannelUnavailableError, QueuePersistenceError

logger = logging.getLogger(__name__)


class DeliveryChannel(Protocol):
    name: str

    def is_eligible(self) -> bool: ...
    def attempt(self, payload: Dict[str, Any]) -> None: ...


class KeyValueStore(Protocol):
    name: str

    def get_item(self, key: str) -> Optional[str]: ...
    def set_item(self, key: str, value: str) -> None: ...
    def close(self) -> None: ...


def _capability(target: Any, method: str) -> Optional[Callable[..., Any]]:
    if target is None:
        return None
    fn = getattr(target, method, None)
    return fn if callable(fn) else None


class WebviewBridgeChannel:
    """Embedded webview bridge; receives the report as a JSON string."""

    name = "webview"

    def __init__(self, host: HostEnvironment) -> None:
        self._host = host

    def is_eligible(self) -> bool:
        return _capability(self._host.webview, "post_message") is not None

    def attempt(self, payload: Dict[str, Any]) -> None:
        post = _capability(self._host.webview, "post_message")
        if post is None:
            raise ChannelUnavailableError("webview bridge is not available")
        post(json.dumps(payload, ensure_ascii=False))


class ParentFrameChannel:
    """Enclosing frame messaging; receives the structured report."""

    name = "parent_frame"

    def __init__(self, host: HostEnvironment, *, target_origin: str = "*") -> None:
        self._host = host
        self.target_origin = target_origin or "*"

    def _post(self) -> Optional[Callable[..., Any]]:
        if not self._host.has_distinct_parent():
            return None
        return _capability(self._host.parent, "post_message")

    def is_eligible(self) -> bool:
        return self._post() is not None

    def attempt(self, payload: Dict[str, Any]) -> None:
        post = self._post()
        if post is None:
            raise ChannelUnavailableError("no parent frame to post to")
        post(payload, self.target_origin)


class HostBridgeChannel:
    """Host-provided analytics bridge object."""

    name = "host_bridge"

    def __init__(self, host: HostEnvironment) -> None:
        self._host = host

    def is_eligible(self) -> bool:
        return _capability(self._host.analytics_bridge, "send_analytics") is not None

    def attempt(self, payload: Dict[str, Any]) -> None:
        send = _capability(self._host.analytics_bridge, "send_analytics")
        if send is None:
            raise ChannelUnavailableError("host analytics bridge is not available")
        send(payload)


class DurableQueueChannel:
    """Last-resort channel: appends the report to a persisted JSON array.

    The stored array is re-read on every append, so reports written by other
    writers sharing the store are kept and anything an external reader has
    drained stays drained. The queue is never pruned here.
    """

    name = "durable_queue"
    durable = True

    def __init__(self, storage: KeyValueStore, *, key: str = "analytics_queue") -> None:
        self._storage = storage
        self.key = key

    def is_eligible(self) -> bool:
        return True

    def _read(self) -> List[Dict[str, Any]]:
        try:
            raw = self._storage.get_item(self.key)
        except Exception as e:
            raise QueuePersistenceError(f"failed to read queue {self.key!r}: {e}") from e
        if not raw:
            return []
        try:
            loaded = json.loads(raw)
        except ValueError:
            loaded = None
        if not isinstance(loaded, list):
            logger.warning(
                "[delivery/durable_queue] stored value under %s is not a JSON array; starting a new queue",
                self.key,
            )
            return []
        return loaded

    def attempt(self, payload: Dict[str, Any]) -> None:
        queue = self._read()
        queue.append(payload)
        try:
            serialized = json.dumps(queue, ensure_ascii=False)
            self._storage.set_item(self.key, serialized)
        except Exception as e:
            raise QueuePersistenceError(f"failed to persist queue {self.key!r}: {e}") from e

    def pending(self) -> List[Dict[str, Any]]:
        return self._read()
