from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from playmetrics.delivery.channels import (
    DeliveryChannel,
    DurableQueueChannel,
    HostBridgeChannel,
    KeyValueStore,
    ParentFrameChannel,
    WebviewBridgeChannel,
)
from playmetrics.delivery.host import HostEnvironment

logger = logging.getLogger(__name__)


class DeliveryStatus(str, Enum):
    DELIVERED = "delivered"
    QUEUED = "queued"
    LOST = "lost"


@dataclass(frozen=True, slots=True)
class ChannelFailure:
    channel: str
    error: str


@dataclass(frozen=True, slots=True)
class DeliveryResult:
    status: DeliveryStatus
    channel: Optional[str] = None
    errors: Tuple[ChannelFailure, ...] = field(default_factory=tuple)

    @property
    def sent(self) -> bool:
        # A queued report counts as delivered-for-later.
        return self.status is not DeliveryStatus.LOST

    def __bool__(self) -> bool:
        return self.sent

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "channel": self.channel,
            "errors": [{"channel": f.channel, "error": f.error} for f in self.errors],
        }


class DeliveryRouter:
    """Sends one report through the first channel that accepts it.

    Channels are tried in the given order. Ineligible channels are skipped,
    a channel that raises is logged and skipped, and the first one that
    returns ends the attempt. Exceptions never leave `deliver`.
    """

    def __init__(self, channels: Sequence[DeliveryChannel]) -> None:
        self._channels: Tuple[DeliveryChannel, ...] = tuple(channels)

    @classmethod
    def for_host(
        cls,
        host: HostEnvironment,
        storage: KeyValueStore,
        *,
        queue_key: str = "analytics_queue",
        target_origin: str = "*",
    ) -> "DeliveryRouter":
        return cls(
            [
                WebviewBridgeChannel(host),
                ParentFrameChannel(host, target_origin=target_origin),
                HostBridgeChannel(host),
                DurableQueueChannel(storage, key=queue_key),
            ]
        )

    @property
    def channels(self) -> Tuple[DeliveryChannel, ...]:
        return self._channels

    def deliver(self, payload: Dict[str, Any]) -> DeliveryResult:
        failures: List[ChannelFailure] = []
        for channel in self._channels:
            name = getattr(channel, "name", type(channel).__name__)
            try:
                if not channel.is_eligible():
                    continue
                channel.attempt(payload)
            except Exception as e:
                failures.append(ChannelFailure(channel=name, error=f"{type(e).__name__}: {e}"))
                if getattr(channel, "durable", False):
                    logger.error("[delivery] durable fallback failed: %s err=%s", name, e, exc_info=True)
                else:
                    logger.warning("[delivery] channel failed: %s err=%s", name, e)
                continue

            durable = bool(getattr(channel, "durable", False))
            status = DeliveryStatus.QUEUED if durable else DeliveryStatus.DELIVERED
            logger.info("[delivery] report %s via %s", status.value, name)
            return DeliveryResult(status=status, channel=name, errors=tuple(failures))

        logger.error("[delivery] all delivery methods failed (%d attempted)", len(failures))
        return DeliveryResult(status=DeliveryStatus.LOST, errors=tuple(failures))
