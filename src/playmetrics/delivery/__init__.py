"""Report delivery: ordered channels with a durable local fallback."""

from .channels import (
    DeliveryChannel,
    DurableQueueChannel,
    HostBridgeChannel,
    KeyValueStore,
    ParentFrameChannel,
    WebviewBridgeChannel,
)
from .host import HostEnvironment
from .router import ChannelFailure, DeliveryResult, DeliveryRouter, DeliveryStatus

__all__ = [
    "ChannelFailure",
    "DeliveryChannel",
    "DeliveryResult",
    "DeliveryRouter",
    "DeliveryStatus",
    "DurableQueueChannel",
    "HostBridgeChannel",
    "HostEnvironment",
    "KeyValueStore",
    "ParentFrameChannel",
    "WebviewBridgeChannel",
]
