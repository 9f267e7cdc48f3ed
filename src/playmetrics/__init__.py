"""playmetrics: client-side gameplay analytics collector."""

from importlib import metadata

from .analytics import AnalyticsManager, EventStore
from .config import PlaymetricsSettings, load_settings
from .delivery import DeliveryResult, DeliveryRouter, DeliveryStatus, HostEnvironment

__all__ = [
    "AnalyticsManager",
    "DeliveryResult",
    "DeliveryRouter",
    "DeliveryStatus",
    "EventStore",
    "HostEnvironment",
    "PlaymetricsSettings",
    "load_settings",
    "__version__",
]


def _load_version() -> str:
    try:
        version = metadata.version("playmetrics")
        return str(version) if version is not None else "0.0.0"
    except metadata.PackageNotFoundError:
        return "0.0.0"


__version__ = _load_version()
