from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class HostEnvironment:
    """Capabilities the embedding runtime exposes to the collector.

    Any attribute may be None. Channels look attributes up on every flush, so
    a host can attach or detach a capability between reports.

      - webview: object with `post_message(serialized: str)`
      - parent: enclosing frame with `post_message(payload: dict, target_origin: str)`
      - analytics_bridge: object with `send_analytics(payload: dict)`
    """

    webview: Optional[Any] = None
    parent: Optional[Any] = None
    analytics_bridge: Optional[Any] = None

    def has_distinct_parent(self) -> bool:
        return self.parent is not None and self.parent is not self
