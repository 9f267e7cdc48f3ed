from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(eq=False)
class MemoryKeyValueStore:
    name: str = "memory"

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[str(key)] = str(value)

    def close(self) -> None:
        return
