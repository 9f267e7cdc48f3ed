from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True, slots=True)
class Session:
    """One analytics-tracked application run."""

    game_name: str
    session_id: str
    timestamp: int  # ms since epoch

    def to_dict(self) -> Dict[str, Any]:
        return {
            "game_name": self.game_name,
            "session_id": self.session_id,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True, slots=True)
class Task:
    """One action recorded inside the current level.

    `task_type` and `result` are free-form tags chosen by the game.
    """

    task_id: str
    task_name: str
    task_type: str
    result: str
    time_taken_ms: int
    points_earned: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "task_id": self.task_id,
            "task_name": self.task_name,
            "task_type": self.task_type,
            "result": self.result,
            "time_taken_ms": self.time_taken_ms,
            "points_earned": self.points_earned,
        }


@dataclass(slots=True)
class Level:
    """One play-through of a level, open until `end_time` is set."""

    level_id: str
    start_time: int
    end_time: Optional[int] = None
    duration_ms: Optional[int] = None
    completed: bool = False
    xp_earned: int = 0
    tasks: List[Task] = field(default_factory=list)

    @property
    def is_open(self) -> bool:
        return self.end_time is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level_id": self.level_id,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "duration_ms": self.duration_ms,
            "completed": self.completed,
            "xp_earned": self.xp_earned,
            "tasks": [t.to_dict() for t in self.tasks],
        }
