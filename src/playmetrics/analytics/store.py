from __future__ import annotations

import logging
import threading
import time
from copy import deepcopy
from typing import Any, Callable, Dict, List, Optional, Tuple

from playmetrics.analytics.models import Level, Session, Task

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def _now_ms() -> int:
    return int(time.time() * 1000)


class EventStore:
    """In-memory accumulation of session, level, task and metric events.

    Rejected calls (no current level, or a level id that is not the current
    one) are warnings: they return False and leave every level untouched.
    A single re-entrant lock serializes mutations and snapshots so hosts that
    call in from several threads never see a level mid-append.
    """

    def __init__(self, *, clock: Optional[Clock] = None) -> None:
        self._clock: Clock = clock or _now_ms
        self._lock = threading.RLock()

        self._session: Optional[Session] = None
        self._levels: List[Level] = []
        self._current: Optional[Level] = None
        self._raw_data: Dict[str, Any] = {}

    # -- lifecycle -----------------------------------------------------------

    def initialize(self, game_name: str, session_id: str) -> Session:
        session = Session(
            game_name=str(game_name),
            session_id=str(session_id),
            timestamp=int(self._clock()),
        )
        with self._lock:
            self._session = session
        logger.info("[analytics] session initialized game=%s session=%s", session.game_name, session.session_id)
        return session

    def start_level(self, level_id: str) -> None:
        with self._lock:
            previous = self._current
            level = Level(level_id=str(level_id), start_time=int(self._clock()))
            self._levels.append(level)
            self._current = level
        if previous is not None and previous.is_open:
            # The previous level stays in `levels` with end_time=None.
            logger.warning(
                "[analytics] level %s started while %s was still open; %s is left unclosed",
                level_id,
                previous.level_id,
                previous.level_id,
            )
        logger.info("[analytics] level started: %s", level_id)

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
        with self._lock:
            current = self._current
            if current is None or current.level_id != level_id:
                logger.warning("[analytics] no active level %s to record task %s", level_id, task_id)
                return False
            current.tasks.append(
                Task(
                    task_id=str(task_id),
                    task_name=str(task_name),
                    task_type=str(task_type),
                    result=str(result),
                    time_taken_ms=int(time_taken_ms),
                    points_earned=int(points_earned),
                )
            )
        logger.debug(
            "[analytics] task recorded: %s level=%s type=%s result=%s duration_ms=%s points=%s",
            task_id,
            level_id,
            task_type,
            result,
            time_taken_ms,
            points_earned,
        )
        return True

    def end_level(self, level_id: str, completed: bool, duration_ms: int, xp_earned: int) -> bool:
        with self._lock:
            current = self._current
            if current is None or current.level_id != level_id:
                logger.warning("[analytics] no active level %s to end", level_id)
                return False
            # Duration and xp are trusted as given, not derived from timestamps.
            # Numeric fields are stored as ints, the same as task fields.
            current.end_time = int(self._clock())
            current.duration_ms = int(duration_ms)
            current.completed = bool(completed)
            current.xp_earned = int(xp_earned)
            self._current = None
        logger.info(
            "[analytics] level ended: %s completed=%s duration_ms=%s xp=%s",
            level_id,
            completed,
            duration_ms,
            xp_earned,
        )
        return True

    def add_raw_metric(self, key: str, value: Any) -> None:
        with self._lock:
            self._raw_data[str(key)] = value
        logger.debug("[analytics] metric set: %s", key)

    def reset(self) -> None:
        with self._lock:
            self._session = None
            self._levels = []
            self._current = None
            self._raw_data = {}
        logger.info("[analytics] data reset")

    # -- reads ---------------------------------------------------------------

    def get_report_data(self) -> Dict[str, Any]:
        """Snapshot of {session, levels, rawData}; safe for the caller to mutate."""
        with self._lock:
            return {
                "session": self._session.to_dict() if self._session else None,
                "levels": [level.to_dict() for level in self._levels],
                "rawData": deepcopy(self._raw_data),
            }

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def current_level(self) -> Optional[Level]:
        with self._lock:
            return deepcopy(self._current) if self._current else None

    @property
    def levels(self) -> Tuple[Level, ...]:
        with self._lock:
            return tuple(deepcopy(level) for level in self._levels)
