from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, Optional, Union

from .config import MASTERY_POINTS_PER_TASK

logger = logging.getLogger(__name__)


class Lab(Enum):
    CPU = "cpu"
    MEMORY = "memory"
    DEADLOCK = "deadlock"
    CONCURRENCY = "concurrency"


# (user_id, lab label, task count)
ProgressReporter = Callable[[str, str, int], None]


def report_progress(
    reporter: Optional[ProgressReporter],
    user_id: Optional[str],
    lab: Union[Lab, str],
    task_count: int = 1,
) -> bool:
    """
    Tell the progress tracker that a lab task was completed.

    Does nothing without a reporter or a signed-in user. A failing reporter
    is logged and ignored. Returns True if the reporter accepted the call.
    """
    if reporter is None or not user_id:
        return False

    label = lab.value if isinstance(lab, Lab) else str(lab)
    try:
        reporter(user_id, label, task_count)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Progress sync for %s/%s failed: %s", user_id, label, exc)
        return False

    logger.debug("Progress sync: %s data pushed for %s", label, user_id)
    return True


@dataclass
class UserProgress:
    tasks: int = 0
    stats: Dict[str, int] = field(default_factory=dict)
    last_sync: Optional[str] = None


class ProgressLedger:
    """
    In-memory progress tracker, usable as a ``ProgressReporter``.

    Each report adds ``task_count`` to the user's task total and credits the
    lab with mastery points.
    """

    def __init__(self, points_per_task: int = MASTERY_POINTS_PER_TASK) -> None:
        self.points_per_task = points_per_task
        self.users: Dict[str, UserProgress] = {}

    def __call__(self, user_id: str, lab: str, task_count: int = 1) -> None:
        progress = self.users.setdefault(user_id, UserProgress())
        progress.tasks += task_count
        progress.stats[lab] = progress.stats.get(lab, 0) + self.points_per_task
        progress.last_sync = datetime.now(timezone.utc).isoformat()

    def progress_for(self, user_id: str) -> UserProgress:
        return self.users.get(user_id, UserProgress())
