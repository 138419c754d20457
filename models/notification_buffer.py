import threading
from dataclasses import dataclass, field
from typing import Dict, List
import time

from config.config import get_config


@dataclass(frozen=True)
class Notification:
    message: str
    level: str = "success"
    duration_ms: int = 3000
    created_at: float = field(default_factory=time.time)

    def to_dict(self) -> Dict:
        return {
            "message": self.message,
            "level": self.level,
            "duration_ms": self.duration_ms,
        }


class NotificationBuffer:
    def __init__(self, max_pending: int = 50):
        self._pending: List[Notification] = []
        self._max_pending = max_pending
        self._lock = threading.Lock()

    def push(self, message: str, level: str = "success") -> Notification:
        notification = Notification(
            message=message,
            level=level,
            duration_ms=get_config().site.notification_duration_ms,
        )
        with self._lock:
            self._pending.append(notification)
            # Keep only the most recent notifications
            if len(self._pending) > self._max_pending:
                self._pending = self._pending[-self._max_pending :]
        return notification

    def drain(self) -> List[Notification]:
        with self._lock:
            pending, self._pending = self._pending, []
        return pending

    def peek(self) -> List[Notification]:
        with self._lock:
            return list(self._pending)

    def clear(self):
        with self._lock:
            self._pending = []


# Singleton instance
notification_buffer = NotificationBuffer()
