"""Tracks the newest item a user has already looked at, per namespace."""

import threading
import time
from typing import Callable, Dict, Iterable, List, Optional


def _now_ms() -> int:
    return int(time.time() * 1000)


class LastSeenTracker:
    """
    Remembers a "last seen" timestamp (epoch ms) for one kind of item, e.g.
    ``transaction``. Anything first seen after that mark counts as unseen.
    """

    def __init__(self, namespace: str, clock: Optional[Callable[[], int]] = None):
        self.namespace = namespace
        self.last_seen_at = 0
        self._clock = clock or _now_ms
        self._lock = threading.RLock()

    def mark_seen(self, at: Optional[int] = None) -> int:
        """Move the mark forward; it never moves backwards."""
        stamp = self._clock() if at is None else int(at)
        with self._lock:
            if stamp > self.last_seen_at:
                self.last_seen_at = stamp
            return self.last_seen_at

    def reset(self) -> None:
        with self._lock:
            self.last_seen_at = 0

    def is_unseen(self, timestamp: Optional[int]) -> bool:
        if timestamp is None:
            return False
        with self._lock:
            return timestamp > self.last_seen_at

    def filter_unseen(self, items: Iterable[Dict], key: str = "first_seen_at") -> List[Dict]:
        return [item for item in items if self.is_unseen(item.get(key))]

    def to_dict(self) -> Dict:
        return {"namespace": self.namespace, "last_seen_at": self.last_seen_at}
