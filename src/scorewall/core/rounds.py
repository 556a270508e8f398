"""Round queue: completed rounds waiting for the scheduler."""

import threading
from collections import deque
from typing import List, Optional

from .notifications import Round


class RoundQueue:
    """Unbounded FIFO of rounds. Rounds are never merged."""

    def __init__(self):
        self._lock = threading.Lock()
        self._rounds: deque = deque()

    def enqueue(self, round_: Round) -> None:
        with self._lock:
            self._rounds.append(round_)

    def dequeue_next(self) -> Optional[Round]:
        """Remove and return the oldest round, or None if empty."""
        with self._lock:
            if not self._rounds:
                return None
            return self._rounds.popleft()

    def pending_ids(self) -> List[int]:
        with self._lock:
            return [r.id for r in self._rounds]

    def clear(self) -> None:
        with self._lock:
            self._rounds.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._rounds)
