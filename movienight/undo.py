# movienight/undo.py
import time
import uuid
from dataclasses import dataclass, field

KIND_MOVIE = "movie"
KIND_MOVIE_NIGHT = "movie_night"


@dataclass
class UndoEntry:
    token: str
    kind: str
    label: str
    expires_at: float
    movies: list = field(default_factory=list)
    nights: list = field(default_factory=list)
    restored: int = 0

    def remaining(self, now):
        return max(0.0, self.expires_at - now)


class UndoBuffer:
    """Short-lived copies of deleted movies and movie nights.

    Each entry can be taken back exactly once, and only until its window
    runs out. Expired entries are dropped whenever a new one is pushed.
    """

    def __init__(self, window_seconds, clock=time.monotonic):
        self.window_seconds = window_seconds
        self.clock = clock
        self._entries = {}

    def __len__(self):
        return len(self._entries)

    def push(self, kind, label, movies=(), nights=()):
        self.purge()
        entry = UndoEntry(
            token=uuid.uuid4().hex,
            kind=kind,
            label=label,
            expires_at=self.clock() + self.window_seconds,
            movies=list(movies),
            nights=list(nights),
        )
        self._entries[entry.token] = entry
        return entry

    def take(self, token):
        entry = self._entries.pop(token, None)
        if entry is None or entry.expires_at <= self.clock():
            return None
        return entry

    def pending(self):
        now = self.clock()
        return [e for e in self._entries.values() if e.expires_at > now]

    def purge(self):
        now = self.clock()
        expired = [token for token, e in self._entries.items() if e.expires_at <= now]
        for token in expired:
            del self._entries[token]
        return len(expired)

    def seconds_left(self, entry):
        return entry.remaining(self.clock())
