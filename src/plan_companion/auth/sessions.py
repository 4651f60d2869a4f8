# src/plan_companion/auth/sessions.py

from __future__ import annotations

import threading
import time
from collections.abc import Callable

from .passwords import generate_token


class InMemorySessionStore:
    """
    Server-held sessions keyed by opaque token.

    Sessions expire `ttl_seconds` after creation. Expired entries are dropped
    lazily on lookup. Safe to share between request threads.
    """

    def __init__(self, ttl_seconds: float = 7 * 24 * 3600, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl = float(ttl_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        self._sessions: dict[str, tuple[str, float]] = {}

    def create(self, owner_id: str) -> str:
        token = generate_token()
        with self._lock:
            self._sessions[token] = (owner_id, self._clock() + self._ttl)
        return token

    def resolve(self, token: str) -> str | None:
        if not token:
            return None
        with self._lock:
            entry = self._sessions.get(token)
            if entry is None:
                return None
            owner_id, expires_at = entry
            if self._clock() >= expires_at:
                del self._sessions[token]
                return None
            return owner_id

    def revoke(self, token: str) -> None:
        with self._lock:
            self._sessions.pop(token, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
