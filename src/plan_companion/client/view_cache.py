# src/plan_companion/client/view_cache.py

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass
from typing import Any

PLANS_QUERY: tuple[str, ...] = ("/api/plans",)


@dataclass(slots=True)
class CacheEntry:
    value: Any
    version: int
    stale: bool = False


class ViewCache:
    """
    Versioned client-side query cache.

    - Keys are query identities (hashable, e.g. ("/api/plans",)).
    - invalidate() bumps the key's version and marks the entry stale; the next
      read re-fetches. Nothing refreshes in the background.
    - put() with a version older than the current one is discarded, so a fetch
      that started before an invalidation cannot overwrite newer state.
    """

    def __init__(self) -> None:
        self._entries: dict[Hashable, CacheEntry] = {}
        self._versions: dict[Hashable, int] = {}

    def version(self, key: Hashable) -> int:
        return self._versions.get(key, 0)

    def get(self, key: Hashable) -> CacheEntry | None:
        return self._entries.get(key)

    def is_fresh(self, key: Hashable) -> bool:
        entry = self._entries.get(key)
        return entry is not None and not entry.stale

    def put(self, key: Hashable, value: Any, *, version: int | None = None) -> bool:
        current = self.version(key)
        if version is not None and version < current:
            return False
        self._entries[key] = CacheEntry(value=value, version=current)
        return True

    def invalidate(self, key: Hashable) -> int:
        new_version = self.version(key) + 1
        self._versions[key] = new_version
        entry = self._entries.get(key)
        if entry is not None:
            entry.stale = True
        return new_version

    def invalidate_all(self) -> None:
        for key in set(self._entries) | set(self._versions):
            self.invalidate(key)
