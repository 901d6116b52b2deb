"""In-memory response cache for API providers.

Features:
- LRU eviction once ``max_size`` entries are stored
- Per-entry TTL (providers pass their own cache duration)
- Thread-safe; shared by every provider of a registry
"""

from __future__ import annotations

import hashlib
import json
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any


@dataclass
class CacheEntry:
    value: Any
    provider: str
    expires_at: float

    @property
    def is_expired(self) -> bool:
        return time.time() > self.expires_at


class ResponseCache:
    """LRU + TTL cache keyed by provider, method and request parameters."""

    def __init__(self, max_size: int = 1000, default_ttl: int = 3600) -> None:
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._max_size = max_size
        self._default_ttl = default_ttl
        self._lock = threading.RLock()
        self._stats = {"hits": 0, "misses": 0, "evictions": 0}

    @staticmethod
    def make_key(provider: str, method: str, params: dict[str, Any]) -> str:
        """Stable key; ``None`` params are ignored so optional filters don't split entries."""
        clean = {k: v for k, v in params.items() if v is not None}
        raw = f"{provider}:{method}:{json.dumps(clean, sort_keys=True, default=str)}"
        return hashlib.sha256(raw.encode()).hexdigest()[:32]

    def get(self, provider: str, method: str, params: dict[str, Any]) -> Any | None:
        key = self.make_key(provider, method, params)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or entry.is_expired:
                if entry is not None:
                    del self._entries[key]
                self._stats["misses"] += 1
                return None

            self._entries.move_to_end(key)
            self._stats["hits"] += 1
            return entry.value

    def set(
        self,
        provider: str,
        method: str,
        params: dict[str, Any],
        value: Any,
        ttl: int | None = None,
    ) -> None:
        key = self.make_key(provider, method, params)
        ttl = self._default_ttl if ttl is None else ttl
        with self._lock:
            self._entries.pop(key, None)
            while len(self._entries) >= self._max_size:
                self._entries.popitem(last=False)
                self._stats["evictions"] += 1
            self._entries[key] = CacheEntry(
                value=value, provider=provider, expires_at=time.time() + ttl
            )

    def clear(self, provider: str | None = None) -> int:
        """Drop all entries, or only those of one provider. Returns the count removed."""
        with self._lock:
            if provider is None:
                count = len(self._entries)
                self._entries.clear()
                return count

            keys = [k for k, e in self._entries.items() if e.provider == provider]
            for key in keys:
                del self._entries[key]
            return len(keys)

    def cleanup_expired(self) -> int:
        with self._lock:
            keys = [k for k, e in self._entries.items() if e.is_expired]
            for key in keys:
                del self._entries[key]
            return len(keys)

    def stats(self) -> dict[str, Any]:
        with self._lock:
            by_provider: dict[str, int] = {}
            for entry in self._entries.values():
                by_provider[entry.provider] = by_provider.get(entry.provider, 0) + 1
            return {
                **self._stats,
                "size": len(self._entries),
                "max_size": self._max_size,
                "by_provider": by_provider,
            }
