"""
Calculation cache for fincalc.

Purpose
-------
An explicit, caller-owned memo of calculator results. Calculators are pure,
so a result can be reused for identical arguments. The engine never holds a
cache of its own; whoever wants memoisation creates a ``CalculationCache``
and routes calls through ``cached_call``.

Keys are ``(function name, SHA-256 of the canonical JSON of the arguments)``.
Canonical JSON sorts keys and drops whitespace, so ``f(a=1, b=2)`` and
``f(b=2, a=1)`` share an entry. Dataclass and numpy arguments are converted
with ``fincalc.serialization.to_dict`` first; ``nan``, ``inf`` and ``-inf``
are tagged so that they do not collide with each other or with None.

Eviction is least-recently-used at ``max_size``; entries older than
``ttl_seconds`` are dropped when they are next looked up. Results are
deep-copied on the way in and on the way out, so a caller that mutates a
returned record (a schedule list, a values array) never changes the stored
entry. Access to the entries is serialised with a lock.

Example
-------
>>> from fincalc.bonds import price_bond
>>> cache = CalculationCache(max_size=10)
>>> first = cached_call(cache, price_bond, 1000, 5, 10, 5, 2)
>>> cached_call(cache, price_bond, 1000, 5, 10, 5, 2) == first
True
"""

from __future__ import annotations

import hashlib
import json
import logging
import time
from collections import OrderedDict
from copy import deepcopy
from threading import Lock
from typing import Any, Callable, Optional, Tuple, TypeVar

from .constants import DEFAULT_CACHE_SIZE, DEFAULT_CACHE_TTL_SECONDS
from .exceptions import ValidationError
from .serialization import to_dict

__all__ = ["CalculationCache", "cache_key", "cached_call"]

logger = logging.getLogger(__name__)

T = TypeVar("T")
CacheKey = Tuple[str, str]


def cache_key(func_name: str, *args: Any, **kwargs: Any) -> CacheKey:
    """``(func_name, sha256 hex of canonical JSON of args and kwargs)``."""
    payload = {
        "args": to_dict(list(args), tag_non_finite=True),
        "kwargs": to_dict(kwargs, tag_non_finite=True),
    }
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
    return func_name, digest


class CalculationCache:
    """
    Bounded LRU cache with lazy time-to-live expiry.

    Parameters
    ----------
    max_size : int, default 100
        Maximum number of entries (>= 1).
    ttl_seconds : float, default 3600
        Entry lifetime (> 0).
    clock : callable, default time.monotonic
        Source of the current time in seconds. Tests inject a fake clock.
    """

    def __init__(
        self,
        max_size: int = DEFAULT_CACHE_SIZE,
        ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_size < 1:
            raise ValidationError(f"max_size must be >= 1, got {max_size}")
        if ttl_seconds <= 0:
            raise ValidationError(f"ttl_seconds must be > 0, got {ttl_seconds}")
        self.max_size = int(max_size)
        self.ttl_seconds = float(ttl_seconds)
        self._clock = clock
        self._lock = Lock()
        self._entries: "OrderedDict[CacheKey, Tuple[float, Any]]" = OrderedDict()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __repr__(self) -> str:
        return (
            f"CalculationCache(entries={len(self)}, max_size={self.max_size}, "
            f"ttl_seconds={self.ttl_seconds})"
        )

    def get(self, key: CacheKey) -> Optional[Any]:
        """Return a copy of the stored result, or None when missing or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, result = entry
            if self._clock() - stored_at > self.ttl_seconds:
                self._entries.pop(key, None)
                logger.debug("Cache entry for %s expired", key[0])
                return None
            self._entries.move_to_end(key)
            logger.debug("Cache hit for %s", key[0])
            return deepcopy(result)

    def set(self, key: CacheKey, result: Any) -> None:
        """Store a copy of ``result``, evicting the least recently used entry when full."""
        stored = deepcopy(result)
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
            elif len(self._entries) >= self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Cache full (%d); evicted entry for %s", self.max_size, evicted[0])
            self._entries[key] = (self._clock(), stored)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


def cached_call(cache: CalculationCache, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """
    Call ``func(*args, **kwargs)`` through ``cache``.

    Every call returns its own copy of the result; mutating it does not
    affect the cache or other callers. None results are never stored.
    """
    name = f"{getattr(func, '__module__', '')}.{getattr(func, '__qualname__', repr(func))}"
    key = cache_key(name, *args, **kwargs)
    result = cache.get(key)
    if result is not None:
        return result
    result = func(*args, **kwargs)
    if result is not None:
        cache.set(key, result)
    return result
