"""
Signal-type allow-list cache.

Keeps the LLM-eligible subset of the signal-type catalog in memory with an
absolute expiration. A stale allow-list is acceptable for a bounded time, so
unlike the canonical embedding caches this one expires on its own.
"""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from ..config import settings
from ..domain.concepts.models import SignalTypeOption
from ..domain.concepts.ports import SignalTypeStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _CacheEntry:
    options: tuple[SignalTypeOption, ...]
    expires_at: float


class SignalTypeOptionsCache:
    """
    TTL cache of allowed signal types with single-flight refresh.

    Args:
        store: Signal-type catalog reader
        ttl_seconds: Absolute lifetime of a cached entry (default from settings, 2h)
        clock: Monotonic clock, injectable for tests
    """

    CACHE_KEY = "signal-types:allowed-in-llm"

    def __init__(
        self,
        store: SignalTypeStore,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._store = store
        self.ttl_seconds = float(
            settings.signal_type_cache_ttl_seconds if ttl_seconds is None else ttl_seconds
        )
        self._clock = clock
        self._entry: Optional[_CacheEntry] = None
        self._lock = asyncio.Lock()

    def _fresh_entry(self) -> Optional[_CacheEntry]:
        entry = self._entry
        if entry is None or self._clock() >= entry.expires_at:
            return None
        return entry

    async def get_allowed(self, force_refresh: bool = False) -> tuple[SignalTypeOption, ...]:
        """
        Get signal types allowed as classification outputs.

        Args:
            force_refresh: Bypass the cached entry and re-query the store

        Returns:
            Tuple of SignalTypeOption ordered by id
        """
        if not force_refresh:
            entry = self._fresh_entry()
            if entry is not None:
                return entry.options

        async with self._lock:
            # Double-check after acquiring lock
            if not force_refresh:
                entry = self._fresh_entry()
                if entry is not None:
                    return entry.options

            options = tuple(await self._store.fetch_allowed())
            self._entry = _CacheEntry(options=options, expires_at=self._clock() + self.ttl_seconds)
            logger.info(
                f"Cached {len(options)} signal types (allowed_in_llm=true) for {self.ttl_seconds:.0f}s"
            )
            return options

    def invalidate(self) -> None:
        """Remove the cached entry; the next read rebuilds regardless of TTL."""
        self._entry = None
        logger.info(f"Signal-type cache '{self.CACHE_KEY}' invalidated")
