"""Process-wide cache of issuer verification key sets."""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from jwcrypto.jwk import JWKSet
from report_common.logging import setup_logging

from interfaces import KeySetFetcher

logger = setup_logging()

DEFAULT_TTL_SECONDS = 3600.0


@dataclass(frozen=True)
class CachedKeySet:
    """A key set together with the moment it was fetched."""

    key_set: JWKSet
    fetched_at: float


class KeySetCache:
    """
    Caches one key set per URL for at most one TTL window.

    Entries are immutable and replaced by a single dict assignment, so a
    reader sees either the previous or the refreshed entry, never a mix.
    Refreshes are serialized; a caller that waited for the lock re-checks
    the entry before fetching again.
    """

    def __init__(
        self,
        fetcher: KeySetFetcher,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._fetcher = fetcher
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CachedKeySet] = {}
        self._refresh_lock = threading.Lock()

    def get(self, url: str) -> JWKSet:
        """
        Returns the key set for ``url``, fetching it on a miss or after the TTL.

        Raises:
            KeySetFetchError: If a required fetch fails. The stale entry, if
                any, is kept and the next call tries again.
        """
        entry = self._entries.get(url)
        if entry is not None and not self._is_stale(entry):
            return entry.key_set

        with self._refresh_lock:
            entry = self._entries.get(url)
            if entry is not None and not self._is_stale(entry):
                return entry.key_set

            key_set = self._fetcher.fetch(url)
            self._entries[url] = CachedKeySet(key_set=key_set, fetched_at=self._clock())

        logger.info(
            "Key set refreshed",
            extra={"url": url, "ttl_seconds": self._ttl_seconds, "was_cached": entry is not None},
        )
        return key_set

    def _is_stale(self, entry: CachedKeySet) -> bool:
        return self._clock() - entry.fetched_at > self._ttl_seconds
