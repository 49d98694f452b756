"""
Courier Auth Token Cache

Process-wide cache of bearer tokens keyed by provider id. Entries expire a
fixed safety margin before the provider's stated TTL, so a token that is
valid for 24h is reused for 23h.

There is no explicit eviction: an expired entry is simply ignored on read
and overwritten by the next successful login. A failed courier call never
invalidates a cached token. Concurrent misses may both log in; the later
write wins and both tokens are valid.

Usage:
    token = cache.get("ekart")
    if token is None:
        token = await login()
        cache.store("ekart", token, ttl_seconds=86400)
"""
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from printship.core.config import settings

logger = logging.getLogger(__name__)

DEFAULT_SAFETY_MARGIN_SECONDS = 3600


@dataclass(frozen=True)
class CachedToken:
    token: str
    expires_at: float

    def is_valid(self, now: float) -> bool:
        return now < self.expires_at


class TokenCache:
    """
    In-memory token cache with per-entry expiry.

    Args:
        safety_margin_seconds: subtracted from the provider TTL on store
        clock: time source, injectable for tests
    """

    def __init__(
        self,
        safety_margin_seconds: int = DEFAULT_SAFETY_MARGIN_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self._entries: Dict[str, CachedToken] = {}
        self._safety_margin = safety_margin_seconds
        self._clock = clock

    def get(self, provider: str) -> Optional[str]:
        """Return the cached token if present and not past expiry."""
        entry = self._entries.get(provider)
        if entry and entry.is_valid(self._clock()):
            return entry.token
        return None

    def store(self, provider: str, token: str, ttl_seconds: int) -> CachedToken:
        """Cache a token for ttl_seconds minus the safety margin."""
        lifetime = max(ttl_seconds - self._safety_margin, 0)
        entry = CachedToken(token=token, expires_at=self._clock() + lifetime)
        self._entries[provider] = entry
        logger.info(f"[TOKEN_CACHE] Cached {provider} token for {lifetime}s")
        return entry

    def expires_at(self, provider: str) -> Optional[float]:
        entry = self._entries.get(provider)
        return entry.expires_at if entry else None


# Shared by every adapter in the process
default_token_cache = TokenCache(safety_margin_seconds=settings.TOKEN_CACHE_SAFETY_MARGIN_SECONDS)
