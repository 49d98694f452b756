"""
Tests for the courier auth token cache.
"""
from printship.modules.shipping.token_cache import TokenCache


class TestTokenCache:
    """Expiry is the provider TTL minus the safety margin."""

    def test_miss_on_empty_cache(self, token_cache):
        assert token_cache.get("ekart") is None
        assert token_cache.expires_at("ekart") is None

    def test_token_reused_until_margin(self, token_cache, fake_clock):
        token_cache.store("ekart", "tok-1", ttl_seconds=86400)

        fake_clock.advance(23 * 3600 - 1)
        assert token_cache.get("ekart") == "tok-1"

    def test_token_expires_one_margin_before_ttl(self, token_cache, fake_clock):
        start = fake_clock.now
        token_cache.store("ekart", "tok-1", ttl_seconds=86400)

        assert token_cache.expires_at("ekart") == start + 23 * 3600
        fake_clock.advance(23 * 3600)
        assert token_cache.get("ekart") is None

    def test_new_login_overwrites_expired_entry(self, token_cache, fake_clock):
        token_cache.store("ekart", "tok-1", ttl_seconds=86400)
        fake_clock.advance(86400)

        token_cache.store("ekart", "tok-2", ttl_seconds=86400)

        assert token_cache.get("ekart") == "tok-2"

    def test_providers_are_independent(self, token_cache):
        token_cache.store("ekart", "tok-e", ttl_seconds=86400)

        assert token_cache.get("other") is None
        assert token_cache.get("ekart") == "tok-e"

    def test_ttl_shorter_than_margin_is_never_reused(self, fake_clock):
        cache = TokenCache(safety_margin_seconds=3600, clock=fake_clock)

        cache.store("ekart", "tok", ttl_seconds=600)

        assert cache.get("ekart") is None
