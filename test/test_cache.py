"""
Tests for the in-memory metadata cache.
"""

from generate_metadata.constants import ROOT_CACHE_KEY
from generate_metadata.schemas.metadata import MetadataDocument
from generate_metadata.services.cache_service import CacheStats, MetadataCache, cache_key


class TestCacheKey:
    """Tests for cache key derivation."""

    def test_root_sentinel(self):
        """Test that root metadata uses the sentinel key."""
        assert cache_key(None) == ROOT_CACHE_KEY

    def test_paths_used_as_is(self):
        assert cache_key("/blog/hello") == "/blog/hello"
        assert cache_key("/") == "/"

    def test_root_sentinel_cannot_collide_with_path(self):
        assert not ROOT_CACHE_KEY.startswith("/")


class TestMetadataCache:
    """Tests for MetadataCache."""

    def test_basic_get_set(self):
        """Test basic get and set operations."""
        cache = MetadataCache()
        document = MetadataDocument(title="Hello")

        cache.set("/hello", document)
        assert cache.get("/hello") is document
        assert "/hello" in cache
        assert len(cache) == 1

    def test_get_missing_key(self):
        cache = MetadataCache()
        assert cache.get("/missing") is None

    def test_empty_document_is_a_hit(self):
        """Test that a cached empty document is distinguishable from a miss."""
        cache = MetadataCache()
        cache.set("/empty", MetadataDocument())

        assert cache.get("/empty") == MetadataDocument()
        assert cache.get_stats()["hits"] == 1

    def test_delete(self):
        """Test deleting a key."""
        cache = MetadataCache()
        cache.set("/a", MetadataDocument(title="A"))

        assert cache.delete("/a") is True
        assert cache.get("/a") is None
        assert cache.delete("/a") is False

    def test_clear(self):
        """Test clearing every entry."""
        cache = MetadataCache()
        cache.set("/a", MetadataDocument(title="A"))
        cache.set(ROOT_CACHE_KEY, MetadataDocument(title="Root"))

        cache.clear()

        assert len(cache) == 0
        assert cache.keys() == []

    def test_overwrite(self):
        cache = MetadataCache()
        cache.set("/a", MetadataDocument(title="Old"))
        cache.set("/a", MetadataDocument(title="New"))

        assert cache.get("/a").title == "New"
        assert len(cache) == 1


class TestCacheStats:
    """Tests for cache statistics."""

    def test_hit_rate_without_lookups(self):
        assert CacheStats().hit_rate == 0.0

    def test_hit_rate(self):
        assert CacheStats(hits=3, misses=1).hit_rate == 75.0

    def test_get_stats(self):
        """Test counting hits, misses, sets and deletes."""
        cache = MetadataCache()
        cache.set("/a", MetadataDocument(title="A"))
        cache.get("/a")
        cache.get("/b")
        cache.delete("/a")

        stats = cache.get_stats()

        assert stats == {
            "size": 0,
            "hits": 1,
            "misses": 1,
            "sets": 1,
            "deletes": 1,
            "hit_rate": "50.00%",
        }
