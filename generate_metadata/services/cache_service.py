"""
Metadata Cache

In-memory store of the last fetched metadata document per normalized path.
There is no TTL: entries live until a webhook (or an explicit call) clears
them, or the owning client is discarded.
"""

import logging
from dataclasses import dataclass

from generate_metadata.constants import ROOT_CACHE_KEY
from generate_metadata.schemas.metadata import MetadataDocument

logger = logging.getLogger(__name__)


def cache_key(normalized_path: str | None) -> str:
    """Map a normalizer output onto a cache key; ``None`` is the root entry."""
    return ROOT_CACHE_KEY if normalized_path is None else normalized_path


@dataclass
class CacheStats:
    """Cache statistics."""

    hits: int = 0
    misses: int = 0
    sets: int = 0
    deletes: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total * 100


class MetadataCache:
    """
    Per-client metadata cache.

    Keys must come from :func:`cache_key` applied to a normalized path.
    """

    def __init__(self):
        self._entries: dict[str, MetadataDocument] = {}
        self._stats = CacheStats()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def keys(self) -> list[str]:
        return list(self._entries)

    def get(self, key: str) -> MetadataDocument | None:
        """Get a cached document, or None on a miss."""
        document = self._entries.get(key)
        if document is None:
            self._stats.misses += 1
            logger.debug(f"Metadata cache MISS: {key}")
            return None
        self._stats.hits += 1
        logger.debug(f"Metadata cache HIT: {key}")
        return document

    def set(self, key: str, document: MetadataDocument) -> None:
        self._entries[key] = document
        self._stats.sets += 1

    def delete(self, key: str) -> bool:
        """Delete a key."""
        if key in self._entries:
            del self._entries[key]
            self._stats.deletes += 1
            return True
        return False

    def clear(self) -> None:
        """Clear all cached documents."""
        self._stats.deletes += len(self._entries)
        self._entries.clear()

    def get_stats(self) -> dict:
        """Get cache statistics."""
        return {
            "size": len(self._entries),
            "hits": self._stats.hits,
            "misses": self._stats.misses,
            "sets": self._stats.sets,
            "deletes": self._stats.deletes,
            "hit_rate": f"{self._stats.hit_rate:.2f}%",
        }
