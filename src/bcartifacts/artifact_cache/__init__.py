"""
Artifact cache management.

This package handles:
1. Mapping artifact URLs to folders below the cache root
2. Staging unpacked artifacts and promoting them into place
3. Maintaining the lastused marker of each cache entry
"""

from .cache_entry import CacheEntry

__all__ = ["CacheEntry"]
