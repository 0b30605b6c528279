"""Cache manager for storing and retrieving Sophos API data locally."""
import logging
import pickle
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional

from .errors import StorageError


class CacheManager:
    """Manages local caching of API responses using pickle files."""

    def __init__(
        self,
        cache_dir: Path,
        ttl_hours: float = 1,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize cache manager.

        Args:
            cache_dir: Directory to store cache files
            ttl_hours: Entries older than this are treated as missing
            clock: Source of the current time in epoch seconds
        """
        self.cache_dir = Path(cache_dir)
        self.ttl_seconds = ttl_hours * 3600
        self.clock = clock
        self.logger = logging.getLogger(__name__)

        self.logger.debug(f"Cache mode: READ from cache when fresh (TTL {ttl_hours}h)")
        self.logger.debug(f"Cache directory: {cache_dir}")

    def _get_cache_file(self, cache_key: str) -> Path:
        """Get the path to a cache file."""
        return self.cache_dir / f"{cache_key}.pickle"

    def get(self, cache_key: str) -> Optional[Any]:
        """
        Retrieve data from cache.

        Returns:
            Cached data if present and fresh, None otherwise
        """
        cache_file = self._get_cache_file(cache_key)

        if not cache_file.exists():
            self.logger.info(f"📭 Cache miss: {cache_key} (file not found)")
            return None

        try:
            with open(cache_file, 'rb') as f:
                entry = pickle.load(f)
        except Exception as e:
            self.logger.error(f"❌ Error reading cache file {cache_key}: {e}")
            return None

        if not isinstance(entry, dict) or "timestamp" not in entry or "data" not in entry:
            self.logger.warning(f"Ignoring malformed cache entry: {cache_key}")
            return None

        try:
            age = self.clock() - entry["timestamp"]
            cached_on = datetime.fromtimestamp(entry["timestamp"]).strftime('%Y-%m-%d %H:%M:%S')
        except (TypeError, ValueError, OverflowError, OSError) as e:
            self.logger.warning(f"Ignoring cache entry with bad timestamp: {cache_key} ({e})")
            return None

        if age >= self.ttl_seconds:
            self.logger.info(f"⏰ Cache expired: {cache_key} ({round(age / 3600, 1)} hours old)")
            return None

        self.logger.info(f"✅ Cache hit: {cache_key} (cached on {cached_on})")
        return entry["data"]

    def set(self, cache_key: str, data: Any) -> None:
        """
        Store data in cache, stamped with the current time.
        """
        cache_file = self._get_cache_file(cache_key)

        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            with open(cache_file, 'wb') as f:
                pickle.dump({"timestamp": self.clock(), "data": data}, f)

            size_kb = round(cache_file.stat().st_size / 1024, 2)
            self.logger.info(f"💾 Cached: {cache_key} ({size_kb} KB)")
        except Exception as e:
            self.logger.error(f"❌ Error writing cache file {cache_key}: {e}")

    def clear(self) -> str:
        """
        Remove every cache entry.

        Returns a status message; raises StorageError if a file cannot be removed.
        """
        cache_files = list(self.cache_dir.glob("*.pickle")) if self.cache_dir.exists() else []
        if not cache_files:
            return "No cache file to clear"

        for cache_file in cache_files:
            try:
                cache_file.unlink()
            except OSError as e:
                raise StorageError(f"Failed to clear cache: {e}") from e

        self.logger.info(f"🗑️ Cache cleared ({len(cache_files)} files)")
        return "Cache cleared successfully"

    def list_cache_files(self) -> list[dict]:
        """List all cache files with metadata."""
        cache_files = []
        if not self.cache_dir.exists():
            return cache_files
        for cache_file in self.cache_dir.glob("*.pickle"):
            stat = cache_file.stat()
            cache_files.append({
                'key': cache_file.stem,
                'file': cache_file.name,
                'size_bytes': stat.st_size,
                'size_kb': round(stat.st_size / 1024, 2),
                'modified': datetime.fromtimestamp(stat.st_mtime).strftime('%Y-%m-%d %H:%M:%S')
            })
        return sorted(cache_files, key=lambda x: x['modified'], reverse=True)
