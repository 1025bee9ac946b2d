"""
Shared Redis cache utilities.
"""
import json
from typing import Any, Callable, Optional

from django.core.cache import cache


class CacheService:
    """Redis cache wrapper with prefix support."""

    def __init__(self, prefix: str = ""):
        self.prefix = prefix

    def _key(self, key: str) -> str:
        """Build cache key with prefix."""
        return f"{self.prefix}:{key}" if self.prefix else key

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache."""
        value = cache.get(self._key(key))
        if isinstance(value, str):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass
        return value

    def set(self, key: str, value: Any, timeout: int = 300) -> None:
        """Set value in cache with timeout (default 5 minutes)."""
        if isinstance(value, (dict, list)):
            value = json.dumps(value)
        cache.set(self._key(key), value, timeout)

    def delete(self, key: str) -> None:
        """Delete key from cache."""
        cache.delete(self._key(key))

    def get_or_set(self, key: str, default_func: Callable[[], Any], timeout: int = 300) -> Any:
        """Get value from cache or set it using default function."""
        value = self.get(key)
        if value is None:
            value = default_func()
            self.set(key, value, timeout)
        return value


category_cache = CacheService(prefix="category")
