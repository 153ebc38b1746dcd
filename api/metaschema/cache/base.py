"""Base cache backend interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Iterable, Optional


class BaseCacheBackend(ABC):
    """Base class for schema cache backends.

    Entries never expire on their own. Backends that can delete every key
    carrying a tag set supports_tags; the others ignore tags.
    """

    supports_tags: bool = False

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return stored value or None.

        Raises:
            CacheBackendError: If the backend cannot be reached
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str, tags: Iterable[str] = ()) -> None:
        """Store value without expiry, registering it under tags."""
        pass

    @abstractmethod
    def get_counter(self, key: str) -> int:
        """Current value of a counter, 0 when unset."""
        pass

    @abstractmethod
    def incr(self, key: str) -> int:
        """Increment a counter and return the new value."""
        pass

    def flush_tag(self, tag: str) -> int:
        """Delete every key stored under tag; return the number deleted.

        Raises:
            CacheTagsUnsupportedError: If the backend has no tag support
        """
        raise CacheTagsUnsupportedError(f"{self.__class__.__name__} does not support tags")

    @abstractmethod
    def lock(self, name: str, timeout: int) -> AbstractContextManager:
        """Mutual exclusion around a rebuild of one key."""
        pass

    def ping(self) -> bool:
        """Health check."""
        return True


class CacheBackendError(Exception):
    """Base exception for cache backend operations."""

    pass


class CacheTagsUnsupportedError(CacheBackendError):
    """Backend cannot flush by tag."""

    pass
