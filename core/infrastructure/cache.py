"""
Namespaced cache port.

Read models such as the dashboard counters are cached under a namespace.
Each namespace has a version number that is part of every key; bumping the
version orphans all keys of the namespace at once.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class CachePort(ABC):
    """Key/value cache with versioned namespaces."""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Cached value or ``None`` on a miss."""

    @abstractmethod
    async def set(self, key: str, value: Any, timeout: Optional[int] = None) -> None:
        """Store ``value``; ``timeout`` is in seconds, ``None`` uses the backend default."""

    @abstractmethod
    async def namespace_version(self, namespace: str) -> int:
        """Current version of ``namespace``, starting at 1."""

    @abstractmethod
    async def bump_namespace(self, namespace: str) -> int:
        """Invalidate every key of ``namespace`` and return the new version."""

    async def namespaced_key(self, namespace: str, key: str) -> str:
        version = await self.namespace_version(namespace)
        return f"{namespace}:v{version}:{key}"
