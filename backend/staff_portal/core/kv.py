# staff_portal/core/kv.py
"""
Key/value store access.
The store is used for exactly one thing: the set of valid session
(refresh) tokens, kept under a single configured set name.
"""
from typing import Any

from redis.asyncio import Redis


def create_kv_client(url: str, **options: Any) -> Redis:
    """
    Build an async Redis client. No connection is opened until first use.

    Args:
        url: Connection URL, e.g. ``redis://127.0.0.1:6379/0``
        **options: Extra keyword arguments for ``Redis.from_url``
    """
    options.setdefault("decode_responses", True)
    return Redis.from_url(url, **options)


async def connect_kv(client: Redis) -> None:
    """Round-trip once so connection problems surface at startup."""
    await client.ping()


async def close_kv(client: Redis) -> None:
    await client.aclose()


class TokenSet:
    """
    Membership set of session tokens.

    The client is bound late so the set can be built before the connection
    exists (and swapped for a fake in tests).
    """

    def __init__(self, name: str, client: Redis | None = None):
        self.name = name
        self._client = client

    def bind(self, client: Redis) -> None:
        self._client = client

    @property
    def client(self) -> Redis:
        if self._client is None:
            raise RuntimeError("Key/value store is not connected")
        return self._client

    async def add(self, token: str) -> None:
        await self.client.sadd(self.name, token)

    async def contains(self, token: str) -> bool:
        return bool(await self.client.sismember(self.name, token))

    async def discard(self, token: str) -> None:
        await self.client.srem(self.name, token)
