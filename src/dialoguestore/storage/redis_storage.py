"""Redis-backed dialogue storage.

Each chat's dialogue lives under one Redis string key holding the serialized
payload. Replacing a dialogue is a single GETSET and removing one is a
MULTI/EXEC transaction of GET and DEL, so no other client's write can land
between reading the previous value and writing or deleting it.
"""

from contextlib import contextmanager
from types import TracebackType
from typing import Any, Generic, Iterator, Optional, TypeVar, Union

from redis import exceptions as redis_exceptions
from redis.asyncio import Redis
from structlog.contextvars import bound_contextvars

from dialoguestore.config import RedisStorageConfig
from dialoguestore.observability.logging import get_logger
from dialoguestore.storage.base import validate_chat_id
from dialoguestore.storage.errors import (
    DeserializationError,
    SerializationError,
    StoreConnectionError,
    StoreError,
)
from dialoguestore.storage.serializer import Serializer, check_dialogue_type

D = TypeVar("D")

logger = get_logger(__name__)


@contextmanager
def _translate_redis_errors(operation: str) -> Iterator[None]:
    """Re-raise redis-py failures as dialogue storage errors."""
    try:
        yield
    except (redis_exceptions.ConnectionError, redis_exceptions.TimeoutError, OSError) as e:
        logger.warning("redis_unreachable", operation=operation, error=str(e))
        raise StoreConnectionError(f"Redis unreachable during {operation}: {e}") from e
    except redis_exceptions.RedisError as e:
        logger.warning("redis_command_failed", operation=operation, error=str(e))
        raise StoreError(f"Redis rejected {operation}: {e}") from e


class RedisStorage(Generic[D]):
    """Dialogue storage on top of an asyncio Redis client.

    One instance is meant to be created at startup and shared by every
    dispatcher worker. The underlying client keeps its own connection pool
    and is safe for concurrent use, so no locking happens here.

    Attributes:
        serializer: Payload format used for every key of this store
        dialogue_type: Type stored payloads are validated against on read
        key_prefix: Prefix prepended to the decimal chat id

    Example:
        >>> storage = RedisStorage.open("redis://localhost:6379/0", dialogue_type=State)
        >>> await storage.update_dialogue(42, State(step=1))
        >>> await storage.get_dialogue(42)
        State(step=1)
    """

    def __init__(
        self,
        client: Redis,
        serializer: Serializer = Serializer.JSON,
        dialogue_type: Any = Any,
        key_prefix: str = "",
    ) -> None:
        """Wrap an existing Redis client.

        The caller keeps ownership of ``client``; close() will not close it.

        Args:
            client: Async Redis client (or any object with the same command API)
            serializer: Payload format for this store
            dialogue_type: Type used to validate payloads on read
            key_prefix: Prefix for chat keys

        Raises:
            ValueError: If payloads cannot be validated against dialogue_type
        """
        check_dialogue_type(dialogue_type)
        self._client = client
        self._owns_client = False
        self.serializer = serializer
        self.dialogue_type = dialogue_type
        self.key_prefix = key_prefix

    @classmethod
    def open(
        cls,
        target: Union[str, RedisStorageConfig],
        serializer: Optional[Serializer] = None,
        dialogue_type: Any = Any,
        key_prefix: Optional[str] = None,
        **client_kwargs: Any,
    ) -> "RedisStorage[Any]":
        """Create a storage for a connection target.

        No connection is made here; the client connects on first command.

        Args:
            target: Redis URL or a RedisStorageConfig
            serializer: Payload format (defaults to the config's, else JSON)
            dialogue_type: Type used to validate payloads on read
            key_prefix: Prefix for chat keys (defaults to the config's, else empty)
            **client_kwargs: Extra keyword arguments for Redis.from_url

        Returns:
            A storage that owns its client

        Raises:
            StoreConnectionError: If the target cannot be parsed
        """
        if isinstance(target, RedisStorageConfig):
            url = target.url
            kwargs: dict[str, Any] = {**target.connection_kwargs(), **client_kwargs}
            serializer = serializer or target.serializer
            key_prefix = target.key_prefix if key_prefix is None else key_prefix
        else:
            url = target
            kwargs = dict(client_kwargs)

        try:
            client = Redis.from_url(url, **kwargs)
        except ValueError as e:
            raise StoreConnectionError(f"Invalid Redis connection target: {e}") from e

        storage = cls(
            client,
            serializer=serializer or Serializer.JSON,
            dialogue_type=dialogue_type,
            key_prefix=key_prefix or "",
        )
        storage._owns_client = True

        logger.info(
            "redis_storage_opened",
            serializer=storage.serializer.value,
            key_prefix=storage.key_prefix,
        )
        return storage

    def key_for(self, chat_id: int) -> str:
        """Get the Redis key holding a chat's dialogue."""
        return f"{self.key_prefix}{validate_chat_id(chat_id)}"

    async def get_dialogue(self, chat_id: int) -> Optional[D]:
        """Retrieve the current dialogue of a chat.

        Args:
            chat_id: Signed 64-bit chat identifier

        Returns:
            The stored dialogue, or None if the key is absent

        Raises:
            StoreConnectionError: If Redis is unreachable
            StoreError: If Redis rejects the GET
            DeserializationError: If the stored payload is corrupt
        """
        key = self.key_for(chat_id)

        with bound_contextvars(chat_id=chat_id):
            with _translate_redis_errors("get_dialogue"):
                payload = await self._client.get(key)

            logger.debug("dialogue_loaded", found=payload is not None)
            return self._decode(payload)

    async def update_dialogue(self, chat_id: int, dialogue: D) -> Optional[D]:
        """Atomically replace the dialogue of a chat.

        The new value is encoded before touching Redis, so a value that cannot
        be serialized leaves the stored one in place.

        Args:
            chat_id: Signed 64-bit chat identifier
            dialogue: New dialogue value

        Returns:
            The dialogue stored before the replacement, or None

        Raises:
            SerializationError: If the new dialogue cannot be encoded
            StoreConnectionError: If Redis is unreachable
            StoreError: If Redis rejects the GETSET
            DeserializationError: If the previous payload is corrupt; the new
                value has been written by then
        """
        key = self.key_for(chat_id)

        with bound_contextvars(chat_id=chat_id):
            try:
                payload = self.serializer.serialize(dialogue)
            except SerializationError as e:
                logger.warning("dialogue_serialization_failed", error=e.message)
                raise

            with _translate_redis_errors("update_dialogue"):
                previous = await self._client.getset(key, payload)

            logger.debug("dialogue_updated", replaced=previous is not None)
            return self._decode(previous)

    async def remove_dialogue(self, chat_id: int) -> Optional[D]:
        """Atomically remove the dialogue of a chat.

        Args:
            chat_id: Signed 64-bit chat identifier

        Returns:
            The dialogue stored immediately before removal, or None

        Raises:
            StoreConnectionError: If Redis is unreachable
            StoreError: If Redis rejects the transaction. EXEC runs every
                queued command, so the DEL may have been applied even when
                the GET failed (for example on a key of the wrong type)
            DeserializationError: If the removed payload is corrupt; the key
                has been deleted by then
        """
        key = self.key_for(chat_id)

        with bound_contextvars(chat_id=chat_id):
            with _translate_redis_errors("remove_dialogue"):
                async with self._client.pipeline(transaction=True) as pipe:
                    previous, _ = await pipe.get(key).delete(key).execute()

            logger.debug("dialogue_removed", existed=previous is not None)
            return self._decode(previous)

    async def ping(self) -> bool:
        """Check that Redis answers.

        Returns:
            True when Redis replied to PING

        Raises:
            StoreConnectionError: If Redis is unreachable
            StoreError: If Redis rejects the PING
        """
        with _translate_redis_errors("ping"):
            return bool(await self._client.ping())

    async def close(self) -> None:
        """Release the connection pool if this storage created the client."""
        if self._owns_client:
            await self._client.aclose()
            logger.info("redis_storage_closed")

    async def __aenter__(self) -> "RedisStorage[D]":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        await self.close()

    def _decode(self, payload: Optional[bytes]) -> Optional[D]:
        if payload is None:
            return None
        try:
            value: D = self.serializer.deserialize(payload, self.dialogue_type)
        except DeserializationError as e:
            logger.warning("dialogue_deserialization_failed", error=e.message)
            raise
        return value
