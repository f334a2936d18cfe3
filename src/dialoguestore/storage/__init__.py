"""Storage layer for per-conversation dialogue state.

This module provides the dialogue storage interface, the Redis-backed
implementation, the payload serializers and the error taxonomy.
"""

# NOTE: Lazy imports to avoid circular dependencies with dialoguestore.config
# Import these directly when needed:
# from dialoguestore.storage.base import DialogueStorage
# from dialoguestore.storage.redis_storage import RedisStorage
# from dialoguestore.storage.serializer import Serializer

__all__ = [
    "DialogueStorage",
    "RedisStorage",
    "Serializer",
    "DialogueStorageError",
    "StoreConnectionError",
    "StoreError",
    "SerializationError",
    "DeserializationError",
]

_ERRORS = {
    "DialogueStorageError",
    "StoreConnectionError",
    "StoreError",
    "SerializationError",
    "DeserializationError",
}


def __getattr__(name: str):
    """Lazy load attributes to avoid circular imports."""
    if name == "DialogueStorage":
        from dialoguestore.storage.base import DialogueStorage

        return DialogueStorage
    elif name == "RedisStorage":
        from dialoguestore.storage.redis_storage import RedisStorage

        return RedisStorage
    elif name == "Serializer":
        from dialoguestore.storage.serializer import Serializer

        return Serializer
    elif name in _ERRORS:
        from dialoguestore.storage import errors

        return getattr(errors, name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
