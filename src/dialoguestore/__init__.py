"""Persistent per-conversation dialogue state backed by Redis.

A dispatcher loads, replaces and clears the dialogue of each chat through
the DialogueStorage protocol; RedisStorage implements it with atomic Redis
commands and a closed set of payload serializers.
"""

from dialoguestore.config import RedisStorageConfig, get_default_config, load_config_from_env
from dialoguestore.storage.base import DialogueStorage
from dialoguestore.storage.errors import (
    DeserializationError,
    DialogueStorageError,
    SerializationError,
    StoreConnectionError,
    StoreError,
)
from dialoguestore.storage.redis_storage import RedisStorage
from dialoguestore.storage.serializer import Serializer

__version__ = "0.1.0"

__all__ = [
    "DialogueStorage",
    "RedisStorage",
    "RedisStorageConfig",
    "Serializer",
    "DialogueStorageError",
    "StoreConnectionError",
    "StoreError",
    "SerializationError",
    "DeserializationError",
    "get_default_config",
    "load_config_from_env",
]
