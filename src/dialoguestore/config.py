"""Redis storage configuration models and utilities.

This module provides configuration management for the Redis dialogue
storage backend, including the connection target, credentials, key layout
and payload format.
"""

import os
from typing import Optional
from urllib.parse import urlparse

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from dialoguestore.storage.serializer import Serializer

SUPPORTED_SCHEMES = ("redis", "rediss", "unix")


class RedisStorageConfig(BaseModel):
    """Connection target and format settings for RedisStorage.

    Attributes:
        url: Redis connection URL (redis://, rediss:// or unix://)
        username: Optional ACL username, used when the URL carries none
        password: Optional password (sensitive - not logged)
        db: Optional database index, used when the URL path carries none
        key_prefix: Prefix prepended to every chat key (empty = bare chat id)
        serializer: Payload format used for every entry of the store

    Example:
        >>> config = RedisStorageConfig(
        ...     url="redis://cache.internal:6379/2",
        ...     password="s3cret",
        ...     key_prefix="bot:dialogue:",
        ... )
    """

    model_config = ConfigDict(frozen=True)

    url: str = Field(default="redis://localhost:6379/0", description="Redis connection URL")
    username: Optional[str] = Field(default=None, description="ACL username")
    password: Optional[str] = Field(default=None, repr=False, description="Password (sensitive)")
    db: Optional[int] = Field(default=None, ge=0, description="Database index")
    key_prefix: str = Field(default="", description="Prefix for chat keys")
    serializer: Serializer = Field(default=Serializer.JSON, description="Payload format")

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        """Validate the URL uses a scheme redis-py can connect with.

        Args:
            value: The URL to validate

        Returns:
            The validated URL

        Raises:
            ValueError: If the scheme is missing or unsupported
        """
        scheme = urlparse(value).scheme
        if scheme not in SUPPORTED_SCHEMES:
            raise ValueError(
                f"Redis URL scheme must be one of {', '.join(SUPPORTED_SCHEMES)}, "
                f"got '{scheme or value}'"
            )
        return value

    @field_validator("serializer", mode="before")
    @classmethod
    def parse_serializer(cls, value: object) -> object:
        """Accept serializer names in any letter case."""
        if isinstance(value, str) and not isinstance(value, Serializer):
            return Serializer.parse(value)
        return value

    def connection_kwargs(self) -> dict[str, object]:
        """Keyword overrides passed to the Redis client on top of the URL."""
        kwargs: dict[str, object] = {}
        if self.username is not None:
            kwargs["username"] = self.username
        if self.password is not None:
            kwargs["password"] = self.password
        if self.db is not None:
            kwargs["db"] = self.db
        return kwargs


def get_default_config() -> RedisStorageConfig:
    """Get a configuration pointing at a local Redis with JSON payloads.

    Returns:
        RedisStorageConfig with default values
    """
    return RedisStorageConfig()


def load_config_from_env() -> RedisStorageConfig:
    """Load Redis storage configuration from environment variables.

    Automatically loads variables from a .env file found from the working
    directory upwards, without overriding variables already set.

    Reads configuration from the following environment variables:
    - DIALOGUESTORE_REDIS_URL: Redis connection URL
    - DIALOGUESTORE_REDIS_USERNAME: ACL username
    - DIALOGUESTORE_REDIS_PASSWORD: Password
    - DIALOGUESTORE_REDIS_DB: Database index
    - DIALOGUESTORE_KEY_PREFIX: Prefix for chat keys
    - DIALOGUESTORE_SERIALIZER: Payload format name (e.g. "json")

    Returns:
        RedisStorageConfig loaded from environment

    Raises:
        pydantic.ValidationError: If a value is invalid

    Example:
        >>> import os
        >>> os.environ["DIALOGUESTORE_REDIS_URL"] = "redis://cache:6379/1"
        >>> load_config_from_env().url
        'redis://cache:6379/1'
    """
    load_dotenv(find_dotenv(usecwd=True))

    return RedisStorageConfig(
        url=os.getenv("DIALOGUESTORE_REDIS_URL", "redis://localhost:6379/0"),
        username=os.getenv("DIALOGUESTORE_REDIS_USERNAME") or None,
        password=os.getenv("DIALOGUESTORE_REDIS_PASSWORD") or None,
        db=os.getenv("DIALOGUESTORE_REDIS_DB") or None,
        key_prefix=os.getenv("DIALOGUESTORE_KEY_PREFIX", ""),
        serializer=os.getenv("DIALOGUESTORE_SERIALIZER", Serializer.JSON.value),
    )
