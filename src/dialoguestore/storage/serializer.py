"""Serialization formats for stored dialogue values.

The set of formats is closed: a store commits to one format for its whole
lifetime, and mixing formats inside one store would break round-tripping.
"""

from enum import Enum
from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter, ValidationError
from pydantic.errors import PydanticSchemaGenerationError

from dialoguestore.storage.errors import DeserializationError, SerializationError


@lru_cache(maxsize=128)
def _type_adapter(dialogue_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(dialogue_type)


def check_dialogue_type(dialogue_type: Any) -> None:
    """Check that payloads can be validated against ``dialogue_type``.

    Args:
        dialogue_type: Type a storage decodes its payloads into

    Raises:
        ValueError: If pydantic cannot build a validator for the type
    """
    try:
        _type_adapter(dialogue_type)
    except (PydanticSchemaGenerationError, TypeError) as e:
        raise ValueError(
            f"Unsupported dialogue type {_type_name(dialogue_type)}: {e}"
        ) from e


class Serializer(str, Enum):
    """Supported payload formats.

    Members:
        JSON: UTF-8 JSON produced and validated by pydantic

    Example:
        >>> payload = Serializer.JSON.serialize({"step": 1})
        >>> Serializer.JSON.deserialize(payload)
        {'step': 1}
    """

    JSON = "json"

    @classmethod
    def parse(cls, name: str) -> "Serializer":
        """Resolve a configured format name to a serializer.

        Args:
            name: Format name, case-insensitive (e.g. "json", "JSON")

        Returns:
            The matching Serializer member

        Raises:
            ValueError: If no supported format has this name
        """
        try:
            return cls(name.strip().lower())
        except ValueError:
            supported = ", ".join(member.value for member in cls)
            raise ValueError(
                f"Unsupported serializer '{name}'. Supported formats: {supported}"
            ) from None

    def serialize(self, value: Any) -> bytes:
        """Encode a dialogue value into a payload.

        Args:
            value: Value to encode (pydantic model, dataclass, JSON-like data)

        Returns:
            Encoded payload bytes

        Raises:
            SerializationError: If the value holds data the format cannot represent
        """
        # JSON is the only member
        try:
            return _type_adapter(Any).dump_json(value)
        except (ValueError, TypeError) as e:
            raise SerializationError(
                f"Failed to serialize {type(value).__name__} as JSON: {e}"
            ) from e

    def deserialize(self, data: bytes, dialogue_type: Any = Any) -> Any:
        """Decode a payload into a value of ``dialogue_type``.

        Args:
            data: Payload bytes as read from the store
            dialogue_type: Target type the payload must validate against

        Returns:
            The decoded value

        Raises:
            DeserializationError: If the payload is malformed or has the wrong shape
        """
        try:
            return _type_adapter(dialogue_type).validate_json(data)
        except ValidationError as e:
            raise DeserializationError(
                f"Failed to parse JSON payload as {_type_name(dialogue_type)}: "
                f"{e.error_count()} validation error(s)"
            ) from e


def _type_name(dialogue_type: Any) -> str:
    return getattr(dialogue_type, "__name__", None) or repr(dialogue_type)
