"""Custom exceptions for dialogue storage.

This module defines the exception hierarchy surfaced by storage backends,
so callers can tell transient store failures apart from payloads that will
never decode.
"""


class DialogueStorageError(Exception):
    """Base exception for all dialogue storage errors.

    Attributes:
        code: Machine-readable error code
        message: Human-readable error message
        retryable: Whether repeating the same call may succeed
    """

    retryable: bool = False

    def __init__(self, message: str, code: str) -> None:
        """Initialize dialogue storage error.

        Args:
            message: Human-readable error description
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code


class StoreConnectionError(DialogueStorageError):
    """Raised when the key-value store is unreachable or misconfigured.

    Covers refused connections, authentication failures, timeouts and
    connection targets that cannot be parsed.
    """

    retryable = True

    def __init__(self, message: str) -> None:
        """Initialize store connection error.

        Args:
            message: Description of the connection failure
        """
        super().__init__(message=message, code="connection_error")


class StoreError(DialogueStorageError):
    """Raised when the store rejects a command (e.g. WRONGTYPE at key)."""

    retryable = True

    def __init__(self, message: str) -> None:
        super().__init__(message=message, code="store_error")


class SerializationError(DialogueStorageError):
    """Raised when a dialogue value cannot be encoded by the serializer."""

    def __init__(self, message: str) -> None:
        super().__init__(message=message, code="serialization_error")


class DeserializationError(DialogueStorageError):
    """Raised when a stored payload is not valid for the serializer or type.

    Usually means the stored format changed; repeating the call will not help.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message=message, code="deserialization_error")
