"""Tests for the dialogue storage error taxonomy."""

import pytest

from dialoguestore.storage.errors import (
    DeserializationError,
    DialogueStorageError,
    SerializationError,
    StoreConnectionError,
    StoreError,
)


class TestDialogueStorageErrors:
    """Tests for error codes and retry classification."""

    @pytest.mark.parametrize(
        ("error_class", "code", "retryable"),
        [
            (StoreConnectionError, "connection_error", True),
            (StoreError, "store_error", True),
            (SerializationError, "serialization_error", False),
            (DeserializationError, "deserialization_error", False),
        ],
    )
    def test_error_attributes(
        self, error_class: type[DialogueStorageError], code: str, retryable: bool
    ) -> None:
        """Each error should carry its code, message and retry classification."""
        error = error_class("something failed")

        assert isinstance(error, DialogueStorageError)
        assert error.code == code
        assert error.message == "something failed"
        assert str(error) == "something failed"
        assert error.retryable is retryable

    def test_errors_are_distinguishable(self) -> None:
        """No error class should be caught by another's except clause."""
        classes = [StoreConnectionError, StoreError, SerializationError, DeserializationError]

        for raised in classes:
            for other in classes:
                if other is not raised:
                    assert not issubclass(raised, other)

    def test_connection_error_does_not_shadow_builtin(self) -> None:
        """Storage connection errors are not OSError subclasses."""
        assert not issubclass(StoreConnectionError, ConnectionError)
