"""Abstract storage interface for per-conversation dialogue state.

This module defines the Protocol a dispatcher relies on to load, replace and
clear the dialogue of a conversation, so storage backends can be swapped
without changing the dispatcher.
"""

from typing import Optional, Protocol, TypeVar

D = TypeVar("D")

CHAT_ID_MIN = -(2**63)
CHAT_ID_MAX = 2**63 - 1


class DialogueStorage(Protocol[D]):
    """Protocol for dialogue storage operations.

    Implementations are shared by every concurrent caller for the lifetime of
    the process. Each operation is a single logical request to the store;
    replace and clear must be atomic with respect to other writers of the
    same chat.
    """

    async def get_dialogue(self, chat_id: int) -> Optional[D]:
        """Retrieve the current dialogue of a chat.

        Args:
            chat_id: Signed 64-bit chat identifier

        Returns:
            The stored dialogue, or None if the chat has no active dialogue

        Raises:
            DialogueStorageError: If the store or the payload fails
        """
        ...

    async def update_dialogue(self, chat_id: int, dialogue: D) -> Optional[D]:
        """Atomically replace the dialogue of a chat.

        Args:
            chat_id: Signed 64-bit chat identifier
            dialogue: New dialogue value

        Returns:
            The dialogue stored before the replacement, or None

        Raises:
            DialogueStorageError: If the store or the payload fails
        """
        ...

    async def remove_dialogue(self, chat_id: int) -> Optional[D]:
        """Atomically remove the dialogue of a chat.

        Args:
            chat_id: Signed 64-bit chat identifier

        Returns:
            The dialogue stored immediately before removal, or None

        Raises:
            DialogueStorageError: If the store or the payload fails
        """
        ...


def validate_chat_id(chat_id: int) -> int:
    """Check that a chat identifier fits a signed 64-bit integer.

    Args:
        chat_id: Candidate chat identifier

    Returns:
        The chat identifier unchanged

    Raises:
        ValueError: If chat_id is not an int or is out of range
    """
    if isinstance(chat_id, bool) or not isinstance(chat_id, int):
        raise ValueError(f"chat_id must be an int, got {type(chat_id).__name__}")
    if not CHAT_ID_MIN <= chat_id <= CHAT_ID_MAX:
        raise ValueError(f"chat_id {chat_id} does not fit in a signed 64-bit integer")
    return chat_id
