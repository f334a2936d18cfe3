"""Signup dialogue driven by RedisStorage.

This example plays the role of a dispatcher: it loads a chat's dialogue
before handling a message, then either stores the next state or clears it
when the dialogue is finished.

Run against a local Redis:
    DIALOGUESTORE_REDIS_URL=redis://localhost:6379/0 python examples/signup_dialogue.py
"""

import asyncio
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from dialoguestore import RedisStorage, load_config_from_env
from dialoguestore.observability import get_logger, setup_logging


class Stage(str, Enum):
    """Steps of the signup dialogue."""

    ASK_NAME = "ask_name"
    ASK_AGE = "ask_age"


class Signup(BaseModel):
    """State kept between messages of one chat."""

    stage: Stage = Stage.ASK_NAME
    name: Optional[str] = None


logger = get_logger(__name__)


async def handle_message(storage: RedisStorage[Signup], chat_id: int, text: str) -> str:
    """Advance the signup dialogue of a chat by one message."""
    dialogue = await storage.get_dialogue(chat_id)

    if dialogue is None:
        await storage.update_dialogue(chat_id, Signup())
        return "What is your name?"

    if dialogue.stage is Stage.ASK_NAME:
        await storage.update_dialogue(chat_id, Signup(stage=Stage.ASK_AGE, name=text))
        return f"Nice to meet you, {text}. How old are you?"

    finished = await storage.remove_dialogue(chat_id)
    logger.info("signup_completed", chat_id=chat_id, name=finished.name if finished else None)
    return f"Thanks! Registered {dialogue.name}, age {text}."


async def main() -> None:
    """Replay a short conversation for chat 42."""
    setup_logging(log_level="INFO", json_logs=False)

    async with RedisStorage.open(load_config_from_env(), dialogue_type=Signup) as storage:
        for text in ["/start", "Ada", "36"]:
            print(f"> {text}")
            print(await handle_message(storage, 42, text))


if __name__ == "__main__":
    asyncio.run(main())
