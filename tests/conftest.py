"""Pytest configuration and shared fixtures for the test suite."""

from typing import Any, Optional

import pytest
import structlog
from redis.exceptions import ResponseError

# Configure pytest-asyncio to use auto mode
pytest_plugins = ["pytest_asyncio"]


class MockPipeline:
    """Mock Redis transaction pipeline.

    Commands are queued and applied in one go by execute(), with no awaits in
    between, the way MULTI/EXEC runs on the server.
    """

    def __init__(self, client: "MockRedisClient", transaction: bool) -> None:
        self._client = client
        self.transaction = transaction
        self._queue: list[tuple[str, tuple[Any, ...]]] = []

    async def __aenter__(self) -> "MockPipeline":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self._queue.clear()

    def get(self, key: str) -> "MockPipeline":
        """Queue a GET."""
        self._queue.append(("GET", (key,)))
        return self

    def delete(self, *keys: str) -> "MockPipeline":
        """Queue a DEL."""
        self._queue.append(("DEL", keys))
        return self

    async def execute(self) -> list[Any]:
        """Run all queued commands as one transaction.

        Like EXEC, every queued command runs even when an earlier one fails;
        the first failure is raised once the transaction has finished.
        """
        self._client._check_failure()
        self._client.commands.append(("MULTI", ()))
        results: list[Any] = []
        for name, args in self._queue:
            try:
                results.append(self._client._apply(name, args))
            except ResponseError as e:
                results.append(e)
        self._client.commands.append(("EXEC", ()))
        self._client.transactions += 1
        self._queue.clear()

        for result in results:
            if isinstance(result, ResponseError):
                raise result
        return results


class MockRedisClient:
    """Mock async Redis client for testing.

    Stores string values as bytes and records every command it runs together
    with the structlog context bound at the time. It can also be told to
    raise a given exception on the next commands.
    """

    def __init__(self) -> None:
        """Initialize mock Redis client."""
        self._storage: dict[str, bytes] = {}
        self._hashes: set[str] = set()
        self._failure: Optional[Exception] = None
        self.commands: list[tuple[str, tuple[Any, ...]]] = []
        self.contexts: list[dict[str, Any]] = []
        self.transactions = 0
        self.closed = False

    def set_failure(self, failure: Optional[Exception]) -> None:
        """Make every following command raise ``failure`` (None to stop)."""
        self._failure = failure

    def make_hash(self, key: str) -> None:
        """Turn ``key`` into a non-string key so string commands fail."""
        self._storage.pop(key, None)
        self._hashes.add(key)

    def _check_failure(self) -> None:
        if self._failure is not None:
            raise self._failure

    def _apply(self, name: str, args: tuple[Any, ...]) -> Any:
        self.contexts.append(structlog.contextvars.get_contextvars())
        self.commands.append((name, args))
        if name in ("GET", "GETSET", "SET") and args[0] in self._hashes:
            raise ResponseError("WRONGTYPE Operation against a key holding the wrong kind of value")
        if name == "GET":
            return self._storage.get(args[0])
        if name == "GETSET":
            previous = self._storage.get(args[0])
            self._storage[args[0]] = _to_bytes(args[1])
            return previous
        if name == "SET":
            self._storage[args[0]] = _to_bytes(args[1])
            return True
        if name == "DEL":
            removed = 0
            for key in args:
                if self._storage.pop(key, None) is not None:
                    removed += 1
                if key in self._hashes:
                    self._hashes.discard(key)
                    removed += 1
            return removed
        raise AssertionError(f"Unexpected command {name}")

    async def get(self, key: str) -> Optional[bytes]:
        """Mock GET."""
        self._check_failure()
        return self._apply("GET", (key,))

    async def getset(self, key: str, value: Any) -> Optional[bytes]:
        """Mock GETSET."""
        self._check_failure()
        return self._apply("GETSET", (key, value))

    async def set(self, key: str, value: Any) -> bool:
        """Mock SET."""
        self._check_failure()
        return self._apply("SET", (key, value))

    async def delete(self, *keys: str) -> int:
        """Mock DEL."""
        self._check_failure()
        return self._apply("DEL", keys)

    async def ping(self) -> bool:
        """Mock PING."""
        self._check_failure()
        return True

    async def aclose(self) -> None:
        """Mock connection pool shutdown."""
        self.closed = True

    def pipeline(self, transaction: bool = True) -> MockPipeline:
        """Create a mock pipeline."""
        return MockPipeline(self, transaction)

    def raw(self, key: str) -> Optional[bytes]:
        """Read the stored bytes directly, bypassing command recording."""
        return self._storage.get(key)

    def exists(self, key: str) -> bool:
        """Whether ``key`` holds any value, bypassing command recording."""
        return key in self._storage or key in self._hashes

    def command_names(self) -> list[str]:
        """Names of the commands run so far, in order."""
        return [name for name, _ in self.commands]


def _to_bytes(value: Any) -> bytes:
    if isinstance(value, bytes):
        return value
    return str(value).encode()


@pytest.fixture
def anyio_backend():
    """Configure anyio to use asyncio backend."""
    return "asyncio"


@pytest.fixture
def mock_redis() -> MockRedisClient:
    """Create a mock Redis client."""
    return MockRedisClient()

