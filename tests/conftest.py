from __future__ import annotations

import logging
from typing import Any

import pytest

from nnsresolver.abi.codec import (
    address_word,
    bytes32_word,
    encode_call,
    encode_string_call,
    string_tail,
    uint256_word,
)
from nnsresolver.core.config import Config
from nnsresolver.core.logging import LOGGER_NAME
from nnsresolver.naming.namehash import namehash, reverse_name

RPC_URL = "http://rpc.test"

# Digit-only addresses are their own EIP-55 form
CUSTOM_RESOLVER = "0x1111111111111111111111111111111111111111"
ALICE = "0x2222222222222222222222222222222222222222"
BOB = "0x3333333333333333333333333333333333333333"
OWNER = "0x4444444444444444444444444444444444444444"
ONE = "0x0000000000000000000000000000000000000001"
ZERO = "0x0000000000000000000000000000000000000000"


# ─────────────────────────────────────────────────────────────────
# Return-data builders
# ─────────────────────────────────────────────────────────────────


def address_result(address: str) -> bytes:
    return address_word(address)


def string_result(value: str) -> bytes:
    return uint256_word(32) + string_tail(value)


def bool_result(value: bool) -> bytes:
    return uint256_word(1 if value else 0)


def string_array_result(*items: str) -> bytes:
    """string[] return data: offset, count, element offsets, element tails."""
    tails = [string_tail(item) for item in items]
    heads, offset = [], len(items) * 32
    for tail in tails:
        heads.append(uint256_word(offset))
        offset += len(tail)
    return uint256_word(32) + uint256_word(len(items)) + b"".join(heads) + b"".join(tails)


def node_call(signature: str, name: str, *extra: bytes) -> bytes:
    """Calldata for a call whose first argument is namehash(name)."""
    return encode_call(signature, [bytes32_word(namehash(name)), *extra])


def reverse_call(address: str) -> bytes:
    return node_call("name(bytes32)", reverse_name(address))


class RecordingHandler(logging.Handler):
    """Keeps every record it receives."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


class FakeRpc:
    """
    Stand-in for RpcClient keyed by (target, calldata).

    Unregistered calls return b"" (empty return data). A registered
    exception instance is raised instead of returned.
    """

    def __init__(self, chain_id: int = 3940) -> None:
        self.responses: dict[tuple[str, bytes], Any] = {}
        self.calls: list[tuple[str, bytes]] = []
        self.chain = chain_id

    def on(self, target: str, calldata: bytes, result: Any) -> FakeRpc:
        self.responses[(target.lower(), calldata)] = result
        return self

    def on_node(self, target: str, signature: str, name: str, result: Any, *extra: bytes) -> FakeRpc:
        return self.on(target, node_call(signature, name, *extra), result)

    def on_string(self, target: str, signature: str, value: str, result: Any, head: tuple[bytes, ...] = ()) -> FakeRpc:
        return self.on(target, encode_string_call(signature, list(head), value), result)

    async def call(self, target: str, data: bytes, endpoint: str | None = None, block: str = "latest") -> bytes:
        self.calls.append((target.lower(), data))
        result = self.responses.get((target.lower(), data), b"")
        if isinstance(result, Exception):
            raise result
        return result

    async def chain_id(self, endpoint: str | None = None) -> int:
        return self.chain

    async def close(self) -> None:
        return None

    def called(self, target: str, calldata: bytes) -> bool:
        return (target.lower(), calldata) in self.calls


# ─────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep NNS_* variables from the developer's shell out of tests."""
    for var in (
        "NNS_CHAIN_ID",
        "NNS_RPC_URL",
        "NNS_REGISTRY_ADDRESS",
        "NNS_DEFAULT_RESOLVER",
        "NNS_REGISTRAR_ADDRESS",
        "NNS_REQUEST_TIMEOUT",
        "NNS_CACHE_TTL",
        "NNS_STRICT_FINAL_STEP",
        "NNS_STORAGE_BACKEND",
        "NNS_REDIS_URL",
        "NNS_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def config() -> Config:
    return Config(rpc_url=RPC_URL, rpc_retry_attempts=1, cache_ttl=0)


@pytest.fixture
def fake_rpc() -> FakeRpc:
    return FakeRpc()


@pytest.fixture
def registry(config) -> str:
    return config.registry_address


@pytest.fixture
def default_resolver(config) -> str:
    return config.default_resolver_address


@pytest.fixture
def nns_log():
    """
    Records from the nnsresolver logger tree, captured by a handler of our own.

    NNSClient reconfigures the logger (level, handlers, propagation), so the
    logger's state is saved and restored around each test.
    """
    logger = logging.getLogger(LOGGER_NAME)
    saved_level, saved_propagate, saved_handlers = logger.level, logger.propagate, list(logger.handlers)
    handler = RecordingHandler()
    logger.setLevel(logging.DEBUG)
    logger.addHandler(handler)
    try:
        yield handler.records
    finally:
        logger.handlers[:] = saved_handlers
        logger.setLevel(saved_level)
        logger.propagate = saved_propagate
