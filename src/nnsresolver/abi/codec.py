"""
Minimal contract-call codec.

Encodes the handful of fixed-arity read calls the resolver needs and decodes
their return words. This is not a general ABI codec: callers hand in
arguments that are already 32-byte aligned, and every supported call is
listed in CALLS together with its return decoder.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from nnsresolver.core.exceptions import MalformedResponseError
from nnsresolver.naming.namehash import keccak256, to_checksum_address

WORD_SIZE = 32

_HEX_RE = re.compile(r"[0-9a-fA-F]*")


# ─── Argument Words ──────────────────────────────────────────────


def bytes32_word(value: bytes) -> bytes:
    """Pass a 32-byte value (e.g. a namehash node) through as one word."""
    if len(value) != WORD_SIZE:
        raise ValueError(f"bytes32 argument must be 32 bytes, got {len(value)}")
    return bytes(value)


def uint256_word(value: int) -> bytes:
    """Encode a non-negative integer as a big-endian 32-byte word."""
    if value < 0:
        raise ValueError("uint256 argument must not be negative")
    return value.to_bytes(WORD_SIZE, "big")


def address_word(address: str) -> bytes:
    """Encode an address literal as a left-padded word."""
    raw = bytes.fromhex(address[2:] if address.startswith("0x") else address)
    if len(raw) != 20:
        raise ValueError(f"address argument must be 20 bytes, got {len(raw)}")
    return raw.rjust(WORD_SIZE, b"\x00")


def string_tail(value: str) -> bytes:
    """Length word followed by the UTF-8 bytes right-padded to a word boundary."""
    data = value.encode("utf-8")
    padded = (len(data) + WORD_SIZE - 1) // WORD_SIZE * WORD_SIZE
    return uint256_word(len(data)) + data.ljust(padded, b"\x00")


# ─── Call Encoding ───────────────────────────────────────────────


@lru_cache(maxsize=64)
def function_selector(signature: str) -> bytes:
    """First four bytes of keccak256(signature)."""
    return keccak256(signature.encode("utf-8"))[:4]


def encode_call(signature: str, args: Sequence[bytes] = ()) -> bytes:
    """
    Build calldata: selector || concat(args).

    Each argument must already be a whole number of 32-byte words.
    """
    for i, arg in enumerate(args):
        if len(arg) == 0 or len(arg) % WORD_SIZE:
            raise ValueError(
                f"argument {i} of {signature} is {len(arg)} bytes, expected a multiple of 32"
            )
    return function_selector(signature) + b"".join(args)


def encode_string_call(signature: str, head: Sequence[bytes], value: str) -> bytes:
    """
    Build calldata for a call whose last parameter is a single `string`.

    The head words are followed by the offset of the string tail.
    """
    offset = (len(head) + 1) * WORD_SIZE
    return encode_call(signature, [*head, uint256_word(offset), string_tail(value)])


# ─── Return Decoding ─────────────────────────────────────────────


def to_bytes(data: bytes | str) -> bytes:
    """Accept raw bytes or a 0x-prefixed hex string."""
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    text = data[2:] if data[:2] in ("0x", "0X") else data
    if len(text) % 2 or not _HEX_RE.fullmatch(text):
        raise MalformedResponseError("Result is not valid hex", raw=data)
    return bytes.fromhex(text)


def _word(data: bytes, index: int, raw: bytes | str) -> bytes:
    start = index * WORD_SIZE
    if len(data) < start + WORD_SIZE:
        raise MalformedResponseError(
            f"Result too short: need word {index}, got {len(data)} bytes", raw=raw
        )
    return data[start:start + WORD_SIZE]


def decode_address(word: bytes | str) -> str:
    """
    Decode an address from the first return word.

    Addresses are right-aligned, so the low 20 bytes are taken and
    checksummed.
    """
    data = to_bytes(word)
    low = _word(data, 0, word)[12:]
    return to_checksum_address("0x" + low.hex().lower())


def decode_uint256(word: bytes | str) -> int:
    data = to_bytes(word)
    return int.from_bytes(_word(data, 0, word), "big")


def decode_bool(word: bytes | str) -> bool:
    value = decode_uint256(word)
    if value not in (0, 1):
        raise MalformedResponseError(f"Boolean word out of range: {value}", raw=word)
    return value == 1


def _string_at(raw: bytes, offset: int, data: bytes | str) -> str:
    """Decode the (length, bytes) tail of a `string` starting at `offset`."""
    if offset + WORD_SIZE > len(raw):
        raise MalformedResponseError(f"String offset {offset} out of range", raw=data)
    length = int.from_bytes(raw[offset:offset + WORD_SIZE], "big")
    start = offset + WORD_SIZE
    if start + length > len(raw):
        raise MalformedResponseError(f"String length {length} out of range", raw=data)
    try:
        return raw[start:start + length].decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedResponseError(f"String is not valid UTF-8: {e}", raw=data) from e


def decode_string(data: bytes | str) -> str:
    """Decode a single dynamic `string` return value (offset, length, bytes)."""
    raw = to_bytes(data)
    offset = int.from_bytes(_word(raw, 0, data), "big")
    if offset % WORD_SIZE:
        raise MalformedResponseError(f"String offset {offset} is not word aligned", raw=data)
    return _string_at(raw, offset, data)


def decode_string_array(data: bytes | str) -> list[str]:
    """
    Decode a single dynamic `string[]` return value.

    Layout: offset to the array, element count, one offset per element
    (relative to the word after the count), then each element's string tail.
    """
    raw = to_bytes(data)
    offset = int.from_bytes(_word(raw, 0, data), "big")
    if offset % WORD_SIZE or offset + WORD_SIZE > len(raw):
        raise MalformedResponseError(f"Array offset {offset} out of range", raw=data)
    count = int.from_bytes(raw[offset:offset + WORD_SIZE], "big")
    base = offset + WORD_SIZE
    if base + count * WORD_SIZE > len(raw):
        raise MalformedResponseError(f"Array length {count} out of range", raw=data)

    items = []
    for i in range(count):
        head = base + i * WORD_SIZE
        element = int.from_bytes(raw[head:head + WORD_SIZE], "big")
        if element % WORD_SIZE:
            raise MalformedResponseError(f"Element {i} offset {element} is not word aligned", raw=data)
        items.append(_string_at(raw, base + element, data))
    return items


def decode_domain_record(data: bytes | str) -> tuple[str, int, bool]:
    """Decode (address owner, uint256 expires, bool exists)."""
    raw = to_bytes(data)
    owner = decode_address(_word(raw, 0, data))
    expires = int.from_bytes(_word(raw, 1, data), "big")
    exists = decode_bool(_word(raw, 2, data))
    return owner, expires, exists


# ─── Supported Calls ─────────────────────────────────────────────


@dataclass(frozen=True)
class CallSpec:
    """One read-only call: its signature, selector and return decoder."""

    signature: str
    selector: bytes
    decoder: Callable[[bytes], Any]

    def decode(self, data: bytes) -> Any:
        return self.decoder(data)


def _spec(signature: str, decoder: Callable[[bytes], Any]) -> CallSpec:
    return CallSpec(signature, function_selector(signature), decoder)


CALLS: dict[str, CallSpec] = {
    spec.signature: spec
    for spec in (
        # Registry
        _spec("resolver(bytes32)", decode_address),
        _spec("owner(bytes32)", decode_address),
        _spec("recordExists(bytes32)", decode_bool),
        # Resolver
        _spec("addr(bytes32)", decode_address),
        _spec("addr(bytes32,uint256)", decode_address),
        _spec("name(bytes32)", decode_string),
        _spec("text(bytes32,string)", decode_string),
        # Registrar
        _spec("available(string)", decode_bool),
        _spec("getDomain(string)", decode_domain_record),
        _spec("getDomainsOfOwner(address)", decode_string_array),
        _spec("registrationFee()", decode_uint256),
    )
}


def get_call(signature: str) -> CallSpec:
    """Look up a supported call; unknown signatures are a programming error."""
    try:
        return CALLS[signature]
    except KeyError:
        raise ValueError(f"Unsupported call signature: {signature}") from None


__all__ = [
    "CALLS",
    "CallSpec",
    "WORD_SIZE",
    "address_word",
    "bytes32_word",
    "decode_address",
    "decode_bool",
    "decode_domain_record",
    "decode_string",
    "decode_string_array",
    "decode_uint256",
    "encode_call",
    "encode_string_call",
    "function_selector",
    "get_call",
    "string_tail",
    "to_bytes",
    "uint256_word",
]
