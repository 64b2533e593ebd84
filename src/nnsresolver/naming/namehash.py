"""
Namehash and address-literal helpers.

Implements the recursive domain hash used by the NNS registry (identical to
ENS namehash, EIP-137) and the EIP-55 mixed-case address checksum. Both
must match the on-chain contracts byte for byte.
"""

from __future__ import annotations

import re

from Crypto.Hash import keccak

from nnsresolver.core.exceptions import InvalidNameError

ZERO_NODE = b"\x00" * 32
ZERO_ADDRESS = "0x" + "0" * 40

_ADDRESS_RE = re.compile(r"0x[0-9a-fA-F]{40}")


def keccak256(data: bytes) -> bytes:
    """Keccak-256 digest (the pre-standard SHA-3 variant used by the EVM)."""
    return keccak.new(digest_bits=256, data=data).digest()


def labelhash(label: str) -> bytes:
    """Hash a single label."""
    return keccak256(label.encode("utf-8"))


def namehash(name: str) -> bytes:
    """
    Compute the 32-byte node for a dotted name.

    namehash("")        = 0x00 * 32
    namehash("nex")     = keccak256(namehash("") + keccak256("nex"))
    namehash("a.nex")   = keccak256(namehash("nex") + keccak256("a"))

    No normalization happens here: "Alice.nex" and "alice.nex" hash to
    different nodes, so callers lower-case first.
    """
    node = ZERO_NODE
    if not name:
        return node
    for label in reversed(name.split(".")):
        node = keccak256(node + labelhash(label))
    return node


def namehash_hex(name: str) -> str:
    """namehash as a 0x-prefixed hex string."""
    return "0x" + namehash(name).hex()


def is_address_literal(value: object) -> bool:
    """Check the `0x` + 40 hex characters shape. Does not verify the checksum."""
    return isinstance(value, str) and _ADDRESS_RE.fullmatch(value) is not None


def to_checksum_address(address: str) -> str:
    """
    Apply the EIP-55 mixed-case checksum.

    Each hex letter is upper-cased when the matching nibble of
    keccak256(lowercase_hex_ascii) is 8 or above.
    """
    if not is_address_literal(address):
        raise InvalidNameError(f"Not an address literal: {address!r}", name=address)
    lowered = address[2:].lower()
    digest = keccak256(lowered.encode("ascii")).hex()
    return "0x" + "".join(
        ch.upper() if ch.isalpha() and int(digest[i], 16) >= 8 else ch
        for i, ch in enumerate(lowered)
    )


def is_checksum_address(value: object) -> bool:
    """True if value is an address literal already in EIP-55 form."""
    return is_address_literal(value) and to_checksum_address(value) == value  # type: ignore[arg-type]


def is_zero_address(address: str | None) -> bool:
    return address is None or address.lower() == ZERO_ADDRESS


def reverse_name(address: str, suffix: str = "addr.reverse") -> str:
    """
    Build the reverse-lookup name for an address.

    0x742d35Cc6634C0532925a3b8D4C9db96590c6C87
        → 742d35cc6634c0532925a3b8d4c9db96590c6c87.addr.reverse
    """
    if not is_address_literal(address):
        raise InvalidNameError(f"Not an address literal: {address!r}", name=address)
    return f"{address[2:].lower()}.{suffix}"


__all__ = [
    "ZERO_ADDRESS",
    "ZERO_NODE",
    "is_address_literal",
    "is_checksum_address",
    "is_zero_address",
    "keccak256",
    "labelhash",
    "namehash",
    "namehash_hex",
    "reverse_name",
    "to_checksum_address",
]
