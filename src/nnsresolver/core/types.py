"""
Type definitions for nnsresolver.

Enums and data classes shared by the address format layer, the resolution
pipeline and the client facade.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class IdentifierKind(str, Enum):
    """What the right-hand side of a chain-qualified string denotes."""

    ADDRESS = "address"
    DOMAIN = "domain"


class ResolutionSource(str, Enum):
    """Which step produced a resolved address."""

    LITERAL = "literal"  # input was already an address
    ADDR = "addr"  # addr(bytes32)
    MULTICOIN = "multicoin"  # addr(bytes32,uint256)
    OWNER = "owner"  # registry owner(bytes32)


@dataclass(frozen=True)
class ChainQualifiedAddress:
    """Decoded EIP-3770 string: `chain:identifier`."""

    chain: str
    identifier: str
    kind: IdentifierKind

    @property
    def is_address(self) -> bool:
        return self.kind == IdentifierKind.ADDRESS

    @property
    def is_domain(self) -> bool:
        return self.kind == IdentifierKind.DOMAIN

    def encode(self) -> str:
        return f"{self.chain}:{self.identifier}"


@dataclass
class ResolvedAddress:
    """
    Result of resolving a chain-qualified string.

    `address` is always EIP-55 checksummed. `domain` is only set when the
    address came out of the naming protocol.
    """

    address: str
    chain: str
    original: str
    domain: str | None = None
    source: ResolutionSource | None = None
    cached: bool = False

    def format_for_display(self) -> str:
        """Short human-readable form, e.g. `alice.nex (nex)` or `0x742d...6C87 (nex)`."""
        if self.domain:
            return f"{self.domain} ({self.chain})"
        return f"{self.address[:6]}...{self.address[38:]} ({self.chain})"

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "address": self.address,
            "domain": self.domain,
            "chain": self.chain,
            "original": self.original,
            "source": self.source.value if self.source else None,
            "cached": self.cached,
        }


@dataclass(frozen=True)
class AddressLookup:
    """Outcome of a successful forward lookup for a single name."""

    name: str
    address: str
    source: ResolutionSource
    resolver: str | None = None


@dataclass(frozen=True)
class DomainInfo:
    """Registrar view of a second-level `.nex` label."""

    name: str
    owner: str | None
    expires: datetime | None
    exists: bool
    # Expiry too far out to represent, e.g. a reserved name
    never_expires: bool = False

    def is_expired(self, now: datetime) -> bool:
        """Check expiry against a caller-supplied clock."""
        if self.never_expires:
            return False
        return self.expires is not None and self.expires <= now
