"""
Chain table and Nexus Name Service deployments.

Provides the EIP-3770 short-name table, the known NNS contract deployments
per chain id, and helpers for looking them up.

Reference: https://eips.ethereum.org/EIPS/eip-3770
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType


# ───────────────────────────────────────────────────────────────────
# EIP-3770 Chain Short Names
# ───────────────────────────────────────────────────────────────────

CHAIN_IDENTIFIERS: dict[str, int] = {
    "eth": 1,  # Ethereum Mainnet
    "gor": 5,  # Goerli
    "sep": 11155111,  # Sepolia
    "nex": 3940,  # Nexus Testnet
    "nexus": 3939,  # Nexus Mainnet
    "matic": 137,  # Polygon
    "arb": 42161,  # Arbitrum One
    "opt": 10,  # Optimism
}


# ───────────────────────────────────────────────────────────────────
# Deployed NNS Contract Addresses
# ───────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class NNSDeployment:
    """Contract addresses and endpoint for one NNS deployment."""

    chain_id: int
    name: str
    rpc_url: str
    registry: str
    default_resolver: str
    registrar: str | None = None
    explorer_url: str | None = None


NNS_DEPLOYMENTS: dict[int, NNSDeployment] = {
    3940: NNSDeployment(
        chain_id=3940,
        name="Nexus Testnet",
        rpc_url="https://testnet3.rpc.nexus.xyz",
        # Registry and resolver used by the wallet SDK for name resolution
        registry="0x35481Ed34c3E6446EaafDca622369Df4295dce31",
        default_resolver="0x3C7bc6E4C65A194B3Bec187a3D6ef97A61F9DcD5",
        # Registrar from the dApp deployment, which pairs it with registry
        # 0xA87F122cB8E4490E004B019305438Dcf1849c21f. Names it reports as
        # registered may not resolve through the registry above.
        # Override with NNS_REGISTRAR_ADDRESS.
        registrar="0x7e8F8B3de7053378De2abB412592e0642c05A584",
        explorer_url="https://testnet3.explorer.nexus.xyz",
    ),
    31337: NNSDeployment(
        chain_id=31337,
        name="Hardhat Local",
        rpc_url="http://127.0.0.1:8545",
        registry="0x5FbDB2315678afecb367f032d93F642f64180aa3",
        default_resolver="0xe7f1725E7734CE288F8367e1Bb143E90bb3F0512",
        registrar="0x9fE46736679d2D9a65F0992F2272dE9f3c7fa6e0",
    ),
}

DEFAULT_CHAIN_ID = 3940


class ChainTable(Mapping[str, int]):
    """
    Immutable mapping of chain short names to numeric chain ids.

    Also answers the inverse lookup. Token lookups are exact: callers that
    accept user input lower-case it first.
    """

    def __init__(self, identifiers: Mapping[str, int] | None = None) -> None:
        source = dict(CHAIN_IDENTIFIERS if identifiers is None else identifiers)
        self._by_token: Mapping[str, int] = MappingProxyType(source)
        self._by_id: Mapping[int, str] = MappingProxyType(
            {chain_id: token for token, chain_id in source.items()}
        )

    def __getitem__(self, token: str) -> int:
        return self._by_token[token]

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_token)

    def __len__(self) -> int:
        return len(self._by_token)

    def __hash__(self) -> int:
        return hash(frozenset(self._by_token.items()))

    def __repr__(self) -> str:
        return f"ChainTable({dict(self._by_token)!r})"

    def chain_id(self, token: str) -> int | None:
        """Get the numeric chain id for a short name."""
        return self._by_token.get(token)

    def token(self, chain_id: int) -> str | None:
        """Get the short name for a numeric chain id."""
        return self._by_id.get(chain_id)

    def with_chains(self, **extra: int) -> ChainTable:
        """Return a new table with additional or overridden entries."""
        merged = dict(self._by_token)
        merged.update(extra)
        return ChainTable(merged)


DEFAULT_CHAIN_TABLE = ChainTable()


def get_deployment(chain_id: int) -> NNSDeployment | None:
    """Get the NNS deployment for a chain id."""
    return NNS_DEPLOYMENTS.get(chain_id)


def is_nns_supported(chain_id: int) -> bool:
    """Check if NNS contracts are deployed on this chain."""
    return chain_id in NNS_DEPLOYMENTS


__all__ = [
    "CHAIN_IDENTIFIERS",
    "ChainTable",
    "DEFAULT_CHAIN_ID",
    "DEFAULT_CHAIN_TABLE",
    "NNSDeployment",
    "NNS_DEPLOYMENTS",
    "get_deployment",
    "is_nns_supported",
]
