"""NNSClient - Main SDK entry point."""

from __future__ import annotations

import asyncio
from typing import Any, Sequence

import httpx

from nnsresolver.address.format import SEPARATOR, AddressFormat
from nnsresolver.core.config import Config
from nnsresolver.core.exceptions import InvalidNameError
from nnsresolver.core.logging import configure_logging, get_logger
from nnsresolver.core.types import (
    ChainQualifiedAddress,
    DomainInfo,
    ResolutionSource,
    ResolvedAddress,
)
from nnsresolver.naming.namehash import (
    is_address_literal,
    namehash,
    to_checksum_address,
)
from nnsresolver.resolution.batch import BatchResolver
from nnsresolver.resolution.cache import FORWARD, REVERSE, ResolutionCache
from nnsresolver.resolution.resolver import NameResolver
from nnsresolver.rpc.client import RpcClient
from nnsresolver.storage import StorageBackend, get_storage


class NNSClient:
    """
    Main client for the Nexus Name Service.

    Combines the EIP-3770 address format with on-chain NNS resolution:

        async with NNSClient() as nns:
            resolved = await nns.resolve("nex:alice.nex")
            print(resolved.address)

    Everything comes from one immutable Config; pass `rpc_client` or
    `storage` to share them between clients or substitute them in tests.
    """

    def __init__(
        self,
        config: Config | None = None,
        rpc_client: RpcClient | None = None,
        storage: StorageBackend | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config or Config.from_env()

        configure_logging(level=self._config.log_level)
        self._logger = get_logger("client")
        self._logger.info(
            f"Initializing NNS client (chain {self._config.chain_id}, "
            f"registry {self._config.registry_address})"
        )

        self._rpc = rpc_client or RpcClient.from_config(self._config, http_client=http_client)
        self._owns_rpc = rpc_client is None

        if storage is None:
            kwargs: dict[str, Any] = {}
            if self._config.storage_backend == "redis" and self._config.redis_url:
                kwargs["redis_url"] = self._config.redis_url
            storage = get_storage(self._config.storage_backend, **kwargs)
        self._storage = storage
        self._cache = ResolutionCache(storage, ttl=self._config.cache_ttl)

        self._format = AddressFormat.from_config(self._config)
        self._resolver = NameResolver(self._rpc, self._config)
        self._batch = BatchResolver(self.resolve, concurrency=self._config.batch_concurrency)

    @property
    def config(self) -> Config:
        return self._config

    @property
    def format(self) -> AddressFormat:
        """Chain-table-aware EIP-3770 helpers."""
        return self._format

    @property
    def resolver(self) -> NameResolver:
        return self._resolver

    @property
    def cache(self) -> ResolutionCache:
        return self._cache

    # ─── Address Format ──────────────────────────────────────────────

    def encode(self, chain: str, identifier: str) -> str:
        return self._format.encode(chain, identifier)

    def decode(self, encoded: str) -> ChainQualifiedAddress | None:
        return self._format.decode(encoded)

    def validate(self, encoded: str) -> bool:
        return self._format.validate(encoded)

    def normalize(self, encoded: str) -> str:
        return self._format.normalize(encoded)

    def auto_format(self, raw: str, default_chain: str | None = None) -> str:
        return self._format.auto_format(raw, default_chain)

    @staticmethod
    def namehash(name: str) -> bytes:
        return namehash(name)

    # ─── Resolution ──────────────────────────────────────────────────

    async def resolve(self, encoded: str) -> ResolvedAddress | None:
        """
        Resolve an EIP-3770 string to an address.

        Address identifiers come back checksummed without any network call.
        Domains are resolved only when they are `.nex` names tagged with one
        of the naming chains; any other domain gives None.

        Raises:
            InvalidNameError: no chain separator, or an unusable name
            MalformedResponseError: a contract answered with garbage
        """
        decoded = self._format.decode(encoded)
        if decoded is None:
            raise InvalidNameError(
                f"Missing '{SEPARATOR}' chain separator: {encoded!r}", name=encoded
            )

        if decoded.is_address:
            return ResolvedAddress(
                address=to_checksum_address(decoded.identifier),
                chain=decoded.chain,
                original=encoded,
                source=ResolutionSource.LITERAL,
            )

        domain = decoded.identifier
        if not self._format.is_nns_domain(domain):
            self._logger.debug(f"{domain!r} is not an NNS domain, not resolving")
            return None
        if decoded.chain.lower() not in self._config.naming_chains:
            self._logger.debug(f"Chain {decoded.chain!r} does not use NNS, not resolving {domain}")
            return None

        data, cached = await self._cache.get_or_fetch(
            self._config.chain_id,
            domain,
            lambda: self._fetch_forward(domain),
            FORWARD,
        )
        if data is None:
            return None

        return ResolvedAddress(
            address=data["address"],
            chain=decoded.chain,
            original=encoded,
            domain=data["name"],
            source=ResolutionSource(data["source"]),
            cached=cached,
        )

    async def _fetch_forward(self, name: str) -> dict[str, Any] | None:
        lookup = await self._resolver.lookup_address(name)
        if lookup is None:
            return None
        return {"name": lookup.name, "address": lookup.address, "source": lookup.source.value}

    async def resolve_name(self, name: str) -> str | None:
        """Resolve a bare `.nex` name (no chain tag) to a checksummed address."""
        resolved = await self.resolve(self._format.encode(self._config.naming_chain, name))
        return resolved.address if resolved else None

    async def reverse_resolve(self, address: str, verify: bool = False) -> str | None:
        """Primary `.nex` name for an address, or None."""
        if not is_address_literal(address):
            raise InvalidNameError(f"Not an address literal: {address!r}", name=address)

        async def _fetch() -> dict[str, Any] | None:
            name = await self._resolver.reverse_resolve(address, verify=verify)
            return {"name": name} if name else None

        # verified and unverified answers are different facts
        data_type = f"{REVERSE}:verified" if verify else REVERSE
        data, _ = await self._cache.get_or_fetch(self._config.chain_id, address, _fetch, data_type)
        return data["name"] if data else None

    async def reverse_resolve_formatted(
        self,
        address: str,
        preferred_chain: str | None = None,
        verify: bool = False,
    ) -> str:
        """
        Reverse resolve and encode the result as EIP-3770.

        Returns `chain:name` when a primary name exists, otherwise
        `chain:address` with the address checksummed.
        """
        name = await self.reverse_resolve(address, verify=verify)
        if name:
            return self._format.encode(preferred_chain or self._config.naming_chain, name)
        chain = preferred_chain or self._config.chain_token or self._config.naming_chain
        return self._format.encode(chain, to_checksum_address(address))

    async def batch_resolve(self, identifiers: Sequence[str]) -> list[ResolvedAddress | None]:
        """Resolve many EIP-3770 strings concurrently; failures become None, order preserved."""
        result = await self._batch.process(identifiers)
        return result.results

    # ─── Records & Registrar ─────────────────────────────────────────

    async def get_text(self, name: str, key: str) -> str | None:
        return await self._resolver.get_text(name, key)

    async def get_owner(self, name: str) -> str | None:
        return await self._resolver.get_owner(name)

    async def record_exists(self, name: str) -> bool:
        return await self._resolver.record_exists(name)

    async def is_available(self, label: str) -> bool:
        return await self._resolver.is_available(label)

    async def get_domain_info(self, label: str) -> DomainInfo:
        return await self._resolver.get_domain_info(label)

    async def get_domains_of_owner(self, address: str) -> list[str]:
        return await self._resolver.get_domains_of_owner(address)

    async def get_owned_domains(self, address: str) -> list[DomainInfo]:
        """
        Registrar records for every name the registrar lists under `address`.

        Names that no longer exist or have changed hands are left out.
        """
        names = await self._resolver.get_domains_of_owner(address)
        infos = await asyncio.gather(*(self._resolver.get_domain_info(name) for name in names))
        return [
            info for info in infos
            if info.exists and info.owner is not None and info.owner.lower() == address.lower()
        ]

    async def registration_fee(self) -> int:
        return await self._resolver.registration_fee()

    async def verify_network(self) -> bool:
        """Check the endpoint serves the configured chain."""
        actual = await self._rpc.chain_id()
        if actual != self._config.chain_id:
            self._logger.warning(
                f"RPC endpoint reports chain {actual}, expected {self._config.chain_id}"
            )
            return False
        return True

    # ─── Lifecycle ───────────────────────────────────────────────────

    async def invalidate(self, name_or_address: str) -> None:
        """Drop cached forward and reverse entries for a name or address."""
        await self._cache.invalidate(self._config.chain_id, name_or_address)
        await self._cache.invalidate(self._config.chain_id, name_or_address, f"{REVERSE}:verified")

    async def close(self) -> None:
        if self._owns_rpc:
            await self._rpc.close()
        await self._storage.close()

    async def __aenter__(self) -> NNSClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


__all__ = ["NNSClient"]
