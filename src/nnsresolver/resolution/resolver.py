"""
NNS name resolver.

Runs the fallback pipeline against the registry and resolver contracts:

    1. namehash(name.lower())
    2. registry.resolver(node)           zero or failure → default resolver
    3. resolver.addr(node)               first non-zero wins
    4. resolver.addr(node, coin_type)
    5. registry.owner(node)

Transport and remote errors inside steps 2-5 are logged and treated as a
zero result. Malformed responses and invalid names always propagate.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from nnsresolver.abi.codec import (
    address_word,
    bytes32_word,
    encode_call,
    encode_string_call,
    get_call,
    uint256_word,
)
from nnsresolver.core.exceptions import (
    ConfigurationError,
    InvalidNameError,
    RemoteError,
    TransportError,
)
from nnsresolver.core.logging import get_logger
from nnsresolver.core.types import AddressLookup, DomainInfo, ResolutionSource
from nnsresolver.naming.labels import has_suffix, normalize_name
from nnsresolver.naming.namehash import (
    is_address_literal,
    is_zero_address,
    namehash,
    reverse_name,
    to_checksum_address,
)

if TYPE_CHECKING:
    from nnsresolver.core.config import Config
    from nnsresolver.rpc.client import RpcClient

logger = get_logger("resolution.resolver")

RecoverableError = (TransportError, RemoteError)


def _expiry(expires: int) -> tuple[datetime | None, bool]:
    """Map a registrar expiry to (datetime, never_expires). Zero means unset."""
    if not expires:
        return None, False
    try:
        return datetime.fromtimestamp(expires, tz=timezone.utc), False
    except (OverflowError, OSError, ValueError):
        # Past datetime.max, e.g. type(uint256).max for reserved names
        return None, True


class NameResolver:
    """
    Forward and reverse resolution for `.nex` names.

    Stateless apart from the injected RPC client and config, so one instance
    can serve any number of concurrent lookups.
    """

    def __init__(self, rpc: RpcClient, config: Config) -> None:
        self._rpc = rpc
        self._config = config

    @property
    def config(self) -> Config:
        return self._config

    # ─── Raw Calls ───────────────────────────────────────────────────

    async def _call(self, target: str, signature: str, calldata: bytes) -> Any:
        """eth_call + decode; an empty return payload decodes to None."""
        raw = await self._rpc.call(target, calldata)
        if not raw:
            return None
        return get_call(signature).decode(raw)

    async def _guarded(
        self,
        step: str,
        node: bytes,
        target: str,
        signature: str,
        calldata: bytes,
    ) -> tuple[Any, TransportError | RemoteError | None]:
        """Run one fallback step, folding recoverable errors into (None, error)."""
        try:
            return await self._call(target, signature, calldata), None
        except RecoverableError as e:
            logger.warning(
                f"{step} lookup failed on {target}, treating as zero: {e}",
                extra={
                    "nns_step": step,
                    "nns_node": "0x" + node.hex(),
                    "nns_target": target,
                    "nns_error": type(e).__name__,
                },
            )
            return None, e

    # ─── Pipeline Steps ──────────────────────────────────────────────

    def node_for(self, name: str) -> bytes:
        """Validate and namehash a naming-protocol name."""
        return namehash(normalize_name(name, self._config.domain_suffix))

    async def locate_resolver(self, node: bytes) -> str:
        """Ask the registry for the node's resolver, falling back to the default resolver."""
        registry = self._config.registry_address
        found, _ = await self._guarded(
            "resolver", node, registry, "resolver(bytes32)",
            encode_call("resolver(bytes32)", [bytes32_word(node)]),
        )
        if is_zero_address(found):
            default = to_checksum_address(self._config.default_resolver_address)
            logger.debug(f"No resolver set for 0x{node.hex()}, using default resolver {default}")
            return default
        return found

    async def _address_step(
        self,
        step: str,
        node: bytes,
        target: str,
        signature: str,
        calldata: bytes,
    ) -> tuple[str | None, TransportError | RemoteError | None]:
        address, error = await self._guarded(step, node, target, signature, calldata)
        if is_zero_address(address):
            return None, error
        return address, error

    async def lookup_address(self, name: str) -> AddressLookup | None:
        """
        Resolve a `.nex` name to an address.

        Returns None when no step yields a non-zero address.

        Raises:
            InvalidNameError: name lacks the suffix or is empty after it
            MalformedResponseError: a response did not fit the expected shape
            TransportError / RemoteError: only from the owner step, and only
                when Config.strict_final_step is set
        """
        normalized = normalize_name(name, self._config.domain_suffix)
        node = namehash(normalized)
        node_word = bytes32_word(node)
        resolver = await self.locate_resolver(node)

        address, _ = await self._address_step(
            "addr", node, resolver, "addr(bytes32)",
            encode_call("addr(bytes32)", [node_word]),
        )
        if address:
            return AddressLookup(normalized, address, ResolutionSource.ADDR, resolver)

        address, _ = await self._address_step(
            "multicoin", node, resolver, "addr(bytes32,uint256)",
            encode_call("addr(bytes32,uint256)", [node_word, uint256_word(self._config.coin_type)]),
        )
        if address:
            return AddressLookup(normalized, address, ResolutionSource.MULTICOIN, resolver)

        address, error = await self._address_step(
            "owner", node, self._config.registry_address, "owner(bytes32)",
            encode_call("owner(bytes32)", [node_word]),
        )
        if address:
            return AddressLookup(normalized, address, ResolutionSource.OWNER, resolver)

        if error is not None and self._config.strict_final_step:
            raise error

        logger.debug(f"No address record for {normalized}")
        return None

    async def reverse_resolve(self, address: str, verify: bool = False) -> str | None:
        """
        Recover the primary name for an address.

        Args:
            address: Address literal
            verify: Only accept the name if it forward-resolves to `address`

        Returns:
            The name, or None when no reverse record exists
        """
        if not is_address_literal(address):
            raise InvalidNameError(f"Not an address literal: {address!r}", name=address)

        node = namehash(reverse_name(address, self._config.reverse_suffix))
        resolver = await self.locate_resolver(node)
        name, error = await self._guarded(
            "name", node, resolver, "name(bytes32)",
            encode_call("name(bytes32)", [bytes32_word(node)]),
        )
        if error is not None and self._config.strict_final_step:
            raise error
        if not name:
            logger.debug(f"No reverse record for {address}")
            return None

        if verify:
            if not has_suffix(name, self._config.domain_suffix):
                logger.warning(f"Reverse record for {address} is not a .{self._config.domain_suffix} name: {name!r}")
                return None
            try:
                lookup = await self.lookup_address(name)
            except InvalidNameError:
                logger.warning(f"Reverse record for {address} is not a valid name: {name!r}")
                return None
            if lookup is None or lookup.address.lower() != address.lower():
                logger.warning(f"Reverse record {name} does not resolve back to {address}")
                return None

        return name

    # ─── Record Queries ──────────────────────────────────────────────

    async def get_text(self, name: str, key: str) -> str | None:
        """Read a text record (e.g. `url`, `avatar`); empty → None."""
        node = self.node_for(name)
        resolver = await self.locate_resolver(node)
        value = await self._call(
            resolver, "text(bytes32,string)",
            encode_string_call("text(bytes32,string)", [bytes32_word(node)], key),
        )
        return value or None

    async def get_owner(self, name: str) -> str | None:
        """Registry owner of the name; the zero address → None."""
        node = self.node_for(name)
        owner = await self._call(
            self._config.registry_address, "owner(bytes32)",
            encode_call("owner(bytes32)", [bytes32_word(node)]),
        )
        return None if is_zero_address(owner) else owner

    async def record_exists(self, name: str) -> bool:
        node = self.node_for(name)
        exists = await self._call(
            self._config.registry_address, "recordExists(bytes32)",
            encode_call("recordExists(bytes32)", [bytes32_word(node)]),
        )
        return bool(exists)

    # ─── Registrar Queries ───────────────────────────────────────────

    def _registrar(self) -> str:
        if not self._config.registrar_address:
            raise ConfigurationError("No registrar address configured")
        return self._config.registrar_address

    def _label(self, name: str) -> str:
        """Accept `alice` or `alice.nex`; the registrar wants the bare label."""
        lowered = name.strip().lower()
        suffix = f".{self._config.domain_suffix}"
        label = lowered[: -len(suffix)] if lowered.endswith(suffix) else lowered
        if not label or "." in label:
            raise InvalidNameError(f"Not a second-level label: {name!r}", name=name)
        return label

    async def is_available(self, name: str) -> bool:
        label = self._label(name)
        available = await self._call(
            self._registrar(), "available(string)",
            encode_string_call("available(string)", [], label),
        )
        return bool(available)

    async def get_domain_info(self, name: str) -> DomainInfo:
        label = self._label(name)
        record = await self._call(
            self._registrar(), "getDomain(string)",
            encode_string_call("getDomain(string)", [], label),
        )
        full_name = f"{label}.{self._config.domain_suffix}"
        if record is None:
            return DomainInfo(name=full_name, owner=None, expires=None, exists=False)
        owner, expires, exists = record
        expires_at, never_expires = _expiry(expires)
        return DomainInfo(
            name=full_name,
            owner=None if is_zero_address(owner) else owner,
            expires=expires_at,
            exists=exists,
            never_expires=never_expires,
        )

    async def get_domains_of_owner(self, address: str) -> list[str]:
        """
        Names the registrar lists for an owner, with the `.nex` suffix added.

        The registrar answers from its own bookkeeping, so a listed name
        may since have expired; read get_domain_info() to check.
        """
        if not is_address_literal(address):
            raise InvalidNameError(f"Not an address literal: {address!r}", name=address)
        labels = await self._call(
            self._registrar(), "getDomainsOfOwner(address)",
            encode_call("getDomainsOfOwner(address)", [address_word(address)]),
        )
        suffix = f".{self._config.domain_suffix}"
        return [
            label if label.lower().endswith(suffix) else f"{label}{suffix}"
            for label in labels or []
        ]

    async def registration_fee(self) -> int:
        """Current registration fee in wei."""
        fee = await self._call(
            self._registrar(), "registrationFee()",
            encode_call("registrationFee()"),
        )
        return fee or 0


__all__ = ["NameResolver"]
