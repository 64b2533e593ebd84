"""
EIP-3770 chain-qualified address format.

Format: chain:identifier

    nex:alice.nex                                      (NNS domain)
    nex:0x742d35Cc6634C0532925a3b8D4C9db96590c6C87     (Nexus address)
    eth:0x742d35Cc6634C0532925a3b8D4C9db96590c6C87     (Ethereum address)

`encode` and `decode` need no configuration. Everything that depends on the
chain table or the naming suffix lives on AddressFormat, which is built from
a Config.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from nnsresolver.core.chains import DEFAULT_CHAIN_TABLE, ChainTable
from nnsresolver.core.types import ChainQualifiedAddress, IdentifierKind, ResolvedAddress
from nnsresolver.naming.labels import has_suffix
from nnsresolver.naming.namehash import is_address_literal, to_checksum_address

if TYPE_CHECKING:
    from nnsresolver.core.config import Config

SEPARATOR = ":"


def encode(chain: str, identifier: str) -> str:
    """Join a chain token and an identifier."""
    return f"{chain}{SEPARATOR}{identifier}"


def decode(encoded: str) -> ChainQualifiedAddress | None:
    """
    Split on the first separator.

    Returns None when there is no separator. The identifier kind is decided
    purely by the address-literal shape.
    """
    chain, sep, identifier = encoded.partition(SEPARATOR)
    if not sep:
        return None
    kind = IdentifierKind.ADDRESS if is_address_literal(identifier) else IdentifierKind.DOMAIN
    return ChainQualifiedAddress(chain=chain, identifier=identifier, kind=kind)


def is_domain(value: str) -> bool:
    """Dotted, not an address, and no empty labels."""
    if is_address_literal(value) or "." not in value:
        return False
    return all(value.split("."))


class AddressFormat:
    """
    Chain-table-aware EIP-3770 operations.

    Usage:
        fmt = AddressFormat.from_config(config)
        fmt.validate("nex:alice.nex")          # True
        fmt.normalize("NEX:ALICE.NEX")         # "nex:alice.nex"
        fmt.auto_format("alice.nex")           # "nex:alice.nex"
    """

    def __init__(
        self,
        chain_table: ChainTable = DEFAULT_CHAIN_TABLE,
        domain_suffix: str = "nex",
        naming_chain: str = "nex",
        default_chain: str = "nex",
    ) -> None:
        self._chains = chain_table
        self._suffix = domain_suffix
        self._naming_chain = naming_chain
        self._default_chain = default_chain

    @classmethod
    def from_config(cls, config: Config) -> AddressFormat:
        return cls(
            chain_table=config.chain_table,
            domain_suffix=config.domain_suffix,
            naming_chain=config.naming_chain,
            default_chain=config.default_chain,
        )

    @property
    def chain_table(self) -> ChainTable:
        return self._chains

    # Re-exported so callers can stay on one object
    encode = staticmethod(encode)
    decode = staticmethod(decode)
    is_domain = staticmethod(is_domain)

    def is_nns_domain(self, value: str) -> bool:
        return is_domain(value) and has_suffix(value, self._suffix)

    def validate(self, encoded: str) -> bool:
        """
        Check an EIP-3770 string.

        Requires exactly one separator, a chain token present in the chain
        table, and an identifier matching its kind.
        """
        decoded = decode(encoded)
        if decoded is None:
            return False
        if SEPARATOR in decoded.identifier:
            return False
        if decoded.chain not in self._chains:
            return False
        if decoded.kind == IdentifierKind.ADDRESS:
            return is_address_literal(decoded.identifier)
        return is_domain(decoded.identifier)

    def normalize(self, encoded: str) -> str:
        """
        Lower-case the chain token, checksum addresses, lower-case domains.

        Strings without a separator are returned unchanged.
        """
        decoded = decode(encoded)
        if decoded is None:
            return encoded
        if decoded.kind == IdentifierKind.ADDRESS:
            identifier = to_checksum_address(decoded.identifier)
        else:
            identifier = decoded.identifier.lower()
        return encode(decoded.chain.lower(), identifier)

    def auto_format(self, raw: str, default_chain: str | None = None) -> str:
        """
        Prepend a chain tag when the input carries none.

        `.nex` domains get the naming chain; other addresses and domains get
        `default_chain`. Input that is neither is returned unchanged.
        """
        if SEPARATOR in raw:
            return raw
        chain = default_chain or self._default_chain
        if is_address_literal(raw):
            return encode(chain, raw)
        if is_domain(raw):
            return encode(self._naming_chain if self.is_nns_domain(raw) else chain, raw)
        return raw

    def needs_resolution(self, value: str) -> bool:
        """True when the value names a domain rather than an address."""
        decoded = decode(value)
        if decoded is None:
            return is_domain(value)
        return decoded.kind == IdentifierKind.DOMAIN

    def get_chain_id(self, chain: str) -> int | None:
        return self._chains.chain_id(chain)

    def get_chain_token(self, chain_id: int) -> str | None:
        return self._chains.token(chain_id)

    def supported_chains(self) -> dict[str, int]:
        return dict(self._chains)

    @staticmethod
    def extract_identifier(encoded: str) -> str:
        decoded = decode(encoded)
        return decoded.identifier if decoded else encoded

    @staticmethod
    def extract_chain(encoded: str) -> str | None:
        decoded = decode(encoded)
        return decoded.chain if decoded else None

    @staticmethod
    def format_for_display(resolved: ResolvedAddress) -> str:
        return resolved.format_for_display()


_default_format = AddressFormat()


def validate(encoded: str) -> bool:
    """validate() against the built-in chain table."""
    return _default_format.validate(encoded)


def normalize(encoded: str) -> str:
    return _default_format.normalize(encoded)


def auto_format(raw: str, default_chain: str | None = None) -> str:
    return _default_format.auto_format(raw, default_chain)


__all__ = [
    "AddressFormat",
    "SEPARATOR",
    "auto_format",
    "decode",
    "encode",
    "is_domain",
    "normalize",
    "validate",
]
