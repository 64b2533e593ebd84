"""
nnsresolver - Nexus Name Service resolution with EIP-3770 addresses

Resolve `.nex` names to addresses and back over plain JSON-RPC.

Usage:
    >>> from nnsresolver import NNSClient
    >>>
    >>> async with NNSClient() as nns:
    ...     resolved = await nns.resolve("nex:alice.nex")
    ...     name = await nns.reverse_resolve("0x742d35Cc6634C0532925a3b8D4C9db96590c6C87")

Pure helpers need no client:
    >>> from nnsresolver import namehash, normalize
    >>> namehash("alice.nex").hex()
    >>> normalize("NEX:ALICE.NEX")
    'nex:alice.nex'
"""

from nnsresolver.address.format import (
    AddressFormat,
    auto_format,
    decode,
    encode,
    is_domain,
    normalize,
    validate,
)
from nnsresolver.client import NNSClient
from nnsresolver.core.chains import CHAIN_IDENTIFIERS, ChainTable, NNSDeployment
from nnsresolver.core.config import Config
from nnsresolver.core.exceptions import (
    ConfigurationError,
    InvalidNameError,
    MalformedResponseError,
    NNSError,
    RemoteError,
    TransportError,
)
from nnsresolver.core.logging import configure_logging, get_logger
from nnsresolver.core.types import (
    AddressLookup,
    ChainQualifiedAddress,
    DomainInfo,
    IdentifierKind,
    ResolutionSource,
    ResolvedAddress,
)
from nnsresolver.naming import (
    is_address_literal,
    is_valid_label,
    namehash,
    reverse_name,
    to_checksum_address,
)
from nnsresolver.resolution import BatchResolver, NameResolver, ResolutionCache
from nnsresolver.rpc import RpcClient

__version__ = "0.1.0"

__all__ = [
    # Client
    "NNSClient",
    "Config",
    # Address format
    "AddressFormat",
    "auto_format",
    "decode",
    "encode",
    "is_domain",
    "normalize",
    "validate",
    # Naming
    "is_address_literal",
    "is_valid_label",
    "namehash",
    "reverse_name",
    "to_checksum_address",
    # Resolution
    "BatchResolver",
    "NameResolver",
    "ResolutionCache",
    "RpcClient",
    # Chains
    "CHAIN_IDENTIFIERS",
    "ChainTable",
    "NNSDeployment",
    # Types
    "AddressLookup",
    "ChainQualifiedAddress",
    "DomainInfo",
    "IdentifierKind",
    "ResolutionSource",
    "ResolvedAddress",
    # Exceptions
    "ConfigurationError",
    "InvalidNameError",
    "MalformedResponseError",
    "NNSError",
    "RemoteError",
    "TransportError",
    # Logging
    "configure_logging",
    "get_logger",
]
