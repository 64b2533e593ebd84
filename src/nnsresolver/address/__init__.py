"""EIP-3770 address format layer."""

from nnsresolver.address.format import (
    SEPARATOR,
    AddressFormat,
    auto_format,
    decode,
    encode,
    is_domain,
    normalize,
    validate,
)

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
