"""Naming module: namehash, address checksum and label rules."""

from nnsresolver.naming.labels import has_suffix, is_valid_label, normalize_name, strip_suffix
from nnsresolver.naming.namehash import (
    ZERO_ADDRESS,
    ZERO_NODE,
    is_address_literal,
    is_checksum_address,
    is_zero_address,
    keccak256,
    labelhash,
    namehash,
    namehash_hex,
    reverse_name,
    to_checksum_address,
)

__all__ = [
    "ZERO_ADDRESS",
    "ZERO_NODE",
    "has_suffix",
    "is_address_literal",
    "is_checksum_address",
    "is_valid_label",
    "is_zero_address",
    "keccak256",
    "labelhash",
    "namehash",
    "namehash_hex",
    "normalize_name",
    "reverse_name",
    "strip_suffix",
    "to_checksum_address",
]
