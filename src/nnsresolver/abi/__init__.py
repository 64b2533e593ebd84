"""Contract-call encoding for the NNS read surface."""

from nnsresolver.abi.codec import (
    CALLS,
    CallSpec,
    decode_address,
    decode_string,
    encode_call,
    function_selector,
    get_call,
)

__all__ = [
    "CALLS",
    "CallSpec",
    "decode_address",
    "decode_string",
    "encode_call",
    "function_selector",
    "get_call",
]
