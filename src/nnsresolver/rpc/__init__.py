"""JSON-RPC transport."""

from nnsresolver.rpc.client import RpcClient

__all__ = ["RpcClient"]
