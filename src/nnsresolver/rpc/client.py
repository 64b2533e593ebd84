"""
Lightweight JSON-RPC client for read-only contract calls.

Uses `eth_call` via httpx. No web3.py dependency: calldata is built by
nnsresolver.abi.codec and the raw result bytes are handed back to the
caller for decoding.

Configuration (pick one):
    1. Constructor: RpcClient("https://testnet3.rpc.nexus.xyz")
    2. Config:      RpcClient.from_config(Config.from_env())  # NNS_RPC_URL

For fallback, pass comma-separated URLs:
    NNS_RPC_URL=https://primary.example/rpc,https://backup.example/rpc
"""

from __future__ import annotations

import itertools
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

import httpx

from nnsresolver.abi.codec import to_bytes
from nnsresolver.core.exceptions import (
    ConfigurationError,
    MalformedResponseError,
    RemoteError,
    TransportError,
)
from nnsresolver.core.logging import get_logger
from nnsresolver.naming.namehash import is_address_literal
from nnsresolver.resilience.retry import execute_with_retry

if TYPE_CHECKING:
    from nnsresolver.core.config import Config

logger = get_logger("rpc.client")


class RpcClient:
    """
    JSON-RPC transport for `eth_call` and `eth_chainId`.

    Every call is a state query; nothing here can mutate chain state.

    Failure mapping:
        - connection error, timeout, non-2xx status → TransportError
        - JSON-RPC `error` member                    → RemoteError
        - body that is not a JSON-RPC envelope       → MalformedResponseError

    With several endpoints configured, each is tried in order and the last
    TransportError/RemoteError is raised once all of them have failed.
    """

    DEFAULT_TIMEOUT = 10.0  # seconds per JSON-RPC call

    def __init__(
        self,
        rpc_url: str | Sequence[str],
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        retry_attempts: int = 3,
        retry_backoff: float = 0.25,
    ) -> None:
        """
        Args:
            rpc_url: Endpoint URL, comma-separated URLs, or a list of URLs
            http_client: Shared httpx client (for connection pooling)
            timeout: Per-request timeout used when the client is owned
            retry_attempts: Attempts per endpoint for transient transport errors
            retry_backoff: Exponential backoff multiplier in seconds
        """
        raw = rpc_url.split(",") if isinstance(rpc_url, str) else list(rpc_url)
        self._rpc_urls: list[str] = [u.strip() for u in raw if u and u.strip()]
        if not self._rpc_urls:
            raise ConfigurationError("No RPC URL configured")
        self._http_client = http_client
        self._owns_client = False
        self._timeout = timeout
        self._retry_attempts = retry_attempts
        self._retry_backoff = retry_backoff
        self._ids = itertools.count(1)

    @classmethod
    def from_config(cls, config: Config, http_client: httpx.AsyncClient | None = None) -> RpcClient:
        return cls(
            config.rpc_urls,
            http_client=http_client,
            timeout=config.request_timeout,
            retry_attempts=config.rpc_retry_attempts,
            retry_backoff=config.rpc_retry_backoff,
        )

    @property
    def endpoints(self) -> list[str]:
        return list(self._rpc_urls)

    async def _get_client(self) -> httpx.AsyncClient:
        """Lazy-init HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self._timeout)
            self._owns_client = True
        return self._http_client

    async def close(self) -> None:
        """Close owned HTTP client."""
        if self._owns_client and self._http_client:
            await self._http_client.aclose()
            self._http_client = None
            self._owns_client = False

    async def __aenter__(self) -> RpcClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # ─── Public Calls ────────────────────────────────────────────────

    async def call(
        self,
        target: str,
        data: bytes,
        endpoint: str | None = None,
        block: str = "latest",
    ) -> bytes:
        """
        Execute `eth_call` and return the raw result bytes.

        An empty result (`0x`) comes back as b"" and is left to the caller
        to interpret.

        Args:
            target: Contract address
            data: Calldata (selector + argument words)
            endpoint: Query only this URL instead of the configured list
            block: Block tag
        """
        if not is_address_literal(target):
            raise ValueError(f"eth_call target is not an address: {target!r}")
        params = [{"to": target, "data": "0x" + data.hex()}, block]
        result = await self._request("eth_call", params, endpoint)
        if not isinstance(result, str):
            raise MalformedResponseError("eth_call result is not a hex string", raw=str(result))
        return to_bytes(result)

    async def chain_id(self, endpoint: str | None = None) -> int:
        """Read `eth_chainId` from the endpoint."""
        result = await self._request("eth_chainId", [], endpoint)
        try:
            return int(result, 16)
        except (TypeError, ValueError) as e:
            raise MalformedResponseError("eth_chainId result is not a hex quantity", raw=str(result)) from e

    # ─── JSON-RPC Plumbing ───────────────────────────────────────────

    async def _request(self, method: str, params: list[Any], endpoint: str | None = None) -> Any:
        """Send one JSON-RPC request with multi-endpoint fallback."""
        urls = [endpoint] if endpoint else self._rpc_urls
        last_error: TransportError | RemoteError | None = None

        for i, url in enumerate(urls):
            payload = {
                "jsonrpc": "2.0",
                "id": next(self._ids),
                "method": method,
                "params": params,
            }
            try:
                return await self._post(url, payload)
            except (TransportError, RemoteError) as e:
                remaining = len(urls) - i - 1
                logger.warning(
                    f"{method} failed on endpoint {i + 1}/{len(urls)}: {e} "
                    f"({'falling back' if remaining else 'no more endpoints'})"
                )
                last_error = e

        if last_error is None:
            raise ConfigurationError("No RPC endpoint to query")
        raise last_error

    async def _post(self, url: str, payload: dict[str, Any]) -> Any:
        """POST one envelope to one endpoint and unwrap `result`."""
        client = await self._get_client()
        try:
            response = await execute_with_retry(
                self._post_once, client, url, payload,
                attempts=self._retry_attempts,
                backoff=self._retry_backoff,
            )
        except httpx.TimeoutException as e:
            raise TransportError(f"RPC timeout: {url}", url=url, details={"timeout": True}) from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise TransportError(f"RPC HTTP {status}: {url}", url=url, status_code=status) from e
        except httpx.HTTPError as e:
            raise TransportError(f"RPC request failed: {e}", url=url) from e

        try:
            body = response.json()
        except ValueError as e:
            raise MalformedResponseError("RPC response is not JSON", raw=response.text[:200]) from e

        if not isinstance(body, dict):
            raise MalformedResponseError("RPC response is not a JSON object", raw=response.text[:200])

        error = body.get("error")
        if error is not None:
            if isinstance(error, dict):
                raise RemoteError(
                    error.get("message") or "RPC returned error",
                    code=error.get("code"),
                    data=error.get("data"),
                    url=url,
                )
            raise RemoteError(str(error), url=url)

        if "result" not in body:
            raise MalformedResponseError("RPC response has neither result nor error", raw=response.text[:200])
        logger.debug(f"{payload['method']} ok from {url}")
        return body["result"]

    @staticmethod
    async def _post_once(client: httpx.AsyncClient, url: str, payload: dict[str, Any]) -> httpx.Response:
        response = await client.post(url, json=payload)
        response.raise_for_status()
        return response


__all__ = ["RpcClient"]
