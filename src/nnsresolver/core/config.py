"""
Configuration management for nnsresolver.

Handles loading configuration from environment variables and validation.
A Config is immutable; build a new one with `with_updates` to point at a
different endpoint or deployment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Any

from nnsresolver.core.chains import (
    DEFAULT_CHAIN_ID,
    DEFAULT_CHAIN_TABLE,
    NNS_DEPLOYMENTS,
    ChainTable,
    get_deployment,
)
from nnsresolver.naming.namehash import is_address_literal

_TESTNET = NNS_DEPLOYMENTS[DEFAULT_CHAIN_ID]

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _get_env_var(name: str, default: str | None = None, required: bool = False) -> str | None:
    """Get environment variable with optional default."""
    value = os.environ.get(name, default)
    if required and not value:
        raise ValueError(f"Required environment variable {name} is not set")
    return value


@dataclass(frozen=True)
class Config:
    """Resolver configuration."""

    rpc_url: str = _TESTNET.rpc_url
    chain_id: int = DEFAULT_CHAIN_ID
    registry_address: str = _TESTNET.registry
    default_resolver_address: str = _TESTNET.default_resolver
    registrar_address: str | None = _TESTNET.registrar

    # Naming protocol
    domain_suffix: str = "nex"
    reverse_suffix: str = "addr.reverse"
    coin_type: int = 60  # native account namespace for addr(bytes32,uint256)
    naming_chain: str = "nex"  # tag auto_format gives to .nex names
    naming_chains: tuple[str, ...] = ("nex", "nexus")  # tags resolved through NNS
    default_chain: str = "nex"
    chain_table: ChainTable = field(default_factory=lambda: DEFAULT_CHAIN_TABLE)

    # Transport
    request_timeout: float = 10.0
    rpc_retry_attempts: int = 3
    rpc_retry_backoff: float = 0.25

    # Resolution behaviour
    batch_concurrency: int = 10
    strict_final_step: bool = False

    # Caching
    cache_ttl: int = 300  # seconds, 0 disables
    storage_backend: str = "memory"
    redis_url: str | None = None

    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not self.rpc_urls:
            raise ValueError("rpc_url is required")
        for label, value in (
            ("registry_address", self.registry_address),
            ("default_resolver_address", self.default_resolver_address),
        ):
            if not is_address_literal(value):
                raise ValueError(f"{label} is not an address: {value!r}")
        if self.registrar_address is not None and not is_address_literal(self.registrar_address):
            raise ValueError(f"registrar_address is not an address: {self.registrar_address!r}")
        if self.naming_chain not in self.chain_table:
            raise ValueError(f"naming_chain {self.naming_chain!r} is not in the chain table")
        if self.rpc_retry_attempts < 1:
            raise ValueError("rpc_retry_attempts must be at least 1")
        if self.batch_concurrency < 1:
            raise ValueError("batch_concurrency must be at least 1")
        if self.cache_ttl < 0:
            raise ValueError("cache_ttl must not be negative")

    @property
    def rpc_urls(self) -> list[str]:
        """Configured endpoints in fallback order."""
        return [u.strip() for u in self.rpc_url.split(",") if u.strip()]

    @property
    def chain_token(self) -> str | None:
        """Short name of the configured chain, if it is in the table."""
        return self.chain_table.token(self.chain_id)

    @classmethod
    def for_chain(cls, chain_id: int, **overrides: Any) -> Config:
        """Build a config from a known NNS deployment."""
        deployment = get_deployment(chain_id)
        if deployment is None:
            raise ValueError(f"No known NNS deployment for chain id {chain_id}")
        values: dict[str, Any] = {
            "rpc_url": deployment.rpc_url,
            "chain_id": deployment.chain_id,
            "registry_address": deployment.registry,
            "default_resolver_address": deployment.default_resolver,
            "registrar_address": deployment.registrar,
        }
        values.update(overrides)
        return cls(**values)

    @classmethod
    def from_env(cls, **overrides: Any) -> Config:
        """Load configuration from environment variables."""
        chain_id = int(
            overrides.get("chain_id") or _get_env_var("NNS_CHAIN_ID", default=str(DEFAULT_CHAIN_ID))  # type: ignore[arg-type]
        )
        base = cls.for_chain(chain_id) if get_deployment(chain_id) else cls(chain_id=chain_id)

        values: dict[str, Any] = {}
        env_strings = {
            "rpc_url": "NNS_RPC_URL",
            "registry_address": "NNS_REGISTRY_ADDRESS",
            "default_resolver_address": "NNS_DEFAULT_RESOLVER",
            "registrar_address": "NNS_REGISTRAR_ADDRESS",
            "storage_backend": "NNS_STORAGE_BACKEND",
            "redis_url": "NNS_REDIS_URL",
            "log_level": "NNS_LOG_LEVEL",
        }
        for attr, env_name in env_strings.items():
            value = _get_env_var(env_name)
            if value:
                values[attr] = value

        timeout = _get_env_var("NNS_REQUEST_TIMEOUT")
        if timeout:
            values["request_timeout"] = float(timeout)

        cache_ttl = _get_env_var("NNS_CACHE_TTL")
        if cache_ttl:
            values["cache_ttl"] = int(cache_ttl)

        strict = _get_env_var("NNS_STRICT_FINAL_STEP")
        if strict:
            values["strict_final_step"] = strict.strip().lower() in _TRUE_VALUES

        values.update(overrides)
        values["chain_id"] = chain_id
        return base.with_updates(**values)

    def with_updates(self, **updates: Any) -> Config:
        """Create a new Config with updated values."""
        return replace(self, **updates)
