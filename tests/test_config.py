"""Unit tests for config module."""

from unittest.mock import patch

import pytest

from nnsresolver.core.chains import (
    DEFAULT_CHAIN_TABLE,
    NNS_DEPLOYMENTS,
    get_deployment,
    is_nns_supported,
)
from nnsresolver.core.config import Config
from nnsresolver.naming import is_address_literal

HARDHAT_REGISTRY = "0x5FbDB2315678afecb367f032d93F642f64180aa3"


class TestConfig:
    """Tests for Config class."""

    def test_defaults_point_at_testnet(self) -> None:
        config = Config()

        assert config.chain_id == 3940
        assert config.rpc_url == "https://testnet3.rpc.nexus.xyz"
        assert config.registry_address == "0x35481Ed34c3E6446EaafDca622369Df4295dce31"
        assert config.default_resolver_address == "0x3C7bc6E4C65A194B3Bec187a3D6ef97A61F9DcD5"
        assert config.registrar_address == "0x7e8F8B3de7053378De2abB412592e0642c05A584"
        assert config.chain_token == "nex"
        assert config.coin_type == 60
        assert config.strict_final_step is False

    def test_config_is_immutable(self) -> None:
        config = Config()
        with pytest.raises(AttributeError):
            config.rpc_url = "http://other"  # type: ignore

    def test_rpc_urls_split(self) -> None:
        config = Config(rpc_url="http://a, http://b ,")
        assert config.rpc_urls == ["http://a", "http://b"]

    @pytest.mark.parametrize(
        "kwargs,match",
        [
            ({"rpc_url": " "}, "rpc_url is required"),
            ({"registry_address": "registry.nex"}, "registry_address"),
            ({"default_resolver_address": "0x123"}, "default_resolver_address"),
            ({"registrar_address": "nope"}, "registrar_address"),
            ({"naming_chain": "zzz"}, "naming_chain"),
            ({"rpc_retry_attempts": 0}, "rpc_retry_attempts"),
            ({"batch_concurrency": 0}, "batch_concurrency"),
            ({"cache_ttl": -1}, "cache_ttl"),
        ],
    )
    def test_validation(self, kwargs, match) -> None:
        with pytest.raises(ValueError, match=match):
            Config(**kwargs)

    def test_with_updates(self) -> None:
        config = Config()
        updated = config.with_updates(strict_final_step=True, cache_ttl=0)

        assert updated.strict_final_step is True
        assert updated.cache_ttl == 0
        assert config.strict_final_step is False

    def test_configs_coexist(self) -> None:
        test = Config(rpc_url="http://127.0.0.1:8545")
        prod = Config()
        assert test.rpc_url != prod.rpc_url
        assert test.chain_table is prod.chain_table is DEFAULT_CHAIN_TABLE


class TestForChain:
    """Tests for building configs from known deployments."""

    def test_hardhat(self) -> None:
        config = Config.for_chain(31337)
        assert config.registry_address == HARDHAT_REGISTRY
        assert config.rpc_url == "http://127.0.0.1:8545"

    def test_override(self) -> None:
        config = Config.for_chain(31337, rpc_url="http://node:8545")
        assert config.rpc_url == "http://node:8545"

    def test_unknown_chain(self) -> None:
        with pytest.raises(ValueError, match="No known NNS deployment"):
            Config.for_chain(1)

    def test_deployment_lookup(self) -> None:
        assert get_deployment(3940).name == "Nexus Testnet"
        assert get_deployment(1) is None
        assert is_nns_supported(31337)
        assert not is_nns_supported(137)

    @pytest.mark.parametrize("chain_id", sorted(NNS_DEPLOYMENTS))
    def test_deployment_addresses_are_literals(self, chain_id) -> None:
        deployment = NNS_DEPLOYMENTS[chain_id]
        addresses = [deployment.registry, deployment.default_resolver, deployment.registrar]
        assert all(is_address_literal(a) for a in addresses)
        assert len({a.lower() for a in addresses}) == 3

    def test_registrar_override(self) -> None:
        other = "0x" + "ab" * 20
        with patch.dict("os.environ", {"NNS_REGISTRAR_ADDRESS": other}):
            config = Config.from_env()
        assert config.registrar_address == other
        assert config.registry_address == NNS_DEPLOYMENTS[3940].registry


class TestFromEnv:
    """Tests for environment loading."""

    def test_defaults_without_env(self) -> None:
        config = Config.from_env()
        assert config == Config()

    def test_reads_environment(self) -> None:
        env = {
            "NNS_RPC_URL": "http://a,http://b",
            "NNS_REQUEST_TIMEOUT": "2.5",
            "NNS_CACHE_TTL": "0",
            "NNS_STRICT_FINAL_STEP": "true",
            "NNS_STORAGE_BACKEND": "redis",
            "NNS_REDIS_URL": "redis://cache:6379/0",
            "NNS_LOG_LEVEL": "DEBUG",
        }
        with patch.dict("os.environ", env):
            config = Config.from_env()

        assert config.rpc_urls == ["http://a", "http://b"]
        assert config.request_timeout == 2.5
        assert config.cache_ttl == 0
        assert config.strict_final_step is True
        assert config.storage_backend == "redis"
        assert config.redis_url == "redis://cache:6379/0"
        assert config.log_level == "DEBUG"

    def test_chain_id_selects_deployment(self) -> None:
        with patch.dict("os.environ", {"NNS_CHAIN_ID": "31337"}):
            config = Config.from_env()
        assert config.chain_id == 31337
        assert config.registry_address == HARDHAT_REGISTRY

    def test_overrides_win(self) -> None:
        with patch.dict("os.environ", {"NNS_RPC_URL": "http://env"}):
            config = Config.from_env(rpc_url="http://override")
        assert config.rpc_url == "http://override"

    def test_strict_flag_false_values(self) -> None:
        with patch.dict("os.environ", {"NNS_STRICT_FINAL_STEP": "no"}):
            assert Config.from_env().strict_final_step is False
