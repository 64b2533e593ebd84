"""
Tests for the EIP-3770 address format layer.
"""

import pytest

from nnsresolver.address import AddressFormat, auto_format, decode, encode, normalize, validate
from nnsresolver.core.chains import CHAIN_IDENTIFIERS, DEFAULT_CHAIN_TABLE, ChainTable
from nnsresolver.core.config import Config
from nnsresolver.core.types import IdentifierKind, ResolutionSource, ResolvedAddress

CHECKSUMMED = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
LOWER = CHECKSUMMED.lower()


# ─────────────────────────────────────────────────────────────────
# Encode / Decode
# ─────────────────────────────────────────────────────────────────


class TestEncodeDecode:
    """Tests for the config-free primitives."""

    def test_encode(self):
        assert encode("nex", "alice.nex") == "nex:alice.nex"

    @pytest.mark.parametrize(
        "chain,identifier,kind",
        [
            ("nex", "alice.nex", IdentifierKind.DOMAIN),
            ("eth", CHECKSUMMED, IdentifierKind.ADDRESS),
            ("arb", "vitalik.eth", IdentifierKind.DOMAIN),
        ],
    )
    def test_round_trip(self, chain, identifier, kind):
        decoded = decode(encode(chain, identifier))
        assert decoded.chain == chain
        assert decoded.identifier == identifier
        assert decoded.kind == kind

    def test_decode_without_separator(self):
        assert decode("alice.nex") is None

    def test_decode_splits_on_first_separator(self):
        decoded = decode("nex:a:b")
        assert decoded.chain == "nex"
        assert decoded.identifier == "a:b"

    def test_kind_by_shape_only(self):
        assert decode("nex:0xabc").kind == IdentifierKind.DOMAIN
        assert decode(f"zzz:{LOWER}").is_address


# ─────────────────────────────────────────────────────────────────
# Validate / Normalize
# ─────────────────────────────────────────────────────────────────


class TestValidate:
    """Tests for validate()."""

    @pytest.mark.parametrize(
        "value",
        ["nex:alice.nex", f"eth:{CHECKSUMMED}", f"nexus:{LOWER}", "opt:pay.alice.nex"],
    )
    def test_valid(self, value):
        assert validate(value)

    @pytest.mark.parametrize(
        "value",
        [
            "alice.nex",            # no separator
            "zzz:alice.nex",        # unknown chain
            "NEX:alice.nex",        # chain tokens match exactly
            "nex:a:b.nex",          # second separator
            "nex:",                 # empty identifier
            "nex:alice",            # domain without a dot
            "nex:alice..nex",       # empty label
            "nex:0xabc",            # neither an address nor a domain
            f"nex:{LOWER}\n",       # trailing newline
        ],
    )
    def test_invalid(self, value):
        assert not validate(value)


class TestNormalize:
    """Tests for normalize()."""

    def test_domain(self):
        assert normalize("NEX:ALICE.NEX") == "nex:alice.nex"

    def test_address(self):
        assert normalize("nex:" + LOWER) == "nex:" + CHECKSUMMED

    def test_address_with_trailing_newline_is_not_checksummed(self):
        value = "nex:" + LOWER + "\n"
        assert decode(value).kind == IdentifierKind.DOMAIN
        assert normalize(value) == value

    def test_without_separator_unchanged(self):
        assert normalize("Alice.NEX") == "Alice.NEX"


class TestAutoFormat:
    """Tests for auto_format()."""

    def test_already_tagged(self):
        assert auto_format("eth:alice.nex") == "eth:alice.nex"

    def test_nns_domain_gets_naming_chain(self):
        assert auto_format("alice.nex", default_chain="eth") == "nex:alice.nex"

    def test_address_gets_default_chain(self):
        assert auto_format(CHECKSUMMED, default_chain="eth") == f"eth:{CHECKSUMMED}"
        assert auto_format(CHECKSUMMED) == f"nex:{CHECKSUMMED}"

    def test_other_domain_gets_default_chain(self):
        assert auto_format("vitalik.eth", default_chain="eth") == "eth:vitalik.eth"

    def test_unrecognized_unchanged(self):
        assert auto_format("hello") == "hello"


# ─────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────


class TestAddressFormatHelpers:
    """Tests for the chain-table-aware helpers."""

    def test_from_config_custom_table(self):
        table = DEFAULT_CHAIN_TABLE.with_chains(base=8453)
        fmt = AddressFormat.from_config(Config(chain_table=table))
        assert fmt.validate("base:alice.nex")
        assert fmt.get_chain_id("base") == 8453
        assert not validate("base:alice.nex")

    def test_chain_lookups(self):
        fmt = AddressFormat()
        assert fmt.get_chain_id("nex") == 3940
        assert fmt.get_chain_id("nexus") == 3939
        assert fmt.get_chain_id("zzz") is None
        assert fmt.get_chain_token(42161) == "arb"
        assert fmt.supported_chains() == CHAIN_IDENTIFIERS

    def test_is_nns_domain(self):
        fmt = AddressFormat()
        assert fmt.is_nns_domain("alice.nex")
        assert not fmt.is_nns_domain("alice.eth")
        assert not fmt.is_nns_domain(CHECKSUMMED)

    def test_needs_resolution(self):
        fmt = AddressFormat()
        assert fmt.needs_resolution("nex:alice.nex")
        assert fmt.needs_resolution("alice.nex")
        assert not fmt.needs_resolution(f"nex:{CHECKSUMMED}")
        assert not fmt.needs_resolution(CHECKSUMMED)

    def test_extract(self):
        assert AddressFormat.extract_identifier("nex:alice.nex") == "alice.nex"
        assert AddressFormat.extract_identifier("alice.nex") == "alice.nex"
        assert AddressFormat.extract_chain("nex:alice.nex") == "nex"
        assert AddressFormat.extract_chain("alice.nex") is None

    def test_format_for_display(self):
        named = ResolvedAddress(address=CHECKSUMMED, chain="nex", original="nex:alice.nex", domain="alice.nex")
        bare = ResolvedAddress(address=CHECKSUMMED, chain="eth", original=f"eth:{CHECKSUMMED}")
        assert AddressFormat.format_for_display(named) == "alice.nex (nex)"
        assert AddressFormat.format_for_display(bare) == "0x5aAe...eAed (eth)"

    def test_resolved_to_dict(self):
        resolved = ResolvedAddress(
            address=CHECKSUMMED,
            chain="nex",
            original="nex:alice.nex",
            domain="alice.nex",
            source=ResolutionSource.ADDR,
        )
        assert resolved.to_dict()["source"] == "addr"


class TestChainTable:
    """Tests for the immutable chain table."""

    def test_builtin_entries(self):
        assert dict(DEFAULT_CHAIN_TABLE) == {
            "eth": 1,
            "gor": 5,
            "sep": 11155111,
            "nex": 3940,
            "nexus": 3939,
            "matic": 137,
            "arb": 42161,
            "opt": 10,
        }

    def test_immutable(self):
        with pytest.raises(TypeError):
            DEFAULT_CHAIN_TABLE["zzz"] = 1  # type: ignore[index]

    def test_with_chains_returns_new_table(self):
        extended = DEFAULT_CHAIN_TABLE.with_chains(base=8453)
        assert "base" in extended
        assert "base" not in DEFAULT_CHAIN_TABLE
        assert isinstance(extended, ChainTable)
