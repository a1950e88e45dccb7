from __future__ import annotations

import copy
import json
from pathlib import Path

import pytest

import levr_sdk.core.config as config
from levr_sdk.core.constants.contracts import LEVR_CONTRACTS_BY_CHAIN, MULTICALL3_ADDRESS
from levr_sdk.core.errors import ConfigurationError


@pytest.fixture
def restore_global_config() -> None:
    original = copy.deepcopy(config.CONFIG)
    yield
    config.set_config(original)


def test_resolve_config_path_defaults_to_repo_root(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("LEVR_CONFIG_PATH", raising=False)
    monkeypatch.delenv("LEVR_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)

    repo_root = Path(__file__).resolve().parents[2]
    assert config.resolve_config_path() == repo_root / "config.json"


def test_resolve_config_path_env_relative_is_repo_relative(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("LEVR_CONFIG_PATH", "config.example.json")
    monkeypatch.chdir(tmp_path)

    repo_root = Path(__file__).resolve().parents[2]
    assert config.resolve_config_path() == repo_root / "config.example.json"


def test_load_config_json_supports_env_override(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("LEVR_CONFIG_PATH", "config.example.json")
    monkeypatch.chdir(tmp_path)

    cfg = config.load_config_json()
    assert isinstance(cfg.get("rpc_urls"), dict)
    assert cfg["treasury_airdrop"]["version"] == "v1"


def test_load_config_json_tolerates_bad_files(tmp_path: Path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    listing = tmp_path / "list.json"
    listing.write_text(json.dumps([1, 2, 3]))

    assert config.load_config_json(broken) == {}
    assert config.load_config_json(listing) == {}
    assert config.load_config_json(tmp_path / "missing.json") == {}
    with pytest.raises(FileNotFoundError):
        config.load_config_json(tmp_path / "missing.json", require_exists=True)


def test_rpc_urls_prefer_config(restore_global_config: None) -> None:
    config.set_config({"rpc_urls": {"8453": "https://one.invalid"}})
    assert config.get_rpc_urls_for_chain(8453) == ["https://one.invalid"]

    config.set_rpc_urls({8453: ["https://a.invalid", "https://b.invalid"]})
    assert config.get_rpc_urls_for_chain(8453) == ["https://a.invalid", "https://b.invalid"]


def test_rpc_urls_fall_back_to_public_defaults(restore_global_config: None) -> None:
    config.set_config({})

    assert config.get_rpc_urls_for_chain(8453) == ["https://mainnet.base.org"]
    with pytest.raises(ConfigurationError):
        config.get_rpc_urls_for_chain(1)


def test_contract_addresses(restore_global_config: None) -> None:
    override = "0x1000000000000000000000000000000000000001"
    config.set_config({"contracts": {"8453": {"factory": override}}})

    assert config.get_contract_address(8453, "factory") == override
    assert (
        config.get_contract_address(8453, "weth") == LEVR_CONTRACTS_BY_CHAIN[8453]["weth"]
    )
    assert config.get_contract_address(8453, "airdrop") is None
    assert config.get_multicall_address(8453) == MULTICALL3_ADDRESS
    with pytest.raises(ConfigurationError):
        config.require_contract_address(8453, "airdrop")


def test_multicall_chunk_size(restore_global_config: None) -> None:
    config.set_config({})
    assert config.get_multicall_chunk_size() == 150

    config.set_config({"multicall": {"chunk_size": "25"}})
    assert config.get_multicall_chunk_size() == 25

    config.set_config({"multicall": {"chunk_size": 0}})
    assert config.get_multicall_chunk_size() == 1

    config.set_config({"multicall": {"chunk_size": "lots"}})
    assert config.get_multicall_chunk_size() == 150


def test_treasury_airdrop_amounts(restore_global_config: None) -> None:
    config.set_config({})
    version, amounts = config.get_treasury_airdrop_amounts()
    assert version == "v1"
    assert amounts[0] == 10_000_000_000
    assert len(amounts) == 9

    config.set_config({"treasury_airdrop": {"version": "v2", "amounts": ["5", 7]}})
    assert config.get_treasury_airdrop_amounts() == ("v2", (5, 7))
