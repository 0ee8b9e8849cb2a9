"""Tests for the config_loader and config_schema modules."""

import pytest
import yaml

from pair_swap.config_loader import (
    PRIVATE_KEY_ENV,
    apply_env_overrides,
    build_config,
    load_config,
    load_yaml_config,
    read_private_key,
)
from pair_swap.config_schema import SwapConfig
from pair_swap.exceptions import ConfigurationError

TOKEN = "0x1111111111111111111111111111111111111111"
DEX = "0x2222222222222222222222222222222222222222"
TOKEN_LOWER = "0xabcdefabcdefabcdefabcdefabcdefabcdefabcd"


def base_config(**overrides):
    config = {
        "rpc_url": "https://rpc.example.org",
        "token_address": TOKEN,
        "dex_address": DEX,
    }
    config.update(overrides)
    return config


def write_yaml(tmp_path, data, name="swap.yaml"):
    path = tmp_path / name
    path.write_text(yaml.dump(data))
    return path


def test_load_yaml_config_valid(tmp_path):
    """Test loading a valid YAML configuration."""
    path = write_yaml(tmp_path, base_config())
    assert load_yaml_config(path) == base_config()


def test_load_yaml_config_file_not_found():
    """Test loading config from non-existent file."""
    with pytest.raises(ConfigurationError, match="Configuration file not found"):
        load_yaml_config("/non/existent/file.yaml")


def test_load_yaml_config_empty_file(tmp_path):
    """Test loading config from empty file."""
    path = tmp_path / "empty.yaml"
    path.write_text("")
    with pytest.raises(ConfigurationError, match="Empty configuration file"):
        load_yaml_config(path)


def test_load_yaml_config_invalid_yaml(tmp_path):
    """Test loading config with invalid YAML."""
    path = tmp_path / "bad.yaml"
    path.write_text("invalid: yaml: content: [")
    with pytest.raises(ConfigurationError, match="Invalid YAML"):
        load_yaml_config(path)


def test_load_yaml_config_not_a_mapping(tmp_path):
    """Test loading a YAML list instead of a mapping."""
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ConfigurationError, match="YAML mapping"):
        load_yaml_config(path)


def test_defaults():
    """Test that unset fields take the documented defaults."""
    config = build_config(base_config())

    assert config.native_symbol == "ETH"
    assert config.token_symbol == "TOKEN"
    assert config.native_decimals == 18
    assert config.default_token_decimals == 18
    assert config.max_input_decimals == 8
    assert config.refresh_interval_sec == 10
    assert config.notification_duration_sec == 4
    assert config.pricer == "contract"
    assert config.fee_bps == 100
    assert config.dry_run is True


def test_addresses_are_checksummed():
    """Test that addresses are normalized to checksum form."""
    config = build_config(base_config(token_address=TOKEN_LOWER))
    assert config.token_address != TOKEN_LOWER
    assert config.token_address.lower() == TOKEN_LOWER


@pytest.mark.parametrize(
    "overrides",
    [
        {"rpc_url": "ws://rpc.example.org"},
        {"token_address": "0x123"},
        {"dex_address": "not-an-address"},
        {"fee_bps": 10_000},
        {"refresh_interval_sec": 0},
        {"pricer": "oracle"},
        {"unknown_field": 1},
    ],
)
def test_invalid_config(overrides):
    """Test that schema violations raise ConfigurationError with details."""
    with pytest.raises(ConfigurationError) as exc_info:
        build_config(base_config(**overrides))
    assert exc_info.value.details["errors"]


def test_config_is_frozen():
    """Test that a validated config cannot be mutated."""
    config = build_config(base_config())
    with pytest.raises(Exception):
        config.fee_bps = 30


def test_env_overrides():
    """Test environment overrides replace file values."""
    environ = {
        "PAIR_SWAP_RPC_URL": "https://override.example.org",
        "PAIR_SWAP_DEX_ADDRESS": "",
    }
    result = apply_env_overrides(base_config(), environ)

    assert result["rpc_url"] == "https://override.example.org"
    assert result["dex_address"] == DEX


def test_load_config(tmp_path):
    """Test the full load path."""
    path = write_yaml(tmp_path, base_config(pricer="local", fee_bps=30))

    config = load_config(path, environ={})

    assert isinstance(config, SwapConfig)
    assert config.pricer == "local"
    assert config.fee_bps == 30


def test_private_key_is_env_only(tmp_path):
    """Test that the signing key never comes from the config file."""
    path = write_yaml(tmp_path, base_config(private_key="0xdead"))
    with pytest.raises(ConfigurationError):
        load_config(path, environ={})

    assert read_private_key({PRIVATE_KEY_ENV: "0xbeef"}) == "0xbeef"
    assert read_private_key({}) is None
