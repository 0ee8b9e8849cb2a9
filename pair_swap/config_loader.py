"""
Configuration loading for the pair swap session.

Reads a YAML file, applies environment overrides and validates the result
against the pydantic schema. Secrets (the signing key) are never read from
YAML; see PRIVATE_KEY_ENV.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError as PydanticValidationError

from .config_schema import SwapConfig, validate_swap_config
from .exceptions import ConfigurationError

PRIVATE_KEY_ENV = "PAIR_SWAP_PRIVATE_KEY"

# Environment variable -> config field
ENV_OVERRIDES = {
    "PAIR_SWAP_RPC_URL": "rpc_url",
    "PAIR_SWAP_TOKEN_ADDRESS": "token_address",
    "PAIR_SWAP_DEX_ADDRESS": "dex_address",
}


def load_yaml_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """Load and parse YAML configuration file."""
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r") as f:
            config_dict = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if config_dict is None:
        raise ConfigurationError(f"Empty configuration file: {config_path}")
    if not isinstance(config_dict, dict):
        raise ConfigurationError(
            f"Configuration file must contain a YAML mapping: {config_path}"
        )

    return config_dict


def apply_env_overrides(
    config_dict: Dict[str, Any], environ: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    """Return a copy of config_dict with environment overrides applied."""
    environ = os.environ if environ is None else environ
    result = dict(config_dict)
    for env_name, field_name in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value:
            result[field_name] = value
    return result


def build_config(config_dict: Dict[str, Any]) -> SwapConfig:
    """Validate a raw config dictionary, wrapping schema errors."""
    try:
        return validate_swap_config(config_dict)
    except PydanticValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration: {e.error_count()} error(s)",
            details={"errors": e.errors(include_url=False)},
        ) from e


def load_config(
    config_path: Union[str, Path], environ: Optional[Dict[str, str]] = None
) -> SwapConfig:
    """
    Load and validate a swap config from a YAML file.

    Args:
        config_path: Path to config YAML file
        environ: Environment mapping for overrides (defaults to os.environ
            after loading .env)

    Returns:
        Validated SwapConfig instance

    Raises:
        ConfigurationError: If the file is missing, unparseable or invalid
    """
    if environ is None:
        load_dotenv()
    config_dict = load_yaml_config(config_path)
    return build_config(apply_env_overrides(config_dict, environ))


def read_private_key(environ: Optional[Dict[str, str]] = None) -> Optional[str]:
    """Signing key from the environment, if set."""
    environ = os.environ if environ is None else environ
    return environ.get(PRIVATE_KEY_ENV) or None
