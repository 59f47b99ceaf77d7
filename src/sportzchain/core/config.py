"""
SportZchain Configuration

Supports testnet and mainnet deployments with separate configurations.

All values are read from environment variables at import time:
- SPN_NETWORK selects the active Config class (testnet by default)
- SPN_MINT_POLICY selects who may mint on newly deployed tokens
- SPN_TOKEN_* override the token deployment parameters (whole tokens)
"""

from __future__ import annotations

import logging
import os
from enum import Enum

from .constants import (
    DEFAULT_INITIAL_SUPPLY,
    DEFAULT_SUPPLY_UPPER_LIMIT,
    DEFAULT_TOKEN_DECIMALS,
    DEFAULT_TOKEN_NAME,
    DEFAULT_TOKEN_SYMBOL,
    MAX_TOKEN_DECIMALS,
)

logger = logging.getLogger(__name__)


class NetworkType(Enum):
    TESTNET = "testnet"
    MAINNET = "mainnet"


class MintPolicy(Enum):
    """Who is allowed to call mint on a token."""

    MINTER_ROLE = "minter_role"
    OWNER = "owner"
    OWNER_OR_MINTER = "owner_or_minter"


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


def _get_int(env_var: str, default: int) -> int:
    raw = os.getenv(env_var, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{env_var} must be an integer, got {raw!r}") from exc


def parse_mint_policy(value: str) -> MintPolicy:
    """Parse a mint policy name (case-insensitive)."""
    try:
        return MintPolicy(value.strip().lower())
    except ValueError as exc:
        allowed = ", ".join(policy.value for policy in MintPolicy)
        raise ConfigurationError(
            f"Unknown mint policy {value!r}; expected one of: {allowed}"
        ) from exc


# Get network type from environment variable
NETWORK = os.getenv("SPN_NETWORK", "testnet")  # Default to testnet for safety

MINT_POLICY = parse_mint_policy(os.getenv("SPN_MINT_POLICY", MintPolicy.OWNER_OR_MINTER.value))

TOKEN_NAME = os.getenv("SPN_TOKEN_NAME", DEFAULT_TOKEN_NAME)
TOKEN_SYMBOL = os.getenv("SPN_TOKEN_SYMBOL", DEFAULT_TOKEN_SYMBOL)
TOKEN_DECIMALS = _get_int("SPN_TOKEN_DECIMALS", DEFAULT_TOKEN_DECIMALS)
SUPPLY_UPPER_LIMIT = _get_int("SPN_SUPPLY_UPPER_LIMIT", DEFAULT_SUPPLY_UPPER_LIMIT)
INITIAL_SUPPLY = _get_int("SPN_INITIAL_SUPPLY", DEFAULT_INITIAL_SUPPLY)

LOG_LEVEL = os.getenv("SPN_LOG_LEVEL", "INFO").upper()
LOG_DIR = os.getenv("SPN_LOG_DIR", os.path.join(os.path.expanduser("~"), ".sportzchain", "logs"))

if not 0 <= TOKEN_DECIMALS <= MAX_TOKEN_DECIMALS:
    raise ConfigurationError(
        f"SPN_TOKEN_DECIMALS must be between 0 and {MAX_TOKEN_DECIMALS}, got {TOKEN_DECIMALS}"
    )
if INITIAL_SUPPLY > SUPPLY_UPPER_LIMIT:
    raise ConfigurationError(
        f"SPN_INITIAL_SUPPLY ({INITIAL_SUPPLY}) exceeds SPN_SUPPLY_UPPER_LIMIT ({SUPPLY_UPPER_LIMIT})"
    )


class TestnetConfig:
    """Testnet Configuration (local and staging deployments)"""

    NETWORK_TYPE = NetworkType.TESTNET

    # Token deployment (whole tokens)
    TOKEN_NAME = TOKEN_NAME
    TOKEN_SYMBOL = TOKEN_SYMBOL
    TOKEN_DECIMALS = TOKEN_DECIMALS
    SUPPLY_UPPER_LIMIT = SUPPLY_UPPER_LIMIT
    INITIAL_SUPPLY = INITIAL_SUPPLY
    MINT_POLICY = MINT_POLICY

    # Vesting contract is deployed alongside the token
    DEPLOY_VESTING = True

    LOG_LEVEL = LOG_LEVEL
    LOG_DIR = LOG_DIR


class MainnetConfig:
    """Mainnet Configuration (production deployment)"""

    NETWORK_TYPE = NetworkType.MAINNET

    TOKEN_NAME = TOKEN_NAME
    TOKEN_SYMBOL = TOKEN_SYMBOL
    TOKEN_DECIMALS = TOKEN_DECIMALS
    SUPPLY_UPPER_LIMIT = SUPPLY_UPPER_LIMIT
    # Mainnet deploy script mints the whole cap up front
    INITIAL_SUPPLY = _get_int("SPN_MAINNET_INITIAL_SUPPLY", SUPPLY_UPPER_LIMIT)
    MINT_POLICY = MINT_POLICY

    DEPLOY_VESTING = True

    LOG_LEVEL = LOG_LEVEL
    LOG_DIR = LOG_DIR


# Select config based on network
if NETWORK.lower() == "mainnet":
    Config = MainnetConfig
    if Config.INITIAL_SUPPLY > Config.SUPPLY_UPPER_LIMIT:
        raise ConfigurationError(
            "SPN_MAINNET_INITIAL_SUPPLY exceeds SPN_SUPPLY_UPPER_LIMIT"
        )
elif NETWORK.lower() == "testnet":
    Config = TestnetConfig
else:
    raise ConfigurationError(f"Unknown SPN_NETWORK {NETWORK!r}; expected testnet or mainnet")

logger.debug(
    "Configuration loaded",
    extra={
        "event": "config.loaded",
        "network": Config.NETWORK_TYPE.value,
        "mint_policy": Config.MINT_POLICY.value,
    },
)

# Export config
__all__ = [
    "Config",
    "ConfigurationError",
    "MintPolicy",
    "NetworkType",
    "TestnetConfig",
    "MainnetConfig",
    "parse_mint_policy",
]
