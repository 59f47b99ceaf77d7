"""
SportZchain Constants

Fixed values shared by the token ledger, the vesting contract and the
deployment factory. Deployment-tunable values live in config.py instead.
"""

from typing import Final

# =============================================================================
# ADDRESSES
# =============================================================================

# Null principal: source of mints, sink of burns, owner after renounce
ZERO_ADDRESS: Final[str] = "0x" + "0" * 40

# =============================================================================
# ARITHMETIC LIMITS
# =============================================================================

UINT256_MAX: Final[int] = 2**256 - 1
MAX_TOKEN_DECIMALS: Final[int] = 18
DEFAULT_TOKEN_DECIMALS: Final[int] = 18

# =============================================================================
# DEPLOYMENT DEFAULTS (whole tokens, scaled by decimals at deploy time)
# =============================================================================

DEFAULT_TOKEN_NAME: Final[str] = "SportZchain Token"
DEFAULT_TOKEN_SYMBOL: Final[str] = "SPN"
DEFAULT_SUPPLY_UPPER_LIMIT: Final[int] = 10 * 10**9  # 10 billion SPN
DEFAULT_INITIAL_SUPPLY: Final[int] = 3 * 10**9  # 3 billion SPN

# =============================================================================
# TIME CONSTANTS (in seconds)
# =============================================================================

SECONDS_PER_DAY: Final[int] = 86400
SECONDS_PER_30_DAYS: Final[int] = 2592000
SECONDS_PER_YEAR: Final[int] = 31536000
