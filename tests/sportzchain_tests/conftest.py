"""
Shared fixtures for contract tests: named accounts, a controllable clock,
a freshly deployed token and a funded vesting contract.
"""

import pytest

from sportzchain.core.contracts.erc20 import SportZchainToken
from sportzchain.core.contracts.vesting import TokenVesting

DECIMALS = 18
ONE_TOKEN = 10**DECIMALS
SUPPLY_UPPER_LIMIT = 10 * 10**9 * ONE_TOKEN
INITIAL_SUPPLY = 3 * 10**9 * ONE_TOKEN

OWNER = "0x" + "a1" * 20
ADDR1 = "0x" + "b2" * 20
ADDR2 = "0x" + "c3" * 20
ADDR3 = "0x" + "d4" * 20

T0 = 1_700_000_000


class FakeClock:
    """Deterministic time provider; tests move ``now`` explicitly."""

    def __init__(self, now: int = T0) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def token(clock):
    """Token deployed by OWNER with 3B of a 10B cap minted to OWNER."""
    return SportZchainToken(
        deployer=OWNER,
        name="SportZChain Token",
        symbol="SPN",
        decimals=DECIMALS,
        supply_upper_limit=SUPPLY_UPPER_LIMIT,
        initial_supply=INITIAL_SUPPLY,
        time_provider=clock,
    )


@pytest.fixture
def small_token(clock):
    """Token with small round numbers for arithmetic-heavy tests."""
    return SportZchainToken(
        deployer=OWNER,
        name="T",
        symbol="T",
        decimals=0,
        supply_upper_limit=1_000,
        initial_supply=500,
        time_provider=clock,
    )


@pytest.fixture
def vesting(small_token, clock):
    """Vesting contract for small_token, funded with 300 tokens by OWNER."""
    contract = TokenVesting(deployer=OWNER, token=small_token, time_provider=clock)
    small_token.transfer(OWNER, contract.address, 300)
    return contract
