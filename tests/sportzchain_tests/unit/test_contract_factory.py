"""
Unit tests for ContractFactory deployment wiring.
"""

from types import SimpleNamespace

import pytest

from sportzchain.core.config import MintPolicy
from sportzchain.core.contracts.erc20 import SportZchainToken
from sportzchain.core.contracts.factory import ContractFactory
from sportzchain.core.contracts.vesting import TokenVesting
from sportzchain.core.ledger_exceptions import ContractNotFoundError, SupplyCapExceededError

OWNER = "0x" + "a1" * 20


def _deploy_config(**overrides):
    values = {
        "TOKEN_NAME": "SportZchain Token",
        "TOKEN_SYMBOL": "SPN",
        "TOKEN_DECIMALS": 18,
        "SUPPLY_UPPER_LIMIT": 10 * 10**9,
        "INITIAL_SUPPLY": 3 * 10**9,
        "MINT_POLICY": MintPolicy.OWNER_OR_MINTER,
        "DEPLOY_VESTING": True,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


class TestContractFactory:
    def test_create_token_raw_units(self):
        factory = ContractFactory()
        token = factory.create_token(OWNER, "T", "T", 18, supply_upper_limit=1_000, initial_supply=10)

        assert isinstance(token, SportZchainToken)
        assert token.total_supply == 10
        assert factory.get_contract(token.address) is token

    def test_create_token_whole_tokens_scaled_by_decimals(self):
        factory = ContractFactory()
        token = factory.create_token(
            OWNER, "T", "T", 18,
            supply_upper_limit=10 * 10**9,
            initial_supply=3 * 10**9,
            whole_tokens=True,
        )
        assert token.cap == 10 * 10**9 * 10**18
        assert token.balance_of(OWNER) == 3 * 10**9 * 10**18

    def test_create_vesting_binds_token(self):
        factory = ContractFactory()
        token = factory.create_token(OWNER, "T", "T", 0, 100, 100)
        vesting = factory.create_vesting(OWNER, token.address)

        assert isinstance(vesting, TokenVesting)
        assert vesting.token is token
        assert factory.get_contract(vesting.address.upper()) is vesting

    def test_create_vesting_for_unknown_token(self):
        factory = ContractFactory()
        with pytest.raises(ContractNotFoundError):
            factory.create_vesting(OWNER, "0x" + "ff" * 20)

    def test_create_vesting_for_non_token_contract(self):
        factory = ContractFactory()
        token = factory.create_token(OWNER, "T", "T", 0, 100, 100)
        vesting = factory.create_vesting(OWNER, token.address)
        with pytest.raises(ContractNotFoundError):
            factory.create_vesting(OWNER, vesting.address)

    def test_create_from_config(self):
        factory = ContractFactory()
        token, vesting = factory.create_from_config(OWNER, _deploy_config())

        assert token.symbol == "SPN"
        assert token.total_supply == 3 * 10**9 * 10**18
        assert vesting is not None and vesting.token is token

    def test_create_from_config_without_vesting(self):
        factory = ContractFactory()
        token, vesting = factory.create_from_config(OWNER, _deploy_config(DEPLOY_VESTING=False))
        assert vesting is None
        assert len(factory.list_contracts()) == 1

    def test_mainnet_style_full_initial_supply(self):
        factory = ContractFactory()
        token, _ = factory.create_from_config(OWNER, _deploy_config(INITIAL_SUPPLY=10 * 10**9))
        assert token.total_supply == token.cap
        with pytest.raises(SupplyCapExceededError):
            token.mint(OWNER, OWNER, 1)

    def test_shared_time_provider(self):
        factory = ContractFactory(time_provider=lambda: 1234)
        token = factory.create_token(OWNER, "T", "T", 0, 100, 100)
        assert token.events[-1].timestamp == 1234

    def test_list_contracts(self):
        factory = ContractFactory()
        token = factory.create_token(OWNER, "T", "T", 0, 100, 40)
        vesting = factory.create_vesting(OWNER, token.address)

        listing = {entry["address"]: entry for entry in factory.list_contracts()}
        assert listing[token.address]["type"] == "SportZchainToken"
        assert listing[token.address]["total_supply"] == 40
        assert listing[vesting.address]["type"] == "TokenVesting"
        assert listing[vesting.address]["token"] == token.address
        assert listing[vesting.address]["schedules"] == 0

    def test_get_contract_unknown(self):
        with pytest.raises(ContractNotFoundError):
            ContractFactory().get_contract("0x" + "ee" * 20)
