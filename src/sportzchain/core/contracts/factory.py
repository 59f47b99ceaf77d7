"""
Contract factory.

Deploys tokens and vesting contracts in the order the deployment scripts use
(token first, then a vesting contract bound to the token's address) and
keeps a registry of deployed contracts by address.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from ..config import MintPolicy
from ..ledger_exceptions import ContractNotFoundError
from ..units import to_base_units
from .base import BaseContract, normalize_address
from .erc20 import SportZchainToken
from .vesting import TokenVesting

logger = logging.getLogger(__name__)


class ContractFactory:
    """
    Factory for deploying SportZchain contracts.

    Provides a standardized way to deploy tokens and vesting contracts with
    consistent initialization and registration.
    """

    def __init__(self, time_provider: Callable[[], int] | None = None) -> None:
        """
        Initialize the factory.

        Args:
            time_provider: Clock handed to every contract it deploys
        """
        self.time_provider = time_provider
        self.deployed_contracts: dict[str, BaseContract] = {}

    def create_token(
        self,
        creator: str,
        name: str,
        symbol: str,
        decimals: int = 18,
        supply_upper_limit: int = 0,
        initial_supply: int = 0,
        mint_policy: MintPolicy = MintPolicy.OWNER_OR_MINTER,
        whole_tokens: bool = False,
    ) -> SportZchainToken:
        """
        Deploy a new token.

        Args:
            creator: Address deploying the token (owner, admin, initial holder)
            name: Token name
            symbol: Token symbol (ticker)
            decimals: Decimal places (default 18)
            supply_upper_limit: Supply cap
            initial_supply: Supply minted to creator
            mint_policy: Who may mint after deployment
            whole_tokens: Treat cap and initial supply as whole tokens and
                scale them by 10**decimals

        Returns:
            Deployed SportZchainToken
        """
        if whole_tokens:
            supply_upper_limit = to_base_units(supply_upper_limit, decimals)
            initial_supply = to_base_units(initial_supply, decimals)

        logger.info("Deploying %s token...", symbol)
        token = SportZchainToken(
            deployer=creator,
            name=name,
            symbol=symbol,
            decimals=decimals,
            supply_upper_limit=supply_upper_limit,
            initial_supply=initial_supply,
            mint_policy=mint_policy,
            time_provider=self.time_provider,
        )
        self.deployed_contracts[token.address] = token

        logger.info(
            "Token deployed",
            extra={
                "event": "factory.token_deployed",
                "address": token.address,
                "symbol": symbol,
                "initial_supply": initial_supply,
                "creator": creator[:10],
            }
        )
        return token

    def create_vesting(self, creator: str, token_address: str) -> TokenVesting:
        """
        Deploy a vesting contract for an already deployed token.

        Raises:
            ContractNotFoundError: If token_address is not a deployed token
        """
        token = self.get_contract(token_address)
        if not isinstance(token, SportZchainToken):
            raise ContractNotFoundError(f"No token deployed at {token_address}")

        logger.info("Deploying vesting contract for %s...", token.symbol)
        vesting = TokenVesting(
            deployer=creator,
            token=token,
            time_provider=self.time_provider,
        )
        self.deployed_contracts[vesting.address] = vesting

        logger.info(
            "Vesting contract deployed",
            extra={
                "event": "factory.vesting_deployed",
                "address": vesting.address,
                "token": token.address,
                "creator": creator[:10],
            }
        )
        return vesting

    def create_from_config(
        self, creator: str, config: Any = None
    ) -> tuple[SportZchainToken, TokenVesting | None]:
        """
        Deploy the token (and vesting, when enabled) from a config class.

        Token figures in the config are whole tokens.
        """
        if config is None:
            from ..config import Config
            config = Config

        token = self.create_token(
            creator,
            name=config.TOKEN_NAME,
            symbol=config.TOKEN_SYMBOL,
            decimals=config.TOKEN_DECIMALS,
            supply_upper_limit=config.SUPPLY_UPPER_LIMIT,
            initial_supply=config.INITIAL_SUPPLY,
            mint_policy=config.MINT_POLICY,
            whole_tokens=True,
        )
        vesting = None
        if getattr(config, "DEPLOY_VESTING", False):
            vesting = self.create_vesting(creator, token.address)
        return token, vesting

    def get_contract(self, address: str) -> BaseContract:
        """
        Get a deployed contract by address.

        Raises:
            ContractNotFoundError: If nothing is deployed at address
        """
        contract = self.deployed_contracts.get(normalize_address(address))
        if contract is None:
            raise ContractNotFoundError(f"No contract deployed at {address}")
        return contract

    def list_contracts(self) -> list[dict[str, Any]]:
        """
        List all deployed contracts.

        Returns:
            List of contract metadata
        """
        contracts = []
        for address, contract in self.deployed_contracts.items():
            entry: dict[str, Any] = {
                "address": address,
                "type": type(contract).__name__,
                "deployer": contract.deployer,
            }
            if isinstance(contract, SportZchainToken):
                entry.update({
                    "name": contract.name,
                    "symbol": contract.symbol,
                    "decimals": contract.decimals,
                    "total_supply": contract.total_supply,
                    "cap": contract.cap,
                    "owner": contract.owner,
                })
            elif isinstance(contract, TokenVesting):
                entry.update({
                    "token": contract.token.address,
                    "owner": contract.owner,
                    "schedules": len(contract.schedules),
                })
            contracts.append(entry)
        return contracts
