"""
SportZchain Contracts.

This module provides the contract implementations:
- SportZchainToken: capped ERC20 with pause, burn, roles and ownership
- TokenVesting: linear-with-cliff vesting of a funded token balance
- ContractFactory: deploys tokens and vesting contracts
"""

from .access_control import AccessControl, Ownable, Role
from .base import BaseContract, ContractEvent
from .erc20 import SportZchainToken
from .factory import ContractFactory
from .vesting import ReleaseReceipt, TokenVesting, VestingScheduleData

__all__ = [
    "AccessControl",
    "BaseContract",
    "ContractEvent",
    "ContractFactory",
    "Ownable",
    "ReleaseReceipt",
    "Role",
    "SportZchainToken",
    "TokenVesting",
    "VestingScheduleData",
]
