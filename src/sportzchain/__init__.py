"""
SportZchain - SPN token ledger and vesting contracts

Main Components:
- Token: capped, pausable, burnable ERC20 ledger with roles and ownership
- Vesting: linear-with-cliff release of a funded token balance
- Factory: token-then-vesting deployment wiring
"""

__version__ = "0.1.0"
__author__ = "SportZchain Development Team"

__all__ = []
