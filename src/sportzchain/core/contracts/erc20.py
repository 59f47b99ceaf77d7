"""
SportZchain ERC20 token.

Capped, pausable, burnable ERC20 ledger with role-based administration and a
separate single owner:
- Basic token operations (transfer, approve, transferFrom)
- Allowance adjustment (increaseAllowance/decreaseAllowance)
- Capped minting, gated by the configured MintPolicy
- Burning (BURNER_ROLE)
- Pause/unpause of balance movements (PAUSER_ROLE)
- Roles (AccessControl) and ownership (Ownable) administered independently
- Events (Transfer, Approval, RoleGranted, RoleRevoked, OwnershipTransferred,
  Paused, Unpaused)

Every state-changing method takes the calling address first and returns the
list of events it emitted. A method that raises has changed nothing.
"""

from __future__ import annotations

import logging
from typing import Callable

from ..config import MintPolicy
from ..constants import MAX_TOKEN_DECIMALS, ZERO_ADDRESS
from ..ledger_exceptions import (
    AlreadyInStateError,
    ContractPausedError,
    InsufficientAllowanceError,
    InsufficientBalanceError,
    InvalidAllowanceError,
    SupplyCapExceededError,
    UnauthorizedError,
    ValidationError,
)
from .access_control import AccessControl, Ownable, Role
from .base import (
    BaseContract,
    ContractEvent,
    normalize_address,
    require_nonzero_address,
    validate_amount,
)

logger = logging.getLogger(__name__)


class SportZchainToken(Ownable, AccessControl, BaseContract):
    """
    Capped ERC20 token with pause, burn, roles and ownership.

    The deployer receives the initial supply and becomes both ``owner`` and
    the only ``DEFAULT_ADMIN_ROLE`` holder. No other role is assigned at
    deployment: pausers and burners must be granted explicitly.

    Invariants:
    - ``sum(balances) == total_supply``
    - ``total_supply <= cap``
    - balances and allowances are never negative
    """

    def __init__(
        self,
        deployer: str,
        name: str,
        symbol: str,
        decimals: int,
        supply_upper_limit: int,
        initial_supply: int,
        mint_policy: MintPolicy = MintPolicy.OWNER_OR_MINTER,
        address: str | None = None,
        time_provider: Callable[[], int] | None = None,
    ) -> None:
        super().__init__(deployer, address=address, time_provider=time_provider)

        if not isinstance(name, str) or not name:
            raise ValidationError("ERC20: name cannot be empty")
        if not isinstance(symbol, str) or not symbol:
            raise ValidationError("ERC20: symbol cannot be empty")
        if isinstance(decimals, bool) or not isinstance(decimals, int) or not 0 <= decimals <= MAX_TOKEN_DECIMALS:
            raise ValidationError("ERC20: invalid decimals")
        validate_amount(supply_upper_limit)
        validate_amount(initial_supply)
        if supply_upper_limit == 0:
            raise ValidationError("ERC20Capped: cap is 0")
        if initial_supply > supply_upper_limit:
            raise SupplyCapExceededError(
                "Cant mint more than supply limit",
                details={"initial_supply": initial_supply, "cap": supply_upper_limit},
            )
        if not isinstance(mint_policy, MintPolicy):
            raise ValidationError(f"Unknown mint policy: {mint_policy!r}")

        self._name = name
        self._symbol = symbol
        self._decimals = decimals
        self._cap = supply_upper_limit
        self._mint_policy = mint_policy

        self._total_supply = 0
        self._balances: dict[str, int] = {}
        self._allowances: dict[str, dict[str, int]] = {}
        self._paused = False

        self._init_owner(self.deployer)
        self._init_roles(self.deployer)

        with self._transaction():
            self._emit("OwnershipTransferred", previous_owner=ZERO_ADDRESS, new_owner=self.deployer)
            self._emit(
                "RoleGranted",
                role=Role.DEFAULT_ADMIN.value,
                account=self.deployer,
                sender=self.deployer,
            )
            if initial_supply > 0:
                self._mint(self.deployer, initial_supply)

        logger.info(
            "ERC20 token deployed",
            extra={
                "event": "erc20.deployed",
                "token": self._symbol,
                "address": self.address,
                "deployer": self.deployer[:10],
                "initial_supply": initial_supply,
                "cap": supply_upper_limit,
                "mint_policy": mint_policy.value,
            }
        )

    # ==================== View Functions ====================

    @property
    def name(self) -> str:
        return self._name

    @property
    def symbol(self) -> str:
        return self._symbol

    @property
    def decimals(self) -> int:
        return self._decimals

    @property
    def cap(self) -> int:
        """Maximum total supply (supplyUpperLimit)."""
        return self._cap

    @property
    def total_supply(self) -> int:
        return self._total_supply

    @property
    def mint_policy(self) -> MintPolicy:
        return self._mint_policy

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def balances(self) -> dict[str, int]:
        """Snapshot of all non-zero balances."""
        with self._lock:
            return {account: amount for account, amount in self._balances.items() if amount}

    def balance_of(self, account: str) -> int:
        """
        Get the token balance of an account.

        Args:
            account: Address to check

        Returns:
            Token balance
        """
        return self._balances.get(normalize_address(account, "account"), 0)

    def allowance(self, owner: str, spender: str) -> int:
        """
        Get the allowance granted by owner to spender.

        Args:
            owner: Token owner address
            spender: Spender address

        Returns:
            Approved amount
        """
        owner_norm = normalize_address(owner, "owner")
        spender_norm = normalize_address(spender, "spender")
        return self._allowances.get(owner_norm, {}).get(spender_norm, 0)

    # ==================== State-Changing Functions ====================

    def transfer(self, sender: str, recipient: str, amount: int) -> list[ContractEvent]:
        """
        Transfer tokens from sender to recipient.

        Args:
            sender: Address sending tokens (msg.sender)
            recipient: Address receiving tokens
            amount: Amount to transfer

        Returns:
            Emitted events

        Raises:
            ContractPausedError: If the token is paused
            InsufficientBalanceError: If sender's balance is too low
        """
        with self._transaction() as emitted:
            sender_norm = normalize_address(sender, "sender")
            recipient_norm = require_nonzero_address(recipient, "transfer to")
            validate_amount(amount)
            self._require_not_paused()

            self._move(sender_norm, recipient_norm, amount)

        logger.debug(
            "ERC20 transfer",
            extra={
                "event": "erc20.transfer",
                "token": self._symbol,
                "from": sender_norm[:10],
                "to": recipient_norm[:10],
                "amount": amount,
            }
        )
        return emitted

    def approve(self, owner: str, spender: str, amount: int) -> list[ContractEvent]:
        """
        Set spender's allowance over owner's tokens (overwrites the old value).

        Args:
            owner: Token owner (msg.sender)
            spender: Address being approved
            amount: Amount to approve

        Returns:
            Emitted events
        """
        with self._transaction() as emitted:
            owner_norm = normalize_address(owner, "owner")
            spender_norm = require_nonzero_address(spender, "approve to")
            validate_amount(amount)

            self._approve(owner_norm, spender_norm, amount)

        return emitted

    def increase_allowance(self, owner: str, spender: str, added_value: int) -> list[ContractEvent]:
        """
        Increase spender's allowance (safer than approve for increments).

        Args:
            owner: Token owner
            spender: Spender address
            added_value: Amount to add to allowance

        Returns:
            Emitted events
        """
        with self._transaction() as emitted:
            owner_norm = normalize_address(owner, "owner")
            spender_norm = require_nonzero_address(spender, "approve to")
            validate_amount(added_value)

            current = self._allowances.get(owner_norm, {}).get(spender_norm, 0)
            self._approve(owner_norm, spender_norm, validate_amount(current + added_value))

        return emitted

    def decrease_allowance(self, owner: str, spender: str, subtracted_value: int) -> list[ContractEvent]:
        """
        Decrease spender's allowance (safer than approve for decrements).

        Args:
            owner: Token owner
            spender: Spender address
            subtracted_value: Amount to subtract

        Returns:
            Emitted events

        Raises:
            InvalidAllowanceError: If decrease exceeds current allowance
        """
        with self._transaction() as emitted:
            owner_norm = normalize_address(owner, "owner")
            spender_norm = require_nonzero_address(spender, "approve to")
            validate_amount(subtracted_value)

            current = self._allowances.get(owner_norm, {}).get(spender_norm, 0)
            if subtracted_value > current:
                raise InvalidAllowanceError(
                    "ERC20: decreased allowance below zero",
                    details={"current": current, "subtracted": subtracted_value},
                )
            self._approve(owner_norm, spender_norm, current - subtracted_value)

        return emitted

    def transfer_from(
        self, spender: str, from_addr: str, to_addr: str, amount: int
    ) -> list[ContractEvent]:
        """
        Transfer tokens using an allowance.

        Args:
            spender: Address executing transfer (msg.sender)
            from_addr: Token owner
            to_addr: Recipient
            amount: Amount to transfer

        Returns:
            Emitted events

        Raises:
            ContractPausedError: If the token is paused
            InsufficientAllowanceError: If spender's allowance is too low
            InsufficientBalanceError: If from_addr's balance is too low
        """
        with self._transaction() as emitted:
            spender_norm = normalize_address(spender, "spender")
            from_norm = normalize_address(from_addr, "from")
            to_norm = require_nonzero_address(to_addr, "transfer to")
            validate_amount(amount)
            self._require_not_paused()

            current_allowance = self._allowances.get(from_norm, {}).get(spender_norm, 0)
            if current_allowance < amount:
                raise InsufficientAllowanceError(
                    "ERC20: insufficient allowance",
                    details={"allowance": current_allowance, "amount": amount},
                )
            self._require_balance(from_norm, amount, "ERC20: transfer amount exceeds balance")

            self._allowances.setdefault(from_norm, {})[spender_norm] = current_allowance - amount
            self._move(from_norm, to_norm, amount)

        logger.debug(
            "ERC20 transferFrom",
            extra={
                "event": "erc20.transfer_from",
                "token": self._symbol,
                "spender": spender_norm[:10],
                "from": from_norm[:10],
                "to": to_norm[:10],
                "amount": amount,
            }
        )
        return emitted

    # ==================== Minting & Burning ====================

    def mint(self, minter: str, to: str, amount: int) -> list[ContractEvent]:
        """
        Mint new tokens up to the supply cap.

        Args:
            minter: Address calling mint (authorized by mint_policy)
            to: Recipient of minted tokens
            amount: Amount to mint

        Returns:
            Emitted events

        Raises:
            UnauthorizedError: If minter is not allowed to mint
            SupplyCapExceededError: If minting would exceed the cap
            ContractPausedError: If the token is paused
        """
        with self._transaction() as emitted:
            minter_norm = self._require_minter(minter)
            to_norm = require_nonzero_address(to, "mint to")
            validate_amount(amount)
            self._require_not_paused()

            self._mint(to_norm, amount)

        logger.info(
            "ERC20 mint",
            extra={
                "event": "erc20.mint",
                "token": self._symbol,
                "minter": minter_norm[:10],
                "to": to_norm[:10],
                "amount": amount,
                "new_supply": self._total_supply,
            }
        )
        return emitted

    def burn(self, holder: str, amount: int) -> list[ContractEvent]:
        """
        Burn tokens from the caller's own balance (BURNER_ROLE only).

        Args:
            holder: Address burning tokens (msg.sender)
            amount: Amount to burn

        Returns:
            Emitted events

        Raises:
            UnauthorizedError: If holder lacks BURNER_ROLE
            ContractPausedError: If the token is paused
            InsufficientBalanceError: If holder's balance is too low
        """
        with self._transaction() as emitted:
            holder_norm = self._require_role(Role.BURNER, holder, "Caller is not a burner")
            validate_amount(amount)
            self._require_not_paused()
            self._require_balance(holder_norm, amount, "ERC20: burn amount exceeds balance")

            self._balances[holder_norm] -= amount
            self._total_supply -= amount
            self._emit("Transfer", from_address=holder_norm, to_address=ZERO_ADDRESS, value=amount)

        logger.info(
            "ERC20 burn",
            extra={
                "event": "erc20.burn",
                "token": self._symbol,
                "from": holder_norm[:10],
                "amount": amount,
                "new_supply": self._total_supply,
            }
        )
        return emitted

    # ==================== Admin Functions ====================

    def pause(self, caller: str) -> list[ContractEvent]:
        """Pause token movements (PAUSER_ROLE only)."""
        with self._transaction() as emitted:
            caller_norm = self._require_role(Role.PAUSER, caller, "Caller is not a pauser")
            if self._paused:
                raise AlreadyInStateError("Pausable: paused")
            self._paused = True
            self._emit("Paused", account=caller_norm)

        logger.warning(
            "ERC20 paused",
            extra={"event": "erc20.paused", "token": self._symbol, "by": caller_norm[:10]}
        )
        return emitted

    def unpause(self, caller: str) -> list[ContractEvent]:
        """Unpause token movements (PAUSER_ROLE only)."""
        with self._transaction() as emitted:
            caller_norm = self._require_role(Role.PAUSER, caller, "Caller is not a pauser")
            if not self._paused:
                raise AlreadyInStateError("Pausable: not paused")
            self._paused = False
            self._emit("Unpaused", account=caller_norm)

        logger.info(
            "ERC20 unpaused",
            extra={"event": "erc20.unpaused", "token": self._symbol, "by": caller_norm[:10]}
        )
        return emitted

    # ==================== Helpers ====================

    def _require_not_paused(self) -> None:
        if self._paused:
            raise ContractPausedError("ERC20Pausable: token transfer while paused")

    def _require_balance(self, account: str, amount: int, message: str) -> None:
        balance = self._balances.get(account, 0)
        if balance < amount:
            raise InsufficientBalanceError(
                message, details={"account": account, "balance": balance, "amount": amount}
            )

    def _require_minter(self, caller: str) -> str:
        caller_norm = normalize_address(caller, "caller")
        is_owner = self._owner != ZERO_ADDRESS and caller_norm == self._owner
        is_minter = caller_norm in self._roles.get(Role.MINTER.value, set())

        if self._mint_policy is MintPolicy.OWNER:
            allowed = is_owner
        elif self._mint_policy is MintPolicy.MINTER_ROLE:
            allowed = is_minter
        else:
            allowed = is_owner or is_minter

        if not allowed:
            raise UnauthorizedError(
                "Caller is not a minter",
                details={"caller": caller_norm, "mint_policy": self._mint_policy.value},
            )
        return caller_norm

    def _move(self, from_norm: str, to_norm: str, amount: int) -> None:
        """Move balance after all checks have passed; emits Transfer."""
        self._require_balance(from_norm, amount, "ERC20: transfer amount exceeds balance")
        self._balances[from_norm] = self._balances.get(from_norm, 0) - amount
        self._balances[to_norm] = self._balances.get(to_norm, 0) + amount
        self._emit("Transfer", from_address=from_norm, to_address=to_norm, value=amount)

    def _mint(self, to_norm: str, amount: int) -> None:
        if self._total_supply + amount > self._cap:
            raise SupplyCapExceededError(
                "Cant mint more than supply limit",
                details={
                    "total_supply": self._total_supply,
                    "amount": amount,
                    "cap": self._cap,
                },
            )
        self._total_supply += amount
        self._balances[to_norm] = self._balances.get(to_norm, 0) + amount
        self._emit("Transfer", from_address=ZERO_ADDRESS, to_address=to_norm, value=amount)

    def _approve(self, owner_norm: str, spender_norm: str, amount: int) -> None:
        self._allowances.setdefault(owner_norm, {})[spender_norm] = amount
        self._emit("Approval", owner=owner_norm, spender=spender_norm, value=amount)
