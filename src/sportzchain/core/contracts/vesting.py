"""
Token vesting contract.

Holds a balance of one SportZchain token and releases it to beneficiaries on
a linear schedule with a cliff. The contract is funded by transferring
tokens to its address; schedules can only be created while that balance
covers every outstanding allocation. Payouts go through the token's public
``transfer`` from the vesting contract's own address.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from ..constants import ZERO_ADDRESS
from ..ledger_exceptions import (
    InsufficientFundingError,
    InvalidScheduleError,
    LedgerError,
    NothingToReleaseError,
    ScheduleNotFoundError,
    TransferFailedError,
)
from .access_control import Ownable
from .base import (
    BaseContract,
    ContractEvent,
    normalize_address,
    require_nonzero_address,
    to_timestamp,
    validate_amount,
)

if TYPE_CHECKING:
    from .erc20 import SportZchainToken

logger = logging.getLogger(__name__)


@dataclass
class VestingScheduleData:
    beneficiary: str
    total_allocated: int
    start_time: int
    duration: int
    cliff: int
    released: int = 0

    @property
    def cliff_end(self) -> int:
        return self.start_time + self.cliff

    @property
    def end_time(self) -> int:
        return self.start_time + self.duration

    @property
    def remaining(self) -> int:
        """Allocated tokens not yet paid out."""
        return self.total_allocated - self.released

    def vested_amount(self, current_time: int) -> int:
        """
        Tokens vested by current_time, released or not.

        Nothing vests before the cliff; after the cliff the vested share grows
        linearly from start_time and reaches total_allocated at end_time.
        """
        current_time = to_timestamp(current_time, "current_time")
        if current_time < self.cliff_end:
            return 0
        if current_time >= self.end_time:
            return self.total_allocated
        return self.total_allocated * (current_time - self.start_time) // self.duration


@dataclass(frozen=True)
class ReleaseReceipt:
    """Outcome of a successful release."""

    beneficiary: str
    amount: int
    events: list[ContractEvent]
    token_events: list[ContractEvent]


class TokenVesting(Ownable, BaseContract):
    """
    Linear-with-cliff vesting of one token for many beneficiaries.

    One schedule per beneficiary. Schedules are never deleted; a fully
    released schedule simply has nothing left to claim.
    """

    def __init__(
        self,
        deployer: str,
        token: "SportZchainToken",
        address: str | None = None,
        time_provider: Callable[[], int] | None = None,
    ) -> None:
        super().__init__(deployer, address=address, time_provider=time_provider)
        if token is None:
            raise InvalidScheduleError("Vesting: token cannot be None")
        self._token = token
        self._schedules: dict[str, VestingScheduleData] = {}

        self._init_owner(self.deployer)
        with self._transaction():
            self._emit("OwnershipTransferred", previous_owner=ZERO_ADDRESS, new_owner=self.deployer)

        logger.info(
            "TokenVesting deployed at %s for token %s",
            self.address,
            token.address,
        )

    # ==================== View Functions ====================

    @property
    def token(self) -> "SportZchainToken":
        return self._token

    @property
    def schedules(self) -> dict[str, VestingScheduleData]:
        """Snapshot of all schedules keyed by beneficiary."""
        with self._lock:
            return {
                beneficiary: VestingScheduleData(**vars(schedule))
                for beneficiary, schedule in self._schedules.items()
            }

    def get_schedule(self, beneficiary: str) -> VestingScheduleData:
        """Return a copy of a beneficiary's schedule."""
        with self._lock:
            return VestingScheduleData(**vars(self._get_schedule(beneficiary)))

    def vested_amount(self, beneficiary: str, current_time: int | None = None) -> int:
        """
        Calculates the amount of tokens vested for a beneficiary by current_time.
        """
        current_time = self._resolve_time(current_time)
        with self._lock:
            return self._get_schedule(beneficiary).vested_amount(current_time)

    def releasable_amount(self, beneficiary: str, current_time: int | None = None) -> int:
        """Vested tokens not yet released."""
        current_time = self._resolve_time(current_time)
        with self._lock:
            schedule = self._get_schedule(beneficiary)
            return schedule.vested_amount(current_time) - schedule.released

    def outstanding_allocation(self) -> int:
        """Tokens still owed across all schedules."""
        with self._lock:
            return sum(schedule.remaining for schedule in self._schedules.values())

    def unallocated_balance(self) -> int:
        """Funded tokens not backing any schedule."""
        with self._lock:
            return max(0, self._token.balance_of(self.address) - self.outstanding_allocation())

    # ==================== State-Changing Functions ====================

    def create_schedule(
        self,
        caller: str,
        beneficiary: str,
        total_allocated: int,
        start_time: int,
        duration: int,
        cliff: int,
    ) -> list[ContractEvent]:
        """
        Creates a new vesting schedule (owner only).

        The vesting contract's token balance must already cover every
        outstanding allocation plus ``total_allocated``.

        Raises:
            UnauthorizedError: If caller is not the owner
            InvalidScheduleError: If parameters are inconsistent
            InsufficientFundingError: If the contract balance is too low
        """
        with self._transaction() as emitted:
            self._require_owner(caller)
            beneficiary_norm = require_nonzero_address(beneficiary, "beneficiary")
            self._validate_schedule(total_allocated, start_time, duration, cliff)
            if beneficiary_norm in self._schedules:
                raise InvalidScheduleError(
                    f"Vesting: schedule already exists for {beneficiary_norm}",
                    details={"beneficiary": beneficiary_norm},
                )

            funded = self._token.balance_of(self.address)
            required = self.outstanding_allocation() + total_allocated
            if funded < required:
                raise InsufficientFundingError(
                    "Vesting: insufficient token balance for allocation",
                    details={"funded": funded, "required": required},
                )

            self._schedules[beneficiary_norm] = VestingScheduleData(
                beneficiary=beneficiary_norm,
                total_allocated=total_allocated,
                start_time=start_time,
                duration=duration,
                cliff=cliff,
            )
            self._emit(
                "VestingScheduleCreated",
                beneficiary=beneficiary_norm,
                amount=total_allocated,
                start=start_time,
                duration=duration,
                cliff=cliff,
            )

        logger.info(
            "Vesting schedule created for %s",
            beneficiary_norm,
            extra={
                "event": "vesting.schedule_created",
                "contract": self.address[:10],
                "amount": total_allocated,
                "start": start_time,
                "duration": duration,
                "cliff": cliff,
            }
        )
        return emitted

    def release(
        self, caller: str, beneficiary: str, current_time: int | None = None
    ) -> ReleaseReceipt:
        """
        Pays the vested-but-unreleased amount to the beneficiary.

        Anyone may trigger a release; tokens always go to the beneficiary.

        Raises:
            ValidationError: If current_time is not a number of seconds
            ScheduleNotFoundError: If beneficiary has no schedule
            NothingToReleaseError: If nothing is claimable yet
            TransferFailedError: If the token transfer is rejected
        """
        caller_norm = normalize_address(caller, "caller")
        current_time = self._resolve_time(current_time)

        with self._transaction() as emitted:
            schedule = self._get_schedule(beneficiary)
            claimable = schedule.vested_amount(current_time) - schedule.released
            if claimable <= 0:
                raise NothingToReleaseError(
                    "Vesting: no tokens are due",
                    details={"beneficiary": schedule.beneficiary, "released": schedule.released},
                )

            token_events = self._pay(schedule.beneficiary, claimable)

            schedule.released += claimable
            self._emit("TokensReleased", beneficiary=schedule.beneficiary, amount=claimable)

        logger.info(
            "Released %d tokens for %s",
            claimable,
            schedule.beneficiary,
            extra={
                "event": "vesting.released",
                "contract": self.address[:10],
                "caller": caller_norm[:10],
                "released_total": schedule.released,
            }
        )
        return ReleaseReceipt(
            beneficiary=schedule.beneficiary,
            amount=claimable,
            events=emitted,
            token_events=token_events,
        )

    def withdraw_unallocated(self, caller: str, to: str, amount: int) -> list[ContractEvent]:
        """
        Send funded tokens that back no schedule to ``to`` (owner only).

        Raises:
            InsufficientFundingError: If amount exceeds the unallocated balance
            TransferFailedError: If the token transfer is rejected
        """
        with self._transaction() as emitted:
            self._require_owner(caller)
            to_norm = require_nonzero_address(to, "withdraw to")
            validate_amount(amount)

            available = self.unallocated_balance()
            if amount > available:
                raise InsufficientFundingError(
                    "Vesting: amount exceeds unallocated balance",
                    details={"available": available, "amount": amount},
                )
            self._pay(to_norm, amount)
            self._emit("UnallocatedWithdrawn", to=to_norm, amount=amount)

        logger.info(
            "Withdrew %d unallocated tokens to %s",
            amount,
            to_norm,
            extra={"event": "vesting.withdrawn", "contract": self.address[:10]}
        )
        return emitted

    # ==================== Helpers ====================

    def _get_schedule(self, beneficiary: str) -> VestingScheduleData:
        beneficiary_norm = normalize_address(beneficiary, "beneficiary")
        schedule = self._schedules.get(beneficiary_norm)
        if schedule is None:
            raise ScheduleNotFoundError(f"Vesting schedule for {beneficiary_norm} not found.")
        return schedule

    def _pay(self, recipient: str, amount: int) -> list[ContractEvent]:
        try:
            return self._token.transfer(self.address, recipient, amount)
        except LedgerError as exc:
            logger.error(
                "Vesting payout of %d to %s failed: %s",
                amount,
                recipient,
                exc.message,
                extra={"event": "vesting.transfer_failed", "contract": self.address[:10]}
            )
            raise TransferFailedError(
                f"Vesting: token transfer failed: {exc.message}",
                details={"recipient": recipient, "amount": amount},
            ) from exc

    @staticmethod
    def _validate_schedule(total_allocated: int, start_time: int, duration: int, cliff: int) -> None:
        for label, value in (("start time", start_time), ("duration", duration), ("cliff", cliff)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidScheduleError(f"Vesting: {label} must be an integer")
        validate_amount(total_allocated)
        if total_allocated == 0:
            raise InvalidScheduleError("Vesting: amount must be positive")
        if start_time < 0:
            raise InvalidScheduleError("Vesting: start time cannot be negative")
        if duration <= 0:
            raise InvalidScheduleError("Vesting: duration must be positive")
        if cliff < 0:
            raise InvalidScheduleError("Vesting: cliff cannot be negative")
        if cliff > duration:
            raise InvalidScheduleError("Vesting: cliff is longer than duration")
