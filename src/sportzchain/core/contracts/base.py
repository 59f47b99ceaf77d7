"""
Shared contract plumbing: addresses, event records and call atomicity.

Every contract call runs inside ``_transaction()``. The transaction holds the
contract's lock for the whole call and buffers emitted events; the buffer is
committed to the contract's event log only when the call returns normally.
Contract methods perform all of their checks before the first state write, so
a raised error leaves state and event log untouched.
"""

from __future__ import annotations

import hashlib
import itertools
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator

from ..constants import UINT256_MAX, ZERO_ADDRESS
from ..ledger_exceptions import InvalidAddressError, InvalidAmountError, ValidationError


_deploy_counter = itertools.count(1)


@dataclass(frozen=True)
class ContractEvent:
    """Represents an emitted contract event (Transfer, Approval, RoleGranted, ...)."""

    event_type: str
    args: dict[str, Any]
    contract: str = ""
    sequence: int = 0
    timestamp: int = field(default_factory=lambda: int(time.time()))

    def __getitem__(self, key: str) -> Any:
        return self.args[key]


def normalize_address(address: str, field_name: str = "address") -> str:
    """Normalize an address to lowercase, rejecting empty values."""
    if not isinstance(address, str) or not address.strip():
        raise InvalidAddressError(f"{field_name} must be a non-empty address string")
    return address.strip().lower()


def require_nonzero_address(address: str, field_name: str) -> str:
    """Normalize an address and reject the zero address."""
    normalized = normalize_address(address, field_name)
    if normalized == ZERO_ADDRESS:
        raise InvalidAddressError(f"ERC20: {field_name} is the zero address")
    return normalized


def validate_amount(amount: int) -> int:
    """Validate amount is a uint256-range integer."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmountError(f"Amount must be an integer, got {type(amount).__name__}")
    if amount < 0:
        raise InvalidAmountError("Amount cannot be negative")
    if amount > UINT256_MAX:
        raise InvalidAmountError("Amount exceeds uint256")
    return amount


def to_timestamp(value: Any, source: str = "timestamp") -> int:
    """Coerce a clock reading or caller-supplied time to whole seconds."""
    if isinstance(value, bool):
        raise ValidationError(f"{source} must be a number of seconds, got bool")
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ValidationError(f"{source} must be a number of seconds, got {value!r}") from exc


def generate_contract_address(kind: str, deployer: str) -> str:
    """Derive a fresh contract address from deployer and a deploy counter."""
    addr_input = f"{kind}:{deployer}:{next(_deploy_counter)}:{time.time_ns()}".encode()
    addr_hash = hashlib.sha3_256(addr_input).digest()
    return f"0x{addr_hash[-20:].hex()}"


class BaseContract:
    """Address, event log, lock and clock shared by every contract."""

    def __init__(
        self,
        deployer: str,
        address: str | None = None,
        time_provider: Callable[[], int] | None = None,
    ) -> None:
        self.deployer = require_nonzero_address(deployer, "deployer")
        self.address = (
            normalize_address(address) if address
            else generate_contract_address(type(self).__name__, self.deployer)
        )
        self._events: list[ContractEvent] = []
        self._lock = threading.RLock()
        self._pending: list[ContractEvent] | None = None
        self._pending_time = 0
        self._time_provider = time_provider or (lambda: int(time.time()))

    @property
    def events(self) -> tuple[ContractEvent, ...]:
        """Committed event log, oldest first."""
        with self._lock:
            return tuple(self._events)

    def _current_time(self) -> int:
        return to_timestamp(self._time_provider(), "time_provider")

    def _resolve_time(self, current_time: Any = None) -> int:
        if current_time is None:
            return self._current_time()
        return to_timestamp(current_time, "current_time")

    @contextmanager
    def _transaction(self) -> Iterator[list[ContractEvent]]:
        """Run one contract call atomically and commit its events on success."""
        with self._lock:
            if self._pending is not None:
                raise RuntimeError(f"{type(self).__name__}: nested contract call")
            # One clock reading per call, taken before any state is touched
            timestamp = self._current_time()
            pending: list[ContractEvent] = []
            self._pending = pending
            self._pending_time = timestamp
            try:
                yield pending
            finally:
                self._pending = None
            self._events.extend(pending)

    def _emit(self, event_type: str, **args: Any) -> ContractEvent:
        if self._pending is None:
            raise RuntimeError(f"{type(self).__name__}: event emitted outside a transaction")
        event = ContractEvent(
            event_type=event_type,
            args=args,
            contract=self.address,
            sequence=len(self._events) + len(self._pending),
            timestamp=self._pending_time,
        )
        self._pending.append(event)
        return event

    def events_of_type(self, event_type: str) -> list[ContractEvent]:
        """Return committed events of one type, oldest first."""
        with self._lock:
            return [event for event in self._events if event.event_type == event_type]
