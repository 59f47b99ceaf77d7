"""
Access control for SportZchain contracts.

Two independent authorization layers, combined by the token contract:

- ``Ownable``: a single owner address gating ownership transfer.
- ``AccessControl``: role -> member sets, administered by holders of
  ``DEFAULT_ADMIN_ROLE``.

Transferring ownership never changes role membership and granting
``DEFAULT_ADMIN_ROLE`` never changes the owner. Callers that want both to
move must do it explicitly.

Both mixins expect to be combined with ``BaseContract``, which provides
``_transaction()`` and ``_emit()``.
"""

from __future__ import annotations

import logging
from enum import Enum

from ..constants import ZERO_ADDRESS
from ..ledger_exceptions import UnauthorizedError, ValidationError
from .base import ContractEvent, normalize_address, require_nonzero_address

logger = logging.getLogger(__name__)


class Role(Enum):
    """Standard token roles."""
    DEFAULT_ADMIN = "DEFAULT_ADMIN_ROLE"
    MINTER = "MINTER_ROLE"
    BURNER = "BURNER_ROLE"
    PAUSER = "PAUSER_ROLE"


def role_key(role: Role | str) -> str:
    """Normalize a Role member or raw role id to its string id."""
    if isinstance(role, Role):
        return role.value
    if isinstance(role, str) and role.strip():
        return role.strip()
    raise ValidationError(f"Invalid role identifier: {role!r}")


class Ownable:
    """Single-owner authorization layer."""

    _owner: str

    def _init_owner(self, owner: str) -> None:
        self._owner = normalize_address(owner, "owner")

    @property
    def owner(self) -> str:
        return self._owner

    def _require_owner(self, caller: str) -> str:
        """Require caller is owner; returns the normalized caller."""
        caller_norm = normalize_address(caller, "caller")
        if self._owner == ZERO_ADDRESS or caller_norm != self._owner:
            raise UnauthorizedError(
                "Ownable: caller is not the owner",
                details={"caller": caller_norm, "owner": self._owner},
            )
        return caller_norm

    def transfer_ownership(self, caller: str, new_owner: str) -> list[ContractEvent]:
        """Transfer ownership (owner only). Role memberships are left as they are."""
        with self._transaction() as emitted:
            self._require_owner(caller)
            new_owner_norm = require_nonzero_address(new_owner, "new owner")

            previous = self._owner
            self._owner = new_owner_norm
            self._emit("OwnershipTransferred", previous_owner=previous, new_owner=new_owner_norm)

        logger.info(
            "Ownership transferred",
            extra={
                "event": "ownable.ownership_transferred",
                "contract": self.address[:10],
                "previous_owner": previous[:10],
                "new_owner": new_owner_norm[:10],
            }
        )
        return emitted

    def renounce_ownership(self, caller: str) -> list[ContractEvent]:
        """Leave the contract without an owner. Irreversible."""
        with self._transaction() as emitted:
            self._require_owner(caller)

            previous = self._owner
            self._owner = ZERO_ADDRESS
            self._emit("OwnershipTransferred", previous_owner=previous, new_owner=ZERO_ADDRESS)

        logger.warning(
            "Ownership renounced",
            extra={
                "event": "ownable.ownership_renounced",
                "contract": self.address[:10],
                "previous_owner": previous[:10],
            }
        )
        return emitted


class AccessControl:
    """
    Role-based access control.

    Roles are plain string ids; ``Role`` lists the ones the token checks.
    Holders of ``DEFAULT_ADMIN_ROLE`` may grant and revoke every role,
    including ``DEFAULT_ADMIN_ROLE`` itself.
    """

    _roles: dict[str, set[str]]

    def _init_roles(self, admin: str) -> None:
        self._roles = {role.value: set() for role in Role}
        self._roles[Role.DEFAULT_ADMIN.value].add(normalize_address(admin, "admin"))

    # ==================== View Functions ====================

    def has_role(self, role: Role | str, account: str) -> bool:
        """Check if an account holds a role."""
        return normalize_address(account, "account") in self._roles.get(role_key(role), set())

    def get_role_members(self, role: Role | str) -> set[str]:
        """Get all addresses with a given role."""
        with self._lock:
            return set(self._roles.get(role_key(role), set()))

    def get_account_roles(self, account: str) -> set[str]:
        """Get all roles assigned to an address."""
        account_norm = normalize_address(account, "account")
        with self._lock:
            return {role for role, members in self._roles.items() if account_norm in members}

    # ==================== Role Administration ====================

    def grant_role(self, caller: str, role: Role | str, account: str) -> list[ContractEvent]:
        """
        Grant a role to an account (DEFAULT_ADMIN_ROLE only).

        Granting a role the account already holds succeeds without an event.

        Raises:
            UnauthorizedError: If caller is not an admin
        """
        with self._transaction() as emitted:
            caller_norm = self._require_role(Role.DEFAULT_ADMIN, caller)
            key = role_key(role)
            account_norm = normalize_address(account, "account")

            members = self._roles.setdefault(key, set())
            if account_norm not in members:
                members.add(account_norm)
                self._emit("RoleGranted", role=key, account=account_norm, sender=caller_norm)

        if emitted:
            logger.info(
                "Role granted",
                extra={
                    "event": "rbac.role_granted",
                    "contract": self.address[:10],
                    "role": key,
                    "address": account_norm[:10],
                    "admin": caller_norm[:10],
                }
            )
        return emitted

    def revoke_role(self, caller: str, role: Role | str, account: str) -> list[ContractEvent]:
        """
        Revoke a role from an account (DEFAULT_ADMIN_ROLE only).

        Revoking a role the account does not hold succeeds without an event.

        Raises:
            UnauthorizedError: If caller is not an admin
        """
        with self._transaction() as emitted:
            caller_norm = self._require_role(Role.DEFAULT_ADMIN, caller)
            key = role_key(role)
            account_norm = normalize_address(account, "account")
            self._remove_member(key, account_norm, caller_norm)

        if emitted:
            logger.info(
                "Role revoked",
                extra={
                    "event": "rbac.role_revoked",
                    "contract": self.address[:10],
                    "role": key,
                    "address": account_norm[:10],
                    "admin": caller_norm[:10],
                }
            )
        return emitted

    def renounce_role(self, caller: str, role: Role | str, account: str) -> list[ContractEvent]:
        """Give up one of the caller's own roles."""
        with self._transaction() as emitted:
            caller_norm = normalize_address(caller, "caller")
            account_norm = normalize_address(account, "account")
            if caller_norm != account_norm:
                raise UnauthorizedError(
                    "AccessControl: can only renounce roles for self",
                    details={"caller": caller_norm, "account": account_norm},
                )
            key = role_key(role)
            self._remove_member(key, account_norm, caller_norm)

        if emitted:
            logger.info(
                "Role renounced",
                extra={
                    "event": "rbac.role_renounced",
                    "contract": self.address[:10],
                    "role": key,
                    "address": account_norm[:10],
                }
            )
        return emitted

    # ==================== Helpers ====================

    def _remove_member(self, key: str, account_norm: str, sender: str) -> None:
        members = self._roles.get(key)
        if members and account_norm in members:
            members.discard(account_norm)
            self._emit("RoleRevoked", role=key, account=account_norm, sender=sender)

    def _require_role(self, role: Role | str, caller: str, message: str | None = None) -> str:
        """Require caller holds role; returns the normalized caller."""
        key = role_key(role)
        caller_norm = normalize_address(caller, "caller")
        if caller_norm not in self._roles.get(key, set()):
            logger.warning(
                "Access denied: role not assigned",
                extra={
                    "event": "rbac.role_not_assigned",
                    "contract": self.address[:10],
                    "address": caller_norm[:10],
                    "required_role": key,
                }
            )
            raise UnauthorizedError(
                message or f"AccessControl: account {caller_norm} is missing role {key}",
                details={"caller": caller_norm, "role": key},
            )
        return caller_norm
