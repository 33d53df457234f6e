from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.enums import STAFF_ROLES, Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .model import Account
from .repository import AccountRepository

logger = logging.getLogger(__name__)

INVALID_LOGIN = "Invalid email or password"


@dataclass(frozen=True)
class SessionStaff:
    """What we store into Flask session after login."""

    account_id: int
    full_name: str
    email: str
    role: Role


class AuthService:
    """Use case: staff login."""

    def __init__(self, accounts: AccountRepository):
        self._accounts = accounts

    def authenticate(self, email: str, password: str) -> SessionStaff:
        email = (email or "").strip().lower()
        account = self._accounts.get_by_email(email)
        if not account or not account.is_active:
            raise AuthenticationError(INVALID_LOGIN)

        try:
            valid = check_password_hash(account.password_hash, password or "")
        except ValueError:
            # placeholder or corrupted hash
            valid = False
        if not valid:
            raise AuthenticationError(INVALID_LOGIN)

        if account.role not in STAFF_ROLES:
            raise AuthorizationError("This portal is for staff only")

        logger.info("Staff login: %s (%s)", account.email, account.role.value)
        return SessionStaff(
            account_id=account.account_id,
            full_name=account.full_name,
            email=account.email,
            role=account.role,
        )


class StaffService:
    """Use case: manage staff accounts (admin)."""

    def __init__(self, accounts: AccountRepository):
        self._accounts = accounts

    def create_staff(self, *, current_role: Role, full_name: str, email: str, password: str, role: Role) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        full_name = require_non_empty(full_name, "Full name")
        email = require_non_empty(email, "Email").lower()
        require_min_length(password, "Password", 6)
        if role not in STAFF_ROLES:
            raise ValidationError("Staff role must be admin, staff or coach")
        if self._accounts.get_by_email(email):
            raise ValidationError("An account with this email already exists")

        account_id = self._accounts.create_account(
            email=email,
            password_hash=generate_password_hash(password),
            full_name=full_name,
            role=role,
        )
        logger.info("Created %s account %s for %s", role.value, account_id, email)
        return account_id

    def list_staff(self) -> Sequence[Account]:
        return self._accounts.list_staff()

    def deactivate(self, *, current_role: Role, current_account_id: int, account_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")
        if int(account_id) == int(current_account_id):
            raise ValidationError("You cannot deactivate your own account")

        account = self._accounts.get_by_id(int(account_id))
        if not account:
            raise NotFoundError("Staff member not found")
        if not self._accounts.set_active(account.account_id, is_active=False):
            raise ValidationError("Deactivation failed")
        logger.info("Deactivated account %s", account.account_id)
