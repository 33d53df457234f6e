"""Staff invitations.

An admin invites a colleague by email. The account is created straight away
with a random password and ``must_change_password`` set, and the invite is a
signed, time-limited token (itsdangerous) that lets its holder choose the
real password once.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from werkzeug.security import generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.constants import STAFF_INVITE_MAX_AGE
from ..core.enums import STAFF_ROLES, Role
from ..core.exceptions import AuthorizationError, ValidationError
from .repository import AccountRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StaffInvite:
    account_id: int
    email: str
    token: str


class StaffInviteService:
    def __init__(self, accounts: AccountRepository, *, secret_key: str, max_age: int = STAFF_INVITE_MAX_AGE):
        self._accounts = accounts
        self._serializer = URLSafeTimedSerializer(secret_key, salt="itp-staff-invite")
        self._max_age = int(max_age)

    def invite(self, *, current_role: Role, email: str, full_name: str, role: Role) -> StaffInvite:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")
        email = require_non_empty(email, "Email").lower()
        full_name = require_non_empty(full_name, "Full name")
        if role not in STAFF_ROLES:
            raise ValidationError("Staff role must be admin, staff or coach")
        if self._accounts.get_by_email(email):
            raise ValidationError("A user with this email already exists.")

        account_id = self._accounts.create_account(
            email=email,
            password_hash=generate_password_hash(secrets.token_urlsafe(32)),
            full_name=full_name,
            role=role,
            must_change_password=True,
        )
        token = self._serializer.dumps({"account_id": account_id, "email": email})
        logger.info("Invited %s as %s (account %s)", email, role.value, account_id)
        return StaffInvite(account_id=account_id, email=email, token=token)

    def accept(self, token: str, password: str) -> int:
        try:
            data = self._serializer.loads(token or "", max_age=self._max_age)
        except SignatureExpired:
            raise ValidationError("This invitation has expired")
        except BadSignature:
            raise ValidationError("Invalid invitation link")

        require_min_length(password, "Password", 6)
        account = self._accounts.get_by_id(int(data["account_id"]))
        if not account or account.email != data.get("email") or not account.is_active:
            raise ValidationError("Invalid invitation link")
        if not account.must_change_password:
            raise ValidationError("This invitation has already been used")
        if not self._accounts.set_password(account.account_id, generate_password_hash(password)):
            raise ValidationError("Failed to set password")
        logger.info("Invitation accepted by %s", account.email)
        return account.account_id
