from __future__ import annotations

import pytest
from werkzeug.security import check_password_hash, generate_password_hash

from itp_admin.core.enums import Role
from itp_admin.core.exceptions import AuthorizationError, ValidationError
from itp_admin.staff.invites import StaffInviteService
from itp_admin.staff.model import Account
from itp_admin.staff.service import AuthService


@pytest.fixture
def accounts(account_repo):
    account_repo.accounts = {
        1: Account(1, "admin@itp.example", generate_password_hash("secret1"), "Ada Admin", Role.ADMIN),
    }
    return account_repo


def test_invite_creates_account_awaiting_password(accounts):
    invite = StaffInviteService(accounts, secret_key="k").invite(
        current_role=Role.ADMIN, email=" New.Coach@ITP.example ", full_name="Nia Coach", role=Role.COACH
    )

    account = accounts.get_by_id(invite.account_id)
    assert account.email == "new.coach@itp.example"
    assert account.role is Role.COACH
    assert account.must_change_password is True
    assert invite.token


def test_invite_rules(accounts):
    service = StaffInviteService(accounts, secret_key="k")

    with pytest.raises(AuthorizationError):
        service.invite(current_role=Role.STAFF, email="a@itp.example", full_name="A", role=Role.STAFF)
    with pytest.raises(ValidationError, match="A user with this email already exists."):
        service.invite(current_role=Role.ADMIN, email="ADMIN@itp.example", full_name="A", role=Role.STAFF)
    with pytest.raises(ValidationError, match="Staff role"):
        service.invite(current_role=Role.ADMIN, email="p@itp.example", full_name="P", role=Role.PLAYER)


def test_accept_sets_password_once(accounts):
    service = StaffInviteService(accounts, secret_key="k")
    invite = service.invite(current_role=Role.ADMIN, email="s@itp.example", full_name="Sam Staff", role=Role.STAFF)

    with pytest.raises(ValidationError, match="at least 6"):
        service.accept(invite.token, "123")
    assert service.accept(invite.token, "welcome1") == invite.account_id

    account = accounts.get_by_id(invite.account_id)
    assert check_password_hash(account.password_hash, "welcome1")
    assert account.must_change_password is False
    assert AuthService(accounts).authenticate("s@itp.example", "welcome1").role is Role.STAFF
    with pytest.raises(ValidationError, match="already been used"):
        service.accept(invite.token, "another1")


def test_accept_rejects_bad_tokens(accounts):
    invite = StaffInviteService(accounts, secret_key="k").invite(
        current_role=Role.ADMIN, email="s@itp.example", full_name="Sam Staff", role=Role.STAFF
    )

    with pytest.raises(ValidationError, match="Invalid invitation link"):
        StaffInviteService(accounts, secret_key="other").accept(invite.token, "welcome1")
    with pytest.raises(ValidationError, match="expired"):
        StaffInviteService(accounts, secret_key="k", max_age=-1).accept(invite.token, "welcome1")


def test_invite_api(make_client, accounts):
    service = StaffInviteService(accounts, secret_key="k")
    admin = make_client(invite_service=service)

    created = admin.post("/api/staff/invite", json={"email": "c@itp.example", "full_name": "Cal Coach", "role": "coach"})
    assert created.status_code == 201
    token = created.get_json()["token"]

    anonymous = make_client(logged_in=False, invite_service=service)
    assert anonymous.post("/api/staff/invite/accept", json={"token": token, "password": "welcome1"}).status_code == 200

    staff = make_client(role="staff", invite_service=service)
    assert staff.post("/api/staff/invite", json={"email": "d@itp.example", "full_name": "D"}).status_code == 403
