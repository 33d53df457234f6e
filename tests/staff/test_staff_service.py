from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from itp_admin.core.enums import Role
from itp_admin.core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from itp_admin.staff.model import Account
from itp_admin.staff.service import AuthService, StaffService


@pytest.fixture
def accounts(account_repo):
    account_repo.accounts = {
        1: Account(1, "admin@itp.example", generate_password_hash("secret1"), "Ada Admin", Role.ADMIN),
        2: Account(2, "player@itp.example", generate_password_hash("secret2"), "Pia Player", Role.PLAYER),
        3: Account(3, "gone@itp.example", generate_password_hash("secret3"), "Gus Gone", Role.STAFF, is_active=False),
        4: Account(4, "broken@itp.example", "not-a-hash", "Bea Broken", Role.STAFF),
    }
    return account_repo


def test_authenticate_staff(accounts):
    staff = AuthService(accounts).authenticate(" Admin@ITP.example ", "secret1")
    assert staff.account_id == 1
    assert staff.role is Role.ADMIN


@pytest.mark.parametrize(
    "email,password",
    [
        ("admin@itp.example", "wrong"),
        ("nobody@itp.example", "secret1"),
        ("gone@itp.example", "secret3"),
        ("broken@itp.example", "anything"),
    ],
)
def test_authenticate_rejects(accounts, email, password):
    with pytest.raises(AuthenticationError, match="Invalid email or password"):
        AuthService(accounts).authenticate(email, password)


def test_player_accounts_cannot_use_staff_portal(accounts):
    with pytest.raises(AuthorizationError, match="staff only"):
        AuthService(accounts).authenticate("player@itp.example", "secret2")


def test_create_staff_rules(accounts):
    service = StaffService(accounts)

    with pytest.raises(AuthorizationError):
        service.create_staff(current_role=Role.STAFF, full_name="X", email="x@itp.example", password="secret", role=Role.STAFF)
    with pytest.raises(ValidationError, match="at least 6"):
        service.create_staff(current_role=Role.ADMIN, full_name="X", email="x@itp.example", password="123", role=Role.STAFF)
    with pytest.raises(ValidationError, match="already exists"):
        service.create_staff(
            current_role=Role.ADMIN, full_name="X", email="ADMIN@itp.example", password="secret", role=Role.STAFF
        )
    with pytest.raises(ValidationError, match="Staff role"):
        service.create_staff(current_role=Role.ADMIN, full_name="X", email="x@itp.example", password="secret", role=Role.PLAYER)

    account_id = service.create_staff(
        current_role=Role.ADMIN, full_name="Cory Coach", email="Cory@itp.example", password="secret", role=Role.COACH
    )
    assert accounts.get_by_id(account_id).email == "cory@itp.example"


def test_deactivate(accounts):
    service = StaffService(accounts)
    with pytest.raises(ValidationError, match="your own account"):
        service.deactivate(current_role=Role.ADMIN, current_account_id=1, account_id=1)

    service.deactivate(current_role=Role.ADMIN, current_account_id=1, account_id=4)
    assert accounts.get_by_id(4).is_active is False


def test_login_sets_session(make_client, accounts):
    client = make_client(auth_service=AuthService(accounts), logged_in=False)

    res = client.post("/api/auth/login", json={"email": "admin@itp.example", "password": "secret1"})
    assert res.status_code == 200
    with client.session_transaction() as sess:
        assert sess["account_id"] == 1
        assert sess["role"] == "admin"

    me = client.get("/api/auth/me").get_json()
    assert me["staff"]["full_name"] == "Ada Admin"

    bad = client.post("/api/auth/login", json={"email": "admin@itp.example", "password": "nope"})
    assert bad.status_code == 401


def test_staff_management_is_admin_only(make_client, accounts):
    client = make_client(staff_service=StaffService(accounts), role="coach")
    assert client.get("/api/staff").status_code == 403
