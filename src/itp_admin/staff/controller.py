from __future__ import annotations

from datetime import timedelta

from flask import Flask, session

from ..common.validators import parse_enum
from ..common.web import admin_required, current_account_id, current_role, login_required, ok, request_data
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import Role


def _account_payload(account) -> dict:
    return {
        "account_id": account.account_id,
        "email": account.email,
        "full_name": account.full_name,
        "role": account.role.value,
        "is_active": account.is_active,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = request_data()
        staff = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)
        session["account_id"] = staff.account_id
        session["name"] = staff.full_name
        session["email"] = staff.email
        session["role"] = staff.role.value

        return ok(staff={"account_id": staff.account_id, "full_name": staff.full_name, "role": staff.role.value})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok()

    @app.route("/api/auth/me", endpoint="current_staff")
    @login_required
    def me():
        return ok(
            staff={
                "account_id": current_account_id(),
                "full_name": session.get("name"),
                "email": session.get("email"),
                "role": session.get("role"),
            }
        )

    @app.route("/api/staff", endpoint="staff_list")
    @admin_required
    def staff_list():
        return ok(staff=[_account_payload(a) for a in container.staff_service.list_staff()])

    @app.route("/api/staff", methods=["POST"], endpoint="staff_create")
    @admin_required
    def staff_create():
        data = request_data()
        account_id = container.staff_service.create_staff(
            current_role=current_role(),
            full_name=data.get("full_name", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            role=parse_enum(Role, data.get("role", "staff"), "role"),
        )
        return ok(account_id=account_id), 201

    @app.route("/api/staff/<int:account_id>/deactivate", methods=["POST"], endpoint="staff_deactivate")
    @admin_required
    def staff_deactivate(account_id: int):
        container.staff_service.deactivate(
            current_role=current_role(),
            current_account_id=current_account_id(),
            account_id=account_id,
        )
        return ok()

    @app.route("/api/staff/invite", methods=["POST"], endpoint="staff_invite")
    @admin_required
    def staff_invite():
        data = request_data()
        invite = container.invite_service.invite(
            current_role=current_role(),
            email=data.get("email", ""),
            full_name=data.get("full_name", ""),
            role=parse_enum(Role, data.get("role", "staff"), "role"),
        )
        return ok(account_id=invite.account_id, email=invite.email, token=invite.token), 201

    @app.route("/api/staff/invite/accept", methods=["POST"], endpoint="staff_invite_accept")
    def staff_invite_accept():
        data = request_data()
        account_id = container.invite_service.accept(data.get("token", ""), data.get("password", ""))
        return ok(account_id=account_id)
