from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Account


class AccountRepository(Protocol):
    def get_by_id(self, account_id: int) -> Optional[Account]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Account]:
        raise NotImplementedError

    def create_account(
        self,
        *,
        email: str,
        password_hash: str,
        full_name: str,
        role: Role,
        must_change_password: bool = False,
    ) -> int:
        raise NotImplementedError

    def delete_by_id(self, account_id: int) -> bool:
        raise NotImplementedError

    def set_active(self, account_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def set_password(self, account_id: int, password_hash: str) -> bool:
        """Store a new hash and clear `must_change_password`."""
        raise NotImplementedError

    def list_staff(self) -> Sequence[Account]:
        raise NotImplementedError
