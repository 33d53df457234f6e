from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Account:
    """Login identity. Staff sign in to this app; player accounts are created by prospect conversion."""

    account_id: int
    email: str
    password_hash: str
    full_name: str
    role: Role
    is_active: bool = True
    must_change_password: bool = False
    created_at: Optional[datetime] = None
