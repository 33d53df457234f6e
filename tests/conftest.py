from __future__ import annotations

from dataclasses import asdict, replace
from datetime import datetime
from types import SimpleNamespace

import pytest
from flask import Flask

from itp_admin.core.enums import STAFF_ROLES, PlayerStatus
from itp_admin.core.exceptions import DuplicateKeyError
from itp_admin.main import register_routes
from itp_admin.players.model import Player
from itp_admin.staff.model import Account
from itp_admin.storage.local_bucket_storage import LocalBucketStorage

FIXED_NOW = datetime(2024, 3, 15, 9, 0, 0)


def make_player(id: int = 1, **overrides) -> Player:
    values = dict(
        id=id,
        player_id=f"ITP_{id:03d}",
        first_name="Player",
        last_name=str(id),
        status=PlayerStatus.ACTIVE,
    )
    values.update(overrides)
    return Player(**values)


class FakePlayerRepo:
    def __init__(self, players=()):
        self.players = {p.id: p for p in players}
        self.taken_ids = set()
        self.created = []

    def get_by_id(self, id):
        return self.players.get(int(id))

    def get_by_player_id(self, player_id):
        return next((p for p in self.players.values() if p.player_id == player_id), None)

    def list_players(self, *, status=None, search=None, house_id=None):
        out = list(self.players.values())
        if status is not None:
            out = [p for p in out if p.status == status]
        if house_id is not None:
            out = [p for p in out if p.house_id == house_id]
        if search:
            out = [p for p in out if search.lower() in p.full_name.lower()]
        return sorted(out, key=lambda p: (p.last_name, p.first_name))

    def last_issued_player_id(self):
        ids = sorted(p.player_id for p in self.players.values() if p.player_id.startswith("ITP_"))
        return ids[-1] if ids else None

    def create_player(self, player):
        if player.player_id in self.taken_ids:
            # a concurrent insert got there first; it is visible from now on
            self.taken_ids.discard(player.player_id)
            other = max(self.players, default=0) + 100
            self.players[other] = make_player(other, player_id=player.player_id)
            raise DuplicateKeyError(f"Duplicate player id {player.player_id}")
        id = max(self.players, default=0) + 1
        self.players[id] = Player(id=id, **asdict(player))
        self.created.append(player)
        return id

    def update_player(self, id, changes):
        if int(id) not in self.players:
            return False
        self.players[int(id)] = replace(self.players[int(id)], **changes)
        return True

    def delete_player(self, id):
        return self.players.pop(int(id), None) is not None


class FakeAccountRepo:
    def __init__(self, accounts=()):
        self.accounts = {a.account_id: a for a in accounts}
        self.fail_create = None

    def get_by_id(self, account_id):
        return self.accounts.get(account_id)

    def get_by_email(self, email):
        return next((a for a in self.accounts.values() if a.email == email), None)

    def create_account(self, *, email, password_hash, full_name, role, must_change_password=False):
        if self.fail_create is not None:
            raise self.fail_create
        account_id = max(self.accounts, default=0) + 1
        self.accounts[account_id] = Account(
            account_id=account_id,
            email=email,
            password_hash=password_hash,
            full_name=full_name,
            role=role,
            must_change_password=must_change_password,
        )
        return account_id

    def delete_by_id(self, account_id):
        return self.accounts.pop(account_id, None) is not None

    def set_active(self, account_id, *, is_active):
        if account_id not in self.accounts:
            return False
        self.accounts[account_id] = replace(self.accounts[account_id], is_active=is_active)
        return True

    def set_password(self, account_id, password_hash):
        if account_id not in self.accounts:
            return False
        self.accounts[account_id] = replace(
            self.accounts[account_id], password_hash=password_hash, must_change_password=False
        )
        return True

    def list_staff(self):
        return [a for a in self.accounts.values() if a.role in STAFF_ROLES]


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def player_factory():
    return make_player


@pytest.fixture
def player_repo():
    return FakePlayerRepo()


@pytest.fixture
def account_repo():
    return FakeAccountRepo()


@pytest.fixture
def storage(tmp_path):
    return LocalBucketStorage(tmp_path / "storage", secret_key="test-secret", max_age=60)


@pytest.fixture
def make_client():
    """Flask test client over a partial container; the session is logged in as staff unless told otherwise."""

    def _make(*, role: str = "admin", logged_in: bool = True, **services):
        app = Flask(__name__)
        app.secret_key = "test-secret"
        app.config["TESTING"] = True
        register_routes(app, SimpleNamespace(**services))
        client = app.test_client()
        if logged_in:
            with client.session_transaction() as sess:
                sess["account_id"] = 7
                sess["name"] = "Tom Coach"
                sess["email"] = "tom@itp.example"
                sess["role"] = role
        return client

    return _make
