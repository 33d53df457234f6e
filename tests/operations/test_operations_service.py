from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from itp_admin.core.enums import GroceryOrderStatus, InsuranceClaimStatus, PlayerTrialStatus, WellPassStatus
from itp_admin.core.exceptions import NotFoundError, ValidationError
from itp_admin.grocery.model import GroceryOrder
from itp_admin.medical.model import InsuranceClaim
from itp_admin.operations.model import WellPassMembership
from itp_admin.operations.service import OperationsService
from itp_admin.trials.model import PlayerTrial


class FakeWellPassRepo:
    def __init__(self, memberships=()):
        self.memberships = {m.membership_id: m for m in memberships}

    def list_memberships(self):
        return list(self.memberships.values())

    def get_membership(self, membership_id):
        return self.memberships.get(membership_id)

    def create_membership(self, values):
        membership_id = max(self.memberships, default=0) + 1
        self.memberships[membership_id] = WellPassMembership(membership_id=membership_id, **values)
        return membership_id

    def update_membership(self, membership_id, changes):
        self.memberships[membership_id] = replace(self.memberships[membership_id], **changes)
        return True

    def delete_membership(self, membership_id):
        return self.memberships.pop(membership_id, None) is not None


class Listing:
    """Read side of the medical, trial and grocery repositories."""

    def __init__(self, claims=(), trials=(), orders=()):
        self._claims, self._trials, self._orders = list(claims), list(trials), list(orders)

    def list_claims(self):
        return self._claims

    def list_trials(self):
        return self._trials

    def list_orders(self):
        return self._orders


def _claim(claim_id, status):
    return InsuranceClaim(claim_id, 1, f"INV-{claim_id}", date(2024, 3, 1), "Clinic", "Visit", Decimal("10"), status)


def _trial(trial_id, status):
    return PlayerTrial(trial_id, 1, "FC Basel", date(2024, 3, 1), date(2024, 3, 5), status)


@pytest.fixture
def repo():
    return FakeWellPassRepo(
        [
            WellPassMembership(1, 1, WellPassStatus.ACTIVE, date(2024, 1, 1), membership_number="WP-1"),
            WellPassMembership(2, 2, WellPassStatus.PENDING, date(2024, 3, 1)),
        ]
    )


@pytest.fixture
def service(repo):
    listing = Listing(
        claims=[_claim(1, InsuranceClaimStatus.PENDING), _claim(2, InsuranceClaimStatus.IN_REVIEW), _claim(3, InsuranceClaimStatus.PAID)],
        trials=[_trial(1, PlayerTrialStatus.ONGOING), _trial(2, PlayerTrialStatus.COMPLETED)],
        orders=[
            GroceryOrder(1, 1, date(2024, 3, 18), GroceryOrderStatus.PENDING),
            GroceryOrder(2, 2, date(2024, 3, 18), GroceryOrderStatus.DELIVERED),
        ],
    )
    return OperationsService(repo, medical=listing, trials=listing, grocery=listing)


def test_overview_counts(service):
    overview = service.overview()
    assert overview.wellpass_counts == {"active": 1, "inactive": 0, "pending": 1, "expired": 0}
    assert overview.open_claims == 2
    assert overview.active_trials == 1
    assert overview.pending_grocery_orders == 1


def test_create_membership(service, repo):
    membership_id = service.create_membership({"player_id": "3", "start_date": "2024-03-15", "membership_number": ""})
    membership = repo.get_membership(membership_id)
    assert membership.status is WellPassStatus.PENDING
    assert membership.membership_number is None

    with pytest.raises(ValidationError, match="Player is required"):
        service.create_membership({"start_date": "2024-03-15"})
    with pytest.raises(ValidationError, match="Start date is required"):
        service.create_membership({"player_id": 3})
    with pytest.raises(ValidationError, match="End date cannot be before start date"):
        service.create_membership({"player_id": 3, "start_date": "2024-03-15", "end_date": "2024-03-01"})


def test_update_and_delete_membership(service, repo):
    service.update_membership(2, {"status": "active", "membership_number": "WP-2"})
    assert repo.get_membership(2).status is WellPassStatus.ACTIVE

    with pytest.raises(ValidationError, match="End date"):
        service.update_membership(2, {"end_date": "2024-02-01"})

    service.delete_membership(2)
    with pytest.raises(NotFoundError):
        service.update_membership(2, {"notes": "x"})
    with pytest.raises(NotFoundError):
        service.delete_membership(2)


def test_operations_endpoint(make_client, service):
    client = make_client(operations_service=service)
    body = client.get("/api/operations").get_json()
    assert body["open_claims"] == 2
    assert body["memberships"][0]["membership_number"] == "WP-1"
