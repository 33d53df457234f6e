from __future__ import annotations

from datetime import date, timedelta
from types import SimpleNamespace

import pytest

from itp_admin.core.enums import PlayerStatus, PlayerTrialStatus, TaskCategory, TaskPriority, TaskStatus
from itp_admin.dashboard.service import DashboardService, expiry_alerts
from itp_admin.housing.model import HouseOccupancy
from itp_admin.tasks.model import Task
from itp_admin.trials.model import PlayerTrial

TODAY = date(2024, 3, 15)


class Stub:
    def __init__(self, **lists):
        self._lists = lists

    def list_tasks(self):
        return self._lists.get("tasks", [])

    def list_trials(self):
        return self._lists.get("trials", [])

    def list_events(self, start, end):
        assert start == end == TODAY
        return self._lists.get("events", [])

    def board(self):
        return SimpleNamespace(
            occupied_beds=3,
            total_beds=8,
            occupancy=[HouseOccupancy(house_id=1, name="Widdersdorf 1", rooms=4, beds=8, occupied=3)],
        )


def _task(task_id, status, due=None):
    return Task(task_id, f"Task {task_id}", status, TaskPriority.MEDIUM, TaskCategory.ADMIN, 7, due_date=due)


def _trial(trial_id, status, start, end):
    return PlayerTrial(trial_id, 1, "FC Basel", start, end, status)


def test_expiry_alerts_window(player_factory):
    players = [
        player_factory(1, insurance_expiry=TODAY + timedelta(days=40)),
        player_factory(2, insurance_expiry=TODAY + timedelta(days=10)),
        player_factory(3, insurance_expiry=TODAY),
        player_factory(4, insurance_expiry=TODAY - timedelta(days=1)),
        player_factory(5),
    ]
    alerts = expiry_alerts(players, field="insurance_expiry", today=TODAY, min_days=0, max_days=30)
    assert [(a.player_id, a.days_left) for a in alerts] == [(3, 0), (2, 10)]
    assert alerts[1].player_name == "Player 2"


def test_visa_alerts_include_recently_overdue(player_factory):
    players = [
        player_factory(1, visa_expiry=TODAY - timedelta(days=5)),
        player_factory(2, visa_expiry=TODAY - timedelta(days=45)),
    ]
    alerts = expiry_alerts(players, field="visa_expiry", today=TODAY, min_days=-30, max_days=30)
    assert [a.player_id for a in alerts] == [1]
    assert alerts[0].days_left == -5


@pytest.fixture
def service(player_repo, player_factory, clock):
    player_repo.players = {
        1: player_factory(1, visa_expiry=TODAY + timedelta(days=3)),
        2: player_factory(2, insurance_expiry=TODAY + timedelta(days=20)),
        3: player_factory(3, status=PlayerStatus.ALUMNI, visa_expiry=TODAY),
    }
    stub = Stub(
        tasks=[
            _task(1, TaskStatus.PENDING),
            _task(2, TaskStatus.PENDING, TODAY + timedelta(days=2)),
            _task(3, TaskStatus.COMPLETED, TODAY),
        ],
        trials=[
            _trial(1, PlayerTrialStatus.SCHEDULED, TODAY + timedelta(days=10), TODAY + timedelta(days=12)),
            _trial(2, PlayerTrialStatus.ONGOING, TODAY - timedelta(days=1), TODAY + timedelta(days=2)),
            _trial(3, PlayerTrialStatus.SCHEDULED, TODAY - timedelta(days=9), TODAY - timedelta(days=7)),
            _trial(4, PlayerTrialStatus.CANCELLED, TODAY, TODAY),
        ],
        events=["morning training", "gym"],
    )
    return DashboardService(players=player_repo, tasks=stub, events=stub, trials=stub, housing=stub, clock=clock)


def test_load_dashboard(service):
    board = service.load()

    assert board.today == TODAY
    assert board.stats.active_players == 2
    assert board.stats.pending_tasks == 2
    assert board.stats.todays_events == 2
    assert (board.stats.occupied_beds, board.stats.total_beds) == (3, 8)
    # dated tasks first, undated last
    assert [t.task_id for t in board.pending_tasks] == [2, 1]
    assert [t.trial_id for t in board.upcoming_trials] == [2, 1]
    assert [a.player_id for a in board.visa_alerts] == [1]
    assert [a.player_id for a in board.insurance_alerts] == [2]


def test_dashboard_endpoint(make_client, service):
    client = make_client(dashboard_service=service)
    body = client.get("/api/dashboard").get_json()
    assert body["stats"]["upcoming_trials"] == 2
    assert body["occupancy"][0]["name"] == "Widdersdorf 1"
    assert body["visa_alerts"][0]["expires_on"] == "2024-03-18"


def test_dashboard_requires_login(make_client, service):
    client = make_client(dashboard_service=service, logged_in=False)
    assert client.get("/api/dashboard").status_code == 401
