"""Dashboard: headline counts and expiry alerts."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, List, Optional, Sequence

from ..calendar.repository import CalendarRepository
from ..common.datetime_utils import now_local
from ..core.constants import EXPIRY_WARNING_DAYS, VISA_OVERDUE_DAYS
from ..core.enums import PlayerStatus, PlayerTrialStatus, TaskStatus
from ..housing.model import HouseOccupancy
from ..housing.service import RoomAllocationService
from ..players.model import Player
from ..players.repository import PlayerRepository
from ..tasks.model import Task
from ..tasks.repository import TaskRepository
from ..trials.model import PlayerTrial
from ..trials.repository import PlayerTrialRepository


@dataclass(frozen=True)
class ExpiryAlert:
    player_id: int
    player_name: str
    kind: str
    expires_on: date
    days_left: int


@dataclass(frozen=True)
class DashboardStats:
    active_players: int
    pending_tasks: int
    todays_events: int
    upcoming_trials: int
    occupied_beds: int
    total_beds: int


@dataclass(frozen=True)
class Dashboard:
    today: date
    stats: DashboardStats
    pending_tasks: Sequence[Task]
    upcoming_trials: Sequence[PlayerTrial]
    insurance_alerts: Sequence[ExpiryAlert]
    visa_alerts: Sequence[ExpiryAlert]
    occupancy: Sequence[HouseOccupancy]


def expiry_alerts(
    players: Sequence[Player],
    *,
    field: str,
    today: date,
    min_days: int,
    max_days: int,
) -> List[ExpiryAlert]:
    """Players whose `field` date falls within today+min_days .. today+max_days, soonest first."""
    alerts = []
    for p in players:
        expires: Optional[date] = getattr(p, field)
        if expires is None:
            continue
        days_left = (expires - today).days
        if min_days <= days_left <= max_days:
            alerts.append(ExpiryAlert(p.id, p.full_name, field, expires, days_left))
    alerts.sort(key=lambda a: a.days_left)
    return alerts


class DashboardService:
    def __init__(
        self,
        *,
        players: PlayerRepository,
        tasks: TaskRepository,
        events: CalendarRepository,
        trials: PlayerTrialRepository,
        housing: RoomAllocationService,
        clock: Callable[[], datetime] = now_local,
    ):
        self._players = players
        self._tasks = tasks
        self._events = events
        self._trials = trials
        self._housing = housing
        self._clock = clock

    def load(self) -> Dashboard:
        today = self._clock().date()
        players = list(self._players.list_players(status=PlayerStatus.ACTIVE))
        pending = [t for t in self._tasks.list_tasks() if t.status == TaskStatus.PENDING]
        pending.sort(key=lambda t: (t.due_date is None, t.due_date or date.max))
        trials = [
            t
            for t in self._trials.list_trials()
            if t.status in (PlayerTrialStatus.SCHEDULED, PlayerTrialStatus.ONGOING) and t.trial_end_date >= today
        ]
        trials.sort(key=lambda t: t.trial_start_date)
        board = self._housing.board()

        return Dashboard(
            today=today,
            stats=DashboardStats(
                active_players=len(players),
                pending_tasks=len(pending),
                todays_events=len(self._events.list_events(today, today)),
                upcoming_trials=len(trials),
                occupied_beds=board.occupied_beds,
                total_beds=board.total_beds,
            ),
            pending_tasks=pending,
            upcoming_trials=trials,
            insurance_alerts=expiry_alerts(players, field="insurance_expiry", today=today, min_days=0, max_days=EXPIRY_WARNING_DAYS),
            visa_alerts=expiry_alerts(
                players, field="visa_expiry", today=today, min_days=-VISA_OVERDUE_DAYS, max_days=EXPIRY_WARNING_DAYS
            ),
            occupancy=board.occupancy,
        )
