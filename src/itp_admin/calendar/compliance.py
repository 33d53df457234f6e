"""Daily compliance traffic light per player.

A player's day counts the training/competition events they attend (events
without attendees apply to everyone). Each such event needs one activity log,
and any required activity also requires a mobility session.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Sequence

from ..core.enums import TRAINING_COMPETITION_TYPES
from ..players.model import Player
from .model import FeedEvent, TrainingLoad, WellnessLog

GREEN = "green"
YELLOW = "yellow"
RED = "red"
GRAY = "gray"

LIGHT_ORDER = {RED: 0, YELLOW: 1, GREEN: 2, GRAY: 3}


@dataclass(frozen=True)
class ComplianceResult:
    light: str
    wellness_completed: bool
    activity_logs_count: int
    activity_logs_required: int
    mobility_completed: bool
    mobility_required: bool
    points: int


@dataclass(frozen=True)
class ComplianceRow:
    player_id: int
    player_name: str
    compliance: ComplianceResult


def calculate_compliance(
    player_events: Sequence[FeedEvent],
    wellness_logs: Sequence[WellnessLog],
    training_loads: Sequence[TrainingLoad],
) -> ComplianceResult:
    required = sum(1 for e in player_events if e.type in TRAINING_COMPETITION_TYPES)
    mobility_required = required > 0
    wellness_completed = len(wellness_logs) > 0
    count = len(training_loads)
    mobility_completed = any(t.mobility_completed for t in training_loads)

    points = int(wellness_completed) + count + int(mobility_completed)

    if required == 0:
        light = GRAY
    else:
        done = min(count, required) + int(mobility_completed)
        needed = required + int(mobility_required)
        if done >= needed:
            light = GREEN
        elif done > 0:
            light = YELLOW
        else:
            light = RED

    return ComplianceResult(
        light=light,
        wellness_completed=wellness_completed,
        activity_logs_count=count,
        activity_logs_required=required,
        mobility_completed=mobility_completed,
        mobility_required=mobility_required,
        points=points,
    )


def player_events_for_date(player_id: int, day: date, events: Sequence[FeedEvent]) -> List[FeedEvent]:
    return [e for e in events if e.date == day and (not e.attendee_ids or player_id in e.attendee_ids)]


def compliance_rows(
    day: date,
    events: Sequence[FeedEvent],
    players: Sequence[Player],
    wellness_logs: Sequence[WellnessLog],
    training_loads: Sequence[TrainingLoad],
) -> List[ComplianceRow]:
    """Rows for `day`, worst light first."""
    rows = []
    for player in players:
        result = calculate_compliance(
            player_events_for_date(player.id, day, events),
            [w for w in wellness_logs if w.player_id == player.id and w.date == day],
            [t for t in training_loads if t.player_id == player.id and t.date == day],
        )
        rows.append(ComplianceRow(player_id=player.id, player_name=player.full_name, compliance=result))
    rows.sort(key=lambda r: LIGHT_ORDER[r.compliance.light])
    return rows
