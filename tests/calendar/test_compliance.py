from __future__ import annotations

from datetime import date

from itp_admin.calendar.compliance import GRAY, GREEN, RED, YELLOW, calculate_compliance, compliance_rows
from itp_admin.calendar.model import FeedEvent, TrainingLoad, WellnessLog
from itp_admin.core.enums import EventType

DAY = date(2024, 3, 15)


def _event(id, type=EventType.TEAM_TRAINING, attendees=()):
    return FeedEvent(id=id, title=id, date=DAY, type=type, source="event", attendee_ids=attendees)


def test_no_training_is_gray():
    result = calculate_compliance([_event("1", EventType.SCHOOL)], [WellnessLog(1, DAY)], [])
    assert result.light == GRAY
    assert result.mobility_required is False
    assert result.points == 1


def test_nothing_logged_is_red():
    result = calculate_compliance([_event("1")], [], [])
    assert result.light == RED
    assert result.activity_logs_required == 1
    assert result.mobility_required is True


def test_partial_is_yellow():
    result = calculate_compliance([_event("1"), _event("2", EventType.MATCH)], [], [TrainingLoad(1, DAY)])
    assert result.light == YELLOW
    assert result.activity_logs_count == 1
    assert result.activity_logs_required == 2


def test_all_logs_plus_mobility_is_green():
    loads = [TrainingLoad(1, DAY), TrainingLoad(1, DAY, mobility_completed=True)]
    result = calculate_compliance([_event("1"), _event("2", EventType.GYM)], [WellnessLog(1, DAY)], loads)
    assert result.light == GREEN
    assert result.points == 4


def test_logs_without_mobility_stay_yellow():
    result = calculate_compliance([_event("1")], [], [TrainingLoad(1, DAY)])
    assert result.light == YELLOW


def test_rows_apply_attendees_and_sort_worst_first(player_factory):
    players = [player_factory(1, first_name="Ana"), player_factory(2, first_name="Ben"), player_factory(3, first_name="Cy")]
    events = [
        _event("team"),
        _event("gym", EventType.GYM, attendees=(2,)),
        FeedEvent(id="next-day", title="x", date=date(2024, 3, 16), type=EventType.MATCH, source="event", attendee_ids=(3,)),
    ]
    loads = [
        TrainingLoad(1, DAY, mobility_completed=True),
        TrainingLoad(3, DAY, mobility_completed=True),
        TrainingLoad(2, date(2024, 3, 14), mobility_completed=True),
    ]

    rows = compliance_rows(DAY, events, players, [], loads)

    assert [(r.player_id, r.compliance.light) for r in rows] == [(2, RED), (1, GREEN), (3, GREEN)]
    assert rows[0].compliance.activity_logs_required == 2
    assert rows[1].player_name == "Ana 1"
