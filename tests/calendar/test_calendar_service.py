from __future__ import annotations

from dataclasses import asdict, replace
from datetime import date, time

import pytest

from itp_admin.calendar.model import Attendee, CalendarEvent
from itp_admin.calendar.service import CalendarService, parse_player_ids, parse_recurrence_days
from itp_admin.core.enums import EventType, PlayerStatus, RecurrenceRule
from itp_admin.core.exceptions import NotFoundError, ValidationError


class FakeCalendarRepo:
    def __init__(self):
        self.events = {}
        self.attendees = {}
        self.wellness = []
        self.loads = []

    def _with_attendees(self, event):
        return replace(event, attendees=tuple(Attendee(p) for p in self.attendees.get(event.event_id, ())))

    def list_events(self, start, end):
        return [self._with_attendees(e) for e in sorted(self.events.values(), key=lambda e: e.date) if start <= e.date <= end]

    def get_event(self, event_id):
        event = self.events.get(event_id)
        return self._with_attendees(event) if event else None

    def list_series(self, head_id):
        members = [e for e in self.events.values() if e.event_id == head_id or e.parent_event_id == head_id]
        return sorted(members, key=lambda e: (e.date, e.event_id))

    def create_events(self, events):
        ids = []
        for new in events:
            event_id = max(self.events, default=0) + 1
            self.events[event_id] = CalendarEvent(event_id=event_id, **asdict(new))
            ids.append(event_id)
        return ids

    def update_events(self, event_ids, changes):
        for event_id in event_ids:
            self.events[event_id] = replace(self.events[event_id], **changes)
        return len(event_ids)

    def reparent(self, old_parent_id, new_parent_id):
        moved = [e for e in self.events.values() if e.parent_event_id == old_parent_id]
        for e in moved:
            self.events[e.event_id] = replace(e, parent_event_id=new_parent_id)
        return len(moved)

    def delete_events(self, event_ids):
        deleted = 0
        for event_id in event_ids:
            if self.events.pop(event_id, None) is not None:
                deleted += 1
            # instances cascade with their parent row
            for child in [e.event_id for e in self.events.values() if e.parent_event_id == event_id]:
                self.events.pop(child)
                deleted += 1
        return deleted

    def add_attendees(self, event_ids, player_ids):
        for event_id in event_ids:
            current = self.attendees.setdefault(event_id, [])
            current.extend(p for p in player_ids if p not in current)

    def replace_attendees(self, event_ids, player_ids):
        for event_id in event_ids:
            self.attendees[event_id] = list(player_ids)

    def list_wellness_logs(self, day):
        return [w for w in self.wellness if w.date == day]

    def list_training_loads(self, day):
        return [t for t in self.loads if t.date == day]


class EmptyRepo:
    def list_trials(self):
        return []

    def list_prospects(self, status=None):
        return []

    def list_appointments(self):
        return []


@pytest.fixture
def repo():
    return FakeCalendarRepo()


@pytest.fixture
def service(repo, player_repo, clock):
    empty = EmptyRepo()
    return CalendarService(repo, players=player_repo, trials=empty, prospects=empty, medical=empty, clock=clock)


def _series(service, **overrides):
    data = {
        "title": "Team Training",
        "date": "2024-03-04",
        "type": "team_training",
        "start_time": "10:00",
        "end_time": "11:30",
        "recurrence_rule": "weekly",
        "recurrence_end_date": "2024-03-25",
        "player_ids": "1,2",
    }
    data.update(overrides)
    return service.create_event(data)


def test_parsers():
    assert parse_player_ids("3, 4,3") == [3, 4]
    assert parse_player_ids([]) == []
    with pytest.raises(ValidationError):
        parse_player_ids("a")
    assert parse_recurrence_days("Mon,wed,mon") == ("mon", "wed")


def test_create_single_event(service, repo):
    ids = service.create_event({"title": "Meeting", "date": "2024-03-15", "type": "meeting", "start_time": "09:00", "player_ids": [5]})

    assert len(ids) == 1
    event = repo.get_event(ids[0])
    assert event.start_time == time(9, 0)
    assert event.is_recurring is False
    assert [a.player_id for a in event.attendees] == [5]


def test_create_validates_times(service):
    with pytest.raises(ValidationError, match="Start time is required"):
        service.create_event({"title": "Meeting", "date": "2024-03-15"})
    with pytest.raises(ValidationError, match="End time must be after start time"):
        service.create_event({"title": "Meeting", "date": "2024-03-15", "start_time": "10:00", "end_time": "09:00"})


def test_all_day_drops_times(service, repo):
    ids = service.create_event({"title": "Holiday", "date": "2024-03-15", "all_day": "true", "start_time": "10:00"})
    event = repo.get_event(ids[0])
    assert event.all_day is True
    assert event.start_time is None


def test_create_series(service, repo):
    ids = _series(service)

    head, *instances = [repo.get_event(i) for i in ids]
    assert head.is_recurring is True
    assert head.recurrence_rule is RecurrenceRule.WEEKLY
    assert head.recurrence_end_date == date(2024, 3, 25)
    assert [e.date for e in instances] == [date(2024, 3, 11), date(2024, 3, 18), date(2024, 3, 25)]
    assert all(e.parent_event_id == head.event_id and not e.is_recurring for e in instances)
    assert all([a.player_id for a in e.attendees] == [1, 2] for e in instances)


def test_series_needs_end_date(service):
    with pytest.raises(ValidationError, match="Recurrence end date is required"):
        _series(service, recurrence_end_date="")


def test_custom_series_uses_weekdays(service, repo):
    ids = _series(service, recurrence_rule="custom", recurrence_days="tue,thu", recurrence_end_date="2024-03-10")
    assert [repo.get_event(i).date for i in ids] == [date(2024, 3, 4), date(2024, 3, 5), date(2024, 3, 7)]
    assert repo.get_event(ids[0]).recurrence_days == ("tue", "thu")


def test_update_this_only(service, repo):
    ids = _series(service)
    service.update_event(ids[2], {"title": "Moved", "date": "2024-03-19"}, scope="this")

    assert repo.get_event(ids[2]).title == "Moved"
    assert repo.get_event(ids[2]).date == date(2024, 3, 19)
    assert repo.get_event(ids[1]).title == "Team Training"


def test_update_following_keeps_member_dates(service, repo):
    ids = _series(service)
    count = service.update_event(ids[2], {"start_time": "18:00", "end_time": "19:00", "date": "2024-01-01"}, scope="following")

    assert count == 2
    assert repo.get_event(ids[1]).start_time == time(10, 0)
    assert repo.get_event(ids[2]).start_time == time(18, 0)
    assert repo.get_event(ids[3]).start_time == time(18, 0)
    assert repo.get_event(ids[3]).date == date(2024, 3, 25)


def test_update_all_replaces_attendees(service, repo):
    ids = _series(service)
    assert service.update_event(ids[1], {"player_ids": [9]}, scope="all") == 4
    assert all([a.player_id for a in repo.get_event(i).attendees] == [9] for i in ids)


def test_update_needs_changes(service):
    ids = _series(service)
    with pytest.raises(ValidationError, match="Nothing to update"):
        service.update_event(ids[0], {})
    with pytest.raises(NotFoundError):
        service.update_event(999, {"title": "x"})


def test_delete_single_instance(service, repo):
    ids = _series(service)
    assert service.delete_event(ids[2], scope="this") == 1
    assert sorted(repo.events) == [ids[0], ids[1], ids[3]]


def test_delete_following_trims_head(service, repo):
    ids = _series(service)
    assert service.delete_event(ids[2], scope="following") == 2
    assert sorted(repo.events) == [ids[0], ids[1]]
    assert repo.get_event(ids[0]).recurrence_end_date == date(2024, 3, 17)


def test_delete_all_from_instance(service, repo):
    ids = _series(service)
    service.delete_event(ids[3], scope="all")
    assert repo.events == {}


def test_delete_head_only_promotes_next_instance(service, repo):
    ids = _series(service)
    service.delete_event(ids[0], scope="this")

    assert ids[0] not in repo.events
    new_head = repo.get_event(ids[1])
    assert new_head.is_recurring is True
    assert new_head.parent_event_id is None
    assert new_head.recurrence_end_date == date(2024, 3, 25)
    assert repo.get_event(ids[2]).parent_event_id == ids[1]
    assert repo.get_event(ids[3]).parent_event_id == ids[1]


def test_delete_one_off(service, repo):
    ids = service.create_event({"title": "Meeting", "date": "2024-03-15", "start_time": "09:00"})
    assert service.delete_event(ids[0], scope="all") == 1
    assert repo.events == {}


def test_page_builds_grid_and_compliance(service, repo, player_repo, player_factory):
    player_repo.players = {1: player_factory(1), 2: player_factory(2, status=PlayerStatus.ALUMNI)}
    service.create_event({"title": "Training", "date": "2024-03-15", "type": "team_training", "start_time": "10:00"})
    service.create_event({"title": "April", "date": "2024-04-20", "all_day": True})

    page = service.page(mode="month")

    assert page.current == date(2024, 3, 15)
    assert page.header == "March 2024"
    assert [e.title for e in page.events] == ["Training"]
    assert len(page.grid) == 6
    assert [r.player_id for r in page.compliance] == [1]
    assert page.compliance[0].compliance.light == "red"


def test_page_rejects_unknown_mode(service):
    with pytest.raises(ValidationError):
        service.page(mode="year")


def test_calendar_endpoints(make_client, service, repo):
    client = make_client(calendar_service=service)

    res = client.post(
        "/api/calendar/events",
        json={"title": "Gym", "date": "2024-03-12", "type": "gym", "start_time": "07:30", "recurrence_rule": "daily", "recurrence_end_date": "2024-03-14"},
    )
    assert res.status_code == 201
    ids = res.get_json()["event_ids"]
    assert len(ids) == 3

    body = client.get("/api/calendar?view=week&date=2024-03-12").get_json()
    assert body["header"] == "Mar 10 - Mar 16, 2024"
    assert body["navigation"] == {"prev": "2024-03-05", "next": "2024-03-19"}
    assert len(body["grid"]) == 7
    assert body["grid"][2]["hours"][7]["events"][0]["title"] == "Gym"

    res = client.patch(f"/api/calendar/events/{ids[1]}", json={"title": "Gym+", "scope": "following"})
    assert res.get_json()["updated"] == 2

    res = client.delete(f"/api/calendar/events/{ids[0]}?scope=all")
    assert res.get_json()["deleted"] == 3
    assert client.get(f"/api/calendar/events/{ids[0]}").status_code == 404
