"""Calendar entries built from other modules' rows.

Trials and appointments are not stored as events; they are expanded into
`FeedEvent`s every time the calendar page loads.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, List, Optional, Sequence

from ..core.enums import EventType
from ..medical.model import MedicalAppointment
from ..prospects.model import TrialProspect
from ..trials.model import PlayerTrial
from .model import CalendarEvent, FeedEvent
from .recurrence import weekday_numbers

UNKNOWN_PLAYER = "Unknown Player"

DOCTOR_LABELS = {
    "general": "General",
    "orthopedic": "Orthopedic",
    "physiotherapy": "Physio",
    "dentist": "Dentist",
    "specialist": "Specialist",
    "other": "Other",
}


def _days(start: date, end: date) -> Iterable[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def trial_events(trials: Sequence[PlayerTrial]) -> List[FeedEvent]:
    """One all-day entry per trial day, limited to `trial_days` when set."""
    events: List[FeedEvent] = []
    for trial in trials:
        allowed = weekday_numbers(trial.trial_days) if trial.trial_days else None
        title = f"{trial.player_name or UNKNOWN_PLAYER} @ {trial.trial_club}"
        for day in _days(trial.trial_start_date, trial.trial_end_date):
            if allowed is not None and day.weekday() not in allowed:
                continue
            events.append(
                FeedEvent(
                    id=f"trial-{trial.trial_id}-{day.isoformat()}",
                    title=title,
                    date=day,
                    type=EventType.TRIAL,
                    source="trial",
                    all_day=True,
                    location=trial.trial_club,
                    description=trial.notes or None,
                    attendee_ids=(trial.player_id,),
                )
            )
    return events


def prospect_events(prospects: Sequence[TrialProspect]) -> List[FeedEvent]:
    events: List[FeedEvent] = []
    for prospect in prospects:
        if not prospect.trial_start_date:
            continue
        end = prospect.trial_end_date or prospect.trial_start_date
        for day in _days(prospect.trial_start_date, end):
            events.append(
                FeedEvent(
                    id=f"prospect-{prospect.prospect_id}-{day.isoformat()}",
                    title=f"Trial: {prospect.full_name}",
                    date=day,
                    type=EventType.PROSPECT_TRIAL,
                    source="prospect",
                    all_day=True,
                    location=prospect.accommodation_details or None,
                    description=prospect.scouting_notes or None,
                )
            )
    return events


def appointment_events(appointments: Sequence[MedicalAppointment]) -> List[FeedEvent]:
    events: List[FeedEvent] = []
    for appt in appointments:
        label = DOCTOR_LABELS.get(appt.doctor_type.value, "Medical")
        description = appt.reason
        if appt.clinic_name:
            description += f" at {appt.clinic_name}"
        events.append(
            FeedEvent(
                id=f"medical-{appt.appointment_id}",
                title=f"{appt.player_name or UNKNOWN_PLAYER} - {label}",
                date=appt.appointment_date,
                type=EventType.MEDICAL,
                source="medical",
                start_time=appt.appointment_time,
                all_day=appt.appointment_time is None,
                location=appt.clinic_address or appt.clinic_name or None,
                description=description,
                attendee_ids=(appt.player_id,),
            )
        )
    return events


def stored_events(events: Sequence[CalendarEvent]) -> List[FeedEvent]:
    return [
        FeedEvent(
            id=str(e.event_id),
            title=e.title,
            date=e.date,
            type=e.type,
            source="event",
            start_time=e.start_time,
            end_time=e.end_time,
            all_day=e.all_day,
            location=e.location,
            description=e.description,
            event_id=e.event_id,
            parent_event_id=e.parent_event_id,
            is_recurring=e.is_recurring or e.parent_event_id is not None,
            attendee_ids=tuple(a.player_id for a in e.attendees),
        )
        for e in events
    ]


def merge_feed(
    events: Sequence[CalendarEvent],
    *,
    trials: Sequence[PlayerTrial] = (),
    prospects: Sequence[TrialProspect] = (),
    appointments: Sequence[MedicalAppointment] = (),
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> List[FeedEvent]:
    feed = stored_events(events) + trial_events(trials) + prospect_events(prospects) + appointment_events(appointments)
    if start is not None:
        feed = [e for e in feed if e.date >= start]
    if end is not None:
        feed = [e for e in feed if e.date <= end]
    return sorted(feed, key=lambda e: (e.date, e.is_timed, e.start_time.isoformat() if e.start_time else "", e.id))
