from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from itp_admin.core.enums import PlayerTrialStatus, TrialOutcome
from itp_admin.core.exceptions import NotFoundError, ValidationError
from itp_admin.trials.model import PlayerTrial
from itp_admin.trials.service import PlayerTrialService, parse_trial_days


class FakeTrialRepo:
    def __init__(self):
        self.trials = {}

    def list_trials(self):
        return list(self.trials.values())

    def get_trial(self, trial_id):
        return self.trials.get(trial_id)

    def create_trial(self, values):
        trial_id = len(self.trials) + 1
        self.trials[trial_id] = PlayerTrial(trial_id=trial_id, **values)
        return trial_id

    def update_trial(self, trial_id, changes):
        self.trials[trial_id] = replace(self.trials[trial_id], **changes)
        return True

    def delete_trial(self, trial_id):
        return self.trials.pop(trial_id, None) is not None


TRIAL = {"player_id": 3, "trial_club": "FC Basel", "trial_start_date": "2024-03-18", "trial_end_date": "2024-03-22"}


def test_parse_trial_days():
    assert parse_trial_days("Monday, wed,mon") == ("mon", "wed")
    assert parse_trial_days(None) == ()
    with pytest.raises(ValidationError):
        parse_trial_days(["funday"])


def test_create_trial_defaults():
    repo = FakeTrialRepo()
    trial_id = PlayerTrialService(repo).create_trial({**TRIAL, "trial_days": "mon,tue", "travel_arranged": "on"})

    trial = repo.get_trial(trial_id)
    assert trial.status is PlayerTrialStatus.SCHEDULED
    assert trial.trial_outcome is TrialOutcome.PENDING
    assert trial.trial_days == ("mon", "tue")
    assert trial.travel_arranged is True
    assert trial.trial_start_date == date(2024, 3, 18)


def test_trial_dates_must_be_ordered():
    service = PlayerTrialService(FakeTrialRepo())
    with pytest.raises(ValidationError, match="End date cannot be before start date"):
        service.create_trial({**TRIAL, "trial_end_date": "2024-03-10"})
    with pytest.raises(ValidationError, match="Club is required"):
        service.create_trial({**TRIAL, "trial_club": ""})


def test_update_checks_merged_dates():
    repo = FakeTrialRepo()
    service = PlayerTrialService(repo)
    trial_id = service.create_trial(TRIAL)

    with pytest.raises(ValidationError):
        service.update_trial(trial_id, {"trial_start_date": "2024-03-25"})

    service.update_trial(trial_id, {"status": "completed", "trial_outcome": "offer_received"})
    assert repo.get_trial(trial_id).trial_outcome is TrialOutcome.OFFER_RECEIVED

    service.delete_trial(trial_id)
    with pytest.raises(NotFoundError):
        service.update_trial(trial_id, {"notes": "x"})
