from __future__ import annotations

import pytest

from itp_admin.core.enums import PlayerStatus, WhereaboutsStatus
from itp_admin.core.exceptions import NotFoundError, ValidationError
from itp_admin.players.whereabouts import WhereaboutsService, clean_whereabouts_details, location_info, return_info


def test_details_keep_only_the_status_keys():
    details = {"club": " FC Basel ", "start_date": "2024-03-18", "end_date": "", "destination": "Accra"}

    assert clean_whereabouts_details(WhereaboutsStatus.ON_TRIAL, details) == {"club": "FC Basel", "start_date": "2024-03-18"}
    assert clean_whereabouts_details(WhereaboutsStatus.HOME_LEAVE, details) == {"destination": "Accra"}
    assert clean_whereabouts_details(WhereaboutsStatus.SCHOOL, details) == {}
    with pytest.raises(ValidationError):
        clean_whereabouts_details(WhereaboutsStatus.INJURED, {"expected_return": "soon"})


def test_return_and_location_info(player_factory):
    leave = player_factory(1, whereabouts_details={"destination": "Accra", "return_date": "2024-04-02"})
    injured = player_factory(2, whereabouts_details={"injury_type": "Ankle", "expected_return": "2024-03-30"})
    home = player_factory(3)

    assert return_info(leave) == "Returns: Apr 2, 2024"
    assert location_info(leave) == "Destination: Accra"
    assert return_info(injured) == "Expected: Mar 30, 2024"
    assert location_info(injured) == "Injury: Ankle"
    assert return_info(home) is None and location_info(home) is None


def test_update_whereabouts(player_repo, player_factory):
    player_repo.players[1] = player_factory(1, whereabouts_details={"club": "old"})
    service = WhereaboutsService(player_repo)

    service.update(1, {"whereabouts_status": "injured", "whereabouts_details": {"injury_type": "Hamstring", "club": "x"}})

    player = player_repo.get_by_id(1)
    assert player.whereabouts_status is WhereaboutsStatus.INJURED
    assert player.whereabouts_details == {"injury_type": "Hamstring"}

    service.update(1, {"status": "at_academy", "details": {"injury_type": "Hamstring"}})
    assert player_repo.get_by_id(1).whereabouts_details == {}

    with pytest.raises(ValidationError):
        service.update(1, {"whereabouts_status": "on_holiday"})
    with pytest.raises(NotFoundError):
        service.update(99, {"whereabouts_status": "school"})


def test_board_groups_active_players(player_repo, player_factory):
    player_repo.players[1] = player_factory(1, whereabouts_status=WhereaboutsStatus.ON_TRIAL, whereabouts_details={"club": "FC Basel"})
    player_repo.players[2] = player_factory(2)
    player_repo.players[3] = player_factory(3, whereabouts_status=WhereaboutsStatus.ON_TRIAL, status=PlayerStatus.ALUMNI)

    groups = {g.status: g for g in WhereaboutsService(player_repo).board()}

    assert list(groups) == list(WhereaboutsStatus)
    assert [e.player.id for e in groups[WhereaboutsStatus.ON_TRIAL].entries] == [1]
    assert groups[WhereaboutsStatus.ON_TRIAL].entries[0].location_info == "At: FC Basel"
    assert groups[WhereaboutsStatus.AT_ACADEMY].count == 1

    [only] = WhereaboutsService(player_repo).board("on_trial")
    assert only.label == "On Trial"


def test_whereabouts_api(make_client, player_repo, player_factory):
    player_repo.players[1] = player_factory(1)
    client = make_client(whereabouts_service=WhereaboutsService(player_repo))

    response = client.post("/api/players/1/whereabouts", json={"whereabouts_status": "home_leave", "whereabouts_details": {"destination": "Lagos"}})
    assert response.status_code == 200

    body = client.get("/api/players/whereabouts?status=home_leave").get_json()
    [group] = body["groups"]
    assert group["count"] == 1
    assert group["players"][0]["location_info"] == "Destination: Lagos"
    assert group["players"][0]["whereabouts_details"] == {"destination": "Lagos"}
