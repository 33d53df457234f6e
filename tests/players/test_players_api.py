from __future__ import annotations

from itp_admin.documents.service import DocumentService
from itp_admin.players.service import PlayerService


class NoDocuments:
    def list_for_player(self, player_id):
        return []


def _client(make_client, player_repo, storage, **kwargs):
    return make_client(
        player_service=PlayerService(player_repo),
        document_service=DocumentService(NoDocuments(), storage),
        **kwargs,
    )


def test_requires_login(make_client, player_repo, storage):
    client = _client(make_client, player_repo, storage, logged_in=False)
    res = client.get("/api/players")
    assert res.status_code == 401
    assert res.get_json()["success"] is False


def test_players_are_staff_only(make_client, player_repo, storage):
    client = _client(make_client, player_repo, storage, role="player")
    assert client.get("/api/players").status_code == 403


def test_create_and_fetch_player(make_client, player_repo, storage):
    client = _client(make_client, player_repo, storage)

    res = client.post("/api/players", json={"first_name": "Max", "last_name": "Kruse", "date_of_birth": "2006-05-01"})
    assert res.status_code == 201
    body = res.get_json()
    assert body["player_id"] == "ITP_001"

    res = client.get(f"/api/players/{body['id']}")
    assert res.status_code == 200
    player = res.get_json()["player"]
    assert player["full_name"] == "Max Kruse"
    assert player["date_of_birth"] == "2006-05-01"
    assert player["status"] == "pending"


def test_validation_error_maps_to_400(make_client, player_repo, storage):
    client = _client(make_client, player_repo, storage)
    res = client.post("/api/players", json={"first_name": "Max"})
    assert res.status_code == 400
    assert res.get_json()["message"] == "Last name is required"


def test_missing_player_maps_to_404(make_client, player_repo, storage):
    client = _client(make_client, player_repo, storage)
    res = client.get("/api/players/42")
    assert res.status_code == 404
    assert res.get_json()["message"] == "Player not found"


def test_hard_delete_requires_admin(make_client, player_repo, storage, player_factory):
    player_repo.players[1] = player_factory(1)
    client = _client(make_client, player_repo, storage, role="staff")
    assert client.delete("/api/players/1?hard=1").status_code == 403
    assert client.delete("/api/players/1").status_code == 200
