from __future__ import annotations

from flask import Flask

from ..common.serialization import to_jsonable
from ..common.web import login_required, ok, request_data
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/housing", endpoint="housing_board")
    @login_required
    def housing_board():
        board = container.room_allocation_service.board()
        return ok(
            houses=to_jsonable(board.houses),
            rooms=[
                {**to_jsonable(room), "occupants": to_jsonable(board.residents_by_room.get(room.room_id, []))}
                for room in board.rooms
            ],
            unassigned=to_jsonable(board.unassigned),
            occupancy=[{**to_jsonable(o), "available": o.available} for o in board.occupancy],
            summary={
                "houses": len(board.houses),
                "total_rooms": board.total_rooms,
                "total_beds": board.total_beds,
                "occupied_beds": board.occupied_beds,
                "unassigned": len(board.unassigned),
            },
        )

    @app.route("/api/housing/move", methods=["POST"], endpoint="housing_move")
    @login_required
    def housing_move():
        data = request_data()
        room_id = data.get("room_id")
        changed = container.room_allocation_service.move_player(
            player_id=int(data.get("player_id") or 0),
            room_id=int(room_id) if room_id not in (None, "", "unassigned") else None,
        )
        return ok(changed=changed)
