from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..core.exceptions import NotFoundError, ValidationError
from .model import House, HouseOccupancy, Resident, Room
from .repository import HousingRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AllocationBoard:
    houses: Sequence[House]
    rooms: Sequence[Room]
    residents_by_room: Dict[int, List[Resident]]
    unassigned: Sequence[Resident]
    occupancy: Sequence[HouseOccupancy]
    total_rooms: int
    total_beds: int
    occupied_beds: int


class RoomAllocationService:
    """Drag-and-drop room assignment with capacity checks."""

    def __init__(self, housing: HousingRepository):
        self._housing = housing

    def board(self) -> AllocationBoard:
        houses = list(self._housing.list_houses())
        rooms = list(self._housing.list_rooms())
        residents = list(self._housing.list_residents())
        room_ids = {r.room_id for r in rooms}

        by_room: Dict[int, List[Resident]] = {r.room_id: [] for r in rooms}
        unassigned: List[Resident] = []
        for resident in residents:
            if resident.room_id is not None and resident.room_id in room_ids:
                by_room[resident.room_id].append(resident)
            else:
                unassigned.append(resident)

        occupancy = []
        for house in houses:
            house_rooms = [r for r in rooms if r.house_id == house.house_id]
            occupancy.append(
                HouseOccupancy(
                    house_id=house.house_id,
                    name=house.name,
                    rooms=len(house_rooms),
                    beds=sum(r.capacity for r in house_rooms),
                    occupied=sum(len(by_room[r.room_id]) for r in house_rooms),
                )
            )

        return AllocationBoard(
            houses=houses,
            rooms=rooms,
            residents_by_room=by_room,
            unassigned=unassigned,
            occupancy=occupancy,
            total_rooms=len(rooms),
            total_beds=sum(r.capacity for r in rooms),
            occupied_beds=sum(len(v) for v in by_room.values()),
        )

    def move_player(self, *, player_id: int, room_id: Optional[int]) -> bool:
        """Drop a player on a room (or on the unassigned pool when room_id is None).

        Returns False when the drop changes nothing.
        """
        resident = self._housing.get_resident(int(player_id))
        if not resident:
            raise NotFoundError("Player not found")

        if room_id is None:
            if resident.room_id is None:
                return False
            self._housing.set_room(resident.id, room_id=None, house_id=None)
            logger.info("Player %s moved to unassigned pool", resident.player_id)
            return True

        room = self._housing.get_room(int(room_id))
        if not room:
            raise NotFoundError("Room not found")
        if resident.room_id == room.room_id:
            return False
        # counted over the board residents: active and pending players only
        occupants = sum(1 for r in self._housing.list_residents() if r.room_id == room.room_id)
        if occupants >= room.capacity:
            raise ValidationError("Room is full")

        self._housing.set_room(resident.id, room_id=room.room_id, house_id=room.house_id)
        logger.info("Player %s assigned to room %s (house %s)", resident.player_id, room.name, room.house_id)
        return True
