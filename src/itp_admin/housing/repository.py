from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import House, Resident, Room


class HousingRepository(Protocol):
    def list_houses(self) -> Sequence[House]:
        raise NotImplementedError

    def list_rooms(self) -> Sequence[Room]:
        raise NotImplementedError

    def get_room(self, room_id: int) -> Optional[Room]:
        raise NotImplementedError

    def list_residents(self) -> Sequence[Resident]:
        """Active and pending players with their room assignment."""
        raise NotImplementedError

    def get_resident(self, id: int) -> Optional[Resident]:
        raise NotImplementedError

    def set_room(self, id: int, *, room_id: Optional[int], house_id: Optional[int]) -> bool:
        raise NotImplementedError
