from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class House:
    house_id: int
    name: str
    address: Optional[str] = None


@dataclass(frozen=True)
class Room:
    room_id: int
    house_id: int
    name: str
    capacity: int
    floor: Optional[int] = None


@dataclass(frozen=True)
class Resident:
    """A player as seen by the room allocation board."""

    id: int
    player_id: str
    full_name: str
    room_id: Optional[int]
    house_id: Optional[int]
    positions: Tuple[str, ...] = ()


@dataclass(frozen=True)
class HouseOccupancy:
    house_id: int
    name: str
    rooms: int
    beds: int
    occupied: int

    @property
    def available(self) -> int:
        return max(self.beds - self.occupied, 0)
