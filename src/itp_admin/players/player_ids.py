"""Human-readable player identifiers: ITP_001, ITP_002, ..."""

from __future__ import annotations

import re
from typing import Optional

from ..core.constants import PLAYER_ID_PREFIX, PLAYER_ID_WIDTH

_PLAYER_ID_RE = re.compile(rf"{PLAYER_ID_PREFIX}(\d+)")


def format_player_id(number: int) -> str:
    return f"{PLAYER_ID_PREFIX}{int(number):0{PLAYER_ID_WIDTH}d}"


def next_player_id(last_issued: Optional[str]) -> str:
    """Increment the most recently issued id; ITP_001 when there is none (or it does not parse)."""
    number = 1
    if last_issued:
        match = _PLAYER_ID_RE.search(last_issued)
        if match:
            number = int(match.group(1)) + 1
    return format_player_id(number)
