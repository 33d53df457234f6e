from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Sequence

from ..core.enums import ProspectStatus
from .model import TrialProspect


class ProspectRepository(Protocol):
    def list_prospects(self) -> Sequence[TrialProspect]:
        raise NotImplementedError

    def get_prospect(self, prospect_id: int) -> Optional[TrialProspect]:
        raise NotImplementedError

    def create_prospect(self, values: Dict[str, Any]) -> int:
        raise NotImplementedError

    def update_prospect(self, prospect_id: int, changes: Dict[str, Any]) -> bool:
        raise NotImplementedError

    def set_status(self, prospect_id: int, status: ProspectStatus) -> bool:
        raise NotImplementedError

    def delete_prospect(self, prospect_id: int) -> bool:
        raise NotImplementedError
