from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Sequence

from .model import PlayerTrial


class PlayerTrialRepository(Protocol):
    def list_trials(self) -> Sequence[PlayerTrial]:
        raise NotImplementedError

    def get_trial(self, trial_id: int) -> Optional[PlayerTrial]:
        raise NotImplementedError

    def create_trial(self, values: Dict[str, Any]) -> int:
        raise NotImplementedError

    def update_trial(self, trial_id: int, changes: Dict[str, Any]) -> bool:
        raise NotImplementedError

    def delete_trial(self, trial_id: int) -> bool:
        raise NotImplementedError
