from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import DocumentCategory


@dataclass(frozen=True)
class PlayerDocument:
    document_id: int
    player_id: int
    name: str
    file_path: str
    category: DocumentCategory
    file_type: Optional[str] = None
    file_size: Optional[int] = None
    document_type: Optional[str] = None
    expiry_date: Optional[date] = None
    description: Optional[str] = None
    uploaded_by: Optional[int] = None
    created_at: Optional[datetime] = None
