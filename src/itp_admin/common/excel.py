from __future__ import annotations

import io
from typing import Iterable, Mapping, Optional, Sequence

import pandas as pd

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def rows_to_xlsx(
    rows: Iterable[Mapping],
    *,
    sheet_name: str = "Sheet1",
    columns: Optional[Sequence[str]] = None,
) -> bytes:
    """Render dict rows as a single-sheet workbook."""
    df = pd.DataFrame(list(rows), columns=list(columns) if columns else None)
    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name[:31])
    return out.getvalue()
