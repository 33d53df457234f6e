"""Operator-facing messages for database failures."""

from __future__ import annotations

from typing import Any, Optional

from mysql.connector import errorcode

DEFAULT_MESSAGE = "An error occurred"

_KNOWN_CODES = {
    errorcode.ER_DUP_ENTRY: "A record with this value already exists",
    errorcode.ER_ROW_IS_REFERENCED_2: "Cannot delete: this record is referenced by other data",
    errorcode.ER_ROW_IS_REFERENCED: "Cannot delete: this record is referenced by other data",
    errorcode.ER_NO_REFERENCED_ROW_2: "The referenced record does not exist",
    errorcode.ER_NO_REFERENCED_ROW: "The referenced record does not exist",
    errorcode.ER_TABLEACCESS_DENIED_ERROR: "Permission denied. Please contact an administrator.",
    errorcode.ER_DBACCESS_DENIED_ERROR: "Permission denied. Please contact an administrator.",
}


def get_error_message(error: Any, fallback: str = DEFAULT_MESSAGE) -> str:
    """Turn a connector error (or a dict/obj with message/details/hint) into one line."""
    if error is None:
        return fallback

    code = getattr(error, "errno", None)
    if code is None and isinstance(error, dict):
        code = error.get("errno") or error.get("code")
    if code in _KNOWN_CODES:
        return _KNOWN_CODES[code]

    def _field(name: str) -> Optional[str]:
        if isinstance(error, dict):
            return error.get(name)
        return getattr(error, name, None)

    message = _field("msg") or _field("message")
    if not message:
        text = str(error) if not isinstance(error, dict) else ""
        return text or fallback

    details = _field("details")
    hint = _field("hint")
    if details:
        return f"{message}: {details}"
    if hint:
        return f"{message} ({hint})"
    return message
