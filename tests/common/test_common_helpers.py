from __future__ import annotations

from datetime import date, datetime, time

import mysql.connector
import pytest
from mysql.connector import errorcode

from itp_admin.common.datetime_utils import add_months, calculate_age, days_until, parse_iso_date, parse_time_of_day
from itp_admin.common.errors import get_error_message
from itp_admin.common.formatting import format_date, format_file_size, format_hour, format_time, get_initials
from itp_admin.common.validators import optional_str, parse_enum, require_non_empty, require_positive
from itp_admin.core.enums import TaskStatus
from itp_admin.core.exceptions import ValidationError


def test_parse_iso_date_accepts_timestamps():
    assert parse_iso_date("2024-03-15T10:30:00") == date(2024, 3, 15)
    assert parse_iso_date(datetime(2024, 3, 15, 9, 0)) == date(2024, 3, 15)


def test_parse_iso_date_rejects_garbage():
    with pytest.raises(ValidationError):
        parse_iso_date("15/03/2024")


def test_parse_time_of_day():
    assert parse_time_of_day("09:30") == time(9, 30)
    assert parse_time_of_day("2024-03-15T18:45:10") == time(18, 45, 10)
    assert parse_time_of_day("") is None
    with pytest.raises(ValidationError):
        parse_time_of_day("half past nine")


def test_add_months_clamps_to_month_end():
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2024, 12, 15), 1) == date(2025, 1, 15)
    assert add_months(date(2024, 1, 15), -1) == date(2023, 12, 15)


def test_days_until_and_age():
    today = date(2024, 3, 15)
    assert days_until("2024-03-20", today=today) == 5
    assert days_until(date(2024, 3, 10), today=today) == -5
    assert calculate_age("2006-03-16", today=today) == 17
    assert calculate_age("2006-03-15", today=today) == 18
    assert calculate_age(None, today=today) is None


def test_formatting_helpers():
    assert format_date("2024-03-05") == "Mar 5, 2024"
    assert format_time("14:05:00") == "2:05 PM"
    assert format_time("00:15") == "12:15 AM"
    assert format_time("bad") == ""
    assert format_hour(0) == "12 AM"
    assert format_hour(12) == "12 PM"
    assert format_hour(15) == "3 PM"
    assert get_initials("Max van der Berg") == "MV"


def test_format_file_size():
    assert format_file_size(0) == "0 Bytes"
    assert format_file_size(512) == "512 Bytes"
    assert format_file_size(1536) == "1.5 KB"
    assert format_file_size(10 * 1024 * 1024) == "10 MB"


def test_validators():
    assert require_non_empty("  Anna ", "Name") == "Anna"
    with pytest.raises(ValidationError, match="Name is required"):
        require_non_empty("   ", "Name")
    assert require_non_empty(5, "Title") == "5"
    with pytest.raises(ValidationError):
        require_non_empty(None, "Title")
    assert optional_str("  ") is None
    assert parse_enum(TaskStatus, "completed", "status") is TaskStatus.COMPLETED
    with pytest.raises(ValidationError):
        parse_enum(TaskStatus, "archived", "status")
    assert require_positive("3", "Capacity") == 3
    with pytest.raises(ValidationError):
        require_positive(0, "Capacity")


def test_database_error_messages():
    referenced = mysql.connector.IntegrityError(msg="parent row", errno=errorcode.ER_ROW_IS_REFERENCED_2)
    missing = mysql.connector.IntegrityError(msg="child row", errno=errorcode.ER_NO_REFERENCED_ROW_2)
    duplicate = mysql.connector.IntegrityError(msg="dup", errno=errorcode.ER_DUP_ENTRY)

    assert get_error_message(referenced) == "Cannot delete: this record is referenced by other data"
    assert get_error_message(missing) == "The referenced record does not exist"
    assert get_error_message(duplicate) == "A record with this value already exists"
    assert get_error_message({"message": "Bad value", "details": "age < 0"}) == "Bad value: age < 0"
    assert get_error_message(None) == "An error occurred"
