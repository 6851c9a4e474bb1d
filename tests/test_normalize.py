from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from talentos.db.models import EmployeeStatus
from talentos.utils.normalize import (
    cell_text,
    format_date,
    is_valid_email,
    map_status,
    parse_date_text,
    parse_date_value,
    parse_salary_value,
    sanitize_email,
    status_label,
    to_utc,
)


@pytest.mark.parametrize("raw,expected", [
    ("  José.Pérez@Empresa.COM ", "jose.perez@empresa.com"),
    ("MUÑOZ@mail.co", "munoz@mail.co"),
    ("", ""),
    (None, ""),
])
def test_sanitize_email(raw, expected):
    assert sanitize_email(raw) == expected


def test_sanitize_email_is_idempotent():
    once = sanitize_email(" Ángela.Núñez@Correo.Com ")
    assert sanitize_email(once) == once


def test_email_needs_at_and_dot():
    assert is_valid_email("a@b.co")
    assert not is_valid_email("ab.co")
    assert not is_valid_email("a@bco")
    assert not is_valid_email("")


@pytest.mark.parametrize("text,expected", [
    ("De Vacaciones", EmployeeStatus.OnVacation),
    ("VACACIONES", EmployeeStatus.OnVacation),
    ("Inactivo", EmployeeStatus.Inactive),
    (" activo ", EmployeeStatus.Active),
    ("", EmployeeStatus.Active),
    (None, EmployeeStatus.Active),
    ("retirado", EmployeeStatus.Active),
])
def test_map_status(text, expected):
    assert map_status(text) == expected


def test_status_labels_map_back():
    for status in EmployeeStatus:
        assert map_status(status_label(status)) == status


def test_to_utc_tags_naive_and_converts_aware():
    naive = datetime(2024, 1, 15, 8, 0)
    assert to_utc(naive) == datetime(2024, 1, 15, 8, 0, tzinfo=timezone.utc)

    bogota = timezone(timedelta(hours=-5))
    aware = datetime(2024, 1, 15, 8, 0, tzinfo=bogota)
    assert to_utc(aware) == datetime(2024, 1, 15, 13, 0, tzinfo=timezone.utc)

    assert to_utc(date(2024, 1, 15)) == datetime(2024, 1, 15, tzinfo=timezone.utc)
    assert to_utc(None) is None


def test_parse_date_text():
    assert parse_date_text("2020-03-04") == datetime(2020, 3, 4)
    assert parse_date_text("not a date") is None
    assert parse_date_text("   ") is None


@pytest.mark.parametrize("text", ["5", "12", "2021", "March", "2021-05"])
def test_parse_date_text_rejects_partial_dates(text):
    assert parse_date_text(text) is None


def test_parse_date_text_keeps_full_dates_with_time():
    assert parse_date_text("17/05/1990 08:30") == datetime(1990, 5, 17, 8, 30)


def test_format_date_uses_utc_day():
    bogota = timezone(timedelta(hours=-5))
    stored = datetime(1990, 5, 17, tzinfo=timezone.utc).astimezone(bogota)

    assert stored.day == 16
    assert format_date(stored) == "1990-05-17"
    assert format_date(datetime(2023, 2, 1)) == "2023-02-01"
    assert format_date(None) == ""


def test_parse_date_value_keeps_native_dates():
    assert parse_date_value(datetime(2020, 1, 1, 9)) == datetime(2020, 1, 1, 9)
    assert parse_date_value(date(2020, 1, 1)) == datetime(2020, 1, 1)


@pytest.mark.parametrize("value,expected", [
    (2500000, Decimal("2500000")),
    (1234.5, Decimal("1234.5")),
    ("$ 1500000", Decimal("1500000")),
    ("abc", Decimal("0")),
    ("", Decimal("0")),
    (None, Decimal("0")),
    (True, Decimal("0")),
    (float("nan"), Decimal("0")),
    ("Infinity", Decimal("0")),
])
def test_parse_salary_value(value, expected):
    assert parse_salary_value(value) == expected


def test_cell_text_drops_integral_float_suffix():
    assert cell_text(1020304050.0) == "1020304050"
    assert cell_text(12.5) == "12.5"
    assert cell_text("  abc ") == "abc"
    assert cell_text(None) == ""
