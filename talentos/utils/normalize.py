"""
Field normalization shared by the create/update and import paths.

- Email sanitizing (trim, lowercase, strip diacritics)
- Lenient status mapping from localized free text
- Free-text dates and UTC normalization
- Salary parsing with currency noise
"""

import math
import re
import unicodedata
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from dateutil import parser as date_parser

from talentos.db.models import EmployeeStatus

EMAIL_PATTERN = re.compile(r"^[^@]+@[^@]+\.[^@]+$")

# Labels written on export; each one maps back to its own status on import
STATUS_LABELS = {
    EmployeeStatus.Active: "Activo",
    EmployeeStatus.Inactive: "Inactivo",
    EmployeeStatus.OnVacation: "De Vacaciones",
}


# ============================================================
# EMAIL
# ============================================================

def remove_diacritics(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(c for c in decomposed if unicodedata.category(c) != "Mn")
    return unicodedata.normalize("NFC", stripped)


def sanitize_email(email: Optional[str]) -> str:
    """Trim, lowercase and strip accents. Idempotent."""
    if not email or not email.strip():
        return ""
    return remove_diacritics(email.strip().lower())


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email or ""))


# ============================================================
# STATUS
# ============================================================

def map_status(text: Optional[str]) -> EmployeeStatus:
    """
    Substring match against the Spanish tokens.

    "inactivo" must be tested before "activo" since it contains it.
    Anything unrecognized (or empty) is Active.
    """
    value = (text or "").strip().lower()
    if "inactivo" in value:
        return EmployeeStatus.Inactive
    if "vacaciones" in value:
        return EmployeeStatus.OnVacation
    if "activo" in value:
        return EmployeeStatus.Active
    return EmployeeStatus.Active


def status_label(status: EmployeeStatus) -> str:
    return STATUS_LABELS.get(status, STATUS_LABELS[EmployeeStatus.Active])


# ============================================================
# DATES
# ============================================================

def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive values are taken as UTC; aware ones are converted."""
    if value is None:
        return None
    if isinstance(value, date) and not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


_DEFAULT_A = datetime(2000, 1, 1)
_DEFAULT_B = datetime(2001, 2, 2)


def parse_date_text(text: Any) -> Optional[datetime]:
    """Free-text date parse; None when the text is empty or unparseable."""
    if text is None:
        return None
    text = str(text).strip()
    if not text:
        return None
    try:
        first = date_parser.parse(text, default=_DEFAULT_A)
        second = date_parser.parse(text, default=_DEFAULT_B)
    except (ValueError, OverflowError, TypeError):
        return None
    # Fragments like "12" or "2021" borrow the missing parts from the default
    if first != second:
        return None
    return first


def parse_date_value(value: Any) -> Optional[datetime]:
    """Native date/datetime as-is, anything else through the text parser."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    return parse_date_text(value)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_date(value: Optional[datetime]) -> str:
    """YYYY-MM-DD of the UTC calendar day."""
    return to_utc(value).strftime("%Y-%m-%d") if value else ""


# ============================================================
# NUMBERS
# ============================================================

def _finite_or_zero(value: Decimal) -> Decimal:
    return value if value.is_finite() else Decimal("0")


def parse_salary_text(text: Any) -> Decimal:
    """Strip '$' and spaces then parse; unparseable -> 0."""
    cleaned = str(text or "").replace("$", "").replace(" ", "")
    if not cleaned:
        return Decimal("0")
    try:
        return _finite_or_zero(Decimal(cleaned))
    except InvalidOperation:
        return Decimal("0")


def parse_salary_value(value: Any) -> Decimal:
    """Numbers as-is (booleans are not numbers), strings through parse_salary_text."""
    if isinstance(value, bool) or value is None:
        return Decimal("0")
    if isinstance(value, (int, float, Decimal)):
        if isinstance(value, float) and not math.isfinite(value):
            return Decimal("0")
        return _finite_or_zero(Decimal(str(value)))
    return parse_salary_text(value)


def number_text(value: Any) -> str:
    """Render a cell/JSON number as text: 12345.0 -> '12345'."""
    if isinstance(value, bool):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def cell_text(value: Any) -> str:
    """Spreadsheet cell value as trimmed text."""
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return number_text(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value).strip()
