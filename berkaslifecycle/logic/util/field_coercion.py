"""
Field value coercion for case-file writes.

- tanggal* fields -> datetime.date (ISO date or full ISO datetime)
- biaya_ukur      -> float
- everything else -> trimmed string
Empty input becomes None for every field.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Mapping

from core.common.errors import ValidationError
from core.helpers.date_time_helper import parse_date
from berkaslifecycle.models.section import DATE_FIELDS, NUMBER_FIELDS


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def coerce_value(name: str, value: Any) -> Any:
    if _blank(value):
        return None
    if name in DATE_FIELDS:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        try:
            return parse_date(str(value))
        except ValueError as ex:
            raise ValidationError(f"Format tanggal tidak valid untuk '{name}': {value!r}") from ex
    if name in NUMBER_FIELDS:
        if isinstance(value, bool):
            raise ValidationError(f"Nilai angka tidak valid untuk '{name}': {value!r}")
        try:
            return float(str(value).strip().replace(",", "."))
        except ValueError as ex:
            raise ValidationError(f"Nilai angka tidak valid untuk '{name}': {value!r}") from ex
    return str(value).strip()


def coerce_values(values: Mapping[str, Any]) -> Dict[str, Any]:
    """Coerce every entry of an already-filtered (snake_case) payload."""
    return {name: coerce_value(name, value) for name, value in values.items()}
