from __future__ import annotations

from typing import Any

from .errors import InvalidField
from .time_utils import parse_iso_date


# Maximum money value accepted on any record field
MAX_AMOUNT = 9_999_999.99


def require_text(value: Any, field: str) -> str:
    if value is None or not str(value).strip():
        raise InvalidField(field, f"{field} is required")
    return str(value).strip()


def optional_text(value: Any) -> str | None:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def coerce_int(value: Any, field: str, *, minimum: int | None = 0) -> int:
    """
    Strict integer parsing: rejects floats, decimals and scientific notation
    so that "12.5" or 1e3 never silently become stock counts.
    """
    if isinstance(value, bool):
        raise InvalidField(field, f"{field} must be an integer")
    if isinstance(value, int):
        result = value
    elif isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise InvalidField(field, f"{field} must be an integer")
        if "e" in stripped.lower():
            raise InvalidField(field, f"{field} must be a plain integer (scientific notation not allowed)")
        if "." in stripped:
            raise InvalidField(field, f"{field} must be an integer (no decimals)")
        try:
            result = int(stripped)
        except ValueError:
            raise InvalidField(field, f"{field} must be an integer")
    else:
        raise InvalidField(field, f"{field} must be an integer")

    if minimum is not None and result < minimum:
        raise InvalidField(field, f"{field} must be at least {minimum}")
    return result


def coerce_money(value: Any, field: str, *, allow_zero: bool = True) -> float:
    if isinstance(value, bool) or value is None:
        raise InvalidField(field, f"{field} must be a number")
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise InvalidField(field, f"{field} must be a number")
    if amount != amount or amount < 0 or amount > MAX_AMOUNT:
        raise InvalidField(field, f"{field} must be between 0 and {MAX_AMOUNT}")
    if not allow_zero and amount == 0:
        raise InvalidField(field, f"{field} must be greater than 0")
    return amount


def coerce_percent(value: Any, field: str) -> float:
    pct = coerce_money(value, field)
    if pct > 100:
        raise InvalidField(field, f"{field} must be between 0 and 100")
    return pct


def coerce_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "1", "yes", "on"):
        return True
    if isinstance(value, str) and value.strip().lower() in ("false", "0", "no", "off"):
        return False
    raise InvalidField(field, f"{field} must be true or false")


def coerce_date(value: Any, field: str, *, required: bool = False) -> str | None:
    """ISO date string (YYYY-MM-DD) or None."""
    text = optional_text(value)
    if text is None:
        if required:
            raise InvalidField(field, f"{field} is required")
        return None
    try:
        parsed = parse_iso_date(text)
    except ValueError:
        raise InvalidField(field, f"{field} must be an ISO-8601 date")
    return parsed.isoformat()


def reject_unknown(data: dict, allowed: set[str]) -> None:
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise InvalidField(unknown[0], f"Unknown field(s): {', '.join(unknown)}")
