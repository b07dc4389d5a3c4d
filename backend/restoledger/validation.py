# Overview: Request validation for catalog payloads, shared number/date coercion, and the domain error types.

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sqlalchemy import Boolean, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import DeclarativeMeta

from restoledger.time_utils import parse_iso_datetime


# 9,999,999.99 in cents; anything above is a typo, not a menu price
MAX_PRICE_CENTS = 999_999_999


class ValidationError(ValueError):
    """400-level input problem."""


class NotFoundError(LookupError):
    """404-level problem: a referenced record does not exist."""


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., deleting a referenced organization)."""


class InvariantViolation(RuntimeError):
    """Derived totals disagree with their inputs. Unreachable with validated input."""


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Which columns of a model a client may send.

    writable_fields: accepted keys (anything else is rejected)
    required_on_create: keys a POST must carry
    """
    writable_fields: set[str]
    required_on_create: set[str] = field(default_factory=set)


def _coerce_integer(key: str, value: Any) -> int:
    """
    Whole numbers only. Accepts ints and digit strings ("12", "-3");
    rejects bools, floats, "12.5" and "1e3".
    """
    if isinstance(value, bool):
        raise ValidationError(f"{key} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        raise ValidationError(f"{key} must be an integer, not a decimal")
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{key} must be an integer")

    text = value.strip()
    if "e" in text.lower():
        raise ValidationError(f"{key} must be a plain integer (scientific notation not allowed)")
    if "." in text:
        raise ValidationError(f"{key} must be an integer (no decimals)")
    try:
        return int(text)
    except ValueError:
        raise ValidationError(f"{key} must be an integer")


def _coerce_number(key: str, value: Any) -> float:
    # Stock levels: 2.5 kg is fine
    if isinstance(value, bool):
        raise ValidationError(f"{key} must be a number")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            pass
    raise ValidationError(f"{key} must be a number")


def _coerce_boolean(key: str, value: Any) -> bool:
    # JSON true/false, or the strings "true"/"false" from form-style clients
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ValidationError(f"{key} must be true or false")


def optional_text(key: str, value: Any, *, max_length: int | None = None) -> str | None:
    """Free-text fields (sale notes, loss reason): None or blank -> None, non-strings rejected."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    text = value.strip()
    if not text:
        return None
    if max_length is not None and len(text) > max_length:
        raise ValidationError(f"{key} exceeds max length {max_length}")
    return text


def parse_datetime_field(key: str, value: str | None) -> datetime | None:
    """ISO-8601 string -> UTC-naive datetime, or ValidationError naming the field."""
    try:
        return parse_iso_datetime(value)
    except (AttributeError, TypeError, ValueError):
        raise ValidationError(f"{key} must be an ISO-8601 datetime")


def _coerce_for_column(col, value: Any):
    coltype = col.type
    if isinstance(coltype, Integer):
        return _coerce_integer(col.key, value)
    if isinstance(coltype, Float):
        return _coerce_number(col.key, value)
    if isinstance(coltype, Boolean):
        return _coerce_boolean(col.key, value)
    if isinstance(coltype, DateTime):
        if isinstance(value, datetime):
            return value
        if isinstance(value, str):
            return parse_datetime_field(col.key, value)
        raise ValidationError(f"{col.key} must be a datetime")
    if isinstance(coltype, (String, Text)):
        return str(value).strip()
    return value


def _clean_column_value(col, raw: Any):
    """Coerce one value and check it against nullability and String(n) length."""
    if raw is None:
        if not col.nullable:
            raise ValidationError(f"{col.key} cannot be null")
        return None

    value = _coerce_for_column(col, raw)

    if isinstance(col.type, (String, Text)) and not col.nullable and value == "":
        raise ValidationError(f"{col.key} cannot be blank")
    length = getattr(col.type, "length", None) if isinstance(col.type, String) else None
    if length and len(value) > length:
        raise ValidationError(f"{col.key} exceeds max length {length}")
    return value


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Turn a JSON body into a patch dict for `model`.

    Create (partial=False) requires every policy.required_on_create key;
    update (partial=True) only validates the keys that are present. Keys
    outside policy.writable_fields, or not mapped to a column, are rejected.
    Values are coerced using the column's SQLAlchemy type.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    if not partial:
        missing = sorted(key for key in policy.required_on_create if key not in payload)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    columns = {c.key: c for c in model.__mapper__.columns}
    for key in payload:
        if key not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {key}")
        if key not in columns:
            raise ValidationError(f"Unknown field: {key}")

    return {key: _clean_column_value(columns[key], raw) for key, raw in payload.items()}


def enforce_price_cents(field_name: str, value: Any) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    if value < 0:
        raise ValidationError(f"{field_name} must be >= 0")
    if value > MAX_PRICE_CENTS:
        raise ValidationError(f"{field_name} cannot exceed {MAX_PRICE_CENTS} ({MAX_PRICE_CENTS / 100:,.2f})")


def optional_int(key: str, value: Any) -> int | None:
    """Reference ids in JSON bodies: None stays None, anything else must be an integer."""
    if value is None or value == "":
        return None
    return _coerce_integer(key, value)


def enforce_quantity(value: Any) -> int:
    """Sales and losses are counted in whole units, at least one."""
    quantity = _coerce_integer("quantity", value)
    if quantity < 1:
        raise ValidationError("quantity must be >= 1")
    return quantity


def enforce_rules_menu_item(patch: dict) -> None:
    # Selling below cost is allowed (loss leaders)
    for name in ("cost_price_cents", "selling_price_cents"):
        if patch.get(name) is not None:
            enforce_price_cents(name, patch[name])


def enforce_rules_stock_item(patch: dict) -> None:
    if patch.get("cost_per_unit_cents") is not None:
        enforce_price_cents("cost_per_unit_cents", patch["cost_per_unit_cents"])

    for name in ("current_stock", "min_stock_level"):
        if patch.get(name) is not None and patch[name] < 0:
            raise ValidationError(f"{name} must be >= 0")
