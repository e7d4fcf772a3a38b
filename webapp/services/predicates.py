from __future__ import annotations

import logging
import operator
import uuid
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from typing import Iterable, Sequence

from sqlalchemy import asc, desc
from sqlalchemy.inspection import inspect as sa_inspect
from sqlalchemy.sql.elements import ColumnElement

from webapp.core.errors import FilterValueError, UnknownPropertyError, UnsupportedOperatorError
from webapp.schemas.filters import FilterOperator, PropertyFilter, SortOrder

_LOG = logging.getLogger("webapp.predicates")

# Python comparison operators build SQL clauses when applied to columns.
_COMPARISONS = {
    FilterOperator.EQ: operator.eq,
    FilterOperator.NEQ: operator.ne,
    FilterOperator.GT: operator.gt,
    FilterOperator.LT: operator.lt,
    FilterOperator.GTE: operator.ge,
    FilterOperator.LTE: operator.le,
}


def _squash(name: str) -> str:
    return name.replace("_", "").lower()


def resolve_property(model, property_name: str):
    mapper = sa_inspect(model)
    keys = [attr.key for attr in mapper.column_attrs]
    name = str(property_name or "").strip()
    if name in keys:
        return getattr(model, name)
    # "Owner" / "IsActive" style names from JSON clients
    wanted = _squash(name)
    for key in keys:
        if _squash(key) == wanted:
            return getattr(model, key)
    raise UnknownPropertyError(model.__name__, name)


def _column_python_type(column):
    try:
        return column.property.columns[0].type.python_type
    except Exception:
        return None


def _coerce_bool(column_key: str, value):
    if isinstance(value, bool):
        return value
    if value is None:
        raise FilterValueError(column_key, "boolean")
    text = str(value).strip().lower()
    if text in {"1", "true", "yes", "y", "si", "sí"}:
        return True
    if text in {"0", "false", "no", "n"}:
        return False
    raise FilterValueError(column_key, "boolean")


def _coerce_number(column_key: str, value, python_type):
    if isinstance(value, bool):
        raise FilterValueError(column_key, "number")
    if python_type is Decimal and isinstance(value, Decimal):
        return value
    if python_type is float and isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, int):
        return value if python_type is int else Decimal(value)
    text = str(value).strip()
    if not text:
        raise FilterValueError(column_key, "number")
    try:
        parsed = Decimal(text.replace(",", "."))
    except (ValueError, TypeError, InvalidOperation):
        raise FilterValueError(column_key, "number")
    if not parsed.is_finite():
        raise FilterValueError(column_key, "number")
    if python_type is int:
        # 1.9 against an integer column must not quietly become 1.
        if parsed != parsed.to_integral_value():
            raise FilterValueError(column_key, "integer")
        return int(parsed)
    if python_type is float:
        return float(parsed)
    return parsed


def _coerce_date(column_key: str, value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    if not text:
        raise FilterValueError(column_key, "date")
    try:
        if "T" in text or " " in text:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        return date.fromisoformat(text)
    except ValueError:
        raise FilterValueError(column_key, "date")


def _coerce_datetime(column_key: str, value):
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, datetime.min.time())
    else:
        text = str(value or "").strip()
        if not text:
            raise FilterValueError(column_key, "datetime")
        try:
            if "T" not in text and " " not in text and len(text) == 10:
                parsed = datetime.combine(date.fromisoformat(text), datetime.min.time())
            else:
                parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            raise FilterValueError(column_key, "datetime")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def coerce_value(column, value):
    python_type = _column_python_type(column)
    if python_type is None:
        return value
    if python_type is uuid.UUID:
        if isinstance(value, uuid.UUID):
            return value
        try:
            return uuid.UUID(str(value or "").strip())
        except ValueError:
            raise FilterValueError(column.key, "uuid")
    if python_type is bool:
        return _coerce_bool(column.key, value)
    if python_type in {int, float, Decimal}:
        return _coerce_number(column.key, value, python_type)
    if python_type is datetime:
        return _coerce_datetime(column.key, value)
    if python_type is date:
        return _coerce_date(column.key, value)
    if python_type is str and not isinstance(value, str):
        return str(value)
    return value


def _is_date_only_literal(raw_value) -> bool:
    if isinstance(raw_value, date) and not isinstance(raw_value, datetime):
        return True
    if not isinstance(raw_value, str):
        return False
    text = raw_value.strip()
    if not text or "T" in text or " " in text:
        return False
    try:
        date.fromisoformat(text)
        return True
    except ValueError:
        return False


def parse_operator(raw) -> FilterOperator:
    parsed = FilterOperator.parse(raw)
    if parsed is None:
        raise UnsupportedOperatorError(raw)
    return parsed


def build_predicate(model, descriptor: PropertyFilter) -> ColumnElement:
    op = parse_operator(descriptor.operator)
    column = resolve_property(model, descriptor.property_name)
    value = coerce_value(column, descriptor.value)
    if _column_python_type(column) is datetime and op in {FilterOperator.EQ, FilterOperator.NEQ} and _is_date_only_literal(descriptor.value):
        # A bare date against a timestamp column means the whole day.
        day_expr = (column >= value) & (column < value + timedelta(days=1))
        return day_expr if op is FilterOperator.EQ else ~day_expr
    return _COMPARISONS[op](column, value)


def build_predicates(model, descriptors: Iterable[PropertyFilter]) -> list[ColumnElement]:
    return [build_predicate(model, item) for item in descriptors if not item.is_blank]


def build_ordering(model, descriptors: Sequence[PropertyFilter], order: int):
    if not descriptors:
        return None
    if order not in (SortOrder.ASC, SortOrder.DESC):
        _LOG.warning("Invalid order specified: %s. Defaulting to no specific order.", order)
        return None
    first = descriptors[0]
    if not first.property_name.strip():
        _LOG.warning("First filter has no property name; results are left unordered")
        return None
    column = resolve_property(model, first.property_name)
    return asc(column) if order == SortOrder.ASC else desc(column)

