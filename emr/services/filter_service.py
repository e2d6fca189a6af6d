from __future__ import annotations

import uuid
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from typing import Any, Protocol

from sqlalchemy import inspect, or_
from sqlalchemy.sql import Select

from emr.errors import ValidationError

SORT_ORDERS = ('asc', 'desc')
_TRUE_VALUES = {'true', '1', 'yes', 'y'}
_FALSE_VALUES = {'false', '0', 'no', 'n'}


class FilterCriterion(Protocol):
    property_name: str
    operator: str
    value: str | None


def normalize_name(name: str) -> str:
    # PatientId, patientId and patient_id all resolve to the same attribute.
    return name.strip().replace('_', '').lower()


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(raw)


def _parse_decimal(raw: str) -> Decimal:
    try:
        return Decimal(raw.strip())
    except InvalidOperation as exc:
        raise ValueError(raw) from exc


def _parse_datetime(raw: str) -> datetime:
    return datetime.fromisoformat(raw.strip())


_PARSERS: dict[type, Callable[[str], Any]] = {
    str: lambda raw: raw,
    int: lambda raw: int(raw.strip()),
    float: lambda raw: float(raw.strip()),
    Decimal: _parse_decimal,
    bool: _parse_bool,
    uuid.UUID: lambda raw: uuid.UUID(raw.strip()),
    date: lambda raw: date.fromisoformat(raw.strip()),
    datetime: _parse_datetime,
}


@dataclass(frozen=True)
class FieldSpec:
    name: str
    attribute: Any
    python_type: type
    nullable: bool
    default: Any = None

    @property
    def is_text(self) -> bool:
        return self.python_type is str

    def parse(self, raw: str) -> Any:
        parser = _PARSERS.get(self.python_type, _PARSERS[str])
        try:
            return parser(raw)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"Invalid value '{raw}' for field '{self.name}'") from exc


def _python_type(column) -> type:
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return str
    # DateTime is a subclass of date, resolve the most specific parser first.
    for candidate in (bool, datetime, date, Decimal, int, float, uuid.UUID, str):
        if issubclass(python_type, candidate):
            return candidate
    return str


def _scalar_default(column) -> Any:
    if column.default is not None and column.default.is_scalar:
        return column.default.arg
    return None


class FieldRegistry:
    """Typed lookup of an entity's columns for filtering, searching and sorting."""

    def __init__(self, model: type):
        self.model = model
        self._fields: dict[str, FieldSpec] = {}
        for column_attr in inspect(model).column_attrs:
            column = column_attr.columns[0]
            spec = FieldSpec(
                name=column_attr.key,
                attribute=getattr(model, column_attr.key),
                python_type=_python_type(column),
                nullable=bool(column.nullable) and not column.primary_key,
                default=_scalar_default(column),
            )
            self._fields[normalize_name(column_attr.key)] = spec

    def __iter__(self) -> Iterator[FieldSpec]:
        return iter(self._fields.values())

    def resolve(self, name: str) -> FieldSpec:
        spec = self._fields.get(normalize_name(name or ''))
        if spec is None:
            raise ValidationError(f"Unknown field '{name}' for {self.model.__name__}")
        return spec

    def text_fields(self) -> list[FieldSpec]:
        return [spec for spec in self._fields.values() if spec.is_text]


@lru_cache(maxsize=None)
def field_registry(model: type) -> FieldRegistry:
    return FieldRegistry(model)


def _like_pattern(raw: str, *, prefix: str = '%', suffix: str = '%') -> str:
    escaped = raw.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
    return f'{prefix}{escaped}{suffix}'


def _value_or_null(spec: FieldSpec, raw: str | None) -> Any:
    if raw is None or raw == '':
        return None
    return spec.parse(raw)


def _require_text(spec: FieldSpec, operator: str) -> None:
    if not spec.is_text:
        raise ValidationError(f"Operator '{operator}' requires a text field, '{spec.name}' is not one")


def _require_value(spec: FieldSpec, raw: str | None) -> Any:
    value = _value_or_null(spec, raw)
    if value is None:
        raise ValidationError(f"A value is required to filter on '{spec.name}'")
    return value


def _equal(spec: FieldSpec, raw: str | None):
    value = _value_or_null(spec, raw)
    return spec.attribute.is_(None) if value is None else spec.attribute == value


def _not_equal(spec: FieldSpec, raw: str | None):
    value = _value_or_null(spec, raw)
    return spec.attribute.is_not(None) if value is None else spec.attribute != value


def _contains(spec: FieldSpec, raw: str | None):
    _require_text(spec, 'Contains')
    return spec.attribute.ilike(_like_pattern(raw or ''), escape='\\')


def _starts_with(spec: FieldSpec, raw: str | None):
    _require_text(spec, 'StartsWith')
    return spec.attribute.ilike(_like_pattern(raw or '', prefix=''), escape='\\')


def _ends_with(spec: FieldSpec, raw: str | None):
    _require_text(spec, 'EndsWith')
    return spec.attribute.ilike(_like_pattern(raw or '', suffix=''), escape='\\')


def _in(spec: FieldSpec, raw: str | None):
    tokens = [token.strip() for token in (raw or '').split(',') if token.strip()]
    if not tokens:
        raise ValidationError(f"Operator 'In' needs at least one value for '{spec.name}'")
    return spec.attribute.in_([spec.parse(token) for token in tokens])


OPERATORS: dict[str, Callable[[FieldSpec, str | None], Any]] = {
    'equal': _equal,
    'notequal': _not_equal,
    'greaterthan': lambda spec, raw: spec.attribute > _require_value(spec, raw),
    'greaterthanorequal': lambda spec, raw: spec.attribute >= _require_value(spec, raw),
    'lessthan': lambda spec, raw: spec.attribute < _require_value(spec, raw),
    'lessthanorequal': lambda spec, raw: spec.attribute <= _require_value(spec, raw),
    'contains': _contains,
    'startswith': _starts_with,
    'endswith': _ends_with,
    'in': _in,
    'isnull': lambda spec, _raw: spec.attribute.is_(None),
    'isnotnull': lambda spec, _raw: spec.attribute.is_not(None),
}


def build_predicate(registry: FieldRegistry, criterion: FilterCriterion):
    spec = registry.resolve(criterion.property_name)
    operator = normalize_name(criterion.operator or 'Equal')
    builder = OPERATORS.get(operator)
    if builder is None:
        raise ValidationError(f"Unsupported filter operator '{criterion.operator}'")
    return builder(spec, criterion.value)


def apply_filter(
    query: Select,
    registry: FieldRegistry,
    filters: Iterable[FilterCriterion] | None,
    search_term: str | None,
) -> Select:
    for criterion in filters or ():
        query = query.where(build_predicate(registry, criterion))
    return apply_search(query, registry, search_term)


def apply_search(query: Select, registry: FieldRegistry, search_term: str | None) -> Select:
    term = (search_term or '').strip()
    if not term:
        return query
    text_fields = registry.text_fields()
    if not text_fields:
        return query
    pattern = _like_pattern(term)
    return query.where(or_(*[spec.attribute.ilike(pattern, escape='\\') for spec in text_fields]))


def validate_sort_order(sort_order: str | None) -> str:
    order = (sort_order or 'asc').strip().lower()
    if order not in SORT_ORDERS:
        raise ValidationError("Invalid sort order. Use 'asc' or 'desc'")
    return order


def apply_sort(query: Select, registry: FieldRegistry, sort_field: str | None, sort_order: str | None) -> Select:
    order = validate_sort_order(sort_order)
    if sort_field:
        spec = registry.resolve(sort_field)
        query = query.order_by(spec.attribute.asc() if order == 'asc' else spec.attribute.desc())
    return query


def paginate(query: Select, page_number: int, page_size: int) -> Select:
    return query.offset((page_number - 1) * page_size).limit(page_size)
