from __future__ import annotations

from functools import lru_cache
from typing import Any

from sqlalchemy import inspect

from emr.errors import ValidationError
from emr.services.filter_service import normalize_name


def parse_fields(fields: str | None) -> list[str]:
    return [field.strip() for field in (fields or '').split(',') if field.strip()]


@lru_cache(maxsize=None)
def _attribute_names(model: type) -> dict[str, str]:
    return {normalize_name(attr.key): attr.key for attr in inspect(model).attrs}


@lru_cache(maxsize=None)
def _relationship_names(model: type) -> frozenset[str]:
    return frozenset(rel.key for rel in inspect(model).relationships)


def resolve_attribute(model: type, name: str) -> str:
    key = _attribute_names(model).get(normalize_name(name))
    if key is None:
        raise ValidationError(f"Unknown field '{name}' for {model.__name__}")
    return key


def column_values(entity: Any) -> dict[str, Any]:
    return {attr.key: getattr(entity, attr.key) for attr in inspect(type(entity)).column_attrs}


def _navigation_value(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, (list, tuple, set)):
        return [column_values(item) for item in value]
    return column_values(value)


def _assign(target: dict, entity: Any, segments: list[str]) -> None:
    model = type(entity)
    key = resolve_attribute(model, segments[0])
    value = getattr(entity, key)
    is_navigation = key in _relationship_names(model)

    if len(segments) == 1:
        if key not in target:
            target[key] = _navigation_value(value) if is_navigation else value
        return

    if not is_navigation:
        raise ValidationError(f"Field '{segments[0]}' of {model.__name__} has no nested fields")
    if value is None:
        target[key] = None
        return

    if isinstance(value, (list, tuple, set)):
        items = list(value)
        slots = target.get(key)
        if not isinstance(slots, list) or len(slots) != len(items):
            slots = [{} for _ in items]
            target[key] = slots
        for slot, item in zip(slots, items):
            _assign(slot, item, segments[1:])
        return

    slot = target.get(key)
    if not isinstance(slot, dict):
        slot = {}
        target[key] = slot
    _assign(slot, value, segments[1:])


def map_to_fields(entity: Any, fields: str | None) -> dict[str, Any] | None:
    """Project an entity down to the requested comma-separated field paths.

    ``id`` is always included. Dotted paths descend through navigation
    properties; collections project each related row.
    """
    if entity is None:
        return None

    paths = ['id'] + [path for path in parse_fields(fields) if normalize_name(path) != 'id']
    result: dict[str, Any] = {}
    for path in paths:
        segments = [segment.strip() for segment in path.split('.')]
        if any(not segment for segment in segments):
            raise ValidationError(f"Invalid field path '{path}'")
        _assign(result, entity, segments)
    return result
