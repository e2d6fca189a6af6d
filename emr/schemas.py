from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, create_model, field_validator
from pydantic import ValidationError as PydanticValidationError

from emr.errors import ValidationError
from emr.services.filter_service import FieldRegistry, field_registry

# Stamped from the authenticated principal, never accepted from request bodies.
SERVER_MANAGED_FIELDS = frozenset({'tenant_id', 'created_by', 'created_on', 'updated_by', 'updated_on'})


class FilterCriteria(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    property_name: str = Field(alias='PropertyName')
    operator: str = Field(default='Equal', alias='Operator')
    value: str | None = Field(default=None, alias='Value')

    @field_validator('value', mode='before')
    @classmethod
    def _stringify_value(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, bool):
            return 'true' if value else 'false'
        return str(value)


_FILTER_LIST = TypeAdapter(list[FilterCriteria])


def parse_filter_criteria(raw: str | None) -> list[FilterCriteria] | None:
    if raw is None or not raw.strip():
        return None
    try:
        return _FILTER_LIST.validate_json(raw)
    except PydanticValidationError as exc:
        raise ValidationError(
            'Invalid filters. Use [{"PropertyName": "...", "Operator": "Equal", "Value": "..."}]'
        ) from exc


class PatchOperation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    op: Literal['add', 'remove', 'replace', 'move', 'copy', 'test']
    path: str
    value: Any = None
    from_: str | None = Field(default=None, alias='from')


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = 'bearer'
    expires_at: datetime


class CreatedResponse(BaseModel):
    id: uuid.UUID


class StatusResponse(BaseModel):
    status: bool


@dataclass(frozen=True)
class EntitySchemas:
    create: type[BaseModel]
    update: type[BaseModel]
    patch: type[BaseModel]
    read: type[BaseModel]


class _ReadBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class _WriteBase(BaseModel):
    model_config = ConfigDict(extra='ignore')


class _PatchBase(BaseModel):
    model_config = ConfigDict(extra='forbid')


def _write_fields(registry: FieldRegistry, *, include_id: bool, all_optional: bool) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    for spec in registry:
        if spec.name in SERVER_MANAGED_FIELDS:
            continue
        if spec.name == 'id':
            if include_id:
                fields['id'] = (uuid.UUID | None, None)
            continue
        required = not all_optional and not spec.nullable and spec.default is None
        if required:
            fields[spec.name] = (spec.python_type, ...)
        elif all_optional:
            fields[spec.name] = (spec.python_type | None, None)
        else:
            fields[spec.name] = (spec.python_type | None, spec.default)
    return fields


def build_entity_schemas(model: type) -> EntitySchemas:
    registry = field_registry(model)
    name = model.__name__
    read_fields = {spec.name: (spec.python_type | None, None) for spec in registry}
    return EntitySchemas(
        create=create_model(
            f'{name}Create', __base__=_WriteBase, **_write_fields(registry, include_id=False, all_optional=False)
        ),
        update=create_model(
            f'{name}Update', __base__=_WriteBase, **_write_fields(registry, include_id=True, all_optional=False)
        ),
        patch=create_model(
            f'{name}Patch', __base__=_PatchBase, **_write_fields(registry, include_id=False, all_optional=True)
        ),
        read=create_model(f'{name}Read', __base__=_ReadBase, **read_fields),
    )
