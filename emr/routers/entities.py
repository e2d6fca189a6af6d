import uuid
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from emr.auth import Principal, require_entitlement
from emr.config import settings
from emr.db import get_db
from emr.errors import ValidationError
from emr.models import Entitlement
from emr.schemas import CreatedResponse, PatchOperation, StatusResponse, parse_filter_criteria
from emr.services.entity_registry import EntityConfig
from emr.services.patch_service import canonical_changes, patch_document_to_changes


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def _first_error(exc: PydanticValidationError) -> str:
    error = exc.errors()[0]
    location = '.'.join(str(part) for part in error.get('loc', ()))
    return f"{location}: {error.get('msg')}" if location else str(error.get('msg'))


def build_entity_router(config: EntityConfig) -> APIRouter:
    """Mount the REST surface of one entity at /api/<slug>."""
    router = APIRouter(prefix=f'/api/{config.slug}', tags=[config.name])
    service = config.service
    create_schema = config.schemas.create
    update_schema = config.schemas.update
    patch_schema = config.schemas.patch
    read_schema = config.schemas.read

    read_access = require_entitlement(config.name, Entitlement.READ)
    create_access = require_entitlement(config.name, Entitlement.CREATE)
    update_access = require_entitlement(config.name, Entitlement.UPDATE)
    delete_access = require_entitlement(config.name, Entitlement.DELETE)

    def _stamp_update(values: dict[str, Any], principal: Principal) -> dict[str, Any]:
        if config.audited:
            values['updated_by'] = principal.id
            values['updated_on'] = _now()
        return values

    @router.post('', response_model=CreatedResponse)
    def create_entity(
        payload: create_schema,
        db: Session = Depends(get_db),
        principal: Principal = Depends(create_access),
    ):
        values = payload.model_dump()
        values['tenant_id'] = principal.tenant_id
        if config.audited:
            values['created_by'] = principal.id
            values['created_on'] = _now()
        return CreatedResponse(id=service.create(db, values))

    @router.get('', response_model=list[read_schema])
    def list_entities(
        filters: str | None = Query(default=None, description='[{"PropertyName": "...", "Operator": "Equal", "Value": "..."}]'),
        search_term: str | None = Query(default=None, alias='searchTerm'),
        page_number: int = Query(default=1, alias='pageNumber'),
        page_size: int = Query(default=settings.default_page_size, alias='pageSize'),
        sort_field: str | None = Query(default=None, alias='sortField'),
        sort_order: str = Query(default='asc', alias='sortOrder'),
        db: Session = Depends(get_db),
        _: Principal = Depends(read_access),
    ):
        rows = service.get(
            db,
            filters=parse_filter_criteria(filters),
            search_term=search_term,
            page_number=page_number,
            page_size=page_size,
            sort_field=sort_field,
            sort_order=sort_order,
        )
        return [read_schema.model_validate(row) for row in rows]

    @router.get('/{entity_id}')
    def get_entity(
        entity_id: uuid.UUID,
        fields: str | None = None,
        db: Session = Depends(get_db),
        _: Principal = Depends(read_access),
    ):
        result = service.get_by_id(db, entity_id, fields)
        if result is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='No data found!')
        return result

    @router.delete('/{entity_id}', response_model=StatusResponse)
    def delete_entity(
        entity_id: uuid.UUID,
        db: Session = Depends(get_db),
        _: Principal = Depends(delete_access),
    ):
        return StatusResponse(status=service.delete(db, entity_id))

    @router.put('/{entity_id}', response_model=StatusResponse)
    def update_entity(
        entity_id: uuid.UUID,
        payload: update_schema,
        db: Session = Depends(get_db),
        principal: Principal = Depends(update_access),
    ):
        if payload.id != entity_id:
            raise ValidationError('Mismatched Id')
        values = payload.model_dump(exclude={'id'})
        values['tenant_id'] = principal.tenant_id
        return StatusResponse(status=service.update(db, entity_id, _stamp_update(values, principal)))

    @router.patch('/{entity_id}', response_model=StatusResponse)
    def patch_entity(
        entity_id: uuid.UUID,
        document: list[PatchOperation] | dict[str, Any] | None = Body(default=None),
        db: Session = Depends(get_db),
        principal: Principal = Depends(update_access),
    ):
        if document is None:
            raise ValidationError('Patch document is missing.')
        service.require(db, entity_id)
        changes = patch_document_to_changes(document) if isinstance(document, list) else document
        try:
            validated = patch_schema.model_validate(canonical_changes(service.fields, changes))
        except PydanticValidationError as exc:
            raise ValidationError(_first_error(exc)) from exc
        values = validated.model_dump(exclude_unset=True)
        return StatusResponse(status=service.patch(db, entity_id, _stamp_update(values, principal)))

    return router
