from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Mapping
from typing import Any, Generic, TypeVar

from sqlalchemy import inspect, select
from sqlalchemy.orm import Session, selectinload

from emr.errors import NotFoundError, ValidationError
from emr.models import Base
from emr.services.field_mapper_service import map_to_fields, parse_fields
from emr.services.filter_service import (
    FilterCriterion,
    apply_filter,
    apply_sort,
    field_registry,
    normalize_name,
    paginate,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar('ModelT', bound=Base)

# Kept as-is when an entity is replaced wholesale.
PRESERVED_ON_UPDATE = frozenset({'id', 'created_by', 'created_on'})


class EntityService(Generic[ModelT]):
    """CRUD operations for one entity type.

    The service holds no per-request state; every operation receives the
    request-scoped session and only flushes, leaving the commit to the caller.
    """

    def __init__(self, model: type[ModelT]):
        self.model = model
        self.name = model.__name__
        self.fields = field_registry(model)
        self.navigation_properties = tuple(rel.key for rel in inspect(model).relationships)

    def _find(self, db: Session, entity_id: uuid.UUID) -> ModelT | None:
        return db.execute(select(self.model).where(self.model.id == entity_id)).scalar_one_or_none()

    def require(self, db: Session, entity_id: uuid.UUID) -> ModelT:
        entity = self._find(db, entity_id)
        if entity is None:
            logger.info('%s %s not found', self.name, entity_id)
            raise NotFoundError('No data found!')
        return entity

    def _column_values(self, values: Mapping[str, Any]) -> dict[str, Any]:
        return {self.fields.resolve(name).name: value for name, value in values.items()}

    def _navigation_includes(self, requested: Iterable[str]) -> list[str]:
        prefixes = {normalize_name(path.split('.', 1)[0]) for path in requested if '.' in path}
        return [name for name in self.navigation_properties if normalize_name(name) in prefixes]

    def get_by_id(self, db: Session, entity_id: uuid.UUID, fields: str | None = None) -> dict[str, Any] | None:
        query = select(self.model)
        for name in self._navigation_includes(parse_fields(fields)):
            query = query.options(selectinload(getattr(self.model, name)))
        query = query.where(self.model.id == entity_id)
        entity = db.execute(query).scalars().first()
        return map_to_fields(entity, fields)

    def get(
        self,
        db: Session,
        filters: Iterable[FilterCriterion] | None = None,
        search_term: str | None = '',
        page_number: int = 1,
        page_size: int = 10,
        sort_field: str | None = None,
        sort_order: str | None = 'asc',
    ) -> list[ModelT]:
        if page_size < 1:
            raise ValidationError('Page size invalid!')
        if page_number < 1:
            raise ValidationError('Page number invalid!')

        query = apply_filter(select(self.model), self.fields, filters, search_term)
        query = apply_sort(query, self.fields, sort_field, sort_order)
        query = paginate(query.order_by(self.model.id.asc()), page_number, page_size)
        return list(db.execute(query).scalars().all())

    def create(self, db: Session, values: Mapping[str, Any]) -> uuid.UUID:
        columns = self._column_values(values)
        columns['id'] = uuid.uuid4()
        entity = self.model(**columns)
        db.add(entity)
        db.flush()
        logger.info('Created %s %s', self.name, entity.id)
        return entity.id

    def update(self, db: Session, entity_id: uuid.UUID, values: Mapping[str, Any]) -> bool:
        entity = self.require(db, entity_id)
        columns = self._column_values(values)
        for spec in self.fields:
            if spec.name in PRESERVED_ON_UPDATE:
                continue
            setattr(entity, spec.name, columns.get(spec.name, spec.default))
        db.flush()
        logger.info('Updated %s %s', self.name, entity_id)
        return True

    def patch(self, db: Session, entity_id: uuid.UUID, changes: Mapping[str, Any] | None) -> bool:
        if changes is None:
            raise ValidationError('Patch document is missing!')
        entity = self.require(db, entity_id)
        columns = self._column_values(changes)
        if 'id' in columns:
            raise ValidationError("Field 'id' cannot be patched")
        for name, value in columns.items():
            if value is None and not self.fields.resolve(name).nullable:
                raise ValidationError(f"Field '{name}' cannot be null")
        for name, value in columns.items():
            setattr(entity, name, value)
        db.flush()
        logger.info('Patched %s %s (%s)', self.name, entity_id, ', '.join(sorted(columns)) or 'no changes')
        return True

    def delete(self, db: Session, entity_id: uuid.UUID) -> bool:
        entity = self.require(db, entity_id)
        db.delete(entity)
        db.flush()
        logger.info('Deleted %s %s', self.name, entity_id)
        return True
