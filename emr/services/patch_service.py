from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from emr.errors import ValidationError
from emr.schemas import PatchOperation
from emr.services.filter_service import FieldRegistry


def _unescape_pointer(segment: str) -> str:
    return segment.replace('~1', '/').replace('~0', '~')


def property_from_path(path: str) -> str:
    if not path.startswith('/'):
        raise ValidationError(f"Invalid patch path '{path}'")
    segments = path[1:].split('/')
    if len(segments) != 1 or not segments[0]:
        raise ValidationError(f"Patch path '{path}' must address a single top-level property")
    return _unescape_pointer(segments[0])


def patch_document_to_changes(operations: Sequence[PatchOperation]) -> dict[str, Any]:
    """Collapse JSON Patch operations into a partial update keyed by property name."""
    changes: dict[str, Any] = {}
    for operation in operations:
        name = property_from_path(operation.path)
        if operation.op in ('add', 'replace'):
            changes[name] = operation.value
        elif operation.op == 'remove':
            changes[name] = None
        else:
            raise ValidationError(f"Unsupported patch operation '{operation.op}'")
    return changes


def canonical_changes(registry: FieldRegistry, changes: Mapping[str, Any]) -> dict[str, Any]:
    return {registry.resolve(name).name: value for name, value in changes.items()}
