from __future__ import annotations

import unittest

from emr.errors import ValidationError
from emr.models import ChiefComplaint
from emr.schemas import PatchOperation
from emr.services.filter_service import field_registry
from emr.services.patch_service import canonical_changes, patch_document_to_changes, property_from_path


def op(operation: str, path: str, value=None) -> PatchOperation:
    return PatchOperation(op=operation, path=path, value=value)


class PatchServiceTests(unittest.TestCase):
    def test_replace_add_and_remove_become_partial_update(self) -> None:
        changes = patch_document_to_changes(
            [
                op('replace', '/Name', 'Cough'),
                op('add', '/description', 'Dry'),
                op('remove', '/is_active'),
            ]
        )
        self.assertEqual(changes, {'Name': 'Cough', 'description': 'Dry', 'is_active': None})

    def test_later_operations_win(self) -> None:
        changes = patch_document_to_changes([op('replace', '/name', 'A'), op('replace', '/name', 'B')])
        self.assertEqual(changes, {'name': 'B'})

    def test_pointer_escapes_are_decoded(self) -> None:
        self.assertEqual(property_from_path('/a~1b~0c'), 'a/b~c')

    def test_nested_and_relative_paths_are_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            property_from_path('/patient/name')
        with self.assertRaises(ValidationError):
            property_from_path('name')
        with self.assertRaises(ValidationError):
            property_from_path('/')

    def test_unsupported_operations_are_rejected(self) -> None:
        for operation in ('move', 'copy', 'test'):
            with self.subTest(operation=operation), self.assertRaises(ValidationError):
                patch_document_to_changes([op(operation, '/name', 'x')])

    def test_canonical_changes_resolve_column_names(self) -> None:
        registry = field_registry(ChiefComplaint)
        self.assertEqual(
            canonical_changes(registry, {'Name': 'Cough', 'IsActive': False}),
            {'name': 'Cough', 'is_active': False},
        )
        with self.assertRaises(ValidationError):
            canonical_changes(registry, {'severity': 3})

    def test_patch_operation_accepts_from_alias(self) -> None:
        operation = PatchOperation.model_validate({'op': 'move', 'path': '/name', 'from': '/description'})
        self.assertEqual(operation.from_, '/description')


if __name__ == '__main__':
    unittest.main()
