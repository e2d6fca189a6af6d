from __future__ import annotations

import unittest
import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import select

from db_support import make_session_factory
from emr.errors import ValidationError
from emr.models import ChiefComplaint, Patient, PatientCategory
from emr.schemas import FilterCriteria, parse_filter_criteria
from emr.services.filter_service import (
    apply_filter,
    apply_sort,
    build_predicate,
    field_registry,
    validate_sort_order,
)


def criterion(name: str, operator: str, value: str | None = None) -> FilterCriteria:
    return FilterCriteria(PropertyName=name, Operator=operator, Value=value)


class FieldRegistryTests(unittest.TestCase):
    def test_resolves_pascal_camel_and_snake_case(self) -> None:
        registry = field_registry(Patient)
        self.assertEqual(registry.resolve('PatientCategoryId').name, 'patient_category_id')
        self.assertEqual(registry.resolve('firstName').name, 'first_name')
        self.assertEqual(registry.resolve('date_of_birth').name, 'date_of_birth')

    def test_unknown_field_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            field_registry(Patient).resolve('shoe_size')

    def test_values_are_parsed_to_column_types(self) -> None:
        self.assertEqual(field_registry(Patient).resolve('date_of_birth').parse('1990-01-02'), date(1990, 1, 2))
        self.assertEqual(field_registry(PatientCategory).resolve('discount_percent').parse('5.5'), Decimal('5.5'))
        self.assertIs(field_registry(ChiefComplaint).resolve('is_active').parse('TRUE'), True)
        raw_id = '6f1c2b9e-0d4e-4c57-9a0b-3f6f5a1d2e11'
        self.assertEqual(field_registry(ChiefComplaint).resolve('id').parse(raw_id), uuid.UUID(raw_id))

    def test_unparsable_value_is_a_validation_error(self) -> None:
        with self.assertRaises(ValidationError):
            field_registry(Patient).resolve('date_of_birth').parse('yesterday')

    def test_text_fields_only_include_strings(self) -> None:
        names = {spec.name for spec in field_registry(ChiefComplaint).text_fields()}
        self.assertEqual(names, {'name', 'description'})

    def test_unknown_operator_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            build_predicate(field_registry(ChiefComplaint), criterion('Name', 'Like', 'x'))

    def test_text_operator_on_non_text_field_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            build_predicate(field_registry(ChiefComplaint), criterion('IsActive', 'Contains', 'tr'))

    def test_sort_order_is_case_insensitive(self) -> None:
        self.assertEqual(validate_sort_order('DESC'), 'desc')
        self.assertEqual(validate_sort_order(None), 'asc')
        with self.assertRaises(ValidationError):
            validate_sort_order('sideways')

class FilterCriteriaParsingTests(unittest.TestCase):
    def test_parses_wire_format(self) -> None:
        parsed = parse_filter_criteria('[{"PropertyName": "Name", "Operator": "Equal", "Value": 5}]')
        self.assertEqual(len(parsed), 1)
        self.assertEqual(parsed[0].property_name, 'Name')
        self.assertEqual(parsed[0].value, '5')

    def test_blank_filters_mean_no_filters(self) -> None:
        self.assertIsNone(parse_filter_criteria(None))
        self.assertIsNone(parse_filter_criteria('  '))

    def test_malformed_filters_are_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            parse_filter_criteria('{"PropertyName": "Name"')
        with self.assertRaises(ValidationError):
            parse_filter_criteria('[{"Operator": "Equal"}]')


class FilterQueryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session_factory()()
        self.addCleanup(self.db.close)
        rows = [
            ('Fever', 'High temperature', True),
            ('Headache', None, True),
            ('Chest pain', 'Pain radiating to arm', False),
            ('fever with chills', None, True),
            ('100% blocked nose', None, True),
        ]
        for name, description, active in rows:
            self.db.add(ChiefComplaint(id=uuid.uuid4(), name=name, description=description, is_active=active))
        self.db.flush()
        self.registry = field_registry(ChiefComplaint)

    def _names(self, filters=None, search_term=None, sort_field='name', sort_order='asc') -> list[str]:
        query = apply_filter(select(ChiefComplaint), self.registry, filters, search_term)
        query = apply_sort(query, self.registry, sort_field, sort_order)
        return [row.name for row in self.db.execute(query).scalars().all()]

    def test_contains_is_case_insensitive(self) -> None:
        self.assertEqual(self._names([criterion('Name', 'Contains', 'FEVER')]), ['Fever', 'fever with chills'])

    def test_equal_on_boolean(self) -> None:
        self.assertEqual(self._names([criterion('IsActive', 'Equal', 'false')]), ['Chest pain'])

    def test_in_and_starts_with(self) -> None:
        self.assertEqual(self._names([criterion('name', 'In', 'Fever, Headache')]), ['Fever', 'Headache'])
        self.assertEqual(self._names([criterion('name', 'StartsWith', 'Head')]), ['Headache'])

    def test_null_checks(self) -> None:
        self.assertEqual(
            self._names([criterion('description', 'IsNotNull')]),
            ['Chest pain', 'Fever'],
        )
        self.assertEqual(len(self._names([criterion('description', 'Equal', None)])), 3)

    def test_empty_value_compares_against_null(self) -> None:
        self.assertEqual(len(self._names([criterion('description', 'Equal', '')])), 3)
        self.assertEqual(self._names([criterion('Description', 'NotEqual', '')]), ['Chest pain', 'Fever'])

    def test_criteria_are_combined(self) -> None:
        filters = [criterion('name', 'Contains', 'e'), criterion('is_active', 'Equal', 'true')]
        self.assertNotIn('Chest pain', self._names(filters))

    def test_search_term_matches_any_text_column(self) -> None:
        self.assertEqual(self._names(search_term='pain'), ['Chest pain'])
        self.assertEqual(self._names(search_term='temperature'), ['Fever'])

    def test_search_term_wildcards_are_literal(self) -> None:
        self.assertEqual(self._names(search_term='%'), ['100% blocked nose'])

    def test_sort_descending(self) -> None:
        names = self._names(sort_field='Name', sort_order='desc')
        self.assertEqual(names[0], 'fever with chills')
        self.assertEqual(names[-1], '100% blocked nose')


if __name__ == '__main__':
    unittest.main()
