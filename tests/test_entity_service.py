from __future__ import annotations

import unittest
import uuid
from datetime import datetime, timezone

from sqlalchemy import func, select

from db_support import make_session_factory
from emr.errors import NotFoundError, ValidationError
from emr.models import ChiefComplaint, Patient, PriceList, PriceListVersion, Visit
from emr.schemas import FilterCriteria
from emr.services.entity_service import EntityService


class EntityServiceTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session_factory()()
        self.addCleanup(self.db.close)
        self.service = EntityService(ChiefComplaint)

    def _count(self) -> int:
        return self.db.execute(select(func.count()).select_from(ChiefComplaint)).scalar_one()

    def _create(self, name: str, **values) -> uuid.UUID:
        return self.service.create(self.db, {'name': name, **values})


class CreateAndGetByIdTests(EntityServiceTestCase):
    def test_create_then_get_by_id_returns_id(self) -> None:
        created_id = self._create('Fever')
        self.assertEqual(self.service.get_by_id(self.db, created_id), {'id': created_id})

    def test_create_generates_a_new_id(self) -> None:
        client_id = uuid.uuid4()
        created_id = self.service.create(self.db, {'id': client_id, 'name': 'Fever'})
        self.assertNotEqual(created_id, client_id)
        self.assertIsNone(self.service.get_by_id(self.db, client_id))

    def test_create_rejects_unknown_columns(self) -> None:
        with self.assertRaises(ValidationError):
            self.service.create(self.db, {'name': 'Fever', 'severity': 3})

    def test_get_by_id_projects_requested_fields(self) -> None:
        created_id = self._create('Fever', description='High temperature')
        self.assertEqual(
            self.service.get_by_id(self.db, created_id, 'Name,description'),
            {'id': created_id, 'name': 'Fever', 'description': 'High temperature'},
        )

    def test_get_by_id_of_unknown_row_is_none(self) -> None:
        self.assertIsNone(self.service.get_by_id(self.db, uuid.uuid4(), 'name'))

    def test_navigation_is_included_only_for_dotted_fields(self) -> None:
        service = EntityService(Visit)
        self.assertEqual(service._navigation_includes(['Patient.FirstName', 'notes', 'doctor']), ['patient'])

    def test_get_by_id_follows_navigation(self) -> None:
        patient_id = EntityService(Patient).create(self.db, {'first_name': 'Asha'})
        visits = EntityService(Visit)
        visit_id = visits.create(self.db, {'patient_id': patient_id, 'notes': 'Follow-up'})
        self.db.expire_all()
        self.assertEqual(
            visits.get_by_id(self.db, visit_id, 'notes,patient.first_name'),
            {'id': visit_id, 'notes': 'Follow-up', 'patient': {'first_name': 'Asha'}},
        )

    def test_collection_navigation_on_price_list(self) -> None:
        price_lists = EntityService(PriceList)
        price_list_id = price_lists.create(self.db, {'name': 'Standard'})
        versions = EntityService(PriceListVersion)
        versions.create(self.db, {'price_list_id': price_list_id, 'version_number': 1})
        versions.create(self.db, {'price_list_id': price_list_id, 'version_number': 2})
        self.db.expire_all()

        result = price_lists.get_by_id(self.db, price_list_id, 'name,PriceListVersions.version_number')
        self.assertEqual(result['name'], 'Standard')
        self.assertEqual(sorted(item['version_number'] for item in result['price_list_versions']), [1, 2])


class GetTests(EntityServiceTestCase):
    def test_page_size_and_number_must_be_positive(self) -> None:
        with self.assertRaises(ValidationError):
            self.service.get(self.db, page_size=0)
        with self.assertRaises(ValidationError):
            self.service.get(self.db, page_number=0)

    def test_sort_order_must_be_asc_or_desc(self) -> None:
        with self.assertRaises(ValidationError):
            self.service.get(self.db, sort_field='name', sort_order='sideways')
        with self.assertRaises(ValidationError):
            self.service.get(self.db, sort_order='up')
        self.assertEqual(self.service.get(self.db, sort_field='name', sort_order='DESC'), [])

    def test_unknown_sort_field_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            self.service.get(self.db, sort_field='severity')

    def test_three_rows_split_over_two_pages(self) -> None:
        for name in ('Fever', 'Cough', 'Headache'):
            self._create(name)
        self.assertEqual(len(self.service.get(self.db, page_number=1, page_size=2)), 2)
        self.assertEqual(len(self.service.get(self.db, page_number=2, page_size=2)), 1)
        self.assertEqual(self.service.get(self.db, page_number=3, page_size=2), [])

    def test_pages_are_slices_of_the_sorted_result(self) -> None:
        for name in ('Eczema', 'Asthma', 'Dizziness', 'Cough', 'Back pain', 'Fatigue', 'Cough'):
            self._create(name)
        everything = self.service.get(self.db, page_size=100, sort_field='name', sort_order='desc')
        second_page = self.service.get(self.db, page_number=2, page_size=3, sort_field='name', sort_order='desc')
        self.assertEqual([row.id for row in second_page], [row.id for row in everything[3:6]])

    def test_unsorted_pages_do_not_overlap(self) -> None:
        for index in range(5):
            self._create(f'Complaint {index}')
        first = {row.id for row in self.service.get(self.db, page_number=1, page_size=3)}
        second = {row.id for row in self.service.get(self.db, page_number=2, page_size=3)}
        self.assertEqual(len(first | second), 5)
        self.assertFalse(first & second)

    def test_filters_and_search_narrow_results(self) -> None:
        self._create('Headache')
        self._create('Head injury', is_active=False)
        self._create('Fever', description='since two days')
        filters = [FilterCriteria(PropertyName='Name', Operator='StartsWith', Value='Head')]
        self.assertEqual(len(self.service.get(self.db, filters=filters)), 2)
        filters.append(FilterCriteria(PropertyName='IsActive', Operator='Equal', Value='true'))
        self.assertEqual([row.name for row in self.service.get(self.db, filters=filters)], ['Headache'])
        self.assertEqual([row.name for row in self.service.get(self.db, search_term='TWO')], ['Fever'])


class UpdateTests(EntityServiceTestCase):
    def test_update_replaces_the_row_wholesale(self) -> None:
        author = uuid.uuid4()
        created_on = datetime(2024, 1, 1, tzinfo=timezone.utc)
        created_id = self._create('Fever', description='old', is_active=False, created_by=author, created_on=created_on)

        self.assertTrue(self.service.update(self.db, created_id, {'name': 'High fever'}))

        row = self.db.get(ChiefComplaint, created_id)
        self.assertEqual(row.name, 'High fever')
        self.assertIsNone(row.description)
        self.assertTrue(row.is_active)
        self.assertEqual(row.created_by, author)

    def test_update_of_unknown_row_is_not_found(self) -> None:
        with self.assertRaises(NotFoundError):
            self.service.update(self.db, uuid.uuid4(), {'name': 'x'})


class PatchTests(EntityServiceTestCase):
    def test_missing_patch_document_is_a_validation_error(self) -> None:
        created_id = self._create('Fever')
        with self.assertRaises(ValidationError):
            self.service.patch(self.db, created_id, None)

    def test_patch_of_unknown_row_is_not_found_and_changes_nothing(self) -> None:
        self._create('Fever')
        with self.assertRaises(NotFoundError):
            self.service.patch(self.db, uuid.uuid4(), {'name': 'Cough'})
        self.assertEqual([row.name for row in self.service.get(self.db)], ['Fever'])

    def test_patch_of_unknown_row_is_not_found_whatever_the_document(self) -> None:
        self._create('Fever')
        for changes in ({'name': None}, {'severity': 3}, {'id': uuid.uuid4()}):
            with self.subTest(changes=changes), self.assertRaises(NotFoundError):
                self.service.patch(self.db, uuid.uuid4(), changes)
        self.assertEqual(self._count(), 1)
        self.assertEqual([row.name for row in self.service.get(self.db)], ['Fever'])

    def test_patch_sets_only_given_fields(self) -> None:
        created_id = self._create('Fever', description='High temperature')
        self.assertTrue(self.service.patch(self.db, created_id, {'IsActive': False}))
        row = self.db.get(ChiefComplaint, created_id)
        self.assertFalse(row.is_active)
        self.assertEqual(row.name, 'Fever')
        self.assertEqual(row.description, 'High temperature')

    def test_patch_cannot_null_a_required_field(self) -> None:
        created_id = self._create('Fever')
        with self.assertRaises(ValidationError):
            self.service.patch(self.db, created_id, {'name': None})
        self.assertEqual(self.db.get(ChiefComplaint, created_id).name, 'Fever')

    def test_patch_cannot_change_id(self) -> None:
        created_id = self._create('Fever')
        with self.assertRaises(ValidationError):
            self.service.patch(self.db, created_id, {'id': uuid.uuid4()})


class DeleteTests(EntityServiceTestCase):
    def test_delete_removes_the_row(self) -> None:
        created_id = self._create('Fever')
        self.assertTrue(self.service.delete(self.db, created_id))
        self.assertIsNone(self.service.get_by_id(self.db, created_id))
        self.assertEqual(self._count(), 0)

    def test_delete_of_unknown_row_is_not_found_and_changes_nothing(self) -> None:
        self._create('Fever')
        with self.assertRaises(NotFoundError):
            self.service.delete(self.db, uuid.uuid4())
        self.assertEqual(self._count(), 1)


if __name__ == '__main__':
    unittest.main()
