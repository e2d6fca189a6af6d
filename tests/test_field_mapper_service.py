from __future__ import annotations

import unittest
import uuid
from decimal import Decimal

from emr.errors import ValidationError
from emr.models import ChiefComplaint, GoodsReceipt, GoodsReceiptItem, Patient, PatientCategory
from emr.services.field_mapper_service import map_to_fields, parse_fields


class FieldMapperServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.category = PatientCategory(id=uuid.uuid4(), name='Senior', discount_percent=Decimal('10.00'))
        self.patient = Patient(id=uuid.uuid4(), first_name='Asha', last_name='Rao', patient_category=self.category)

    def test_parse_fields_drops_blanks(self) -> None:
        self.assertEqual(parse_fields(' name, ,description ,'), ['name', 'description'])
        self.assertEqual(parse_fields(None), [])

    def test_missing_entity_maps_to_none(self) -> None:
        self.assertIsNone(map_to_fields(None, 'name'))

    def test_defaults_to_id_only(self) -> None:
        complaint = ChiefComplaint(id=uuid.uuid4(), name='Fever')
        self.assertEqual(map_to_fields(complaint, None), {'id': complaint.id})
        self.assertEqual(map_to_fields(complaint, ''), {'id': complaint.id})

    def test_requested_fields_always_include_id(self) -> None:
        result = map_to_fields(self.patient, 'FirstName,last_name')
        self.assertEqual(result, {'id': self.patient.id, 'first_name': 'Asha', 'last_name': 'Rao'})

    def test_explicit_id_is_not_duplicated(self) -> None:
        result = map_to_fields(self.patient, 'Id,first_name')
        self.assertEqual(list(result), ['id', 'first_name'])

    def test_dotted_path_projects_navigation(self) -> None:
        result = map_to_fields(self.patient, 'first_name,PatientCategory.Name,patient_category.discount_percent')
        self.assertEqual(
            result['patient_category'],
            {'name': 'Senior', 'discount_percent': Decimal('10.00')},
        )

    def test_missing_navigation_reference_maps_to_none(self) -> None:
        patient = Patient(id=uuid.uuid4(), first_name='Ravi')
        self.assertEqual(map_to_fields(patient, 'patient_category.name'), {'id': patient.id, 'patient_category': None})

    def test_plain_navigation_name_returns_its_columns(self) -> None:
        result = map_to_fields(self.patient, 'patient_category')
        self.assertEqual(result['patient_category']['name'], 'Senior')
        self.assertIn('id', result['patient_category'])

    def test_collection_navigation_projects_each_row(self) -> None:
        receipt = GoodsReceipt(
            id=uuid.uuid4(),
            receipt_number='GRN-1',
            goods_receipt_items=[
                GoodsReceiptItem(id=uuid.uuid4(), received_quantity=Decimal('4')),
                GoodsReceiptItem(id=uuid.uuid4(), received_quantity=Decimal('6')),
            ],
        )
        result = map_to_fields(receipt, 'goodsReceiptItems.received_quantity,goods_receipt_items.id')
        self.assertEqual([item['received_quantity'] for item in result['goods_receipt_items']], [Decimal('4'), Decimal('6')])
        self.assertEqual(
            [item['id'] for item in result['goods_receipt_items']],
            [item.id for item in receipt.goods_receipt_items],
        )

    def test_unknown_field_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            map_to_fields(self.patient, 'favourite_colour')

    def test_nested_path_on_scalar_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            map_to_fields(self.patient, 'first_name.length')

    def test_empty_path_segment_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            map_to_fields(self.patient, 'patient_category..name')


if __name__ == '__main__':
    unittest.main()
