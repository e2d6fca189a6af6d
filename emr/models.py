from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class UserRole(str, Enum):
    ADMIN = 'ADMIN'
    USER = 'USER'


class Entitlement(str, Enum):
    READ = 'read'
    CREATE = 'create'
    UPDATE = 'update'
    DELETE = 'delete'


class EntityMixin:
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, index=True)


class AuditMixin:
    created_by: Mapped[uuid.UUID | None] = mapped_column(Uuid)
    created_on: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    updated_by: Mapped[uuid.UUID | None] = mapped_column(Uuid)
    updated_on: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))


# Reference data


class Location(EntityMixin, Base):
    __tablename__ = 'locations'

    name: Mapped[str] = mapped_column(Text, nullable=False)
    code: Mapped[str | None] = mapped_column(String(32))
    address: Mapped[str | None] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class Uom(EntityMixin, Base):
    __tablename__ = 'uoms'

    code: Mapped[str] = mapped_column(String(16), nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)


class Currency(EntityMixin, Base):
    __tablename__ = 'currencies'

    code: Mapped[str] = mapped_column(String(3), nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    symbol: Mapped[str | None] = mapped_column(String(8))


class PaymentMode(EntityMixin, Base):
    __tablename__ = 'payment_modes'

    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)


class VisitMode(EntityMixin, Base):
    __tablename__ = 'visit_modes'

    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)


class Language(EntityMixin, Base):
    __tablename__ = 'languages'

    code: Mapped[str] = mapped_column(String(8), nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)


class Qualification(EntityMixin, Base):
    __tablename__ = 'qualifications'

    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)


class Specialisation(EntityMixin, Base):
    __tablename__ = 'specialisations'

    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)


class PatientCategory(EntityMixin, AuditMixin, Base):
    __tablename__ = 'patient_categories'

    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    discount_percent: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))


class ChiefComplaint(EntityMixin, AuditMixin, Base):
    __tablename__ = 'chief_complaints'

    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class Comorbidity(EntityMixin, Base):
    __tablename__ = 'comorbidities'

    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)


class ProductCategory(EntityMixin, AuditMixin, Base):
    __tablename__ = 'product_categories'

    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)


class SubReason(EntityMixin, Base):
    __tablename__ = 'sub_reasons'

    reason: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)


class GstSettings(EntityMixin, AuditMixin, Base):
    __tablename__ = 'gst_settings'

    name: Mapped[str] = mapped_column(Text, nullable=False)
    cgst: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))
    sgst: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))
    igst: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))


class Generic(EntityMixin, Base):
    __tablename__ = 'generics'

    item_name: Mapped[str | None] = mapped_column(Text)


# People


class Patient(EntityMixin, AuditMixin, Base):
    __tablename__ = 'patients'

    mrn: Mapped[str | None] = mapped_column(String(32))
    first_name: Mapped[str] = mapped_column(Text, nullable=False)
    last_name: Mapped[str | None] = mapped_column(Text)
    date_of_birth: Mapped[date | None] = mapped_column(Date)
    gender: Mapped[str | None] = mapped_column(String(16))
    phone: Mapped[str | None] = mapped_column(String(32))
    email: Mapped[str | None] = mapped_column(Text)
    patient_category_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('patient_categories.id'))

    patient_category: Mapped[PatientCategory | None] = relationship()


class Doctor(EntityMixin, AuditMixin, Base):
    __tablename__ = 'doctors'

    first_name: Mapped[str] = mapped_column(Text, nullable=False)
    last_name: Mapped[str | None] = mapped_column(Text)
    registration_number: Mapped[str | None] = mapped_column(String(64))
    phone: Mapped[str | None] = mapped_column(String(32))
    email: Mapped[str | None] = mapped_column(Text)
    specialisation_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('specialisations.id'))
    qualification_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('qualifications.id'))

    specialisation: Mapped[Specialisation | None] = relationship()
    qualification: Mapped[Qualification | None] = relationship()


# Products


class Product(EntityMixin, AuditMixin, Base):
    __tablename__ = 'products'

    name: Mapped[str] = mapped_column(Text, nullable=False)
    code: Mapped[str | None] = mapped_column(String(64))
    description: Mapped[str | None] = mapped_column(Text)
    hsn_code: Mapped[str | None] = mapped_column(String(16))
    is_service: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    product_category_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('product_categories.id'))
    uom_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('uoms.id'))
    gst_settings_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('gst_settings.id'))
    product_classification_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('product_classifications.id'))
    product_manufacture_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('product_manufactures.id'))

    product_category: Mapped[ProductCategory | None] = relationship()
    uom: Mapped[Uom | None] = relationship()
    gst_settings: Mapped[GstSettings | None] = relationship()
    product_classification: Mapped[ProductClassification | None] = relationship(back_populates='products')
    product_manufacture: Mapped[ProductManufacture | None] = relationship(back_populates='products')
    product_batches: Mapped[list[ProductBatch]] = relationship(back_populates='product')
    product_uoms: Mapped[list[ProductUom]] = relationship(back_populates='product')


class ProductBatch(EntityMixin, AuditMixin, Base):
    __tablename__ = 'product_batches'

    product_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('products.id'))
    batch_number: Mapped[str] = mapped_column(String(64), nullable=False)
    expiry_date: Mapped[date | None] = mapped_column(Date)
    mrp: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    cost_price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))

    product: Mapped[Product | None] = relationship(back_populates='product_batches')


class ProductUom(EntityMixin, Base):
    __tablename__ = 'product_uoms'

    product_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('products.id'))
    uom_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('uoms.id'))
    conversion_factor: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False, default=Decimal('1'))
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    product: Mapped[Product | None] = relationship(back_populates='product_uoms')
    uom: Mapped[Uom | None] = relationship()


# Clinical


class Appointment(EntityMixin, AuditMixin, Base):
    __tablename__ = 'appointments'

    patient_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('patients.id'))
    doctor_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('doctors.id'))
    location_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('locations.id'))
    scheduled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    status: Mapped[str | None] = mapped_column(String(32))
    notes: Mapped[str | None] = mapped_column(Text)

    patient: Mapped[Patient | None] = relationship()
    doctor: Mapped[Doctor | None] = relationship()
    location: Mapped[Location | None] = relationship()
    appointment_services: Mapped[list[AppointmentService]] = relationship(back_populates='appointment')


class AppointmentService(EntityMixin, Base):
    __tablename__ = 'appointment_services'

    appointment_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('appointments.id'))
    service_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('products.id'))
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))

    appointment: Mapped[Appointment | None] = relationship(back_populates='appointment_services')
    service: Mapped[Product | None] = relationship()


class Visit(EntityMixin, AuditMixin, Base):
    __tablename__ = 'visits'

    patient_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('patients.id'))
    location_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('locations.id'))
    visit_mode_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('visit_modes.id'))
    doctor_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('doctors.id'))
    appointment_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('appointments.id'))
    visit_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    status: Mapped[str | None] = mapped_column(String(32))
    notes: Mapped[str | None] = mapped_column(Text)

    patient: Mapped[Patient | None] = relationship()
    location: Mapped[Location | None] = relationship()
    visit_mode: Mapped[VisitMode | None] = relationship()
    doctor: Mapped[Doctor | None] = relationship()
    appointment: Mapped[Appointment | None] = relationship()
    visit_chief_complaints: Mapped[list[VisitChiefComplaint]] = relationship(back_populates='visit')


class VisitChiefComplaint(EntityMixin, Base):
    __tablename__ = 'visit_chief_complaints'

    visit_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('visits.id'))
    chief_complaint_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('chief_complaints.id'))
    duration: Mapped[str | None] = mapped_column(String(64))
    notes: Mapped[str | None] = mapped_column(Text)

    visit: Mapped[Visit | None] = relationship(back_populates='visit_chief_complaints')
    chief_complaint: Mapped[ChiefComplaint | None] = relationship()


class PatientComorbidity(EntityMixin, Base):
    __tablename__ = 'patient_comorbidities'

    patient_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('patients.id'))
    comorbidity_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('comorbidities.id'))
    diagnosed_on: Mapped[date | None] = mapped_column(Date)
    notes: Mapped[str | None] = mapped_column(Text)

    patient: Mapped[Patient | None] = relationship()
    comorbidity: Mapped[Comorbidity | None] = relationship()


# Billing


class Invoice(EntityMixin, AuditMixin, Base):
    __tablename__ = 'invoices'

    invoice_number: Mapped[str | None] = mapped_column(String(64))
    invoice_date: Mapped[date | None] = mapped_column(Date)
    patient_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('patients.id'))
    visit_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('visits.id'))
    doctor_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('doctors.id'))
    location_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('locations.id'))
    total_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    discount_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    status: Mapped[str | None] = mapped_column(String(32))

    patient: Mapped[Patient | None] = relationship()
    visit: Mapped[Visit | None] = relationship()
    doctor: Mapped[Doctor | None] = relationship()
    location: Mapped[Location | None] = relationship()
    invoice_lines: Mapped[list[InvoiceLine]] = relationship(back_populates='invoice')
    invoice_files: Mapped[list[InvoiceFile]] = relationship(back_populates='invoice')


class InvoiceLine(EntityMixin, Base):
    __tablename__ = 'invoice_lines'

    invoice_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('invoices.id'))
    product_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('products.id'))
    product_batch_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('product_batches.id'))
    product_uom_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('product_uoms.id'))
    gst_settings_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('gst_settings.id'))
    quantity: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False, default=Decimal('1'))
    unit_price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))

    invoice: Mapped[Invoice | None] = relationship(back_populates='invoice_lines')
    product: Mapped[Product | None] = relationship()
    product_batch: Mapped[ProductBatch | None] = relationship()
    product_uom: Mapped[ProductUom | None] = relationship()
    gst_settings: Mapped[GstSettings | None] = relationship()


class AccountSettlement(EntityMixin, AuditMixin, Base):
    __tablename__ = 'account_settlements'

    appointment_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('appointments.id'))
    invoice_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('invoices.id'))
    currency_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('currencies.id'))
    settlement_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    reference_number: Mapped[str | None] = mapped_column(String(64))
    notes: Mapped[str | None] = mapped_column(Text)

    appointment: Mapped[Appointment | None] = relationship()
    invoice: Mapped[Invoice | None] = relationship()
    currency: Mapped[Currency | None] = relationship()


# Inventory


class Requisition(EntityMixin, AuditMixin, Base):
    __tablename__ = 'requisitions'

    requisition_number: Mapped[str | None] = mapped_column(String(64))
    requisition_date: Mapped[date | None] = mapped_column(Date)
    location_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('locations.id'))
    status: Mapped[str | None] = mapped_column(String(32))
    notes: Mapped[str | None] = mapped_column(Text)

    location: Mapped[Location | None] = relationship()
    requisition_lines: Mapped[list[RequisitionLine]] = relationship(back_populates='requisition')


class RequisitionLine(EntityMixin, Base):
    __tablename__ = 'requisition_lines'

    requisition_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('requisitions.id'))
    product_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('products.id'))
    product_uom_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('product_uoms.id'))
    quantity: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False, default=Decimal('0'))

    requisition: Mapped[Requisition | None] = relationship(back_populates='requisition_lines')
    product: Mapped[Product | None] = relationship()
    product_uom: Mapped[ProductUom | None] = relationship()


class PurchaseOrder(EntityMixin, AuditMixin, Base):
    __tablename__ = 'purchase_orders'

    po_number: Mapped[str | None] = mapped_column(String(64))
    order_date: Mapped[date | None] = mapped_column(Date)
    expected_date: Mapped[date | None] = mapped_column(Date)
    location_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('locations.id'))
    requisition_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('requisitions.id'))
    status: Mapped[str | None] = mapped_column(String(32))
    total_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))

    location: Mapped[Location | None] = relationship()
    requisition: Mapped[Requisition | None] = relationship()
    purchase_order_lines: Mapped[list[PurchaseOrderLine]] = relationship(back_populates='purchase_order')


class PurchaseOrderLine(EntityMixin, Base):
    __tablename__ = 'purchase_order_lines'

    purchase_order_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('purchase_orders.id'))
    product_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('products.id'))
    product_uom_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('product_uoms.id'))
    requisition_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('requisitions.id'))
    requisition_line_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('requisition_lines.id'))
    quantity: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False, default=Decimal('0'))
    unit_price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))

    purchase_order: Mapped[PurchaseOrder | None] = relationship(back_populates='purchase_order_lines')
    product: Mapped[Product | None] = relationship()
    product_uom: Mapped[ProductUom | None] = relationship()
    requisition: Mapped[Requisition | None] = relationship()
    requisition_line: Mapped[RequisitionLine | None] = relationship()


class GoodsReceipt(EntityMixin, AuditMixin, Base):
    __tablename__ = 'goods_receipts'

    receipt_number: Mapped[str | None] = mapped_column(String(64))
    receipt_date: Mapped[date | None] = mapped_column(Date)
    supplier_invoice_number: Mapped[str | None] = mapped_column(String(64))
    location_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('locations.id'))
    status: Mapped[str | None] = mapped_column(String(32))
    total_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))

    location: Mapped[Location | None] = relationship()
    goods_receipt_items: Mapped[list[GoodsReceiptItem]] = relationship(back_populates='goods_receipt')
    goods_returns: Mapped[list[GoodsReturn]] = relationship(back_populates='goods_receipt')
    goods_receipt_files: Mapped[list[GoodsReceiptFile]] = relationship(back_populates='goods_receipt')


class GoodsReceiptItem(EntityMixin, Base):
    __tablename__ = 'goods_receipt_items'

    goods_receipt_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('goods_receipts.id'))
    product_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('products.id'))
    product_batch_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('product_batches.id'))
    purchase_order_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('purchase_orders.id'))
    purchase_order_line_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('purchase_order_lines.id'))
    received_quantity: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False, default=Decimal('0'))
    unit_cost: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))

    goods_receipt: Mapped[GoodsReceipt | None] = relationship(back_populates='goods_receipt_items')
    product: Mapped[Product | None] = relationship()
    product_batch: Mapped[ProductBatch | None] = relationship()
    purchase_order: Mapped[PurchaseOrder | None] = relationship()
    purchase_order_line: Mapped[PurchaseOrderLine | None] = relationship()


class GoodsReceiptFile(EntityMixin, AuditMixin, Base):
    __tablename__ = 'goods_receipt_files'

    goods_receipt_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('goods_receipts.id'))
    file_name: Mapped[str] = mapped_column(Text, nullable=False)
    file_url: Mapped[str | None] = mapped_column(Text)
    content_type: Mapped[str | None] = mapped_column(String(128))

    goods_receipt: Mapped[GoodsReceipt | None] = relationship(back_populates='goods_receipt_files')


class GoodsReturn(EntityMixin, AuditMixin, Base):
    __tablename__ = 'goods_returns'

    return_number: Mapped[str | None] = mapped_column(String(64))
    return_date: Mapped[date | None] = mapped_column(Date)
    goods_receipt_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('goods_receipts.id'))
    location_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('locations.id'))
    sub_reason_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('sub_reasons.id'))
    status: Mapped[str | None] = mapped_column(String(32))
    notes: Mapped[str | None] = mapped_column(Text)

    goods_receipt: Mapped[GoodsReceipt | None] = relationship(back_populates='goods_returns')
    location: Mapped[Location | None] = relationship()
    sub_reason: Mapped[SubReason | None] = relationship()
    goods_return_items: Mapped[list[GoodsReturnItem]] = relationship(back_populates='goods_return')
    goods_return_files: Mapped[list[GoodsReturnFile]] = relationship(back_populates='goods_return')


class GoodsReturnItem(EntityMixin, Base):
    __tablename__ = 'goods_return_items'

    goods_return_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('goods_returns.id'))
    product_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('products.id'))
    product_batch_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('product_batches.id'))
    goods_receipt_item_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('goods_receipt_items.id'))
    product_uom_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('product_uoms.id'))
    sub_reason_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('sub_reasons.id'))
    quantity: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False, default=Decimal('0'))
    unit_cost: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))

    goods_return: Mapped[GoodsReturn | None] = relationship(back_populates='goods_return_items')
    product: Mapped[Product | None] = relationship()
    product_batch: Mapped[ProductBatch | None] = relationship()
    goods_receipt_item: Mapped[GoodsReceiptItem | None] = relationship()
    product_uom: Mapped[ProductUom | None] = relationship()
    sub_reason: Mapped[SubReason | None] = relationship()


class GoodsReturnFile(EntityMixin, AuditMixin, Base):
    __tablename__ = 'goods_return_files'

    goods_return_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('goods_returns.id'))
    file_name: Mapped[str] = mapped_column(Text, nullable=False)
    file_url: Mapped[str | None] = mapped_column(Text)
    content_type: Mapped[str | None] = mapped_column(String(128))

    goods_return: Mapped[GoodsReturn | None] = relationship(back_populates='goods_return_files')


class StockAdjustment(EntityMixin, AuditMixin, Base):
    __tablename__ = 'stock_adjustments'

    adjustment_number: Mapped[str | None] = mapped_column(String(64))
    adjustment_date: Mapped[date | None] = mapped_column(Date)
    location_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('locations.id'))
    reason: Mapped[str | None] = mapped_column(Text)
    status: Mapped[str | None] = mapped_column(String(32))

    location: Mapped[Location | None] = relationship()
    stock_adjustment_items: Mapped[list[StockAdjustmentItem]] = relationship(back_populates='stock_adjustment')
    stock_adjustment_files: Mapped[list[StockAdjustmentFile]] = relationship(back_populates='stock_adjustment')


class StockAdjustmentItem(EntityMixin, Base):
    __tablename__ = 'stock_adjustment_items'

    stock_adjustment_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('stock_adjustments.id'))
    product_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('products.id'))
    product_batch_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('product_batches.id'))
    product_uom_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('product_uoms.id'))
    quantity_before: Mapped[Decimal | None] = mapped_column(Numeric(12, 3))
    quantity_after: Mapped[Decimal | None] = mapped_column(Numeric(12, 3))
    adjusted_quantity: Mapped[Decimal | None] = mapped_column(Numeric(12, 3))

    stock_adjustment: Mapped[StockAdjustment | None] = relationship(back_populates='stock_adjustment_items')
    product: Mapped[Product | None] = relationship()
    product_batch: Mapped[ProductBatch | None] = relationship()
    product_uom: Mapped[ProductUom | None] = relationship()


class StockAdjustmentFile(EntityMixin, AuditMixin, Base):
    __tablename__ = 'stock_adjustment_files'

    stock_adjustment_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('stock_adjustments.id'))
    file_name: Mapped[str] = mapped_column(Text, nullable=False)
    file_url: Mapped[str | None] = mapped_column(Text)
    content_type: Mapped[str | None] = mapped_column(String(128))

    stock_adjustment: Mapped[StockAdjustment | None] = relationship(back_populates='stock_adjustment_files')


# Clinical parameters and prescribing


class ClinicalParameter(EntityMixin, AuditMixin, Base):
    __tablename__ = 'clinical_parameters'

    name: Mapped[str] = mapped_column(Text, nullable=False)
    code: Mapped[str | None] = mapped_column(String(32))
    data_type: Mapped[str | None] = mapped_column(String(32))
    uom_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('uoms.id'))
    normal_low: Mapped[Decimal | None] = mapped_column(Numeric(12, 3))
    normal_high: Mapped[Decimal | None] = mapped_column(Numeric(12, 3))
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    uom: Mapped[Uom | None] = relationship()


class ClinicalParameterValue(EntityMixin, Base):
    __tablename__ = 'clinical_parameter_values'

    clinical_parameter_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('clinical_parameters.id'))
    value: Mapped[str] = mapped_column(Text, nullable=False)
    display_order: Mapped[int | None] = mapped_column(Integer)


class Formulation(EntityMixin, Base):
    __tablename__ = 'formulations'

    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)


class RouteInfo(EntityMixin, Base):
    __tablename__ = 'route_infos'

    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)


class MedicationDosage(EntityMixin, AuditMixin, Base):
    __tablename__ = 'medication_dosages'

    medication_id: Mapped[uuid.UUID | None] = mapped_column(Uuid)
    uom_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('uoms.id'))
    dosage: Mapped[Decimal | None] = mapped_column(Numeric(12, 3))
    frequency: Mapped[str | None] = mapped_column(String(32))
    duration_days: Mapped[int | None] = mapped_column(Integer)
    instructions: Mapped[str | None] = mapped_column(Text)

    uom: Mapped[Uom | None] = relationship()


class DrugListItems(EntityMixin, Base):
    __tablename__ = 'drug_list_items'

    medication_id: Mapped[uuid.UUID | None] = mapped_column(Uuid)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    quantity: Mapped[Decimal | None] = mapped_column(Numeric(12, 3))
    instructions: Mapped[str | None] = mapped_column(Text)


class Procedure(EntityMixin, AuditMixin, Base):
    __tablename__ = 'procedures'

    name: Mapped[str] = mapped_column(Text, nullable=False)
    code: Mapped[str | None] = mapped_column(String(32))
    description: Mapped[str | None] = mapped_column(Text)
    product_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('products.id'))
    price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))

    product: Mapped[Product | None] = relationship()


class DoctorInvestigation(EntityMixin, AuditMixin, Base):
    __tablename__ = 'doctor_investigations'

    doctor_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('doctors.id'))
    investigation_id: Mapped[uuid.UUID | None] = mapped_column(Uuid)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)

    doctor: Mapped[Doctor | None] = relationship()


# Patient history


class PatientAllergy(EntityMixin, AuditMixin, Base):
    __tablename__ = 'patient_allergies'

    patient_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('patients.id'))
    allergen: Mapped[str] = mapped_column(Text, nullable=False)
    reaction: Mapped[str | None] = mapped_column(Text)
    severity: Mapped[str | None] = mapped_column(String(32))
    noted_on: Mapped[date | None] = mapped_column(Date)

    patient: Mapped[Patient | None] = relationship()


class PatientMedicalHistoryNote(EntityMixin, AuditMixin, Base):
    __tablename__ = 'patient_medical_history_notes'

    patient_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('patients.id'))
    note: Mapped[str] = mapped_column(Text, nullable=False)
    noted_on: Mapped[date | None] = mapped_column(Date)

    patient: Mapped[Patient | None] = relationship()


class PatientNotes(EntityMixin, AuditMixin, Base):
    __tablename__ = 'patient_notes'

    patient_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('patients.id'))
    note: Mapped[str] = mapped_column(Text, nullable=False)
    is_private: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    patient: Mapped[Patient | None] = relationship()


class PatientPregnancy(EntityMixin, AuditMixin, Base):
    __tablename__ = 'patient_pregnancies'

    patient_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('patients.id'))
    last_menstrual_period: Mapped[date | None] = mapped_column(Date)
    expected_delivery_date: Mapped[date | None] = mapped_column(Date)
    gravida: Mapped[int | None] = mapped_column(Integer)
    para: Mapped[int | None] = mapped_column(Integer)
    status: Mapped[str | None] = mapped_column(String(32))
    notes: Mapped[str | None] = mapped_column(Text)

    patient: Mapped[Patient | None] = relationship()


class PregnancyHistory(EntityMixin, AuditMixin, Base):
    __tablename__ = 'pregnancy_histories'

    patient_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('patients.id'))
    pregnancy_year: Mapped[int | None] = mapped_column(Integer)
    outcome: Mapped[str | None] = mapped_column(String(64))
    delivery_mode: Mapped[str | None] = mapped_column(String(64))
    notes: Mapped[str | None] = mapped_column(Text)

    patient: Mapped[Patient | None] = relationship()


class PatientHospitalisationHistory(EntityMixin, AuditMixin, Base):
    __tablename__ = 'patient_hospitalisation_histories'

    patient_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('patients.id'))
    hospital_name: Mapped[str | None] = mapped_column(Text)
    admitted_on: Mapped[date | None] = mapped_column(Date)
    discharged_on: Mapped[date | None] = mapped_column(Date)
    reason: Mapped[str | None] = mapped_column(Text)

    patient: Mapped[Patient | None] = relationship()


class PatientLifeStyle(EntityMixin, AuditMixin, Base):
    __tablename__ = 'patient_life_styles'

    patient_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('patients.id'))
    smoking_status: Mapped[str | None] = mapped_column(String(32))
    alcohol_use: Mapped[str | None] = mapped_column(String(32))
    exercise_frequency: Mapped[str | None] = mapped_column(String(32))
    diet: Mapped[str | None] = mapped_column(Text)
    notes: Mapped[str | None] = mapped_column(Text)

    patient: Mapped[Patient | None] = relationship()


class PatientPayor(EntityMixin, AuditMixin, Base):
    __tablename__ = 'patient_payors'

    patient_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('patients.id'))
    payor_name: Mapped[str] = mapped_column(Text, nullable=False)
    policy_number: Mapped[str | None] = mapped_column(String(64))
    coverage_percent: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))
    valid_from: Mapped[date | None] = mapped_column(Date)
    valid_to: Mapped[date | None] = mapped_column(Date)

    patient: Mapped[Patient | None] = relationship()


class PatientEnrollmentLink(EntityMixin, AuditMixin, Base):
    __tablename__ = 'patient_enrollment_links'

    patient_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('patients.id'))
    location_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('locations.id'))
    link_token: Mapped[str] = mapped_column(String(128), nullable=False)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    is_used: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    patient: Mapped[Patient | None] = relationship()
    location: Mapped[Location | None] = relationship()


class PatientPharmacyQueue(EntityMixin, AuditMixin, Base):
    __tablename__ = 'patient_pharmacy_queues'

    patient_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('patients.id'))
    visit_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('visits.id'))
    dispense_id: Mapped[uuid.UUID | None] = mapped_column(Uuid)
    queue_number: Mapped[int | None] = mapped_column(Integer)
    status: Mapped[str | None] = mapped_column(String(32))
    queued_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    patient: Mapped[Patient | None] = relationship()
    visit: Mapped[Visit | None] = relationship()


class DispenseActivityHistory(EntityMixin, Base):
    __tablename__ = 'dispense_activity_histories'

    dispense_id: Mapped[uuid.UUID | None] = mapped_column(Uuid)
    activity: Mapped[str] = mapped_column(String(64), nullable=False)
    activity_on: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    performed_by: Mapped[uuid.UUID | None] = mapped_column(Uuid)
    notes: Mapped[str | None] = mapped_column(Text)


# Visit details


class DayVisit(EntityMixin, AuditMixin, Base):
    __tablename__ = 'day_visits'

    patient_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('patients.id'))
    doctor_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('doctors.id'))
    visit_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('visits.id'))
    appointment_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('appointments.id'))
    invoice_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('invoices.id'))
    location_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('locations.id'))
    visit_date: Mapped[date | None] = mapped_column(Date)
    token_number: Mapped[int | None] = mapped_column(Integer)
    status: Mapped[str | None] = mapped_column(String(32))

    patient: Mapped[Patient | None] = relationship()
    doctor: Mapped[Doctor | None] = relationship()
    visit: Mapped[Visit | None] = relationship()
    appointment: Mapped[Appointment | None] = relationship()
    invoice: Mapped[Invoice | None] = relationship()
    location: Mapped[Location | None] = relationship()


class VisitDiagnosis(EntityMixin, AuditMixin, Base):
    __tablename__ = 'visit_diagnoses'

    visit_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('visits.id'))
    patient_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('patients.id'))
    diagnosis_code: Mapped[str | None] = mapped_column(String(32))
    description: Mapped[str] = mapped_column(Text, nullable=False)
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    visit: Mapped[Visit | None] = relationship()
    patient: Mapped[Patient | None] = relationship()


class VisitGuideline(EntityMixin, AuditMixin, Base):
    __tablename__ = 'visit_guidelines'

    visit_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('visits.id'))
    guideline: Mapped[str] = mapped_column(Text, nullable=False)

    visit: Mapped[Visit | None] = relationship()


class VisitInvestigation(EntityMixin, AuditMixin, Base):
    __tablename__ = 'visit_investigations'

    doctor_investigation_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('doctor_investigations.id'))
    patient_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('patients.id'))
    invoice_line_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('invoice_lines.id'))
    status: Mapped[str | None] = mapped_column(String(32))
    result: Mapped[str | None] = mapped_column(Text)

    doctor_investigation: Mapped[DoctorInvestigation | None] = relationship()
    patient: Mapped[Patient | None] = relationship()
    invoice_line: Mapped[InvoiceLine | None] = relationship()


class VisitMedicalCertificate(EntityMixin, AuditMixin, Base):
    __tablename__ = 'visit_medical_certificates'

    patient_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('patients.id'))
    visit_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('visits.id'))
    product_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('products.id'))
    invoice_line_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('invoice_lines.id'))
    certificate_type: Mapped[str | None] = mapped_column(String(64))
    issued_on: Mapped[date | None] = mapped_column(Date)
    valid_from: Mapped[date | None] = mapped_column(Date)
    valid_to: Mapped[date | None] = mapped_column(Date)
    remarks: Mapped[str | None] = mapped_column(Text)

    patient: Mapped[Patient | None] = relationship()
    visit: Mapped[Visit | None] = relationship()
    product: Mapped[Product | None] = relationship()
    invoice_line: Mapped[InvoiceLine | None] = relationship()


class VisitChiefComplaintParameter(EntityMixin, Base):
    __tablename__ = 'visit_chief_complaint_parameters'

    visit_chief_complaint_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('visit_chief_complaints.id'))
    clinical_parameter_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('clinical_parameters.id'))
    value: Mapped[str | None] = mapped_column(Text)

    visit_chief_complaint: Mapped[VisitChiefComplaint | None] = relationship()
    clinical_parameter: Mapped[ClinicalParameter | None] = relationship()


class VisitVitalTemplateParameter(EntityMixin, Base):
    __tablename__ = 'visit_vital_template_parameters'

    visit_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('visits.id'))
    clinical_parameter_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('clinical_parameters.id'))
    clinical_parameter_value_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey('clinical_parameter_values.id')
    )
    uom_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('uoms.id'))
    value: Mapped[str | None] = mapped_column(Text)
    recorded_on: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    visit: Mapped[Visit | None] = relationship()
    clinical_parameter: Mapped[ClinicalParameter | None] = relationship()
    clinical_parameter_value: Mapped[ClinicalParameterValue | None] = relationship()
    uom: Mapped[Uom | None] = relationship()


class AppointmentReminderLog(EntityMixin, Base):
    __tablename__ = 'appointment_reminder_logs'

    appointment_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('appointments.id'))
    channel: Mapped[str | None] = mapped_column(String(32))
    sent_on: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    status: Mapped[str | None] = mapped_column(String(32))
    message: Mapped[str | None] = mapped_column(Text)

    appointment: Mapped[Appointment | None] = relationship()


class TokenManagement(EntityMixin, AuditMixin, Base):
    __tablename__ = 'token_managements'

    location_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('locations.id'))
    doctor_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('doctors.id'))
    patient_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('patients.id'))
    token_number: Mapped[int] = mapped_column(Integer, nullable=False)
    token_date: Mapped[date | None] = mapped_column(Date)
    status: Mapped[str | None] = mapped_column(String(32))

    location: Mapped[Location | None] = relationship()
    doctor: Mapped[Doctor | None] = relationship()
    patient: Mapped[Patient | None] = relationship()


class Notification(EntityMixin, AuditMixin, Base):
    __tablename__ = 'notifications'

    recipient_user_id: Mapped[uuid.UUID | None] = mapped_column(Uuid)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    message: Mapped[str | None] = mapped_column(Text)
    channel: Mapped[str | None] = mapped_column(String(32))
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    sent_on: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))


# Billing extensions


class InvoiceFile(EntityMixin, AuditMixin, Base):
    __tablename__ = 'invoice_files'

    invoice_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('invoices.id'))
    file_name: Mapped[str] = mapped_column(Text, nullable=False)
    file_url: Mapped[str | None] = mapped_column(Text)
    content_type: Mapped[str | None] = mapped_column(String(128))

    invoice: Mapped[Invoice | None] = relationship(back_populates='invoice_files')


class PaymentGateway(EntityMixin, AuditMixin, Base):
    __tablename__ = 'payment_gateways'

    appointment_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('appointments.id'))
    doctor_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('doctors.id'))
    patient_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('patients.id'))
    invoice_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('invoices.id'))
    gateway_name: Mapped[str | None] = mapped_column(String(64))
    transaction_reference: Mapped[str | None] = mapped_column(String(128))
    amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    status: Mapped[str | None] = mapped_column(String(32))
    paid_on: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    appointment: Mapped[Appointment | None] = relationship()
    doctor: Mapped[Doctor | None] = relationship()
    patient: Mapped[Patient | None] = relationship()
    invoice: Mapped[Invoice | None] = relationship()


class PriceList(EntityMixin, AuditMixin, Base):
    __tablename__ = 'price_lists'

    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    price_list_versions: Mapped[list[PriceListVersion]] = relationship(back_populates='price_list')


class PriceListVersion(EntityMixin, AuditMixin, Base):
    __tablename__ = 'price_list_versions'

    price_list_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('price_lists.id'))
    version_number: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    effective_from: Mapped[date | None] = mapped_column(Date)
    effective_to: Mapped[date | None] = mapped_column(Date)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    price_list: Mapped[PriceList | None] = relationship(back_populates='price_list_versions')


# Inventory extensions


class GoodsReceiptActivityHistory(EntityMixin, Base):
    __tablename__ = 'goods_receipt_activity_histories'

    goods_receipt_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('goods_receipts.id'))
    activity: Mapped[str] = mapped_column(String(64), nullable=False)
    activity_on: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    performed_by: Mapped[uuid.UUID | None] = mapped_column(Uuid)
    notes: Mapped[str | None] = mapped_column(Text)

    goods_receipt: Mapped[GoodsReceipt | None] = relationship()


class ProductClassification(EntityMixin, Base):
    __tablename__ = 'product_classifications'

    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)

    products: Mapped[list[Product]] = relationship(back_populates='product_classification')


class ProductManufacture(EntityMixin, Base):
    __tablename__ = 'product_manufactures'

    name: Mapped[str] = mapped_column(Text, nullable=False)
    country: Mapped[str | None] = mapped_column(Text)
    description: Mapped[str | None] = mapped_column(Text)

    products: Mapped[list[Product]] = relationship(back_populates='product_manufacture')


# Security


class User(Base):
    __tablename__ = 'users'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    username: Mapped[str] = mapped_column(String(150), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[UserRole] = mapped_column(SQLEnum(UserRole, name='user_role'), nullable=False, default=UserRole.USER)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())

    entitlements: Mapped[list[UserEntitlement]] = relationship(back_populates='user', cascade='all, delete-orphan')


class UserEntitlement(Base):
    __tablename__ = 'user_entitlements'
    __table_args__ = (
        UniqueConstraint('user_id', 'entity_name', 'entitlement', name='user_entitlements_grant_key'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey('users.id'), nullable=False)
    entity_name: Mapped[str] = mapped_column(String(64), nullable=False)
    entitlement: Mapped[Entitlement] = mapped_column(SQLEnum(Entitlement, name='entitlement'), nullable=False)

    user: Mapped[User] = relationship(back_populates='entitlements')


class ApiSession(Base):
    __tablename__ = 'api_sessions'
    __table_args__ = (
        UniqueConstraint('session_token', name='api_sessions_session_token_key'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    session_token: Mapped[str] = mapped_column(String(128), nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey('users.id'), nullable=False)
    ip: Mapped[str | None] = mapped_column(String(64))
    user_agent: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
    last_seen_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    revoked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))


class AuthEvent(Base):
    __tablename__ = 'auth_events'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    attempted_username: Mapped[str] = mapped_column(String(150), nullable=False)
    success: Mapped[bool] = mapped_column(Boolean, nullable=False)
    failure_reason: Mapped[str | None] = mapped_column(Text)
    user_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey('users.id'))
    ip: Mapped[str | None] = mapped_column(String(64))
    user_agent: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
