from __future__ import annotations

from dataclasses import dataclass

from emr.models import (
    AccountSettlement,
    Appointment,
    AppointmentReminderLog,
    AppointmentService,
    AuditMixin,
    Base,
    ChiefComplaint,
    ClinicalParameter,
    ClinicalParameterValue,
    Comorbidity,
    Currency,
    DayVisit,
    DispenseActivityHistory,
    Doctor,
    DoctorInvestigation,
    DrugListItems,
    Formulation,
    Generic,
    GoodsReceipt,
    GoodsReceiptActivityHistory,
    GoodsReceiptFile,
    GoodsReceiptItem,
    GoodsReturn,
    GoodsReturnFile,
    GoodsReturnItem,
    GstSettings,
    Invoice,
    InvoiceFile,
    InvoiceLine,
    Language,
    Location,
    MedicationDosage,
    Notification,
    Patient,
    PatientAllergy,
    PatientCategory,
    PatientComorbidity,
    PatientEnrollmentLink,
    PatientHospitalisationHistory,
    PatientLifeStyle,
    PatientMedicalHistoryNote,
    PatientNotes,
    PatientPayor,
    PatientPharmacyQueue,
    PatientPregnancy,
    PaymentGateway,
    PaymentMode,
    PregnancyHistory,
    PriceList,
    PriceListVersion,
    Procedure,
    Product,
    ProductBatch,
    ProductCategory,
    ProductClassification,
    ProductManufacture,
    ProductUom,
    PurchaseOrder,
    PurchaseOrderLine,
    Qualification,
    Requisition,
    RequisitionLine,
    RouteInfo,
    Specialisation,
    StockAdjustment,
    StockAdjustmentFile,
    StockAdjustmentItem,
    SubReason,
    TokenManagement,
    Uom,
    Visit,
    VisitChiefComplaint,
    VisitChiefComplaintParameter,
    VisitDiagnosis,
    VisitGuideline,
    VisitInvestigation,
    VisitMedicalCertificate,
    VisitMode,
    VisitVitalTemplateParameter,
)
from emr.schemas import EntitySchemas, build_entity_schemas
from emr.services.entity_service import EntityService

ENTITY_MODELS: tuple[type[Base], ...] = (
    AccountSettlement,
    Appointment,
    AppointmentReminderLog,
    AppointmentService,
    ChiefComplaint,
    ClinicalParameter,
    ClinicalParameterValue,
    Comorbidity,
    Currency,
    DayVisit,
    DispenseActivityHistory,
    Doctor,
    DoctorInvestigation,
    DrugListItems,
    Formulation,
    Generic,
    GoodsReceipt,
    GoodsReceiptActivityHistory,
    GoodsReceiptFile,
    GoodsReceiptItem,
    GoodsReturn,
    GoodsReturnFile,
    GoodsReturnItem,
    GstSettings,
    Invoice,
    InvoiceFile,
    InvoiceLine,
    Language,
    Location,
    MedicationDosage,
    Notification,
    Patient,
    PatientAllergy,
    PatientCategory,
    PatientComorbidity,
    PatientEnrollmentLink,
    PatientHospitalisationHistory,
    PatientLifeStyle,
    PatientMedicalHistoryNote,
    PatientNotes,
    PatientPayor,
    PatientPharmacyQueue,
    PatientPregnancy,
    PaymentGateway,
    PaymentMode,
    PregnancyHistory,
    PriceList,
    PriceListVersion,
    Procedure,
    Product,
    ProductBatch,
    ProductCategory,
    ProductClassification,
    ProductManufacture,
    ProductUom,
    PurchaseOrder,
    PurchaseOrderLine,
    Qualification,
    Requisition,
    RequisitionLine,
    RouteInfo,
    Specialisation,
    StockAdjustment,
    StockAdjustmentFile,
    StockAdjustmentItem,
    SubReason,
    TokenManagement,
    Uom,
    Visit,
    VisitChiefComplaint,
    VisitChiefComplaintParameter,
    VisitDiagnosis,
    VisitGuideline,
    VisitInvestigation,
    VisitMedicalCertificate,
    VisitMode,
    VisitVitalTemplateParameter,
)


@dataclass(frozen=True)
class EntityConfig:
    name: str
    slug: str
    model: type[Base]
    service: EntityService
    schemas: EntitySchemas
    audited: bool


def build_entity_config(model: type[Base]) -> EntityConfig:
    return EntityConfig(
        name=model.__name__,
        slug=model.__name__.lower(),
        model=model,
        service=EntityService(model),
        schemas=build_entity_schemas(model),
        audited=issubclass(model, AuditMixin),
    )


ENTITIES: dict[str, EntityConfig] = {config.slug: config for config in map(build_entity_config, ENTITY_MODELS)}
