"""
Treatments API Schemas

Pydantic schemas for patient treatment endpoints.
"""

from dataclasses import asdict
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field

from clinicops.domains.treatments.application.dto.treatment_dtos import (
    ContinuityReport,
    QuickCheckResult,
    RepairReport,
    TreatmentChanges,
    TreatmentCreateRequest,
    ViolationReport,
)
from clinicops.domains.treatments.domain.entities.patient_treatment import PatientTreatment


class TreatmentCreate(BaseModel):
    """Treatment creation request schema."""

    patient_id: int = Field(..., gt=0)
    protocol_id: int = Field(..., gt=0)
    doctor_id: int = Field(..., gt=0)
    start_date: datetime
    end_date: datetime | None = None
    custom_medications: Any = None
    total: Decimal = Field(default=Decimal("0"), ge=0)
    notes: str | None = None
    created_by_id: int | None = Field(default=None, gt=0)

    def to_dto(self, auto_end_existing: bool) -> TreatmentCreateRequest:
        return TreatmentCreateRequest(
            patient_id=self.patient_id,
            protocol_id=self.protocol_id,
            doctor_id=self.doctor_id,
            start_date=self.start_date,
            end_date=self.end_date,
            auto_end_existing=auto_end_existing,
            custom_medications=self.custom_medications,
            total=self.total,
            notes=self.notes,
            created_by_id=self.created_by_id,
        )


class TreatmentUpdate(BaseModel):
    """Partial treatment update; send `end_date: null` to reopen a treatment."""

    protocol_id: int | None = Field(default=None, gt=0)
    doctor_id: int | None = Field(default=None, gt=0)
    start_date: datetime | None = None
    end_date: datetime | None = None
    custom_medications: Any = None
    total: Decimal | None = Field(default=None, ge=0)
    notes: str | None = None

    def to_dto(self) -> TreatmentChanges:
        clear_end = "end_date" in self.model_fields_set and self.end_date is None
        return TreatmentChanges(
            protocol_id=self.protocol_id,
            doctor_id=self.doctor_id,
            start_date=self.start_date,
            end_date=self.end_date,
            clear_end_date=clear_end,
            custom_medications=self.custom_medications,
            total=self.total,
            notes=self.notes,
        )


class TreatmentResponse(BaseModel):
    """Treatment response schema."""

    id: int
    patient_id: int
    protocol_id: int
    doctor_id: int
    start_date: datetime | None = None
    end_date: datetime | None = None
    custom_medications: Any = None
    total: Decimal
    notes: str | None = None
    created_by_id: int | None = None
    state: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, treatment: PatientTreatment, now: datetime | None = None) -> "TreatmentResponse":
        return cls(
            id=treatment.id or 0,
            patient_id=treatment.patient_id,
            protocol_id=treatment.protocol_id,
            doctor_id=treatment.doctor_id,
            start_date=treatment.start_date,
            end_date=treatment.end_date,
            custom_medications=treatment.custom_medications,
            total=treatment.total,
            notes=treatment.notes,
            created_by_id=treatment.created_by_id,
            state=treatment.state(now).kind.value if now and treatment.start_date else None,
            created_at=treatment.created_at,
            updated_at=treatment.updated_at,
        )


class TreatmentSummaryResponse(BaseModel):
    id: int
    protocol_id: int
    start_date: datetime
    end_date: datetime | None = None


class PatientViolationResponse(BaseModel):
    patient_id: int
    active_treatment_count: int
    treatments: list[TreatmentSummaryResponse]
    protocols: list[int]


class ViolationReportResponse(BaseModel):
    """Patients holding more than one active treatment."""

    total_violations: int
    violating_patients: list[PatientViolationResponse]

    @classmethod
    def from_report(cls, report: ViolationReport) -> "ViolationReportResponse":
        return cls.model_validate(asdict(report))


class RepairActionResponse(BaseModel):
    patient_id: int
    action: str
    treatment_id: int
    protocol_id: int
    new_end_date: str


class RepairReportResponse(BaseModel):
    """Outcome (or preview, on a dry run) of the violation repair."""

    processed_patients: int
    treatments_ended: int
    errors: list[str]
    actions: list[RepairActionResponse]
    dry_run: bool

    @classmethod
    def from_report(cls, report: RepairReport) -> "RepairReportResponse":
        return cls.model_validate(asdict(report))


class QuickCheckResponse(BaseModel):
    patient_id: int
    has_active_violations: bool
    active_violations_count: int
    multiple_active: bool
    future_dates: bool
    invalid_ranges: bool
    recommendation: str

    @classmethod
    def from_result(cls, result: QuickCheckResult) -> "QuickCheckResponse":
        return cls.model_validate(asdict(result))


class ContinuityResponse(BaseModel):
    patient_id: int
    is_continuous: bool
    gap_days: int | None = None
    risk_level: str
    previous_treatment_id: int | None = None
    previous_end_date: datetime | None = None
    recommendations: list[str]

    @classmethod
    def from_report(cls, report: ContinuityReport) -> "ContinuityResponse":
        data = asdict(report)
        data["risk_level"] = report.risk_level.value
        return cls.model_validate(data)
