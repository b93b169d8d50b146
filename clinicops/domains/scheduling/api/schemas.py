"""
Scheduling API Schemas

Pydantic schemas for appointment request/response validation.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from clinicops.domains.scheduling.application.dto.appointment_dtos import (
    AllocationRequest,
    AppointmentChanges,
    DoctorAppointmentView,
)
from clinicops.domains.scheduling.domain.entities.appointment import Appointment
from clinicops.domains.scheduling.domain.value_objects.appointment_status import (
    AppointmentStatus,
    AppointmentType,
)


class AppointmentCreateRequest(BaseModel):
    """Appointment booking request schema."""

    user_id: int = Field(..., gt=0)
    service_id: int = Field(..., gt=0)
    appointment_time: datetime = Field(..., description="Slot start; naive values are read as UTC")
    type: AppointmentType
    is_anonymous: bool = False
    doctor_id: int | None = Field(default=None, gt=0, description="Only for services where the patient picks")
    notes: str | None = None

    def to_dto(self) -> AllocationRequest:
        return AllocationRequest(
            user_id=self.user_id,
            service_id=self.service_id,
            appointment_time=self.appointment_time,
            type=self.type,
            is_anonymous=self.is_anonymous,
            doctor_id=self.doctor_id,
            notes=self.notes,
        )


class AppointmentUpdateRequest(BaseModel):
    """Partial appointment update; omitted fields keep their value."""

    user_id: int | None = Field(default=None, gt=0)
    service_id: int | None = Field(default=None, gt=0)
    appointment_time: datetime | None = None
    type: AppointmentType | None = None
    is_anonymous: bool | None = None
    doctor_id: int | None = Field(default=None, gt=0)
    notes: str | None = None

    def to_dto(self) -> AppointmentChanges:
        return AppointmentChanges(**self.model_dump())


class AppointmentStatusRequest(BaseModel):
    """Status change request schema."""

    status: AppointmentStatus


class AppointmentResponse(BaseModel):
    """Appointment response schema."""

    id: int
    user_id: int
    doctor_id: int | None = None
    service_id: int
    appointment_time: datetime | None = None
    slot_end: datetime | None = None
    type: str
    status: str
    is_anonymous: bool
    notes: str | None = None
    patient_meeting_url: str | None = None
    doctor_meeting_url: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, appointment: Appointment) -> "AppointmentResponse":
        return cls(
            id=appointment.id or 0,
            user_id=appointment.user_id,
            doctor_id=appointment.doctor_id,
            service_id=appointment.service_id,
            appointment_time=appointment.appointment_time,
            slot_end=appointment.slot_end,
            type=appointment.type.value,
            status=appointment.status.value,
            is_anonymous=appointment.is_anonymous,
            notes=appointment.notes,
            patient_meeting_url=appointment.patient_meeting_url,
            doctor_meeting_url=appointment.doctor_meeting_url,
            created_at=appointment.created_at,
            updated_at=appointment.updated_at,
        )


class PatientSummary(BaseModel):
    """Patient as shown on a doctor's agenda."""

    id: int
    name: str
    email: str | None = None


class DoctorAppointmentResponse(BaseModel):
    """Doctor agenda entry; anonymous patients are masked."""

    appointment: AppointmentResponse
    patient: PatientSummary

    @classmethod
    def from_view(cls, view: DoctorAppointmentView) -> "DoctorAppointmentResponse":
        return cls(
            appointment=AppointmentResponse.from_entity(view.appointment),
            patient=PatientSummary(id=view.patient.id or 0, name=view.patient.name, email=view.patient.email),
        )
