"""
Appointment DTOs

Inputs and read models of the slot allocator.
"""

from dataclasses import dataclass, fields
from datetime import datetime

from clinicops.domains.scheduling.domain.entities.appointment import Appointment
from clinicops.domains.scheduling.domain.value_objects.appointment_status import AppointmentType
from clinicops.domains.shared.domain.people import Patient


@dataclass
class AllocationRequest:
    """Request for booking a new appointment."""

    user_id: int
    service_id: int
    appointment_time: datetime
    type: AppointmentType
    is_anonymous: bool = False
    doctor_id: int | None = None
    notes: str | None = None


@dataclass
class AppointmentChanges:
    """Partial update of an appointment; None means "keep current value"."""

    user_id: int | None = None
    service_id: int | None = None
    appointment_time: datetime | None = None
    type: AppointmentType | None = None
    is_anonymous: bool | None = None
    doctor_id: int | None = None
    notes: str | None = None

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))


@dataclass
class DoctorAppointmentView:
    """An appointment as shown to its doctor; anonymous patients are masked."""

    appointment: Appointment
    patient: Patient
