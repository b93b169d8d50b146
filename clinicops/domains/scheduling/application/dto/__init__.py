from clinicops.domains.scheduling.application.dto.appointment_dtos import (
    AllocationRequest,
    AppointmentChanges,
    DoctorAppointmentView,
)

__all__ = ["AllocationRequest", "AppointmentChanges", "DoctorAppointmentView"]
