"""
Scheduling Domain Entities
"""

from clinicops.domains.scheduling.domain.entities.appointment import Appointment
from clinicops.domains.scheduling.domain.entities.clinic_service import ClinicService
from clinicops.domains.scheduling.domain.entities.doctor_schedule import DoctorSchedule, DoctorShifts

__all__ = ["Appointment", "ClinicService", "DoctorSchedule", "DoctorShifts"]
