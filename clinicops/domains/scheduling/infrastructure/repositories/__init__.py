"""
Scheduling Infrastructure Repositories
"""

from clinicops.domains.scheduling.infrastructure.repositories.appointment_repository import (
    SQLAlchemyAppointmentRepository,
)
from clinicops.domains.scheduling.infrastructure.repositories.service_repository import SQLAlchemyServiceCatalog
from clinicops.domains.scheduling.infrastructure.repositories.shift_directory import SQLAlchemyShiftDirectory

__all__ = [
    "SQLAlchemyAppointmentRepository",
    "SQLAlchemyServiceCatalog",
    "SQLAlchemyShiftDirectory",
]
