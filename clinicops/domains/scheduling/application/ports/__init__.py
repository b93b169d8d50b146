"""
Scheduling Application Ports
"""

from clinicops.domains.scheduling.application.ports.appointment_repository import IAppointmentRepository
from clinicops.domains.scheduling.application.ports.meeting_port import (
    IMeetingNotifier,
    IMeetingProvider,
    MeetingLinks,
)
from clinicops.domains.scheduling.application.ports.service_catalog import IServiceCatalog
from clinicops.domains.scheduling.application.ports.shift_directory import IShiftDirectory

__all__ = [
    "IAppointmentRepository",
    "IServiceCatalog",
    "IShiftDirectory",
    "IMeetingProvider",
    "IMeetingNotifier",
    "MeetingLinks",
]
