"""
Scheduling Domain Value Objects
"""

from clinicops.domains.scheduling.domain.value_objects.appointment_status import (
    AppointmentStatus,
    AppointmentType,
    ServiceType,
)
from clinicops.domains.scheduling.domain.value_objects.shift import Shift, schedule_date
from clinicops.domains.scheduling.domain.value_objects.slot import (
    Slot,
    SlotCatalog,
    SlotPlacement,
    is_time_between,
    parse_hhmm,
)

__all__ = [
    "AppointmentStatus",
    "AppointmentType",
    "ServiceType",
    "Shift",
    "schedule_date",
    "Slot",
    "SlotCatalog",
    "SlotPlacement",
    "is_time_between",
    "parse_hhmm",
]
