from clinicops.domains.scheduling.application.services.slot_allocator import (
    AppointmentSlotAllocator,
    SchedulingPolicy,
)

__all__ = ["AppointmentSlotAllocator", "SchedulingPolicy"]
