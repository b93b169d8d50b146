"""
Scheduling Domain Layer

Components:
- Entities: Appointment (aggregate root), ClinicService, DoctorSchedule
- Value Objects: AppointmentStatus, AppointmentType, ServiceType, Shift,
  Slot, SlotCatalog, SlotPlacement
"""
