"""
Appointment Slot Allocator

Books patients into catalog slots with a doctor who is on shift and has
no other active booking overlapping the slot.

- CONSULT services: the clinic picks the doctor (first free doctor on
  shift, in directory order) and provisions a video meeting.
- Other services: the patient names the doctor, who must be on shift
  and free.

The service is the only writer of appointments. A unique index on
(doctor, start) for active bookings backs the overlap checks against
concurrent requests.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime

from clinicops.config.settings import Settings
from clinicops.core.domain import (
    AppointmentConflictException,
    EntityNotFoundException,
    IntegrationException,
    ValidationException,
)
from clinicops.core.shared.clock import Clock, ensure_utc, utc_now
from clinicops.domains.scheduling.application.dto.appointment_dtos import (
    AllocationRequest,
    AppointmentChanges,
    DoctorAppointmentView,
)
from clinicops.domains.scheduling.application.ports.appointment_repository import IAppointmentRepository
from clinicops.domains.scheduling.application.ports.meeting_port import IMeetingNotifier, IMeetingProvider
from clinicops.domains.scheduling.application.ports.service_catalog import IServiceCatalog
from clinicops.domains.scheduling.application.ports.shift_directory import IShiftDirectory
from clinicops.domains.scheduling.domain.entities.appointment import Appointment
from clinicops.domains.scheduling.domain.entities.clinic_service import ClinicService
from clinicops.domains.scheduling.domain.value_objects.appointment_status import (
    AppointmentStatus,
    AppointmentType,
)
from clinicops.domains.scheduling.domain.value_objects.shift import Shift, schedule_date
from clinicops.domains.scheduling.domain.value_objects.slot import SlotCatalog, SlotPlacement
from clinicops.domains.shared.application.ports.people_directory import IDoctorDirectory, IPatientDirectory
from clinicops.domains.shared.domain.people import Patient

logger = logging.getLogger(__name__)

PATIENT_NOT_FOUND = "User not found"
TIME_IN_PAST = "Appointment time cannot be in the past"
SERVICE_NOT_FOUND = "Service not found"
ANONYMOUS_MUST_BE_ONLINE = "Anonymous appointment must be online"
TYPE_MISMATCH = "Invalid appointment type for this service"
CHOOSE_OWN_DOCTOR = "It is not possible to choose your own doctor for this service."
SLOT_NOT_IN_CATALOG = "This slot is not available for appointment"
OUTSIDE_SERVICE_HOURS = "Appointment time must be within service working hours"
NO_DOCTOR_AVAILABLE = "No available doctor for this slot"
DOCTOR_REQUIRED = "Doctor ID is required for this appointment type"
DOCTOR_NOT_FOUND = "Doctor not found"
DOCTOR_OFF_SHIFT = "Doctor does not have a working shift at the selected time"
SLOT_ALREADY_BOOKED = "This slot is already booked"
APPOINTMENT_NOT_FOUND = "Appointment not found"


@dataclass(frozen=True)
class SchedulingPolicy:
    """Clock and status rules for the allocator."""

    slot_clock_utc_offset_hours: int = 0
    shift_utc_offset_hours: int = 7
    shift_cutoff_hour: int = 11
    enforce_transitions: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> "SchedulingPolicy":
        return cls(
            slot_clock_utc_offset_hours=settings.SLOT_CLOCK_UTC_OFFSET_HOURS,
            shift_utc_offset_hours=settings.SHIFT_UTC_OFFSET_HOURS,
            shift_cutoff_hour=settings.SHIFT_CUTOFF_HOUR,
            enforce_transitions=settings.APPOINTMENT_ENFORCE_TRANSITIONS,
        )


@dataclass(frozen=True)
class _Booking:
    """Outcome of the shared precondition checks."""

    patient: Patient
    service: ClinicService
    appointment_time: datetime
    placement: SlotPlacement
    shift: Shift
    work_date: date


class AppointmentSlotAllocator:
    """
    Allocates, reallocates and moves appointments through their lifecycle.

    Example:
        ```python
        allocator = AppointmentSlotAllocator(
            appointment_repository=appointments,
            patient_directory=patients,
            doctor_directory=doctors,
            service_catalog=services,
            shift_directory=shifts,
            slot_catalog=SlotCatalog.from_definitions(settings.CLINIC_SLOTS),
            meeting_provider=videosdk,
            meeting_notifier=mailer,
        )
        appointment = await allocator.allocate(AllocationRequest(...))
        ```
    """

    def __init__(
        self,
        appointment_repository: IAppointmentRepository,
        patient_directory: IPatientDirectory,
        doctor_directory: IDoctorDirectory,
        service_catalog: IServiceCatalog,
        shift_directory: IShiftDirectory,
        slot_catalog: SlotCatalog,
        meeting_provider: IMeetingProvider | None = None,
        meeting_notifier: IMeetingNotifier | None = None,
        policy: SchedulingPolicy | None = None,
        clock: Clock = utc_now,
    ):
        self.appointment_repo = appointment_repository
        self.patients = patient_directory
        self.doctors = doctor_directory
        self.services = service_catalog
        self.shifts = shift_directory
        self.slot_catalog = slot_catalog
        self.meeting_provider = meeting_provider
        self.meeting_notifier = meeting_notifier
        self.policy = policy or SchedulingPolicy()
        self._clock = clock

    # ============================================================
    # COMMANDS
    # ============================================================

    async def allocate(self, request: AllocationRequest) -> Appointment:
        """
        Book a new appointment.

        Args:
            request: Booking request

        Returns:
            Persisted appointment in PENDING status with its doctor resolved

        Raises:
            EntityNotFoundException: patient, service or doctor missing
            ValidationException: a booking precondition failed
            AppointmentConflictException: no free doctor / slot taken
            IntegrationException: meeting room could not be created
        """
        logger.info(
            f"Allocating appointment: user={request.user_id} service={request.service_id} "
            f"time={request.appointment_time.isoformat()} type={request.type.value}"
        )
        booking = await self._validate_booking(
            user_id=request.user_id,
            service_id=request.service_id,
            appointment_time=request.appointment_time,
            appointment_type=request.type,
            is_anonymous=request.is_anonymous,
        )

        if booking.service.type.assigns_doctor:
            if request.doctor_id is not None:
                raise ValidationException(CHOOSE_OWN_DOCTOR, field="doctor_id")
            doctor_id = await self._select_free_doctor(booking)
        else:
            doctor_id = await self._resolve_requested_doctor(request.doctor_id)

        await self._confirm_assignment(doctor_id, booking)

        appointment = Appointment(
            user_id=request.user_id,
            doctor_id=doctor_id,
            service_id=request.service_id,
            appointment_time=booking.placement.starts_at,
            slot_end=booking.placement.ends_at,
            type=request.type,
            status=AppointmentStatus.PENDING,
            is_anonymous=request.is_anonymous,
            notes=request.notes,
        )
        if appointment.type is AppointmentType.ONLINE:
            await self._provision_meeting(appointment)

        saved = await self.appointment_repo.save(appointment)
        logger.info(
            f"Appointment {saved.id} booked: doctor={doctor_id} slot={booking.placement.label} "
            f"shift={booking.shift.value}"
        )

        if saved.type is AppointmentType.ONLINE:
            await self._send_meeting_links(saved)
        return saved

    async def reallocate(self, appointment_id: int, changes: AppointmentChanges) -> Appointment:
        """
        Update an appointment, re-running every booking precondition.

        The appointment never conflicts with itself, so submitting its
        current values again changes nothing.

        Args:
            appointment_id: Appointment to update
            changes: Fields to change; None keeps the current value

        Returns:
            Updated appointment
        """
        existing = await self.get(appointment_id)
        if existing.appointment_time is None:
            raise ValidationException("Appointment has no scheduled time", field="appointment_time")

        booking = await self._validate_booking(
            user_id=changes.user_id if changes.user_id is not None else existing.user_id,
            service_id=changes.service_id if changes.service_id is not None else existing.service_id,
            appointment_time=(
                changes.appointment_time if changes.appointment_time is not None else existing.appointment_time
            ),
            appointment_type=changes.type if changes.type is not None else existing.type,
            is_anonymous=changes.is_anonymous if changes.is_anonymous is not None else existing.is_anonymous,
        )

        if booking.service.type.assigns_doctor:
            if changes.doctor_id is not None:
                raise ValidationException(CHOOSE_OWN_DOCTOR, field="doctor_id")
            doctor_id = await self._keep_or_select_doctor(existing, booking)
        else:
            doctor_id = await self._resolve_requested_doctor(
                changes.doctor_id if changes.doctor_id is not None else existing.doctor_id
            )

        await self._confirm_assignment(doctor_id, booking, exclude_id=existing.id)

        doctor_changed = doctor_id != existing.doctor_id
        existing.reschedule(
            user_id=booking.patient.id or 0,
            doctor_id=doctor_id,
            service_id=booking.service.id or 0,
            appointment_time=booking.placement.starts_at,
            slot_end=booking.placement.ends_at,
            type=changes.type if changes.type is not None else existing.type,
            is_anonymous=changes.is_anonymous if changes.is_anonymous is not None else existing.is_anonymous,
            notes=changes.notes if changes.notes is not None else existing.notes,
        )
        # The doctor link carries a token for the assigned doctor only
        new_meeting = existing.type is AppointmentType.ONLINE and (not existing.has_meeting or doctor_changed)
        if new_meeting:
            await self._provision_meeting(existing)

        saved = await self.appointment_repo.save(existing)
        logger.info(f"Appointment {saved.id} reallocated: doctor={doctor_id} slot={booking.placement.label}")

        if new_meeting:
            await self._send_meeting_links(saved)
        return saved

    async def set_status(self, appointment_id: int, status: AppointmentStatus) -> Appointment:
        """
        Move an appointment to `status`. No slot checks are made.

        Raises:
            EntityNotFoundException: unknown appointment
            InvalidOperationException: transition rejected by the table
        """
        appointment = await self.get(appointment_id)
        previous = appointment.status
        if not appointment.change_status(status, enforce_transitions=self.policy.enforce_transitions):
            return appointment

        saved = await self.appointment_repo.set_status(appointment_id, status)
        if saved is None:
            raise EntityNotFoundException("Appointment", appointment_id, APPOINTMENT_NOT_FOUND)
        logger.info(f"Appointment {appointment_id} status {previous.value} -> {status.value}")
        return saved

    # ============================================================
    # QUERIES
    # ============================================================

    async def get(self, appointment_id: int) -> Appointment:
        appointment = await self.appointment_repo.find_by_id(appointment_id)
        if appointment is None:
            raise EntityNotFoundException("Appointment", appointment_id, APPOINTMENT_NOT_FOUND)
        return appointment

    async def list_for_doctor(self, doctor_id: int, limit: int = 50) -> list[DoctorAppointmentView]:
        """Doctor's appointments; anonymous patients are replaced by a placeholder."""
        appointments = await self.appointment_repo.find_by_doctor(doctor_id, limit=limit)
        views: list[DoctorAppointmentView] = []
        for appointment in appointments:
            if appointment.is_anonymous:
                patient = Patient.anonymous()
            else:
                patient = await self.patients.find_by_id(appointment.user_id) or Patient(id=appointment.user_id)
            views.append(DoctorAppointmentView(appointment=appointment, patient=patient))
        return views

    async def list_for_patient(self, user_id: int, limit: int = 50) -> list[Appointment]:
        return await self.appointment_repo.find_by_patient(user_id, limit=limit)

    # ============================================================
    # PRECONDITIONS
    # ============================================================

    async def _validate_booking(
        self,
        *,
        user_id: int,
        service_id: int,
        appointment_time: datetime,
        appointment_type: AppointmentType,
        is_anonymous: bool,
    ) -> _Booking:
        """Checks shared by allocate and reallocate, in a fixed order."""
        patient = await self.patients.find_by_id(user_id)
        if patient is None:
            raise EntityNotFoundException("User", user_id, PATIENT_NOT_FOUND)

        appointment_time = ensure_utc(appointment_time)
        if appointment_time <= self._clock():
            raise ValidationException(TIME_IN_PAST, field="appointment_time")

        service = await self.services.find_by_id(service_id)
        if service is None:
            raise EntityNotFoundException("Service", service_id, SERVICE_NOT_FOUND)

        if is_anonymous and appointment_type is not AppointmentType.ONLINE:
            raise ValidationException(ANONYMOUS_MUST_BE_ONLINE, field="is_anonymous")

        if appointment_type is not service.appointment_type:
            raise ValidationException(TYPE_MISMATCH, field="type")

        placement = self.slot_catalog.place(appointment_time, self.policy.slot_clock_utc_offset_hours)
        if placement is None:
            raise ValidationException(SLOT_NOT_IN_CATALOG, field="appointment_time")

        if not service.is_open_at(placement.slot.start):
            raise ValidationException(OUTSIDE_SERVICE_HOURS, field="appointment_time")

        return _Booking(
            patient=patient,
            service=service,
            appointment_time=appointment_time,
            placement=placement,
            shift=Shift.of(
                appointment_time,
                utc_offset_hours=self.policy.shift_utc_offset_hours,
                cutoff_hour=self.policy.shift_cutoff_hour,
            ),
            work_date=schedule_date(appointment_time),
        )

    async def _select_free_doctor(self, booking: _Booking, exclude_id: int | None = None) -> int:
        """First doctor on shift, in directory order, whose slot is free."""
        async for doctor_id in self.shifts.iter_candidates(booking.work_date, booking.shift):
            if not await self._is_booked(doctor_id, booking.placement, exclude_id):
                logger.debug(f"Doctor {doctor_id} selected for {booking.placement.label}")
                return doctor_id
            logger.debug(f"Doctor {doctor_id} busy at {booking.placement.label}")

        raise AppointmentConflictException(time_slot=booking.placement.label, message=NO_DOCTOR_AVAILABLE)

    async def _keep_or_select_doctor(self, existing: Appointment, booking: _Booking) -> int:
        """Keep the assigned doctor while still on shift and free; otherwise pick again."""
        if existing.doctor_id is not None and await self.shifts.has_shift(
            existing.doctor_id, booking.work_date, booking.shift
        ):
            if not await self._is_booked(existing.doctor_id, booking.placement, existing.id):
                return existing.doctor_id
        logger.info(f"Appointment {existing.id}: doctor {existing.doctor_id} unavailable, selecting another")
        return await self._select_free_doctor(booking, exclude_id=existing.id)

    async def _resolve_requested_doctor(self, doctor_id: int | None) -> int:
        if doctor_id is None:
            raise ValidationException(DOCTOR_REQUIRED, field="doctor_id")
        doctor = await self.doctors.find_by_id(doctor_id)
        if doctor is None:
            raise EntityNotFoundException("Doctor", doctor_id, DOCTOR_NOT_FOUND)
        return doctor_id

    async def _confirm_assignment(self, doctor_id: int, booking: _Booking, exclude_id: int | None = None) -> None:
        """Final shift and overlap check for the doctor about to be written."""
        if not await self.shifts.has_shift(doctor_id, booking.work_date, booking.shift):
            raise ValidationException(DOCTOR_OFF_SHIFT, field="doctor_id")
        if await self._is_booked(doctor_id, booking.placement, exclude_id):
            raise AppointmentConflictException(
                doctor_id=doctor_id,
                time_slot=booking.placement.label,
                message=SLOT_ALREADY_BOOKED,
            )

    async def _is_booked(self, doctor_id: int, placement: SlotPlacement, exclude_id: int | None) -> bool:
        conflicts = await self.appointment_repo.find_conflicting(
            doctor_id,
            placement.starts_at,
            placement.ends_at,
            AppointmentStatus.slot_holding(),
            exclude_id=exclude_id,
        )
        return any(
            a.id != exclude_id and a.occupies(placement.starts_at, placement.ends_at) for a in conflicts
        )

    # ============================================================
    # ONLINE MEETINGS
    # ============================================================

    async def _provision_meeting(self, appointment: Appointment) -> None:
        if self.meeting_provider is None:
            raise IntegrationException("meeting", "Online meeting provider is not configured")
        if appointment.doctor_id is None:
            raise ValidationException(DOCTOR_REQUIRED, field="doctor_id")

        room_id = f"appointment-{int(self._clock().timestamp() * 1000)}-{appointment.user_id}"
        links = await self.meeting_provider.create_meeting(room_id, appointment.user_id, appointment.doctor_id)
        appointment.attach_meeting(links.patient_url, links.doctor_url)
        logger.info(f"Meeting room {links.room_id} created for user {appointment.user_id}")

    async def _send_meeting_links(self, appointment: Appointment) -> None:
        """Mail both participants. Delivery failures never undo the booking."""
        if self.meeting_notifier is None or not appointment.has_meeting:
            return

        try:
            patient = await self.patients.find_by_id(appointment.user_id)
            recipients: list[tuple[str | None, str]] = [
                (patient.email if patient else None, appointment.patient_meeting_url or "")
            ]
            if appointment.doctor_id is not None:
                doctor = await self.doctors.find_by_id(appointment.doctor_id)
                recipients.append((doctor.email if doctor else None, appointment.doctor_meeting_url or ""))
        except Exception as e:
            logger.warning(f"Could not resolve meeting link recipients for appointment {appointment.id}: {e}")
            return

        for email, url in recipients:
            if not email:
                continue
            try:
                await self.meeting_notifier.send_meeting_link(email, url)
            except Exception as e:
                logger.warning(f"Failed to send meeting link for appointment {appointment.id} to {email}: {e}")
