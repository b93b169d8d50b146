"""
Dependency Injection Container

Wires the SQLAlchemy repositories, the meeting adapters and the settings
into the allocator and the treatment guard.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from clinicops.config.settings import Settings, get_settings
from clinicops.domains.scheduling.application.ports.meeting_port import IMeetingNotifier, IMeetingProvider
from clinicops.domains.scheduling.application.services import AppointmentSlotAllocator, SchedulingPolicy
from clinicops.domains.scheduling.domain.value_objects.slot import SlotCatalog
from clinicops.domains.scheduling.infrastructure.external.email import SmtpMeetingNotifier
from clinicops.domains.scheduling.infrastructure.external.videosdk import VideoSDKMeetingProvider
from clinicops.domains.scheduling.infrastructure.repositories import (
    SQLAlchemyAppointmentRepository,
    SQLAlchemyServiceCatalog,
    SQLAlchemyShiftDirectory,
)
from clinicops.domains.shared.infrastructure.repositories import (
    SQLAlchemyDoctorDirectory,
    SQLAlchemyPatientDirectory,
)
from clinicops.domains.treatments.application.services import TreatmentContinuityGuard
from clinicops.domains.treatments.domain.services import TreatmentDatePolicy
from clinicops.domains.treatments.infrastructure.repositories import (
    SQLAlchemyProtocolDirectory,
    SQLAlchemyTreatmentRepository,
)

logger = logging.getLogger(__name__)


class DependencyContainer:
    """
    Creates services per request session.

    Stateless collaborators (slot catalog, meeting adapters) are built once
    and shared; repositories are bound to the session they are given.

    Example:
        ```python
        container = get_container()
        allocator = container.create_slot_allocator(db)
        ```
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self._slot_catalog: SlotCatalog | None = None
        self._meeting_provider: IMeetingProvider | None = None
        self._meeting_notifier: IMeetingNotifier | None = None
        self._adapters_built = False

    # ============================================================
    # SHARED COLLABORATORS
    # ============================================================

    def get_slot_catalog(self) -> SlotCatalog:
        if self._slot_catalog is None:
            self._slot_catalog = SlotCatalog.from_definitions(self.settings.CLINIC_SLOTS)
            logger.info(f"Slot catalog loaded with {len(self._slot_catalog.slots)} slots")
        return self._slot_catalog

    def _build_adapters(self) -> None:
        if self._adapters_built:
            return
        if self.settings.meeting_enabled:
            self._meeting_provider = VideoSDKMeetingProvider(self.settings)
        else:
            logger.warning("VideoSDK credentials missing; online appointments cannot be booked")
        if self.settings.SMTP_SERVER:
            self._meeting_notifier = SmtpMeetingNotifier(self.settings)
        else:
            logger.info("SMTP_SERVER not set; meeting links will not be emailed")
        self._adapters_built = True

    def get_meeting_provider(self) -> IMeetingProvider | None:
        self._build_adapters()
        return self._meeting_provider

    def get_meeting_notifier(self) -> IMeetingNotifier | None:
        self._build_adapters()
        return self._meeting_notifier

    # ============================================================
    # REPOSITORIES
    # ============================================================

    def create_patient_directory(self, db: AsyncSession) -> SQLAlchemyPatientDirectory:
        return SQLAlchemyPatientDirectory(session=db)

    def create_doctor_directory(self, db: AsyncSession) -> SQLAlchemyDoctorDirectory:
        return SQLAlchemyDoctorDirectory(session=db)

    def create_appointment_repository(self, db: AsyncSession) -> SQLAlchemyAppointmentRepository:
        return SQLAlchemyAppointmentRepository(session=db)

    def create_service_catalog(self, db: AsyncSession) -> SQLAlchemyServiceCatalog:
        return SQLAlchemyServiceCatalog(session=db)

    def create_shift_directory(self, db: AsyncSession) -> SQLAlchemyShiftDirectory:
        return SQLAlchemyShiftDirectory(session=db)

    def create_treatment_repository(self, db: AsyncSession) -> SQLAlchemyTreatmentRepository:
        return SQLAlchemyTreatmentRepository(session=db)

    def create_protocol_directory(self, db: AsyncSession) -> SQLAlchemyProtocolDirectory:
        return SQLAlchemyProtocolDirectory(session=db)

    # ============================================================
    # SERVICES
    # ============================================================

    def create_slot_allocator(self, db: AsyncSession) -> AppointmentSlotAllocator:
        return AppointmentSlotAllocator(
            appointment_repository=self.create_appointment_repository(db),
            patient_directory=self.create_patient_directory(db),
            doctor_directory=self.create_doctor_directory(db),
            service_catalog=self.create_service_catalog(db),
            shift_directory=self.create_shift_directory(db),
            slot_catalog=self.get_slot_catalog(),
            meeting_provider=self.get_meeting_provider(),
            meeting_notifier=self.get_meeting_notifier(),
            policy=SchedulingPolicy.from_settings(self.settings),
        )

    def create_continuity_guard(self, db: AsyncSession) -> TreatmentContinuityGuard:
        return TreatmentContinuityGuard(
            treatment_repository=self.create_treatment_repository(db),
            protocol_directory=self.create_protocol_directory(db),
            patient_directory=self.create_patient_directory(db),
            doctor_directory=self.create_doctor_directory(db),
            date_policy=TreatmentDatePolicy.from_settings(self.settings),
        )


_container: DependencyContainer | None = None


def get_container() -> DependencyContainer:
    """Get the process-wide container, creating it on first use."""
    global _container
    if _container is None:
        _container = DependencyContainer()
    return _container


def reset_container() -> None:
    """Drop the cached container (tests and settings reloads)."""
    global _container
    _container = None
