"""Test utilities and helpers."""

from tests.utils.assertions import assert_error_envelope, assert_single_active
from tests.utils.builders import (
    AllocationRequestBuilder,
    AppointmentBuilder,
    ServiceBuilder,
    TreatmentBuilder,
    TreatmentRequestBuilder,
    utc,
)
from tests.utils.fakes import (
    InMemoryAppointmentRepository,
    InMemoryDoctorDirectory,
    InMemoryPatientDirectory,
    InMemoryProtocolDirectory,
    InMemoryServiceCatalog,
    InMemoryShiftDirectory,
    InMemoryTreatmentRepository,
    RecordingMeetingProvider,
    RecordingNotifier,
)

__all__ = [
    # Builders
    "utc",
    "ServiceBuilder",
    "AppointmentBuilder",
    "AllocationRequestBuilder",
    "TreatmentBuilder",
    "TreatmentRequestBuilder",
    # Fakes
    "InMemoryAppointmentRepository",
    "InMemoryDoctorDirectory",
    "InMemoryPatientDirectory",
    "InMemoryProtocolDirectory",
    "InMemoryServiceCatalog",
    "InMemoryShiftDirectory",
    "InMemoryTreatmentRepository",
    "RecordingMeetingProvider",
    "RecordingNotifier",
    # Assertions
    "assert_error_envelope",
    "assert_single_active",
]
