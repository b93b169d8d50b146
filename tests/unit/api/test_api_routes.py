"""
HTTP-level tests for the appointment and treatment routes.

The application is built with create_app() and the service dependencies
are overridden with services backed by in-memory ports, so the tests
exercise request parsing, the error envelope and status-code mapping.
"""

import pytest
from fastapi.testclient import TestClient

from clinicops.api.exception_handlers import status_code_for
from clinicops.config.settings import Settings
from clinicops.core.app_factory import create_app
from clinicops.core.domain import (
    AppointmentConflictException,
    EntityNotFoundException,
    IntegrationException,
    InvalidOperationException,
    TreatmentConflictException,
    ValidationException,
)
from clinicops.domains.scheduling.api.dependencies import get_slot_allocator
from clinicops.domains.scheduling.application.services import AppointmentSlotAllocator
from clinicops.domains.scheduling.domain.value_objects.shift import Shift
from clinicops.domains.treatments.api.dependencies import get_continuity_guard
from clinicops.domains.treatments.application.services import TreatmentContinuityGuard
from tests.utils import (
    InMemoryAppointmentRepository,
    InMemoryServiceCatalog,
    InMemoryShiftDirectory,
    InMemoryTreatmentRepository,
    RecordingMeetingProvider,
    RecordingNotifier,
    ServiceBuilder,
    TreatmentBuilder,
    assert_error_envelope,
    utc,
)

API = "/api/v1"


@pytest.fixture
def allocator(patient_directory, doctor_directory, slot_catalog, scheduling_now) -> AppointmentSlotAllocator:
    return AppointmentSlotAllocator(
        appointment_repository=InMemoryAppointmentRepository(),
        patient_directory=patient_directory,
        doctor_directory=doctor_directory,
        service_catalog=InMemoryServiceCatalog(
            [ServiceBuilder().with_id(1).build(), ServiceBuilder().with_id(2).consult().build()]
        ),
        shift_directory=InMemoryShiftDirectory().add(3, utc(2025, 3, 10).date(), Shift.MORNING),
        slot_catalog=slot_catalog,
        meeting_provider=RecordingMeetingProvider(),
        meeting_notifier=RecordingNotifier(),
        clock=lambda: scheduling_now,
    )


@pytest.fixture
def guard(protocol_directory, patient_directory, doctor_directory, treatment_now) -> TreatmentContinuityGuard:
    return TreatmentContinuityGuard(
        treatment_repository=InMemoryTreatmentRepository(
            [TreatmentBuilder().with_id(1).for_patient(5).with_protocol(1).starting(utc(2025, 1, 1)).build()]
        ),
        protocol_directory=protocol_directory,
        patient_directory=patient_directory,
        doctor_directory=doctor_directory,
        clock=lambda: treatment_now,
    )


@pytest.fixture
def client(allocator, guard) -> TestClient:
    app = create_app(Settings(ENVIRONMENT="test"))
    app.dependency_overrides[get_slot_allocator] = lambda: allocator
    app.dependency_overrides[get_continuity_guard] = lambda: guard
    return TestClient(app)


def booking(**overrides) -> dict:
    payload = {
        "user_id": 7,
        "service_id": 1,
        "appointment_time": "2025-03-10T07:00:00Z",
        "type": "OFFLINE",
        "doctor_id": 3,
    }
    payload.update(overrides)
    return payload


# ============================================================================
# Status code mapping
# ============================================================================


@pytest.mark.unit
@pytest.mark.api
class TestStatusCodeMapping:
    """Test the domain exception to HTTP status mapping."""

    @pytest.mark.parametrize(
        "exc,expected",
        [
            (ValidationException("bad"), 400),
            (EntityNotFoundException("Appointment", 1), 404),
            (AppointmentConflictException(), 409),
            (TreatmentConflictException("two active"), 409),
            (InvalidOperationException("set_status", "COMPLETED"), 409),
            (IntegrationException("videosdk", "down"), 502),
        ],
    )
    def test_status_code_for(self, exc, expected):
        assert status_code_for(exc) == expected


# ============================================================================
# Appointment routes
# ============================================================================


@pytest.mark.unit
@pytest.mark.api
class TestAppointmentRoutes:
    """Test /appointments endpoints."""

    def test_create_appointment(self, client):
        response = client.post(f"{API}/appointments", json=booking())

        assert response.status_code == 201
        body = response.json()
        assert body["doctor_id"] == 3
        assert body["status"] == "PENDING"
        assert body["slot_end"].startswith("2025-03-10T07:30:00")

    def test_double_booking_returns_conflict(self, client):
        client.post(f"{API}/appointments", json=booking())

        response = client.post(f"{API}/appointments", json=booking(user_id=5))

        assert response.status_code == 409
        assert_error_envelope(response.json(), 409, "APPOINTMENT_CONFLICT")
        assert response.json()["message"] == "This slot is already booked"

    def test_choosing_doctor_for_consult_is_rejected(self, client):
        response = client.post(
            f"{API}/appointments", json=booking(service_id=2, type="ONLINE", doctor_id=3)
        )

        assert response.status_code == 400
        assert_error_envelope(response.json(), 400, "VALIDATION_ERROR")
        assert response.json()["details"]["field"] == "doctor_id"

    def test_unknown_appointment_returns_not_found(self, client):
        response = client.get(f"{API}/appointments/404")

        assert response.status_code == 404
        assert_error_envelope(response.json(), 404, "ENTITY_NOT_FOUND")

    def test_status_change_and_rejected_transition(self, client):
        created = client.post(f"{API}/appointments", json=booking()).json()

        cancelled = client.patch(f"{API}/appointments/{created['id']}/status", json={"status": "CANCELLED"})
        reopened = client.patch(f"{API}/appointments/{created['id']}/status", json={"status": "PENDING"})

        assert cancelled.status_code == 200
        assert cancelled.json()["status"] == "CANCELLED"
        assert reopened.status_code == 409
        assert_error_envelope(reopened.json(), 409, "INVALID_OPERATION")

    def test_request_validation_error(self, client):
        response = client.post(f"{API}/appointments", json=booking(type="PHONE"))

        assert response.status_code == 422
        assert response.json()["error"] is True
        assert response.json()["details"]

    def test_doctor_agenda_masks_anonymous_patients(self, client):
        client.post(
            f"{API}/appointments",
            json=booking(service_id=2, type="ONLINE", doctor_id=None, is_anonymous=True),
        )

        response = client.get(f"{API}/appointments/doctor/3")

        assert response.status_code == 200
        [entry] = response.json()
        assert entry["patient"]["name"] == "Anonymous"
        assert entry["patient"]["email"] is None


# ============================================================================
# Treatment routes
# ============================================================================


@pytest.mark.unit
@pytest.mark.api
class TestTreatmentRoutes:
    """Test /treatments endpoints."""

    def test_second_active_protocol_returns_conflict(self, client):
        response = client.post(
            f"{API}/treatments",
            json={"patient_id": 5, "protocol_id": 2, "doctor_id": 3, "start_date": "2025-01-10T00:00:00Z"},
        )

        assert response.status_code == 409
        assert_error_envelope(response.json(), 409, "TREATMENT_CONFLICT")

    def test_auto_end_existing(self, client):
        response = client.post(
            f"{API}/treatments?auto_end_existing=true",
            json={"patient_id": 5, "protocol_id": 2, "doctor_id": 3, "start_date": "2025-01-10T00:00:00Z"},
        )

        assert response.status_code == 201
        assert response.json()["protocol_id"] == 2

        previous = client.get(f"{API}/treatments/1").json()
        assert previous["end_date"].startswith("2025-01-09T23:59:59")

    def test_violation_report_and_dry_run(self, client):
        report = client.get(f"{API}/treatments/violations")
        repair = client.post(f"{API}/treatments/violations/fix")

        assert report.status_code == 200
        assert report.json() == {"total_violations": 0, "violating_patients": []}
        assert repair.status_code == 200
        assert repair.json()["dry_run"] is True
        assert repair.json()["processed_patients"] == 0

    def test_quick_check(self, client):
        response = client.get(f"{API}/treatments/patients/5/quick-check")

        assert response.status_code == 200
        assert response.json()["has_active_violations"] is False

    def test_continuity_check(self, client):
        response = client.get(
            f"{API}/treatments/patients/7/continuity", params={"start": "2025-02-01T00:00:00Z"}
        )

        assert response.status_code == 200
        assert response.json()["risk_level"] == "low"
        assert response.json()["gap_days"] is None

    def test_reopening_via_null_end_date(self, client):
        response = client.patch(f"{API}/treatments/1", json={"end_date": None})

        assert response.status_code == 200
        assert response.json()["end_date"] is None

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "ok"
