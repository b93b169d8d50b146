"""
Shared pytest fixtures for all tests.

This module provides the pinned clocks, in-memory directories, mock
database sessions and container reset used across the suite.
"""

import os
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

# Ensure test environment
os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("LOG_FORMAT", "plain")

from clinicops.core.container import reset_container  # noqa: E402
from clinicops.domains.scheduling.domain.value_objects.slot import SlotCatalog  # noqa: E402
from clinicops.domains.shared.domain.people import Doctor, Patient  # noqa: E402
from clinicops.domains.treatments.domain.entities.treatment_protocol import TreatmentProtocol  # noqa: E402
from tests.utils import (  # noqa: E402
    InMemoryDoctorDirectory,
    InMemoryPatientDirectory,
    InMemoryProtocolDirectory,
    utc,
)

# ============================================================================
# CLOCKS
# ============================================================================


@pytest.fixture
def scheduling_now() -> datetime:
    """Instant the allocator considers "now"; bookings in the tests lie after it."""
    return utc(2025, 3, 1)


@pytest.fixture
def treatment_now() -> datetime:
    """Instant the continuity guard considers "now"."""
    return utc(2025, 1, 15)


# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """Create a mock database session for unit tests."""
    session = AsyncMock(spec=AsyncSession)
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.refresh = AsyncMock()
    session.flush = AsyncMock()
    session.add = MagicMock()
    return session


# ============================================================================
# DIRECTORY FIXTURES
# ============================================================================


@pytest.fixture
def slot_catalog() -> SlotCatalog:
    return SlotCatalog.from_definitions(
        ["07:00-07:30", "07:30-08:00", "08:10-08:40", "13:00-13:30", "16:30-17:00"]
    )


@pytest.fixture
def patient_directory() -> InMemoryPatientDirectory:
    return InMemoryPatientDirectory(
        [
            Patient(id=5, name="Lan Nguyen", email="lan@example.com"),
            Patient(id=7, name="Minh Tran", email="minh@example.com"),
            Patient(id=8, name="Hoa Pham", email=None),
        ]
    )


@pytest.fixture
def doctor_directory() -> InMemoryDoctorDirectory:
    return InMemoryDoctorDirectory(
        [
            Doctor(id=3, user_id=30, name="Dr. Le", email="le@clinic.example"),
            Doctor(id=4, user_id=40, name="Dr. Vo", email="vo@clinic.example"),
            Doctor(id=6, user_id=60, name="Dr. Do", email=None),
        ]
    )


@pytest.fixture
def protocol_directory() -> InMemoryProtocolDirectory:
    return InMemoryProtocolDirectory(
        [
            TreatmentProtocol(id=1, name="TDF/3TC/DTG"),
            TreatmentProtocol(id=2, name="AZT/3TC/LPV-r"),
            TreatmentProtocol(id=3, name="TAF/FTC/BIC"),
        ]
    )


# ============================================================================
# CONTAINER
# ============================================================================


@pytest.fixture(autouse=True)
def fresh_container():
    """Drop the global container so tests never share adapters."""
    reset_container()
    yield
    reset_container()
