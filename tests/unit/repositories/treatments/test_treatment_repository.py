"""
Unit tests for the treatment repository.

Tests SQLAlchemyTreatmentRepository against a mocked AsyncSession.
"""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from clinicops.domains.treatments.infrastructure.persistence.sqlalchemy.models import PatientTreatmentModel
from clinicops.domains.treatments.infrastructure.repositories.treatment_repository import (
    SQLAlchemyTreatmentRepository,
)
from tests.utils import TreatmentBuilder, utc


@pytest.fixture
def treatment_model() -> PatientTreatmentModel:
    return PatientTreatmentModel(
        id=1,
        patient_id=5,
        protocol_id=1,
        doctor_id=3,
        start_date=utc(2025, 1, 1),
        end_date=None,
        total=Decimal("250.00"),
    )


@pytest.fixture
def repository(mock_db_session) -> SQLAlchemyTreatmentRepository:
    mock_db_session.begin_nested = MagicMock()
    return SQLAlchemyTreatmentRepository(mock_db_session)


@pytest.mark.unit
@pytest.mark.repository
class TestSQLAlchemyTreatmentRepository:
    """Test treatment repository implementation."""

    @pytest.mark.asyncio
    async def test_find_active_maps_models(self, repository, mock_db_session, treatment_model):
        # Arrange
        result = MagicMock()
        result.scalars.return_value.all.return_value = [treatment_model]
        mock_db_session.execute.return_value = result

        # Act
        active = await repository.find_active(utc(2025, 1, 15), patient_id=5)

        # Assert
        assert len(active) == 1
        assert active[0].id == 1
        assert active[0].total == Decimal("250.00")
        assert active[0].is_active(utc(2025, 1, 15)) is True

    @pytest.mark.asyncio
    async def test_save_without_commit_flushes(self, repository, mock_db_session):
        """Test save inside a unit of work only flushes."""
        mock_db_session.execute.return_value = MagicMock(scalar_one_or_none=MagicMock(return_value=None))

        await repository.save(TreatmentBuilder().build(), commit=False)

        mock_db_session.add.assert_called_once()
        mock_db_session.flush.assert_awaited_once()
        mock_db_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_save_updates_end_date(self, repository, mock_db_session, treatment_model):
        mock_db_session.execute.return_value = MagicMock(scalar_one_or_none=MagicMock(return_value=treatment_model))
        treatment = TreatmentBuilder().with_id(1).starting(utc(2025, 1, 1)).ending(utc(2025, 1, 9, 23, 59, 59)).build()

        saved = await repository.save(treatment)

        assert treatment_model.end_date == utc(2025, 1, 9, 23, 59, 59)
        assert saved.end_date == utc(2025, 1, 9, 23, 59, 59)
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_commit_rolls_back_and_reraises(self, repository, mock_db_session, treatment_model):
        """Test a failed commit leaves the session usable for the next write."""
        # Arrange
        mock_db_session.execute.return_value = MagicMock(scalar_one_or_none=MagicMock(return_value=treatment_model))
        mock_db_session.commit.side_effect = OperationalError("UPDATE patient_treatments ...", {}, Exception("lost"))
        treatment = TreatmentBuilder().with_id(1).starting(utc(2025, 1, 1)).ending(utc(2025, 1, 15)).build()

        # Act & Assert
        with pytest.raises(OperationalError):
            await repository.save(treatment)

        mock_db_session.rollback.assert_awaited_once()
        mock_db_session.refresh.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_atomic_commits_on_success(self, repository, mock_db_session):
        async with repository.atomic():
            pass

        mock_db_session.begin_nested.assert_called_once()
        mock_db_session.commit.assert_awaited_once()
        mock_db_session.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_atomic_rolls_back_and_reraises(self, repository, mock_db_session):
        with pytest.raises(RuntimeError):
            async with repository.atomic():
                raise RuntimeError("insert failed")

        mock_db_session.rollback.assert_awaited_once()
        mock_db_session.commit.assert_not_awaited()
