"""
Treatments API Dependencies
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from clinicops.core.container import get_container
from clinicops.database.async_db import get_async_db
from clinicops.domains.treatments.application.services import TreatmentContinuityGuard

DbSession = Annotated[AsyncSession, Depends(get_async_db)]


def get_continuity_guard(db: DbSession) -> TreatmentContinuityGuard:
    """Get TreatmentContinuityGuard instance with database session."""
    return get_container().create_continuity_guard(db)


__all__ = ["get_continuity_guard"]
