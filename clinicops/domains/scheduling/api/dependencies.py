"""
Scheduling API Dependencies

FastAPI dependencies for the scheduling domain.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from clinicops.core.container import get_container
from clinicops.database.async_db import get_async_db
from clinicops.domains.scheduling.application.services import AppointmentSlotAllocator

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_async_db)]


def get_slot_allocator(db: DbSession) -> AppointmentSlotAllocator:
    """Get AppointmentSlotAllocator instance with database session."""
    return get_container().create_slot_allocator(db)


__all__ = ["get_slot_allocator"]
