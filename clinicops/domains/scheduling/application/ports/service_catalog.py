"""
Service Catalog Port
"""

from typing import Protocol, runtime_checkable

from clinicops.domains.scheduling.domain.entities.clinic_service import ClinicService


@runtime_checkable
class IServiceCatalog(Protocol):
    """Read-only lookup of clinic services."""

    async def find_by_id(self, service_id: int) -> ClinicService | None:
        """
        Find service by ID.

        Args:
            service_id: Service identifier

        Returns:
            ClinicService if found, None otherwise
        """
        ...
