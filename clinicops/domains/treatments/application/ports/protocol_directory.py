"""
Protocol Directory Port
"""

from typing import Protocol, runtime_checkable

from clinicops.domains.treatments.domain.entities.treatment_protocol import TreatmentProtocol


@runtime_checkable
class IProtocolDirectory(Protocol):
    """Read-only lookup of treatment protocols."""

    async def find_by_id(self, protocol_id: int) -> TreatmentProtocol | None:
        """
        Find protocol by ID.

        Args:
            protocol_id: Protocol ID

        Returns:
            Protocol if found, None otherwise
        """
        ...
