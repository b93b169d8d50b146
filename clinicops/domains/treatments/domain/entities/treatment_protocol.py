"""
Treatment Protocol Entity
"""

from dataclasses import dataclass

from clinicops.core.domain import Entity


@dataclass
class TreatmentProtocol(Entity[int]):
    """A named treatment regimen. Read-only from the guard's side."""

    name: str = ""
    description: str | None = None
