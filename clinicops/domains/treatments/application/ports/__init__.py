"""
Treatments Application Ports
"""

from clinicops.domains.treatments.application.ports.protocol_directory import IProtocolDirectory
from clinicops.domains.treatments.application.ports.treatment_repository import ITreatmentRepository

__all__ = ["IProtocolDirectory", "ITreatmentRepository"]
