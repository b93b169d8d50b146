"""
Treatment Value Objects
"""

from clinicops.domains.treatments.domain.value_objects.treatment_state import (
    Active,
    Ended,
    RiskLevel,
    Scheduled,
    TreatmentState,
    TreatmentStateKind,
)

__all__ = ["Active", "Ended", "RiskLevel", "Scheduled", "TreatmentState", "TreatmentStateKind"]
