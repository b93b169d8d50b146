"""
Treatment DTOs

Inputs and reports of the treatment continuity guard.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from clinicops.domains.treatments.domain.value_objects.treatment_state import RiskLevel


@dataclass
class TreatmentCreateRequest:
    """Request for starting a treatment."""

    patient_id: int
    protocol_id: int
    doctor_id: int
    start_date: datetime
    end_date: datetime | None = None
    auto_end_existing: bool = False
    custom_medications: Any = None
    total: Decimal = field(default_factory=lambda: Decimal("0"))
    notes: str | None = None
    created_by_id: int | None = None


@dataclass
class TreatmentChanges:
    """Partial treatment update; None keeps the current value."""

    protocol_id: int | None = None
    doctor_id: int | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    clear_end_date: bool = False
    custom_medications: Any = None
    total: Decimal | None = None
    notes: str | None = None

    @property
    def touches_dates(self) -> bool:
        return self.start_date is not None or self.end_date is not None or self.clear_end_date


@dataclass
class TreatmentSummary:
    id: int
    protocol_id: int
    start_date: datetime
    end_date: datetime | None


@dataclass
class PatientViolation:
    """A patient with more than one treatment active at the same time."""

    patient_id: int
    active_treatment_count: int
    treatments: list[TreatmentSummary]
    protocols: list[int]


@dataclass
class ViolationReport:
    total_violations: int
    violating_patients: list[PatientViolation]


@dataclass
class RepairAction:
    """One treatment closed (or to be closed, on a dry run) by the repair."""

    patient_id: int
    treatment_id: int
    protocol_id: int
    new_end_date: str
    action: str = "end_treatment"


@dataclass
class RepairReport:
    processed_patients: int
    treatments_ended: int
    errors: list[str]
    actions: list[RepairAction]
    dry_run: bool = True


@dataclass
class QuickCheckResult:
    """Fast consistency check of one patient's current treatments."""

    patient_id: int
    has_active_violations: bool
    active_violations_count: int
    multiple_active: bool
    future_dates: bool
    invalid_ranges: bool
    recommendation: str


@dataclass
class ContinuityReport:
    """Gap between a new start and the patient's previous treatment."""

    patient_id: int
    is_continuous: bool
    gap_days: int | None
    risk_level: RiskLevel
    previous_treatment_id: int | None = None
    previous_end_date: datetime | None = None
    recommendations: list[str] = field(default_factory=list)
