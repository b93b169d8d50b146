"""
Patient Treatment Entity

A patient following one treatment protocol over a date range.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from clinicops.core.domain import AggregateRoot, ValidationException
from clinicops.domains.shared.domain.intervals import Period

from ..value_objects.treatment_state import Active, Ended, Scheduled, TreatmentState


@dataclass
class PatientTreatment(AggregateRoot[int]):
    """
    Patient treatment aggregate root.

    A treatment is active at `now` when it has started and has not ended:
    `start_date <= now` and (`end_date` is None or `end_date > now`).

    Example:
        ```python
        treatment = PatientTreatment(
            patient_id=5,
            protocol_id=2,
            doctor_id=3,
            start_date=datetime(2025, 1, 1, tzinfo=UTC),
        )
        treatment.is_active(now)     # True once started
        treatment.end_at(cutoff)     # closes the period
        ```
    """

    patient_id: int = 0
    protocol_id: int = 0
    doctor_id: int = 0
    start_date: datetime | None = None
    end_date: datetime | None = None
    custom_medications: Any = None
    total: Decimal = field(default_factory=lambda: Decimal("0"))
    notes: str | None = None
    created_by_id: int | None = None

    def _require_start(self) -> datetime:
        if self.start_date is None:
            raise ValidationException("Treatment has no start date", field="start_date")
        return self.start_date

    def is_active(self, now: datetime) -> bool:
        start = self._require_start()
        return start <= now and (self.end_date is None or self.end_date > now)

    def state(self, now: datetime) -> TreatmentState:
        start = self._require_start()
        if start > now:
            return Scheduled(starts_at=start)
        if self.end_date is not None and self.end_date <= now:
            return Ended(at=self.end_date)
        return Active(since=start)

    @property
    def period(self) -> Period:
        return Period(start=self._require_start(), end=self.end_date)

    def end_at(self, when: datetime) -> None:
        """Close the treatment at `when`, which may not precede its start."""
        if when < self._require_start():
            raise ValidationException(
                f"Cannot end treatment {self.id} before it started", field="end_date"
            )
        self.end_date = when
        self.touch()

    def summary(self) -> dict[str, Any]:
        """Compact description used in audit reports."""
        return {
            "id": self.id,
            "protocol_id": self.protocol_id,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
        }
