"""
Treatment Value Objects

A treatment has no stored status column; its state is derived from its
dates and the current instant.
"""

from dataclasses import dataclass
from datetime import datetime

from clinicops.core.domain import StatusEnum, ValueObject


class TreatmentStateKind(StatusEnum):
    """Tag of a derived treatment state."""

    SCHEDULED = "SCHEDULED"
    ACTIVE = "ACTIVE"
    ENDED = "ENDED"


@dataclass(frozen=True)
class Scheduled(ValueObject):
    """Start lies in the future."""

    starts_at: datetime

    @property
    def kind(self) -> TreatmentStateKind:
        return TreatmentStateKind.SCHEDULED


@dataclass(frozen=True)
class Active(ValueObject):
    """Started and not yet ended."""

    since: datetime

    @property
    def kind(self) -> TreatmentStateKind:
        return TreatmentStateKind.ACTIVE


@dataclass(frozen=True)
class Ended(ValueObject):
    """End date has passed."""

    at: datetime

    @property
    def kind(self) -> TreatmentStateKind:
        return TreatmentStateKind.ENDED


TreatmentState = Scheduled | Active | Ended


class RiskLevel(StatusEnum):
    """Risk of a gap between consecutive treatments."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"
