"""
Domain Layer - Core DDD building blocks

- Entities: Objects with identity and lifecycle
- Value Objects: Immutable objects compared by value
- Exceptions: Domain-specific error handling
"""

from clinicops.core.domain.entities import AggregateRoot, Entity
from clinicops.core.domain.exceptions import (
    AppointmentConflictException,
    BusinessRuleViolationException,
    DomainException,
    EntityNotFoundException,
    IntegrationException,
    InvalidOperationException,
    TreatmentConflictException,
    ValidationException,
)
from clinicops.core.domain.value_objects import StatusEnum, ValueObject

__all__ = [
    # Entities
    "Entity",
    "AggregateRoot",
    # Value Objects
    "ValueObject",
    "StatusEnum",
    # Exceptions
    "DomainException",
    "ValidationException",
    "EntityNotFoundException",
    "BusinessRuleViolationException",
    "InvalidOperationException",
    "IntegrationException",
    "AppointmentConflictException",
    "TreatmentConflictException",
]
