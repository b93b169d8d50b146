"""
Scheduling SQLAlchemy Models

Database models for services, doctor schedules and appointments.
"""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Time,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import relationship

from clinicops.domains.scheduling.domain.value_objects.appointment_status import (
    AppointmentStatus,
    AppointmentType,
    ServiceType,
)
from clinicops.domains.scheduling.domain.value_objects.shift import Shift
from clinicops.models.db.base import Base, TimestampMixin


class ServiceModel(Base, TimestampMixin):
    """SQLAlchemy model for clinic services."""

    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    type = Column(SQLEnum(ServiceType, name="service_type"), nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    price = Column(Numeric(12, 2), nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<ServiceModel(id={self.id}, name='{self.name}', type={self.type})>"


class DoctorScheduleModel(Base, TimestampMixin):
    """SQLAlchemy model for doctor working shifts."""

    __tablename__ = "doctor_schedules"

    id = Column(Integer, primary_key=True, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)
    work_date = Column(Date, nullable=False)
    shift = Column(SQLEnum(Shift, name="shift"), nullable=False)
    is_off = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint("doctor_id", "work_date", "shift", name="uq_doctor_schedules_doctor_day_shift"),
        Index("ix_doctor_schedules_day_shift", "work_date", "shift"),
    )

    def __repr__(self) -> str:
        return f"<DoctorScheduleModel(doctor_id={self.doctor_id}, date={self.work_date}, shift={self.shift})>"


class AppointmentModel(Base, TimestampMixin):
    """SQLAlchemy model for appointments."""

    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=True, index=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False)

    appointment_time = Column(DateTime(timezone=True), nullable=False)
    slot_end = Column(DateTime(timezone=True), nullable=False)
    type = Column(SQLEnum(AppointmentType, name="appointment_type"), nullable=False)
    status = Column(
        SQLEnum(AppointmentStatus, name="appointment_status"),
        nullable=False,
        default=AppointmentStatus.PENDING,
    )
    is_anonymous = Column(Boolean, nullable=False, default=False)
    notes = Column(Text, nullable=True)

    patient_meeting_url = Column(Text, nullable=True)
    doctor_meeting_url = Column(Text, nullable=True)

    service = relationship("ServiceModel")

    __table_args__ = (
        # One active booking per doctor and slot start
        Index(
            "uq_appointments_doctor_active_slot",
            "doctor_id",
            "appointment_time",
            unique=True,
            postgresql_where=text("status IN ('PENDING', 'CONFIRMED')"),
        ),
        Index("ix_appointments_doctor_window", "doctor_id", "appointment_time", "slot_end"),
    )

    def __repr__(self) -> str:
        return f"<AppointmentModel(id={self.id}, doctor_id={self.doctor_id}, time={self.appointment_time})>"
