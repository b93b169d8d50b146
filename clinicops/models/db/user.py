"""
User and doctor directory tables.

Patients are rows of `users`; doctors are users with a `doctors` profile.
Both are read-only from the scheduling and treatment services.
"""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from clinicops.models.db.base import Base, TimestampMixin


class UserModel(Base, TimestampMixin):
    """SQLAlchemy model for clinic users (patients, staff and doctors)."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    phone = Column(String(20), nullable=True)

    doctor_profile = relationship("DoctorModel", back_populates="user", uselist=False)

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, email='{self.email}')>"


class DoctorModel(Base, TimestampMixin):
    """SQLAlchemy model for doctor profiles."""

    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    specialization = Column(String(100), nullable=True)

    user = relationship("UserModel", back_populates="doctor_profile", lazy="joined")

    def __repr__(self) -> str:
        return f"<DoctorModel(id={self.id}, user_id={self.user_id})>"
