"""
Scheduling API Routes

FastAPI router for appointment endpoints. Domain exceptions propagate to
the application-wide exception handlers.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from clinicops.domains.scheduling.api.dependencies import get_slot_allocator
from clinicops.domains.scheduling.api.schemas import (
    AppointmentCreateRequest,
    AppointmentResponse,
    AppointmentStatusRequest,
    AppointmentUpdateRequest,
    DoctorAppointmentResponse,
)
from clinicops.domains.scheduling.application.services import AppointmentSlotAllocator

router = APIRouter(prefix="/appointments", tags=["Appointments"])

SlotAllocatorDep = Annotated[AppointmentSlotAllocator, Depends(get_slot_allocator)]


@router.post("", response_model=AppointmentResponse, status_code=201)
async def create_appointment(request: AppointmentCreateRequest, allocator: SlotAllocatorDep):
    """Book a new appointment."""
    appointment = await allocator.allocate(request.to_dto())
    return AppointmentResponse.from_entity(appointment)


@router.patch("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: int,
    request: AppointmentUpdateRequest,
    allocator: SlotAllocatorDep,
):
    """Move or edit an appointment. Booking rules are re-checked."""
    appointment = await allocator.reallocate(appointment_id, request.to_dto())
    return AppointmentResponse.from_entity(appointment)


@router.patch("/{appointment_id}/status", response_model=AppointmentResponse)
async def update_appointment_status(
    appointment_id: int,
    request: AppointmentStatusRequest,
    allocator: SlotAllocatorDep,
):
    """Change appointment status."""
    appointment = await allocator.set_status(appointment_id, request.status)
    return AppointmentResponse.from_entity(appointment)


@router.get("/doctor/{doctor_id}", response_model=list[DoctorAppointmentResponse])
async def list_doctor_appointments(
    doctor_id: int,
    allocator: SlotAllocatorDep,
    limit: int = Query(default=50, ge=1, le=200),
):
    """Doctor agenda, newest first."""
    views = await allocator.list_for_doctor(doctor_id, limit=limit)
    return [DoctorAppointmentResponse.from_view(v) for v in views]


@router.get("/patient/{user_id}", response_model=list[AppointmentResponse])
async def list_patient_appointments(
    user_id: int,
    allocator: SlotAllocatorDep,
    limit: int = Query(default=50, ge=1, le=200),
):
    """Patient's appointments, newest first."""
    appointments = await allocator.list_for_patient(user_id, limit=limit)
    return [AppointmentResponse.from_entity(a) for a in appointments]


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(appointment_id: int, allocator: SlotAllocatorDep):
    """Get an appointment by ID."""
    return AppointmentResponse.from_entity(await allocator.get(appointment_id))
