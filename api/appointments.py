"""
Appointments API Router
Endpoints for calendar appointments
"""

from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from api.deps import get_db, services
from api.schemas.schedule import AppointmentCreate, AppointmentResponse


router = APIRouter(prefix="/appointments", tags=["appointments"])


@router.post("/", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def create_appointment(
    appointment_data: AppointmentCreate,
    db: Session = Depends(get_db)
):
    """
    Add an appointment
    """
    appointment_service = services.get_appointment_service()
    return await appointment_service.add_appointment(
        owner_id=appointment_data.owner_id,
        title=appointment_data.title,
        scheduled_at=appointment_data.scheduled_at,
        type=appointment_data.type,
        location=appointment_data.location,
        notes=appointment_data.notes,
        db=db
    )


@router.get("/owner/{owner_id}", response_model=List[AppointmentResponse])
async def get_appointments_for_day(
    owner_id: str,
    day: Optional[date] = Query(None, description="Day (YYYY-MM-DD), default today"),
    db: Session = Depends(get_db)
):
    """
    Appointments on a given day
    """
    appointment_service = services.get_appointment_service()
    return await appointment_service.list_for_day(owner_id, day or date.today(), db=db)


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_appointment(
    appointment_id: str,
    db: Session = Depends(get_db)
):
    """
    Delete an appointment
    """
    appointment_service = services.get_appointment_service()
    deleted = await appointment_service.delete_appointment(appointment_id, db=db)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Appointment {appointment_id} not found"
        )
