"""
Schedules API Router
Endpoints for day agendas, stateless schedule computation and dose completion
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from api.deps import get_db, services
from api.schemas.schedule import (
    AgendaResponse,
    AppointmentResponse,
    ComputeRequest,
    ComputeResponse,
    ComputedSlot,
    DoseResponse,
    DoseToggleResponse,
    ReminderResponse,
)
from tools.anchors import MedicationInput, Routine
from tools.scheduler import medication_scheduler


router = APIRouter(prefix="/schedules", tags=["schedules"])


@router.post("/compute", response_model=ComputeResponse)
async def compute_schedule(request: ComputeRequest):
    """
    Compute a day's slots from an inline payload without touching storage
    """
    medications = [
        MedicationInput(
            id=m.id,
            name=m.name,
            frequency_per_day=m.frequency_per_day,
            start_date=m.start_date,
            end_date=m.end_date,
            food_rule=m.food_rule,
            ingredients=tuple(m.ingredients),
            min_interval_hours=m.min_interval_hours,
            dosage=m.dosage,
        )
        for m in request.medications
    ]
    routine = Routine(**request.routine.model_dump())

    slots = medication_scheduler.build_slots(medications, routine, request.day)

    return ComputeResponse(
        day=request.day,
        slots=[ComputedSlot(time=s.time, medications=s.medication_names) for s in slots],
        interactions_available=medication_scheduler.interaction_checker.rules_loaded,
    )


@router.get("/{owner_id}", response_model=AgendaResponse)
async def get_day_agenda(
    owner_id: str,
    day: Optional[date] = Query(None, description="Day (YYYY-MM-DD), default today"),
    db: Session = Depends(get_db)
):
    """
    Recompute and return the owner's agenda for a day

    Doses, appointments, the reminder plan and whether interaction data was available.
    """
    schedule_service = services.get_schedule_service()
    agenda = await schedule_service.recompute(owner_id, day=day, db=db)

    return AgendaResponse(
        owner_id=agenda.owner_id,
        day=agenda.day,
        slot_count=agenda.slot_count,
        doses=[DoseResponse.model_validate(d) for d in agenda.doses],
        appointments=[AppointmentResponse.model_validate(a) for a in agenda.appointments],
        reminders=[
            ReminderResponse(
                id=r.id,
                category=r.category.value,
                title=r.title,
                body=r.body,
                fire_at=r.fire_at,
                data=r.data,
            )
            for r in agenda.reminders
        ],
        interactions_available=agenda.interactions_available,
    )


@router.post("/{owner_id}/doses/{dose_key}/toggle", response_model=DoseToggleResponse)
async def toggle_dose(
    owner_id: str,
    dose_key: str,
    db: Session = Depends(get_db)
):
    """
    Flip a dose between taken and not taken
    """
    schedule_service = services.get_schedule_service()

    try:
        return await schedule_service.toggle_dose(owner_id, dose_key, db=db)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


@router.post("/{owner_id}/doses/{dose_key}/taken", response_model=DoseToggleResponse)
async def mark_dose_taken(
    owner_id: str,
    dose_key: str,
    db: Session = Depends(get_db)
):
    """
    Mark a dose taken (notification "done" action); repeated calls keep it taken
    """
    schedule_service = services.get_schedule_service()

    try:
        return await schedule_service.mark_dose_taken(owner_id, dose_key, db=db)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
