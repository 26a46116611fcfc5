"""
Medications API Router
Endpoints for medication management
"""

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from api.deps import get_db, services
from api.schemas.medication import (
    MedicationCreate,
    MedicationUpdate,
    MedicationResponse,
    MedicationList,
)


router = APIRouter(prefix="/medications", tags=["medications"])


@router.post("/", response_model=MedicationResponse, status_code=status.HTTP_201_CREATED)
async def create_medication(
    medication_data: MedicationCreate,
    db: Session = Depends(get_db)
):
    """
    Add a new medication

    - **owner_id**: Owner identifier
    - **name**: Medication name
    - **frequency_per_day**: Doses per day (>= 1)
    - **food_rule**: before_food, after_food or none
    """
    medication_service = services.get_medication_service()

    try:
        medication = await medication_service.add_medication(
            owner_id=medication_data.owner_id,
            name=medication_data.name,
            frequency_per_day=medication_data.frequency_per_day,
            dosage=medication_data.dosage,
            ingredients=medication_data.ingredients,
            start_date=medication_data.start_date,
            end_date=medication_data.end_date,
            food_rule=medication_data.food_rule,
            min_interval_hours=medication_data.min_interval_hours,
            must_avoid=medication_data.must_avoid,
            notes=medication_data.notes,
            db=db
        )
        return medication
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


@router.get("/owner/{owner_id}", response_model=MedicationList)
async def get_owner_medications(
    owner_id: str,
    include_archived: bool = Query(False, description="Include archived medications"),
    db: Session = Depends(get_db)
):
    """
    Get all medications for an owner
    """
    medication_service = services.get_medication_service()

    medications = await medication_service.list_medications(
        owner_id,
        include_archived=include_archived,
        db=db
    )

    return MedicationList(
        medications=[MedicationResponse.model_validate(m) for m in medications],
        total=len(medications)
    )


@router.get("/{medication_id}", response_model=MedicationResponse)
async def get_medication(
    medication_id: str,
    db: Session = Depends(get_db)
):
    """
    Get a medication
    """
    medication_service = services.get_medication_service()

    medication = await medication_service.get_medication(medication_id, db=db)
    if not medication:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Medication {medication_id} not found"
        )

    return medication


@router.patch("/{medication_id}", response_model=MedicationResponse)
async def update_medication(
    medication_id: str,
    medication_data: MedicationUpdate,
    db: Session = Depends(get_db)
):
    """
    Update medication information
    """
    medication_service = services.get_medication_service()

    updates = medication_data.model_dump(exclude_unset=True, exclude_none=True)

    try:
        medication = await medication_service.update_medication(
            medication_id,
            updates,
            db=db
        )
    except ValueError as e:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    if not medication:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Medication {medication_id} not found"
        )

    return medication


@router.delete("/{medication_id}", response_model=MedicationResponse)
async def archive_medication(
    medication_id: str,
    db: Session = Depends(get_db)
):
    """
    Archive a medication so it no longer appears in schedules
    """
    medication_service = services.get_medication_service()

    medication = await medication_service.archive_medication(medication_id, db=db)
    if not medication:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Medication {medication_id} not found"
        )

    return medication


@router.get("/owner/{owner_id}/interactions")
async def check_owner_interactions(
    owner_id: str,
    db: Session = Depends(get_db)
):
    """
    Interaction summary across an owner's current medications
    """
    medication_service = services.get_medication_service()
    return await medication_service.check_interactions(owner_id, db=db)
