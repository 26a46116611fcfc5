"""
Routine API Router
Endpoints for the owner's daily meal/sleep pattern
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.deps import get_db, services
from api.schemas.schedule import RoutineUpdate, RoutineResponse


router = APIRouter(prefix="/routine", tags=["routine"])


@router.get("/{owner_id}", response_model=RoutineResponse)
async def get_routine(
    owner_id: str,
    db: Session = Depends(get_db)
):
    """
    Get the owner's routine (defaults are created on first read)
    """
    routine_service = services.get_routine_service()
    return await routine_service.get_routine(owner_id, db=db)


@router.put("/{owner_id}", response_model=RoutineResponse)
async def update_routine(
    owner_id: str,
    routine_data: RoutineUpdate,
    db: Session = Depends(get_db)
):
    """
    Update routine times; omitted fields keep their values
    """
    routine_service = services.get_routine_service()
    return await routine_service.update_routine(
        owner_id,
        routine_data.model_dump(exclude_none=True),
        db=db
    )
