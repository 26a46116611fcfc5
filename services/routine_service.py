"""
Routine Service
Owner's daily meal/sleep pattern used to anchor doses
"""

import logging
from typing import Dict, Optional, Any
from datetime import datetime
from sqlalchemy.orm import Session

from database import get_db_context
import models


logger = logging.getLogger(__name__)


ROUTINE_FIELDS = ("wake_time", "bed_time", "breakfast_time", "lunch_time", "dinner_time")


class RoutineService:
    """
    Service for routine operations
    """

    async def get_routine(
        self,
        owner_id: str,
        db: Optional[Session] = None
    ) -> models.Routine:
        """Get the owner's routine, creating one with default times if missing"""
        def _get(session: Session) -> models.Routine:
            routine = session.query(models.Routine).filter(
                models.Routine.owner_id == owner_id
            ).first()
            if routine:
                return routine

            routine = models.Routine(owner_id=owner_id)
            session.add(routine)
            session.commit()
            session.refresh(routine)
            logger.info(f"Created default routine for owner {owner_id}")
            return routine

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def update_routine(
        self,
        owner_id: str,
        updates: Dict[str, Any],
        db: Optional[Session] = None
    ) -> models.Routine:
        """
        Update routine times

        Args:
            owner_id: Owner identifier
            updates: Any subset of wake_time, bed_time, breakfast_time, lunch_time, dinner_time
            db: Database session

        Returns:
            Updated Routine object
        """
        def _update(session: Session) -> models.Routine:
            routine = session.query(models.Routine).filter(
                models.Routine.owner_id == owner_id
            ).first()
            if not routine:
                routine = models.Routine(owner_id=owner_id)
                session.add(routine)

            for field in ROUTINE_FIELDS:
                value = updates.get(field)
                if value is not None:
                    setattr(routine, field, value)

            routine.updated_at = datetime.utcnow()
            session.commit()
            session.refresh(routine)
            return routine

        if db:
            return _update(db)

        with get_db_context() as session:
            return _update(session)


# Singleton instance
routine_service = RoutineService()
