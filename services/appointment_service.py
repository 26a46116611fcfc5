"""
Appointment Service
Calendar appointments shown next to the day's doses
"""

import logging
from typing import List, Optional
from datetime import datetime, date, time, timedelta
from sqlalchemy.orm import Session
from sqlalchemy import and_

from database import get_db_context
import models


logger = logging.getLogger(__name__)


class AppointmentService:
    """
    Service for appointment operations
    """

    async def add_appointment(
        self,
        owner_id: str,
        title: str,
        scheduled_at: datetime,
        type: models.AppointmentType = models.AppointmentType.DOCTOR,
        location: Optional[str] = None,
        notes: Optional[str] = None,
        db: Optional[Session] = None
    ) -> models.Appointment:
        """Add an appointment"""
        def _add(session: Session) -> models.Appointment:
            appointment = models.Appointment(
                owner_id=owner_id,
                title=title,
                type=type,
                scheduled_at=scheduled_at,
                location=location,
                notes=notes,
            )
            session.add(appointment)
            session.commit()
            session.refresh(appointment)
            logger.info(f"Added {type.value} appointment for owner {owner_id} at {scheduled_at}")
            return appointment

        if db:
            return _add(db)

        with get_db_context() as session:
            return _add(session)

    async def list_for_day(
        self,
        owner_id: str,
        day: date,
        db: Optional[Session] = None
    ) -> List[models.Appointment]:
        """Appointments on `day`, earliest first"""
        start = datetime.combine(day, time.min)
        end = start + timedelta(days=1)

        def _get(session: Session) -> List[models.Appointment]:
            return session.query(models.Appointment).filter(
                and_(
                    models.Appointment.owner_id == owner_id,
                    models.Appointment.scheduled_at >= start,
                    models.Appointment.scheduled_at < end,
                )
            ).order_by(models.Appointment.scheduled_at).all()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def delete_appointment(
        self,
        appointment_id: str,
        db: Optional[Session] = None
    ) -> bool:
        """Delete an appointment; False if it did not exist"""
        def _delete(session: Session) -> bool:
            appointment = session.query(models.Appointment).filter(
                models.Appointment.id == appointment_id
            ).first()
            if not appointment:
                return False
            session.delete(appointment)
            session.commit()
            return True

        if db:
            return _delete(db)

        with get_db_context() as session:
            return _delete(session)


# Singleton instance
appointment_service = AppointmentService()
