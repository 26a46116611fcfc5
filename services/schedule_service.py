"""
Schedule Service
Recomputes an owner's day agenda and tracks which doses were taken
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Tuple
from datetime import datetime, date, time, timedelta
from sqlalchemy.orm import Session
from sqlalchemy import and_

from config import get_settings
from database import get_db_context
import models
from tools.anchors import Routine
from tools.reminders import ReminderRequest, dose_key, followup_ids_for, plan_reminders, plan_appointment_reminders
from tools.scheduler import MedicationScheduler, medication_scheduler


logger = logging.getLogger(__name__)
settings = get_settings()


@dataclass
class DoseRow:
    """One medication due at one slot time"""
    key: str
    time: datetime
    medication_id: str
    name: str
    dosage: str
    food_rule: str
    taken: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "time": self.time.isoformat(),
            "medication_id": self.medication_id,
            "name": self.name,
            "dosage": self.dosage,
            "food_rule": self.food_rule,
            "taken": self.taken,
        }


@dataclass
class DayAgenda:
    """Everything the day view needs"""
    owner_id: str
    day: date
    doses: List[DoseRow] = field(default_factory=list)
    appointments: List[models.Appointment] = field(default_factory=list)
    reminders: List[ReminderRequest] = field(default_factory=list)
    interactions_available: bool = True

    @property
    def slot_count(self) -> int:
        return len({row.time for row in self.doses})


def parse_dose_key(key: str) -> Tuple[str, datetime]:
    """Split '<medication_id>_<epoch>' into its parts"""
    medication_id, sep, epoch = key.rpartition("_")
    if not sep or not medication_id or not epoch.isdigit():
        raise ValueError(f"Malformed dose key: {key}")
    return medication_id, datetime.fromtimestamp(int(epoch))


class ScheduleService:
    """
    Service for day schedules and dose completion
    """

    def __init__(self, scheduler: Optional[MedicationScheduler] = None):
        self.scheduler = scheduler or medication_scheduler

    async def recompute(
        self,
        owner_id: str,
        day: Optional[date] = None,
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> DayAgenda:
        """
        Rebuild the agenda for a day from current medications and routine

        Args:
            owner_id: Owner identifier
            day: Date to schedule (default today)
            now: Reference time for reminder planning
            db: Database session

        Returns:
            DayAgenda with dose rows, appointments and reminder plan
        """
        day = day or date.today()

        def _recompute(session: Session) -> DayAgenda:
            medications = session.query(models.Medication).filter(
                and_(
                    models.Medication.owner_id == owner_id,
                    models.Medication.is_archived == False,  # noqa: E712
                )
            ).order_by(models.Medication.created_at).all()

            routine_row = session.query(models.Routine).filter(
                models.Routine.owner_id == owner_id
            ).first()
            routine = routine_row.to_value() if routine_row else Routine()

            slots = self.scheduler.build_slots([m.to_input() for m in medications], routine, day)
            taken = self._taken_keys(session, owner_id)

            doses = []
            for slot in slots:
                for med in slot.medications:
                    key = dose_key(med.id, slot.time)
                    doses.append(DoseRow(
                        key=key,
                        time=slot.time,
                        medication_id=med.id,
                        name=med.name,
                        dosage=med.dosage,
                        food_rule=med.food_rule.value,
                        taken=key in taken,
                    ))

            appointments = self._appointments_on(session, owner_id, day)
            reminders = plan_reminders(
                slots, now=now, followup_minutes=settings.REMINDER_FOLLOWUP_MINUTES
            )
            reminders.extend(plan_appointment_reminders(appointments, now=now))
            reminders.sort(key=lambda r: r.fire_at)

            logger.info(
                f"Recomputed schedule for owner {owner_id} on {day}: "
                f"{len(doses)} doses in {len(slots)} slots"
            )
            return DayAgenda(
                owner_id=owner_id,
                day=day,
                doses=doses,
                appointments=appointments,
                reminders=reminders,
                interactions_available=self.scheduler.interaction_checker.rules_loaded,
            )

        if db:
            return _recompute(db)

        with get_db_context() as session:
            return _recompute(session)

    def _taken_keys(self, session: Session, owner_id: str) -> set:
        rows = session.query(models.DoseLog.dose_key).filter(
            and_(
                models.DoseLog.owner_id == owner_id,
                models.DoseLog.status == models.DoseStatus.TAKEN,
            )
        ).all()
        return {row[0] for row in rows}

    def _appointments_on(self, session: Session, owner_id: str, day: date) -> List[models.Appointment]:
        start = datetime.combine(day, time.min)
        return session.query(models.Appointment).filter(
            and_(
                models.Appointment.owner_id == owner_id,
                models.Appointment.scheduled_at >= start,
                models.Appointment.scheduled_at < start + timedelta(days=1),
            )
        ).order_by(models.Appointment.scheduled_at).all()

    async def toggle_dose(
        self,
        owner_id: str,
        key: str,
        db: Optional[Session] = None
    ) -> Dict[str, Any]:
        """
        Flip a dose between taken and not taken

        Returns:
            Dict with the dose key, new taken state and follow-up ids to cancel
        """
        medication_id, scheduled_at = parse_dose_key(key)

        def _toggle(session: Session) -> Dict[str, Any]:
            log = session.query(models.DoseLog).filter(
                and_(
                    models.DoseLog.owner_id == owner_id,
                    models.DoseLog.dose_key == key,
                )
            ).first()

            if log is None:
                log = models.DoseLog(
                    owner_id=owner_id,
                    dose_key=key,
                    medication_id=medication_id,
                    scheduled_at=scheduled_at,
                    status=models.DoseStatus.SCHEDULED,
                )
                session.add(log)

            if log.status == models.DoseStatus.TAKEN:
                log.status = models.DoseStatus.SCHEDULED
                log.taken_at = None
            else:
                log.status = models.DoseStatus.TAKEN
                log.taken_at = datetime.now()

            session.commit()
            taken = log.status == models.DoseStatus.TAKEN
            logger.info(f"Dose {key} for owner {owner_id} marked {'taken' if taken else 'not taken'}")
            return {
                "key": key,
                "taken": taken,
                "cancel_reminder_ids": followup_ids_for(key) if taken else [],
            }

        if db:
            return _toggle(db)

        with get_db_context() as session:
            return _toggle(session)

    async def mark_dose_taken(
        self,
        owner_id: str,
        key: str,
        db: Optional[Session] = None
    ) -> Dict[str, Any]:
        """Set a dose to taken (the notification 'done' action); idempotent"""
        def _mark(session: Session) -> Optional[Dict[str, Any]]:
            log = session.query(models.DoseLog).filter(
                and_(
                    models.DoseLog.owner_id == owner_id,
                    models.DoseLog.dose_key == key,
                )
            ).first()
            if log is not None and log.status == models.DoseStatus.TAKEN:
                return {"key": key, "taken": True, "cancel_reminder_ids": followup_ids_for(key)}
            return None

        if db:
            result = _mark(db)
        else:
            with get_db_context() as session:
                result = _mark(session)

        if result is not None:
            return result
        return await self.toggle_dose(owner_id, key, db=db)


# Singleton instance
schedule_service = ScheduleService()
