"""
Reminder Planning Tool
Turns finalized slots into one notification per slot plus a "did you take it?" follow-up
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, TYPE_CHECKING

from tools.anchors import MedicationInput

if TYPE_CHECKING:
    from tools.scheduler import Slot


logger = logging.getLogger(__name__)


class ReminderCategory(str, Enum):
    """Notification categories the delivery layer registers"""
    DOSE = "dose"
    DOSE_FOLLOWUP = "dose_followup"
    APPOINTMENT = "appointment"


@dataclass
class ReminderRequest:
    """A one-shot local notification to schedule"""
    id: str
    category: ReminderCategory
    title: str
    body: str
    fire_at: datetime
    data: Dict[str, Any] = field(default_factory=dict)


def _epoch(t: datetime) -> int:
    return int(t.timestamp())


def dose_key(medication_id: str, scheduled_at: datetime) -> str:
    """Stable key for one dose of one medication"""
    return f"{medication_id}_{_epoch(scheduled_at)}"


def followup_id_for(slot_time: datetime) -> str:
    return f"DOSE_FU_{_epoch(slot_time)}"


def followup_ids_for(key: str) -> List[str]:
    """Follow-up notification ids to cancel once the dose `key` is taken"""
    _, _, epoch = key.rpartition("_")
    if not epoch.isdigit():
        return []
    return [f"DOSE_FU_{epoch}"]


def _medication_list(meds: Sequence[MedicationInput]) -> str:
    parts = []
    for med in meds:
        parts.append(f"{med.name} {med.dosage}".strip())
    return ", ".join(parts)


def plan_reminders(
    slots: Sequence["Slot"],
    now: Optional[datetime] = None,
    followup_minutes: int = 30,
) -> List[ReminderRequest]:
    """
    Plan dose notifications for a day's slots

    Args:
        slots: Finalized slots from the scheduler
        now: Reference time; slots at or before it are skipped
        followup_minutes: Delay of the follow-up after each slot

    Returns:
        Primary and follow-up requests, in time order
    """
    now = now or datetime.now()
    requests: List[ReminderRequest] = []

    for slot in sorted(slots, key=lambda s: s.time):
        if slot.time <= now:
            continue

        keys = [dose_key(m.id, slot.time) for m in slot.medications]
        meds = _medication_list(slot.medications)

        requests.append(ReminderRequest(
            id=f"DOSE_{_epoch(slot.time)}",
            category=ReminderCategory.DOSE,
            title="Time for your medication",
            body=f"Take: {meds}",
            fire_at=slot.time,
            data={"dose_keys": keys},
        ))
        requests.append(ReminderRequest(
            id=followup_id_for(slot.time),
            category=ReminderCategory.DOSE_FOLLOWUP,
            title="Did you take your medication?",
            body=f"Tap to confirm: {meds}",
            fire_at=slot.time + timedelta(minutes=followup_minutes),
            data={"dose_keys": keys},
        ))

    logger.debug(f"Planned {len(requests)} dose reminders")
    return requests


def plan_appointment_reminders(
    appointments: Sequence[Any],
    now: Optional[datetime] = None,
) -> List[ReminderRequest]:
    """Reminders for future appointments (objects with id/title/scheduled_at/location)"""
    now = now or datetime.now()
    out = []
    for appt in sorted(appointments, key=lambda a: a.scheduled_at):
        if appt.scheduled_at <= now:
            continue
        body = appt.title
        if getattr(appt, "location", None):
            body = f"{appt.title} • {appt.location}"
        out.append(ReminderRequest(
            id=f"APPT_{appt.id}",
            category=ReminderCategory.APPOINTMENT,
            title="Upcoming appointment",
            body=body,
            fire_at=appt.scheduled_at,
            data={"appointment_id": appt.id},
        ))
    return out
