"""
Tests for Reminder Planning
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from tools.reminders import (
    ReminderCategory,
    dose_key,
    followup_id_for,
    followup_ids_for,
    plan_appointment_reminders,
    plan_reminders,
)
from tools.scheduler import Slot


def at(day: date, hh: int, mm: int = 0) -> datetime:
    return datetime.combine(day, time(hh, mm))


@dataclass
class FakeAppointment:
    id: str
    title: str
    scheduled_at: datetime
    location: Optional[str] = None


class TestKeys:
    """Dose keys and follow-up ids"""

    def test_dose_key_format(self, day):
        t = at(day, 8)
        assert dose_key("med1", t) == f"med1_{int(t.timestamp())}"

    def test_followup_ids_for_dose_key(self, day):
        t = at(day, 8)
        assert followup_ids_for(dose_key("med1", t)) == [followup_id_for(t)]

    def test_followup_ids_for_malformed_key(self):
        assert followup_ids_for("nonsense") == []


class TestPlanReminders:
    """One primary plus one follow-up per future slot"""

    def test_one_pair_per_slot(self, make_med, day):
        slot = Slot(at(day, 19, 30), [make_med("a", name="Amoxicillin"), make_med("b", name="Metformin")])

        reminders = plan_reminders([slot], now=at(day, 12))

        assert [r.category for r in reminders] == [ReminderCategory.DOSE, ReminderCategory.DOSE_FOLLOWUP]
        primary, followup = reminders
        assert primary.fire_at == at(day, 19, 30)
        assert primary.body == "Take: Amoxicillin, Metformin"
        assert primary.data["dose_keys"] == [dose_key("a", slot.time), dose_key("b", slot.time)]
        assert followup.fire_at == at(day, 20)
        assert followup.id == followup_id_for(slot.time)

    def test_past_slots_skipped(self, make_med, day):
        slots = [Slot(at(day, 8), [make_med("a")]), Slot(at(day, 20), [make_med("b")])]

        reminders = plan_reminders(slots, now=at(day, 8))

        assert {r.fire_at.hour for r in reminders} == {20}

    def test_custom_followup_delay(self, make_med, day):
        reminders = plan_reminders([Slot(at(day, 20), [make_med("a")])], now=at(day, 7), followup_minutes=10)
        assert reminders[1].fire_at - reminders[0].fire_at == timedelta(minutes=10)

    def test_no_slots(self):
        assert plan_reminders([]) == []


class TestAppointmentReminders:
    """Appointment notifications"""

    def test_future_only_with_location(self, day):
        appts = [
            FakeAppointment("1", "Dentist", at(day, 9)),
            FakeAppointment("2", "Therapy", at(day, 15), location="Clinic B"),
        ]

        reminders = plan_appointment_reminders(appts, now=at(day, 10))

        assert len(reminders) == 1
        assert reminders[0].id == "APPT_2"
        assert reminders[0].category == ReminderCategory.APPOINTMENT
        assert "Clinic B" in reminders[0].body
