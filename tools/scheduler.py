"""
Medication Scheduler Tool
Clusters per-medication dose anchors into the fewest safe reminder slots
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence, Tuple

from config import SchedulerConfig, scheduler_config
from tools.anchors import MedicationInput, Routine, preferred_times
from tools.interaction_checker import InteractionChecker, interaction_checker
from tools import separation


logger = logging.getLogger(__name__)


ScheduledDose = Tuple[datetime, MedicationInput]


@dataclass
class Slot:
    """One reminder event: a time plus the medications taken at it"""
    time: datetime
    medications: List[MedicationInput] = field(default_factory=list)

    @property
    def medication_names(self) -> List[str]:
        return [m.name for m in self.medications]


def _ref_key(med: MedicationInput) -> Tuple[str, Tuple[str, ...]]:
    name, ingredients = med.interaction_ref
    return name.lower().strip(), tuple(sorted(i.lower().strip() for i in ingredients if i))


class MedicationScheduler:
    """
    Greedy slot clustering with interaction-aware co-scheduling.

    Candidates are visited in time order and joined to the first slot that
    is close enough and safe; the slot's time moves to the average of its
    old time and the candidate's. The result depends on visiting order,
    which is fixed by the sort.
    """

    def __init__(
        self,
        checker: Optional[InteractionChecker] = None,
        config: Optional[SchedulerConfig] = None,
    ):
        self.interaction_checker = checker or interaction_checker
        self.config = config or scheduler_config

    def candidate_doses(
        self,
        medications: Sequence[MedicationInput],
        routine: Routine,
        day: date,
    ) -> List[ScheduledDose]:
        """Anchors for every medication active on `day`, sorted by time"""
        pending: List[ScheduledDose] = []
        for med in medications:
            if not med.is_active_on(day):
                continue
            for t in preferred_times(med, day, routine, self.config):
                pending.append((t, med))
        pending.sort(key=lambda dose: dose[0])
        return pending

    def build_slots(
        self,
        medications: Sequence[MedicationInput],
        routine: Routine,
        day: date,
    ) -> List[Slot]:
        """
        Cluster the day's candidate doses into separated slots

        Args:
            medications: All known medications (inactive ones are skipped)
            routine: Patient routine for anchoring
            day: Date to schedule

        Returns:
            Finalized slots sorted by time
        """
        candidates = self.candidate_doses(medications, routine, day)
        if not candidates:
            return []

        compatible: Dict[frozenset, bool] = {}

        def can_co_schedule(a: MedicationInput, b: MedicationInput) -> bool:
            # keyed on what the checker reads, ids may repeat across inputs
            key = frozenset((_ref_key(a), _ref_key(b)))
            if key not in compatible:
                compatible[key] = self.interaction_checker.can_take_together(
                    a.interaction_ref, b.interaction_ref
                )
            return compatible[key]

        slots: List[Slot] = []
        for t, med in candidates:
            idx = self._best_slot_index(t, med, slots, can_co_schedule)
            if idx is None:
                slots.append(Slot(time=t, medications=[med]))
            else:
                slot = slots[idx]
                slot.medications.append(med)
                slot.time = slot.time + (t - slot.time) / 2

        logger.debug(f"Clustered {len(candidates)} doses into {len(slots)} slots for {day}")
        return separation.enforce(slots, self.interaction_checker, self.config)

    def _best_slot_index(self, t: datetime, med: MedicationInput, slots: List[Slot], can_co_schedule) -> Optional[int]:
        """First slot in creation order within the merge window and safe for `med`"""
        window = self.config.MERGE_WINDOW_SECONDS
        for i, slot in enumerate(slots):
            if abs((slot.time - t).total_seconds()) > window:
                continue
            if all(can_co_schedule(existing, med) for existing in slot.medications):
                return i
        return None

    def build_schedule(
        self,
        medications: Sequence[MedicationInput],
        routine: Routine,
        day: date,
    ) -> List[ScheduledDose]:
        """(time, medication) pairs for the day, one per medication per slot"""
        return expand(self.build_slots(medications, routine, day))

    def get_next_dose(
        self,
        schedule: Sequence[ScheduledDose],
        now: Optional[datetime] = None,
    ) -> Optional[ScheduledDose]:
        """Earliest dose strictly after `now`"""
        now = now or datetime.now()
        upcoming = [dose for dose in schedule if dose[0] > now]
        if not upcoming:
            return None
        return min(upcoming, key=lambda dose: dose[0])

    def format_schedule_display(self, schedule: Sequence[ScheduledDose], day: date) -> str:
        """Format schedule for display"""
        lines = [f"📅 Schedule for {day.strftime('%A, %B %d, %Y')}"]
        lines.append("=" * 50)

        if not schedule:
            lines.append("\nNo doses scheduled")
            return "\n".join(lines)

        for time_str, meds in group_by_time(schedule).items():
            lines.append(f"\n⏰ {time_str}")
            for med in meds:
                dosage = f" {med.dosage}" if med.dosage else ""
                lines.append(f"   💊 {med.name}{dosage} ({med.food_rule.label})")

        return "\n".join(lines)


def expand(slots: Sequence[Slot]) -> List[ScheduledDose]:
    """Flatten slots into (slot time, medication) pairs in time order"""
    out: List[ScheduledDose] = []
    for slot in sorted(slots, key=lambda s: s.time):
        out.extend((slot.time, med) for med in slot.medications)
    return out


def group_by_time(schedule: Sequence[ScheduledDose]) -> Dict[str, List[MedicationInput]]:
    """Map "HH:MM" to the medications due then, in schedule order"""
    grouped: Dict[str, List[MedicationInput]] = {}
    for t, med in schedule:
        grouped.setdefault(t.strftime("%H:%M"), []).append(med)
    return grouped


# Singleton instance
medication_scheduler = MedicationScheduler()


def build_schedule(
    medications: Sequence[MedicationInput],
    routine: Routine,
    day: date,
) -> List[ScheduledDose]:
    """Convenience function to build a day's schedule"""
    return medication_scheduler.build_schedule(medications, routine, day)
