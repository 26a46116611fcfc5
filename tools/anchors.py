"""
Dose Anchor Generator
Candidate dose times for one medication on one day, from its food rule and the patient routine
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import List, Optional

from config import SchedulerConfig, scheduler_config
from tools.label_parser import FoodRule


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Routine:
    """Patient's daily meal/sleep pattern, applied identically every day"""
    wake_time: time = time(7, 0)
    bed_time: time = time(23, 0)
    breakfast_time: time = time(8, 0)
    lunch_time: time = time(13, 0)
    dinner_time: time = time(19, 0)


@dataclass(frozen=True)
class MedicationInput:
    """A medication as the scheduler sees it"""
    id: str
    name: str
    frequency_per_day: int
    start_date: date
    end_date: date
    food_rule: FoodRule = FoodRule.NONE
    ingredients: tuple = field(default_factory=tuple)
    min_interval_hours: Optional[float] = None
    dosage: str = ""
    notes: Optional[str] = None

    def is_active_on(self, day: date) -> bool:
        """Inclusive date-range overlap with the given day"""
        return self.start_date <= day and self.end_date >= day

    @property
    def interaction_ref(self):
        """(name, ingredients) pair for the interaction checker"""
        return (self.name, list(self.ingredients))


@dataclass(frozen=True)
class DayWindow:
    """Routine times resolved onto one calendar date"""
    start_of_day: datetime
    end_of_day: datetime
    wake: datetime
    bed: datetime
    breakfast: datetime
    lunch: datetime
    dinner: datetime


def _at(day: date, t: time) -> datetime:
    return datetime.combine(day, time(t.hour, t.minute))


def resolve_day(routine: Routine, day: date, config: SchedulerConfig = scheduler_config) -> DayWindow:
    """Concrete timestamps for the routine on `day`

    A bedtime at or before wake time is an overnight routine; the awake
    window then ends a fixed number of hours after waking.
    """
    start = datetime.combine(day, time.min)
    wake = _at(day, routine.wake_time)
    bed = _at(day, routine.bed_time)
    if bed <= wake:
        bed = wake + timedelta(hours=config.OVERNIGHT_FALLBACK_HOURS)

    return DayWindow(
        start_of_day=start,
        end_of_day=start + timedelta(days=1),
        wake=wake,
        bed=bed,
        breakfast=_at(day, routine.breakfast_time),
        lunch=_at(day, routine.lunch_time),
        dinner=_at(day, routine.dinner_time),
    )


def meal_anchors(window: DayWindow, food_rule: FoodRule, frequency: int) -> List[datetime]:
    """Meal/bed anchors for food-linked medications, before any offset"""
    if frequency == 1:
        anchors = [window.dinner] if food_rule == FoodRule.AFTER_FOOD else [window.breakfast]
    elif frequency == 2:
        anchors = [window.breakfast, window.dinner]
    elif frequency == 3:
        anchors = [window.breakfast, window.lunch, window.dinner]
    else:
        anchors = [window.breakfast, window.lunch, window.dinner, window.bed]
    return anchors[:max(frequency, 0)]


def evenly_spaced(
    count: int,
    start: datetime,
    end: datetime,
    min_spacing_hours: Optional[float] = None,
) -> List[datetime]:
    """
    Spread `count` times from start to end inclusive

    A minimum spacing widens the step but never shrinks it; times that
    would run past `end` are capped at `end`.
    """
    if count <= 0:
        return []
    if count == 1:
        return [start]

    step = (end - start) / (count - 1)
    min_gap = timedelta(hours=min_spacing_hours) if min_spacing_hours else None
    if min_gap is not None:
        step = max(step, min_gap)

    out = [start]
    cursor = start
    for _ in range(1, count):
        cursor = cursor + step
        if min_gap is not None and cursor < out[-1] + min_gap:
            cursor = out[-1] + min_gap
        if cursor > end:
            cursor = end
        out.append(cursor)
    return out


def clamp_inside_awake(t: datetime, window: DayWindow, config: SchedulerConfig = scheduler_config) -> datetime:
    margin = timedelta(minutes=config.CLAMP_MARGIN_MINUTES)
    if t < window.wake:
        return window.wake + margin
    if t > window.bed:
        return window.bed - margin
    return t


def _nudge_off_edges(t: datetime, window: DayWindow, config: SchedulerConfig) -> datetime:
    """Move times sitting on wake/bed a little inside the awake window"""
    leeway = config.EDGE_EQUALITY_LEEWAY_SECONDS
    if abs((t - window.wake).total_seconds()) <= leeway:
        return window.wake + timedelta(minutes=config.AFTER_WAKE_PAD_MINUTES)
    if abs((t - window.bed).total_seconds()) <= leeway:
        return window.bed - timedelta(minutes=config.BEFORE_BED_PAD_MINUTES)
    return t


def preferred_times(
    medication: MedicationInput,
    day: date,
    routine: Routine,
    config: SchedulerConfig = scheduler_config,
) -> List[datetime]:
    """
    Candidate dose times for one medication on one day

    Args:
        medication: The medication to anchor
        day: Calendar date being scheduled
        routine: Patient routine
        config: Scheduling tunables

    Returns:
        Anchors inside the awake window, restricted to the day
    """
    window = resolve_day(routine, day, config)
    freq = medication.frequency_per_day

    if medication.food_rule == FoodRule.AFTER_FOOD:
        offset = timedelta(minutes=config.AFTER_FOOD_MINUTES)
        times = [clamp_inside_awake(a + offset, window, config)
                 for a in meal_anchors(window, FoodRule.AFTER_FOOD, freq)]
    elif medication.food_rule == FoodRule.BEFORE_FOOD:
        offset = timedelta(minutes=config.BEFORE_FOOD_MINUTES)
        times = [clamp_inside_awake(a + offset, window, config)
                 for a in meal_anchors(window, FoodRule.BEFORE_FOOD, freq)]
    else:
        raw = evenly_spaced(freq, window.wake, window.bed, medication.min_interval_hours)
        times = [clamp_inside_awake(_nudge_off_edges(t, window, config), window, config) for t in raw]

    kept = [t for t in times if window.start_of_day <= t < window.end_of_day]
    if len(kept) != len(times):
        logger.debug(f"Dropped {len(times) - len(kept)} anchor(s) for {medication.name} outside {day}")
    return kept
