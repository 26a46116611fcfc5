"""
Inter-Slot Separation
Pushes clustered reminder slots apart when medications in different slots conflict
"""

import logging
from dataclasses import replace
from datetime import timedelta
from typing import List, Optional, Tuple, TYPE_CHECKING

from config import SchedulerConfig, scheduler_config
from tools.interaction_checker import InteractionChecker, interaction_checker

if TYPE_CHECKING:
    from tools.scheduler import Slot


logger = logging.getLogger(__name__)


def cross_slot_constraint(
    a: "Slot",
    b: "Slot",
    checker: InteractionChecker,
) -> Tuple[bool, float]:
    """Strongest constraint between any medication in `a` and any in `b`

    Returns:
        (any avoid conflict, max separate hours)
    """
    has_avoid = False
    max_hours = 0.0
    for ma in a.medications:
        for mb in b.medications:
            avoid, hours = checker.pair_constraint(ma.interaction_ref, mb.interaction_ref)
            has_avoid = has_avoid or avoid
            max_hours = max(max_hours, hours)
    return has_avoid, max_hours


def required_gap_seconds(has_avoid: bool, max_hours: float, config: SchedulerConfig) -> float:
    # avoid conflicts are not escalated past the default gap
    return max(max_hours * 3600, config.DEFAULT_MIN_GAP_SECONDS)


def enforce(
    slots: List["Slot"],
    checker: Optional[InteractionChecker] = None,
    config: SchedulerConfig = scheduler_config,
) -> List["Slot"]:
    """
    Enforce minimum gaps between slots

    One forward sweep over sorted pairs; the later slot of a pair that is
    too close moves to exactly the required gap after the earlier one.
    A push can re-violate an already checked pair, which this single pass
    does not revisit.

    Args:
        slots: Clustered slots (left unmodified)
        checker: Interaction checker to consult
        config: Scheduling tunables

    Returns:
        New slots, sorted by time
    """
    checker = checker or interaction_checker
    out = sorted((replace(s, medications=list(s.medications)) for s in slots), key=lambda s: s.time)
    if len(out) < 2:
        return out

    for i in range(len(out)):
        for j in range(i + 1, len(out)):
            a, b = out[i], out[j]
            has_avoid, max_hours = cross_slot_constraint(a, b, checker)
            required = timedelta(seconds=required_gap_seconds(has_avoid, max_hours, config))

            if abs(a.time - b.time) < required:
                if a.time <= b.time:
                    b.time = a.time + required
                else:
                    a.time = b.time + required
                logger.debug(
                    f"Separated slots {[m.name for m in a.medications]} / "
                    f"{[m.name for m in b.medications]} by {required}"
                )

    return sorted(out, key=lambda s: s.time)
