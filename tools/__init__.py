"""
Tools Package
Scheduling core for MediSchedule: label parsing, interactions, anchoring, clustering
"""

from .label_parser import (
    FoodRule,
    ParsedMedRule,
    parse,
    frequency_suggestion,
)

from .label_summarizer import (
    MedEssentials,
    bullets,
    essentials,
)

from .interaction_checker import (
    InteractionChecker,
    InteractionConflict,
    InteractionRules,
    ClassRule,
    Avoid,
    Separate,
    interaction_checker,
    check_conflicts,
)

from .anchors import (
    Routine,
    MedicationInput,
    preferred_times,
)

from .scheduler import (
    MedicationScheduler,
    Slot,
    medication_scheduler,
    build_schedule,
)

from .reminders import (
    ReminderRequest,
    ReminderCategory,
    plan_reminders,
)

from .openfda_client import (
    OpenFDAClient,
    LabelDetails,
    openfda_client,
)

__all__ = [
    # Label parsing
    "FoodRule",
    "ParsedMedRule",
    "parse",
    "frequency_suggestion",
    "MedEssentials",
    "bullets",
    "essentials",

    # Interactions
    "InteractionChecker",
    "InteractionConflict",
    "InteractionRules",
    "ClassRule",
    "Avoid",
    "Separate",
    "interaction_checker",
    "check_conflicts",

    # Scheduling
    "Routine",
    "MedicationInput",
    "preferred_times",
    "MedicationScheduler",
    "Slot",
    "medication_scheduler",
    "build_schedule",

    # Reminders
    "ReminderRequest",
    "ReminderCategory",
    "plan_reminders",

    # Label provider
    "OpenFDAClient",
    "LabelDetails",
    "openfda_client",
]
