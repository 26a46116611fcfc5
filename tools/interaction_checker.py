"""
Drug Interaction Checker Tool
Class/alias rule table lookups producing pairwise timing conflicts
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set, Tuple, Union

from pydantic import BaseModel, Field, ValidationError

from config import settings


logger = logging.getLogger(__name__)


# ==================== RULE TABLE ====================

class ClassRule(BaseModel):
    """One ingredient class in the rule table"""
    members: List[str] = Field(default_factory=list)
    avoid_with: List[str] = Field(default_factory=list, alias="avoidWith")
    separate_from: Dict[str, float] = Field(default_factory=dict, alias="separateFrom")
    notes: List[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class InteractionRules(BaseModel):
    """Rule table: ingredient classes plus alternate-name aliases"""
    classes: Dict[str, ClassRule] = Field(default_factory=dict)
    aliases: Dict[str, List[str]] = Field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.classes


# ==================== CONFLICT TYPES ====================

@dataclass(frozen=True)
class Avoid:
    """Never co-administer"""


@dataclass(frozen=True)
class Separate:
    """Keep doses at least `hours` apart"""
    hours: float


ConflictKind = Union[Avoid, Separate]


@dataclass(frozen=True)
class InteractionConflict:
    """Conflict between two medications"""
    med_a: str
    med_b: str
    kind: ConflictKind
    explanation: str

    @property
    def pair(self) -> frozenset:
        return frozenset((self.med_a, self.med_b))

    @property
    def is_avoid(self) -> bool:
        return isinstance(self.kind, Avoid)

    @property
    def separation_hours(self) -> float:
        return self.kind.hours if isinstance(self.kind, Separate) else 0.0


MedicationRef = Tuple[str, Sequence[str]]  # (name, ingredients)


def load_rules(path: Union[str, Path]) -> Optional[InteractionRules]:
    """Load the rule table from JSON; None when missing or malformed"""
    try:
        raw = Path(path).read_text(encoding="utf-8")
        return InteractionRules.model_validate(json.loads(raw))
    except FileNotFoundError:
        logger.warning(f"Interaction rule table not found at {path}")
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.warning(f"Interaction rule table at {path} could not be loaded: {e}")
    return None


class InteractionChecker:
    """
    Pairwise interaction checks against the class/alias rule table.

    A checker whose table failed to load reports no conflicts, so
    scheduling still proceeds; `rules_loaded` tells callers which case
    they are in.
    """

    def __init__(self, rules: Optional[InteractionRules] = None, rules_path: Optional[str] = None):
        if rules is None:
            rules = load_rules(rules_path or settings.INTERACTION_RULES_PATH)
        self.rules_loaded = rules is not None
        self.rules = rules or InteractionRules()
        self._build_index()

    def _build_index(self):
        """Lowercase members and invert aliases for lookups"""
        self._members: Dict[str, Set[str]] = {
            name.lower(): {m.lower() for m in rule.members}
            for name, rule in self.rules.classes.items()
        }
        self._rules_by_class: Dict[str, ClassRule] = {
            name.lower(): rule for name, rule in self.rules.classes.items()
        }
        self._aliases: Dict[str, Set[str]] = {
            canonical.lower(): {a.lower() for a in alternates}
            for canonical, alternates in self.rules.aliases.items()
        }
        self._canonical_for: Dict[str, str] = {}
        for canonical, alternates in self._aliases.items():
            for alternate in alternates:
                self._canonical_for[alternate] = canonical

    def _expand(self, name: str, ingredients: Sequence[str]) -> Set[str]:
        """Name + ingredients, lowercased, with alternate names mapped to canonical"""
        terms = {name.lower().strip()} | {i.lower().strip() for i in ingredients if i}
        terms |= {self._canonical_for[t] for t in terms if t in self._canonical_for}
        return terms

    def _classes_containing(self, terms: Set[str]) -> List[str]:
        return [cls for cls, members in self._members.items() if members & terms]

    def _matches(self, target: str, terms: Set[str]) -> bool:
        """Does a rule target (substance, alias or class) name this medication?"""
        t = target.lower()
        if t in terms:
            return True
        if self._aliases.get(t, set()) & terms:
            return True
        members = self._members.get(t)
        return bool(members and members & terms)

    def _conflicts_between(
        self,
        a_name: str,
        a_classes: List[str],
        b_name: str,
        b_terms: Set[str],
    ) -> List[InteractionConflict]:
        """Directional: rules owned by A's classes, evaluated against B"""
        out: List[InteractionConflict] = []
        for cls in a_classes:
            rule = self._rules_by_class[cls]
            for target in rule.avoid_with:
                if self._matches(target, b_terms):
                    out.append(InteractionConflict(
                        med_a=a_name,
                        med_b=b_name,
                        kind=Avoid(),
                        explanation=f"Avoid combining {a_name} with {b_name}",
                    ))
            for target, hours in rule.separate_from.items():
                if self._matches(target, b_terms):
                    out.append(InteractionConflict(
                        med_a=a_name,
                        med_b=b_name,
                        kind=Separate(hours=float(hours)),
                        explanation=f"Keep {a_name} and {b_name} {hours:g}h apart",
                    ))
        return out

    @staticmethod
    def _dedupe(conflicts: List[InteractionConflict]) -> List[InteractionConflict]:
        seen = set()
        out = []
        for c in conflicts:
            if isinstance(c.kind, Avoid):
                key = (c.pair, "avoid")
            else:
                key = (c.pair, "separate", c.kind.hours)
            if key in seen:
                continue
            seen.add(key)
            out.append(c)
        return out

    def check_conflicts(self, medications: Sequence[MedicationRef]) -> List[InteractionConflict]:
        """
        Find every conflict among the given medications

        Args:
            medications: (name, ingredients) pairs

        Returns:
            Deduplicated conflicts, both rule directions evaluated
        """
        if self.rules.is_empty:
            return []

        entries = [(name.lower(), self._expand(name, ingredients)) for name, ingredients in medications]
        conflicts: List[InteractionConflict] = []

        for i, (a_name, a_terms) in enumerate(entries):
            for b_name, b_terms in entries[i + 1:]:
                a_classes = self._classes_containing(a_terms)
                b_classes = self._classes_containing(b_terms)
                conflicts += self._conflicts_between(a_name, a_classes, b_name, b_terms)
                conflicts += self._conflicts_between(b_name, b_classes, a_name, a_terms)

        return self._dedupe(conflicts)

    def pair_constraint(self, a: MedicationRef, b: MedicationRef) -> Tuple[bool, float]:
        """(has avoid conflict, max separate hours) for one pair"""
        has_avoid = False
        max_hours = 0.0
        for conflict in self.check_conflicts([a, b]):
            if isinstance(conflict.kind, Avoid):
                has_avoid = True
            elif isinstance(conflict.kind, Separate):
                max_hours = max(max_hours, conflict.kind.hours)
        return has_avoid, max_hours

    def can_take_together(self, a: MedicationRef, b: MedicationRef) -> bool:
        """True when neither an avoid nor a separate rule links the pair"""
        return not self.check_conflicts([a, b])

    def get_interaction_summary(self, medications: Sequence[MedicationRef]) -> Dict:
        """Counts and rows for display"""
        conflicts = self.check_conflicts(medications)
        return {
            "rules_loaded": self.rules_loaded,
            "total_conflicts": len(conflicts),
            "avoid": sum(1 for c in conflicts if c.is_avoid),
            "separate": sum(1 for c in conflicts if not c.is_avoid),
            "conflicts": [
                {
                    "medications": [c.med_a, c.med_b],
                    "kind": "avoid" if c.is_avoid else "separate",
                    "hours": None if c.is_avoid else c.separation_hours,
                    "explanation": c.explanation,
                }
                for c in conflicts
            ],
        }


# Singleton instance, loaded once at import
interaction_checker = InteractionChecker()


def check_conflicts(medications: Sequence[MedicationRef]) -> List[InteractionConflict]:
    """Convenience function to check conflicts"""
    return interaction_checker.check_conflicts(medications)
