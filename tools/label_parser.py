"""
Drug Label Rule Extractor
Turns free-form label text into scheduling hints (food timing, dosing interval, things to avoid)
"""

import logging
import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


logger = logging.getLogger(__name__)


class FoodRule(str, Enum):
    """Timing of a dose relative to meals"""
    BEFORE_FOOD = "before_food"
    AFTER_FOOD = "after_food"
    NONE = "none"

    @property
    def label(self) -> str:
        return {
            FoodRule.BEFORE_FOOD: "Before food",
            FoodRule.AFTER_FOOD: "After food",
            FoodRule.NONE: "No food rule",
        }[self]


@dataclass
class ParsedMedRule:
    """Scheduling hints extracted from label text"""
    food_rule: Optional[FoodRule] = None
    min_interval_hours: Optional[int] = None
    must_avoid: List[str] = field(default_factory=list)


# Phrase sets are matched against lowercased, whitespace-collapsed text
AFTER_FOOD_PHRASES = [
    "take with food",
    "take after food",
    "take after a meal",
    "administer with food",
    "with food",
    "with meals",
    "with a meal",
    "after meals",
    "after food",
    "after eating",
    "with milk",
]

BEFORE_FOOD_PHRASES = [
    "on an empty stomach",
    "take on empty stomach",
    "administer on an empty stomach",
    "take before food",
    "before food",
    "before meals",
    "before eating",
    "1 hour before eating",
    "1 hour before or 2 hours after meals",
    "without food",
]

_AFTER_MEAL_RE = re.compile(r"\bafter\s+(?:a\s+|each\s+|your\s+)?meals?\b")
_BEFORE_MEAL_RE = re.compile(r"\bbefore\s+(?:a\s+|each\s+|your\s+)?meals?\b")

# Interval patterns, checked in priority order
_EVERY_N_HOURS_RE = re.compile(r"\b(?:every|at intervals of)\s+(\d{1,2})\s*(?:hours?|hrs?|h)\b")
_QNH_RE = re.compile(r"\bq\s?(\d{1,2})\s?h\b")
_EVERY_RANGE_RE = re.compile(r"\bevery\s+(\d{1,2})\s*(?:-|to|–|—)\s*(\d{1,2})\s*(?:hours?|hrs?|h)\b")

VERBAL_FREQUENCIES: List[Tuple[re.Pattern, int]] = [
    (re.compile(r"\bonce\s+(?:daily|a\s+day)\b"), 24),
    (re.compile(r"\btwice\s+(?:daily|a\s+day)\b|\btwo\s+times\s+(?:daily|a\s+day)\b|\bbid\b"), 12),
    (re.compile(r"\bthree\s+times\s+(?:daily|a\s+day)\b|\btid\b"), 8),
    (re.compile(r"\bfour\s+times\s+(?:daily|a\s+day)\b|\bqid\b"), 6),
]

# Cue words that make a nearby substance an "avoid" item
AVOID_CUES = [
    "avoid",
    "do not take with",
    "separate from",
]

# label -> word patterns that name it in label text
AVOID_VOCABULARY: List[Tuple[str, List[str]]] = [
    ("antacids", [r"antacids?"]),
    ("aluminum", [r"aluminum", r"aluminium"]),
    ("magnesium", [r"magnesium"]),
    ("iron", [r"iron"]),
    ("calcium", [r"calcium"]),
    ("dairy", [r"dairy", r"milk products"]),
    ("grapefruit", [r"grapefruit"]),
    ("alcohol", [r"alcohol", r"alcoholic beverages?"]),
    ("zinc", [r"zinc"]),
    ("caffeine", [r"caffeine"]),
    ("NSAIDs", [r"nsaids?"]),
    ("MAO inhibitors", [r"maois?", r"mao inhibitors?"]),
    ("warfarin", [r"warfarin"]),
    ("tetracycline", [r"tetracyclines?"]),
]

_AVOID_PATTERNS = [
    (label, re.compile(r"\b(?:" + "|".join(words) + r")\b"))
    for label, words in AVOID_VOCABULARY
]

_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")


def normalize(raw: str) -> str:
    """Strip HTML tags, collapse whitespace and lowercase"""
    text = _TAG_RE.sub(" ", raw or "")
    text = _WS_RE.sub(" ", text)
    return text.strip().lower()


def parse_food_rule(text: str) -> Optional[FoodRule]:
    """Classify food timing; a text matching both sets is treated as before food"""
    after_hit = any(p in text for p in AFTER_FOOD_PHRASES)
    before_hit = any(p in text for p in BEFORE_FOOD_PHRASES)

    if before_hit:
        return FoodRule.BEFORE_FOOD
    if after_hit:
        return FoodRule.AFTER_FOOD

    if _BEFORE_MEAL_RE.search(text):
        return FoodRule.BEFORE_FOOD
    if _AFTER_MEAL_RE.search(text):
        return FoodRule.AFTER_FOOD
    return None


def _clamp_hours(value: int) -> Optional[int]:
    if 0 < value <= 24:
        return value
    return None


def parse_interval_hours(text: str) -> Optional[int]:
    """Minimum dosing interval in hours, or None"""
    for pattern in (_EVERY_N_HOURS_RE, _QNH_RE):
        match = pattern.search(text)
        if match:
            hours = _clamp_hours(int(match.group(1)))
            if hours is not None:
                return hours

    # "every 4-6 hours": keep the lower bound
    match = _EVERY_RANGE_RE.search(text)
    if match:
        hours = _clamp_hours(min(int(match.group(1)), int(match.group(2))))
        if hours is not None:
            return hours

    for pattern, hours in VERBAL_FREQUENCIES:
        if pattern.search(text):
            return hours

    return None


def parse_avoids(text: str) -> List[str]:
    """Substances the text tells the patient to keep away from the dose"""
    if not any(cue in text for cue in AVOID_CUES):
        return []

    found = {label for label, pattern in _AVOID_PATTERNS if pattern.search(text)}
    return sorted(found)


def parse(raw: str) -> ParsedMedRule:
    """
    Extract scheduling hints from label text

    Never raises; missing signals leave the corresponding field empty.

    Args:
        raw: Label or informational text, possibly containing HTML

    Returns:
        ParsedMedRule with food rule, interval and avoid list
    """
    text = normalize(raw)
    if not text:
        return ParsedMedRule()

    rule = ParsedMedRule(
        food_rule=parse_food_rule(text),
        min_interval_hours=parse_interval_hours(text),
        must_avoid=parse_avoids(text),
    )
    logger.debug(
        f"Parsed label text: food={rule.food_rule} interval={rule.min_interval_hours} "
        f"avoid={rule.must_avoid}"
    )
    return rule


def frequency_suggestion(interval_hours: float) -> int:
    """Map a dosing interval to doses per day (1..6)"""
    exact = {24: 1, 12: 2, 8: 3, 6: 4}
    if interval_hours in exact:
        return exact[interval_hours]
    if interval_hours <= 0:
        return 1
    # half-up rounding
    suggested = int(math.floor(24.0 / interval_hours + 0.5))
    return max(1, min(6, suggested))
