"""
Label Summarizer Tool
Condenses dense drug label sections into short bullets for display
"""

import re
from dataclasses import dataclass, field
from typing import List, TYPE_CHECKING

from tools.label_parser import FoodRule, parse

if TYPE_CHECKING:
    from tools.openfda_client import LabelDetails


@dataclass
class MedEssentials:
    """Short, display-ready summary of a medication label"""
    title: str
    quick_tips: List[str] = field(default_factory=list)
    what_for: List[str] = field(default_factory=list)
    how_to_take: List[str] = field(default_factory=list)
    common_side_effects: List[str] = field(default_factory=list)
    important_warnings: List[str] = field(default_factory=list)
    interactions_to_avoid: List[str] = field(default_factory=list)
    ingredients: List[str] = field(default_factory=list)


MIN_LINE_LENGTH = 8
MAX_LINE_LENGTH = 160
SOFT_CUT_AT = 140

_SECTION_HEADER_RE = re.compile(r"(^|\n)\s*\d+\s+[A-Z][A-Z\s/,-]{3,}(?=\n|$)")
_ORPHAN_NUMBERS_RE = re.compile(r"^\(?\d+(?:\s*,\s*\d+)*\)?$")
_ORPHAN_RANGE_RE = re.compile(r"^\d+\s*[–-]\s*\d+$")
_LEADING_REF_RE = re.compile(r"^\(?\d+(?:,\s*\d+)*\)?\s*")


def _similar(a: str, b: str) -> bool:
    ax, bx = a.lower(), b.lower()
    return ax == bx or ax in bx or bx in ax


def _trim(line: str) -> str:
    if len(line) <= MAX_LINE_LENGTH:
        return line
    space = line.find(" ", SOFT_CUT_AT)
    if space != -1:
        return line[:space]
    return line[:150]


def bullets(raw: str, max_items: int = 5) -> List[str]:
    """
    Turn dense label text into short bullets

    Args:
        raw: Label section text (HTML allowed)
        max_items: Maximum bullets returned

    Returns:
        Up to max_items de-duplicated lines
    """
    text = re.sub(r"<[^>]+>", " ", raw or "")
    text = text.replace("\r", "\n")
    for mark in ("•", "·", "‣"):
        text = text.replace(mark, "\n• ")
    text = text.replace("—", " – ")

    # Headers are only recognisable while line breaks still exist
    text = _SECTION_HEADER_RE.sub("", text)
    text = re.sub(r"[ \t]+", " ", text)

    candidates = [
        part.strip()
        for part in text.replace(".", ".\n").replace(";", ";\n").split("\n")
        if part.strip()
    ]

    lines: List[str] = []
    for line in candidates:
        if line.startswith("•"):
            line = line[1:].strip()

        if _ORPHAN_NUMBERS_RE.match(line) or _ORPHAN_RANGE_RE.match(line):
            continue

        line = _LEADING_REF_RE.sub("", line)
        if len(line) < MIN_LINE_LENGTH:
            continue

        lines.append(_trim(line))

    out: List[str] = []
    for line in lines:
        if any(_similar(existing, line) for existing in out):
            continue
        out.append(line)
        if len(out) >= max_items:
            break
    return out


def quick_tips(text: str) -> List[str]:
    """Chips summarising the parsed scheduling rule"""
    parsed = parse(text)
    tips = []
    if parsed.food_rule == FoodRule.AFTER_FOOD:
        tips.append("Take after food")
    elif parsed.food_rule == FoodRule.BEFORE_FOOD:
        tips.append("Take before food")
    if parsed.min_interval_hours:
        tips.append(f"About every {parsed.min_interval_hours}h")
    if parsed.must_avoid:
        tips.append("Avoid: " + ", ".join(parsed.must_avoid))
    return tips


def essentials(details: "LabelDetails") -> MedEssentials:
    """Build the display summary for a fetched label"""
    return MedEssentials(
        title=details.title,
        quick_tips=quick_tips(details.combined_text),
        what_for=bullets(details.uses, max_items=4),
        how_to_take=bullets(details.dosage, max_items=5),
        common_side_effects=bullets(details.side_effects, max_items=5),
        important_warnings=bullets(details.warnings, max_items=5),
        interactions_to_avoid=bullets(details.interactions, max_items=4),
        ingredients=list(details.ingredients),
    )
