#!/usr/bin/env python3
"""
Print a day's dose schedule from a JSON file
Run: python scripts/print_schedule.py --input meds.json [--date 2024-01-01]

Input shape:
    {"routine": {"wake_time": "07:00", ...},
     "medications": [{"id": "a", "name": "Amoxicillin", "frequency_per_day": 3,
                      "start_date": "2024-01-01", "end_date": "2024-01-10",
                      "food_rule": "after_food", "ingredients": ["amoxicillin"]}]}
"""
import argparse
import json
import logging
import os
import sys
from datetime import date, datetime, time
from typing import Any, Dict, List, Tuple

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from config import settings
from tools.anchors import MedicationInput, Routine
from tools.label_parser import FoodRule
from tools.scheduler import medication_scheduler


logger = logging.getLogger(__name__)


def _parse_time(value: str) -> time:
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(value, fmt).time()
        except ValueError:
            continue
    raise ValueError(f"Cannot parse time: {value}")


def load_payload(data: Dict[str, Any], day: date) -> Tuple[List[MedicationInput], Routine]:
    """Build scheduler inputs from the decoded JSON document"""
    routine = Routine(**{
        field: _parse_time(value)
        for field, value in (data.get("routine") or {}).items()
    })

    medications = []
    for i, raw in enumerate(data.get("medications") or []):
        start = date.fromisoformat(raw["start_date"]) if raw.get("start_date") else day
        end = date.fromisoformat(raw["end_date"]) if raw.get("end_date") else start
        frequency = int(raw.get("frequency_per_day", 1))
        if frequency < 1 or start > end:
            raise ValueError(f"Invalid medication entry: {raw.get('name')}")
        med_id = str(raw.get("id") or f"med{i + 1}")
        if any(m.id == med_id for m in medications):
            raise ValueError(f"Duplicate medication id: {med_id}")
        medications.append(MedicationInput(
            id=med_id,
            name=raw["name"],
            frequency_per_day=frequency,
            start_date=start,
            end_date=end,
            food_rule=FoodRule(raw.get("food_rule", "none")),
            ingredients=tuple(raw.get("ingredients") or ()),
            min_interval_hours=raw.get("min_interval_hours"),
            dosage=raw.get("dosage", ""),
        ))
    return medications, routine


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Print the reminder slots for one day"
    )
    parser.add_argument(
        "--input",
        required=True,
        help="JSON file with routine and medications"
    )
    parser.add_argument(
        "--date",
        default=None,
        help="Day to schedule (YYYY-MM-DD), default today"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL), format=settings.LOG_FORMAT)

    day = date.fromisoformat(args.date) if args.date else date.today()
    with open(args.input, encoding="utf-8") as f:
        data = json.load(f)

    try:
        medications, routine = load_payload(data, day)
    except (KeyError, ValueError) as e:
        parser.error(str(e))

    schedule = medication_scheduler.build_schedule(medications, routine, day)
    print(medication_scheduler.format_schedule_display(schedule, day))

    if not medication_scheduler.interaction_checker.rules_loaded:
        print("\n⚠️  Interaction data unavailable; conflicts were not checked")


if __name__ == "__main__":
    main()
