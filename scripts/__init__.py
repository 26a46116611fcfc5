"""
Scripts for MediSchedule
Command-line utilities
"""

from .print_schedule import load_payload, main as print_schedule

__all__ = [
    "load_payload",
    "print_schedule",
]
