"""
Test Tools Package
Tests for the tools module (label parsing, interaction checker, anchors, scheduler, separation)
"""

__all__ = [
    "test_label_parser",
    "test_label_summarizer",
    "test_interaction_checker",
    "test_anchors",
    "test_scheduler",
    "test_separation",
    "test_reminders",
    "test_openfda_client",
]
