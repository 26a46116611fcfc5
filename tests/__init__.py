"""
MediSchedule Test Suite
=======================

This package contains all tests for the MediSchedule dose scheduler.

Test Structure:
- test_tools/: Label parsing, interaction rules, anchors, clustering and separation
- test_services/: Service layer against an in-memory database
- test_api/: API endpoint tests for FastAPI routes
- conftest.py: Shared pytest fixtures

Running Tests:
    # Run all tests
    pytest

    # Run specific test module
    pytest tests/test_tools/

    # Run only marked tests
    pytest -m "unit"
"""

# Test configuration
TEST_DATABASE_URL = "sqlite:///:memory:"
TEST_OWNER_ID = "owner-1"

# Common test data
SAMPLE_MEDICATIONS = [
    {"name": "Doxycycline", "dosage": "100 mg", "frequency_per_day": 2, "food_rule": "after_food"},
    {"name": "Levothyroxine", "dosage": "50 mcg", "frequency_per_day": 1, "food_rule": "before_food"},
    {"name": "Vitamin D", "dosage": "1000 IU", "frequency_per_day": 1, "food_rule": "none"},
]

__all__ = [
    "TEST_DATABASE_URL",
    "TEST_OWNER_ID",
    "SAMPLE_MEDICATIONS",
]
