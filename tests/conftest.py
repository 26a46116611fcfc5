"""
Pytest Configuration and Shared Fixtures
========================================

This module provides shared fixtures for all MediSchedule tests.
Fixtures include database sessions, test clients, routines, medications and rule tables.
"""

import os
import sys
from datetime import date, time
from typing import Generator, Dict, Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Keep the app's own engine off the working directory
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from database import Base, build_engine, get_db, init_db
from models import Medication, Routine as RoutineRow
from app import app
from tools.anchors import MedicationInput, Routine
from tools.interaction_checker import InteractionChecker, InteractionRules
from tools.label_parser import FoodRule


# ==================== DATABASE FIXTURES ====================

@pytest.fixture(scope="function")
def test_engine():
    """Create a test database engine with in-memory SQLite"""
    engine = build_engine("sqlite:///:memory:")
    init_db(bind=engine)

    yield engine

    # Cleanup
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(test_engine) -> Generator[Session, None, None]:
    """Create a test database session"""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_engine
    )

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Create a FastAPI test client with database override"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ==================== SCHEDULING FIXTURES ====================

@pytest.fixture
def day() -> date:
    """A fixed calendar day so expected times are stable"""
    return date(2024, 3, 12)


@pytest.fixture
def routine() -> Routine:
    """Default routine: wake 07:00, bed 23:00, meals 08:00 / 13:00 / 19:00"""
    return Routine()


@pytest.fixture
def make_med(day):
    """Factory for MedicationInput active on the fixture day"""
    def _make(
        id: str,
        name: str = None,
        frequency_per_day: int = 1,
        food_rule: FoodRule = FoodRule.NONE,
        ingredients=(),
        min_interval_hours=None,
        start_date: date = None,
        end_date: date = None,
    ) -> MedicationInput:
        return MedicationInput(
            id=id,
            name=name or id,
            frequency_per_day=frequency_per_day,
            start_date=start_date or day,
            end_date=end_date or day,
            food_rule=food_rule,
            ingredients=tuple(ingredients),
            min_interval_hours=min_interval_hours,
        )
    return _make


@pytest.fixture
def rules_data() -> Dict[str, Any]:
    """Small rule table covering both conflict kinds"""
    return {
        "classes": {
            "tetracyclines": {
                "members": ["doxycycline", "tetracycline"],
                "separateFrom": {"iron": 2, "antacids": 2},
            },
            "thyroid_hormones": {
                "members": ["levothyroxine"],
                "separateFrom": {"calcium": 4},
            },
            "anticoagulants": {
                "members": ["warfarin"],
                "avoidWith": ["nsaids"],
            },
            "nsaids": {
                "members": ["ibuprofen", "naproxen"],
            },
            "iron": {"members": ["iron", "ferrous sulfate"]},
            "calcium": {"members": ["calcium", "calcium carbonate"]},
            "antacids": {"members": ["calcium carbonate", "antacid"]},
        },
        "aliases": {
            "ibuprofen": ["advil", "motrin"],
            "levothyroxine": ["synthroid"],
        },
    }


@pytest.fixture
def checker(rules_data) -> InteractionChecker:
    """Interaction checker over the small rule table"""
    return InteractionChecker(rules=InteractionRules.model_validate(rules_data))


@pytest.fixture
def empty_checker(tmp_path) -> InteractionChecker:
    """Checker whose rule table could not be loaded"""
    return InteractionChecker(rules_path=str(tmp_path / "missing.json"))


# ==================== DATABASE SAMPLE DATA ====================

@pytest.fixture
def owner_id() -> str:
    return "owner-1"


@pytest.fixture
def sample_medication_data(day) -> Dict[str, Any]:
    """Sample medication data for creating test medications"""
    return {
        "name": "Amoxicillin",
        "dosage": "500 mg",
        "ingredients": ["amoxicillin"],
        "frequency_per_day": 3,
        "start_date": day,
        "end_date": day,
        "food_rule": FoodRule.AFTER_FOOD,
    }


@pytest.fixture
def test_medication(db_session: Session, owner_id, sample_medication_data) -> Medication:
    """Create and return a stored medication"""
    medication = Medication(owner_id=owner_id, **sample_medication_data)
    db_session.add(medication)
    db_session.commit()
    db_session.refresh(medication)
    return medication


@pytest.fixture
def test_routine(db_session: Session, owner_id) -> RoutineRow:
    """Stored routine with the default times"""
    row = RoutineRow(
        owner_id=owner_id,
        wake_time=time(7, 0),
        bed_time=time(23, 0),
        breakfast_time=time(8, 0),
        lunch_time=time(13, 0),
        dinner_time=time(19, 0),
    )
    db_session.add(row)
    db_session.commit()
    db_session.refresh(row)
    return row
