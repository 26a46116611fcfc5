"""
Medication Service
Business logic for medication management and label-based rule suggestions
"""

import logging
from typing import Dict, List, Optional, Any
from datetime import datetime, date
from sqlalchemy.orm import Session
from sqlalchemy import and_

from database import get_db_context
import models
from tools.interaction_checker import interaction_checker
from tools.label_parser import FoodRule, parse, frequency_suggestion
from tools.openfda_client import openfda_client


logger = logging.getLogger(__name__)


class MedicationService:
    """
    Service for medication-related operations
    """

    EDITABLE_FIELDS = {
        "name", "dosage", "ingredients", "frequency_per_day", "start_date",
        "end_date", "food_rule", "min_interval_hours", "must_avoid", "notes",
    }

    async def add_medication(
        self,
        owner_id: str,
        name: str,
        frequency_per_day: int = 1,
        dosage: str = "",
        ingredients: Optional[List[str]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        food_rule: FoodRule = FoodRule.NONE,
        min_interval_hours: Optional[float] = None,
        must_avoid: Optional[List[str]] = None,
        notes: Optional[str] = None,
        db: Optional[Session] = None
    ) -> models.Medication:
        """
        Add a new medication

        Args:
            owner_id: Owner (patient/account) identifier
            name: Medication name
            frequency_per_day: Doses per day (>= 1)
            dosage: Dosage text (e.g., "500 mg")
            ingredients: Active ingredient substance names
            start_date: First day (default today)
            end_date: Last day, inclusive (default start_date)
            food_rule: Timing relative to meals
            min_interval_hours: Minimum hours between doses
            must_avoid: Substances to keep away from the dose
            notes: Free-text notes
            db: Database session

        Returns:
            Created Medication object
        """
        start = start_date or date.today()
        end = end_date or start
        if frequency_per_day < 1:
            raise ValueError("frequency_per_day must be at least 1")
        if start > end:
            raise ValueError("start_date must not be after end_date")

        def _add(session: Session) -> models.Medication:
            medication = models.Medication(
                owner_id=owner_id,
                name=name,
                dosage=dosage,
                ingredients=ingredients or [],
                frequency_per_day=frequency_per_day,
                start_date=start,
                end_date=end,
                food_rule=food_rule,
                min_interval_hours=min_interval_hours,
                must_avoid=must_avoid or [],
                notes=notes,
                is_archived=False
            )

            session.add(medication)
            session.commit()
            session.refresh(medication)

            logger.info(f"Added medication {name} for owner {owner_id}")
            return medication

        if db:
            return _add(db)

        with get_db_context() as session:
            return _add(session)

    async def get_medication(
        self,
        medication_id: str,
        db: Optional[Session] = None
    ) -> Optional[models.Medication]:
        """Get medication by ID"""
        def _get(session: Session) -> Optional[models.Medication]:
            return session.query(models.Medication).filter(
                models.Medication.id == medication_id
            ).first()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def list_medications(
        self,
        owner_id: str,
        include_archived: bool = False,
        db: Optional[Session] = None
    ) -> List[models.Medication]:
        """All medications for an owner, non-archived by default"""
        def _get(session: Session) -> List[models.Medication]:
            query = session.query(models.Medication).filter(
                models.Medication.owner_id == owner_id
            )

            if not include_archived:
                query = query.filter(models.Medication.is_archived == False)  # noqa: E712

            return query.order_by(models.Medication.created_at).all()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def list_active_on(
        self,
        owner_id: str,
        day: date,
        db: Optional[Session] = None
    ) -> List[models.Medication]:
        """Non-archived medications whose date range covers `day`"""
        def _get(session: Session) -> List[models.Medication]:
            return session.query(models.Medication).filter(
                and_(
                    models.Medication.owner_id == owner_id,
                    models.Medication.is_archived == False,  # noqa: E712
                    models.Medication.start_date <= day,
                    models.Medication.end_date >= day,
                )
            ).order_by(models.Medication.created_at).all()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def update_medication(
        self,
        medication_id: str,
        updates: Dict[str, Any],
        db: Optional[Session] = None
    ) -> Optional[models.Medication]:
        """Update medication fields; returns None if not found"""
        def _update(session: Session) -> Optional[models.Medication]:
            medication = session.query(models.Medication).filter(
                models.Medication.id == medication_id
            ).first()

            if not medication:
                return None

            for field, value in updates.items():
                if field in self.EDITABLE_FIELDS:
                    setattr(medication, field, value)

            if medication.frequency_per_day < 1:
                raise ValueError("frequency_per_day must be at least 1")
            if medication.start_date > medication.end_date:
                raise ValueError("start_date must not be after end_date")

            medication.updated_at = datetime.utcnow()
            session.commit()
            session.refresh(medication)

            return medication

        if db:
            return _update(db)

        with get_db_context() as session:
            return _update(session)

    async def archive_medication(
        self,
        medication_id: str,
        db: Optional[Session] = None
    ) -> Optional[models.Medication]:
        """Hide a medication from schedules without deleting it"""
        def _archive(session: Session) -> Optional[models.Medication]:
            medication = session.query(models.Medication).filter(
                models.Medication.id == medication_id
            ).first()
            if not medication:
                return None

            medication.is_archived = True
            medication.updated_at = datetime.utcnow()
            session.commit()
            session.refresh(medication)
            logger.info(f"Archived medication {medication_id}")
            return medication

        if db:
            return _archive(db)

        with get_db_context() as session:
            return _archive(session)

    def suggest_rules(self, label_text: str) -> Dict[str, Any]:
        """
        Pre-fill values for a medication form from label text

        Returns:
            Dict with food_rule, min_interval_hours, frequency_per_day, must_avoid
        """
        parsed = parse(label_text)
        suggestion = {
            "food_rule": parsed.food_rule or FoodRule.NONE,
            "min_interval_hours": parsed.min_interval_hours,
            "frequency_per_day": None,
            "must_avoid": parsed.must_avoid,
        }
        if parsed.min_interval_hours:
            suggestion["frequency_per_day"] = frequency_suggestion(parsed.min_interval_hours)
        return suggestion

    async def suggest_rules_for_name(self, name: str) -> Dict[str, Any]:
        """Fetch label text for `name` and derive rule suggestions from it"""
        details = await openfda_client.fetch_details(name)
        if details is None or details.is_empty:
            suggestion = self.suggest_rules("")
            suggestion["ingredients"] = details.ingredients if details else []
            suggestion["label_found"] = False
            return suggestion

        suggestion = self.suggest_rules(details.combined_text)
        suggestion["ingredients"] = details.ingredients
        suggestion["label_found"] = True
        return suggestion

    async def check_interactions(
        self,
        owner_id: str,
        db: Optional[Session] = None
    ) -> Dict[str, Any]:
        """Interaction summary across an owner's current medications"""
        medications = await self.list_medications(owner_id, db=db)
        refs = [(m.name, m.ingredients or []) for m in medications]
        return interaction_checker.get_interaction_summary(refs)


# Singleton instance
medication_service = MedicationService()
