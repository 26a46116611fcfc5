"""
Tests for Medications API
==========================

Tests medication CRUD operations and the owner interaction summary.
"""

import pytest
from unittest.mock import patch
from fastapi import status
from fastapi.testclient import TestClient

from importlib import import_module

# services/__init__ re-exports a `medication_service` instance that shadows the
# submodule attribute, so fetch the module itself from the import system.
medication_service_module = import_module("services.medication_service")


# ==================== FIXTURES ====================

@pytest.fixture
def medication_create_data(owner_id):
    """Sample data for creating a medication"""
    return {
        "owner_id": owner_id,
        "name": "Doxycycline",
        "dosage": "100 mg",
        "frequency_per_day": 2,
        "food_rule": "after_food",
        "ingredients": ["doxycycline"],
        "start_date": "2024-03-12",
        "end_date": "2024-03-19",
    }


# ==================== CREATE TESTS ====================

class TestCreateMedication:
    """Tests for medication creation endpoint"""

    @pytest.mark.api
    def test_create_medication_success(self, client: TestClient, medication_create_data):
        response = client.post("/api/v1/medications/", json=medication_create_data)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["name"] == "Doxycycline"
        assert data["food_rule"] == "after_food"
        assert data["is_archived"] is False

    @pytest.mark.api
    def test_create_medication_minimal_data(self, client: TestClient, owner_id):
        response = client.post("/api/v1/medications/", json={"owner_id": owner_id, "name": "Aspirin"})

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["frequency_per_day"] == 1
        assert data["food_rule"] == "none"
        assert data["start_date"] == data["end_date"]

    @pytest.mark.api
    def test_create_medication_zero_frequency(self, client: TestClient, medication_create_data):
        medication_create_data["frequency_per_day"] = 0
        response = client.post("/api/v1/medications/", json=medication_create_data)
        assert response.status_code == 422

    @pytest.mark.api
    def test_create_medication_dates_reversed(self, client: TestClient, medication_create_data):
        medication_create_data["start_date"] = "2024-03-20"
        response = client.post("/api/v1/medications/", json=medication_create_data)
        assert response.status_code == 422

    @pytest.mark.api
    def test_create_medication_unknown_food_rule(self, client: TestClient, medication_create_data):
        medication_create_data["food_rule"] = "with_wine"
        response = client.post("/api/v1/medications/", json=medication_create_data)
        assert response.status_code == 422


# ==================== READ TESTS ====================

class TestGetMedications:
    """Tests for medication retrieval endpoints"""

    @pytest.mark.api
    def test_get_owner_medications(self, client: TestClient, owner_id, test_medication):
        response = client.get(f"/api/v1/medications/owner/{owner_id}")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["total"] == 1
        assert data["medications"][0]["id"] == test_medication.id

    @pytest.mark.api
    def test_get_medications_unknown_owner(self, client: TestClient):
        response = client.get("/api/v1/medications/owner/nobody")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"medications": [], "total": 0}

    @pytest.mark.api
    def test_get_medication_by_id(self, client: TestClient, test_medication):
        response = client.get(f"/api/v1/medications/{test_medication.id}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["name"] == "Amoxicillin"

    @pytest.mark.api
    def test_get_medication_not_found(self, client: TestClient):
        response = client.get("/api/v1/medications/missing")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert "not found" in response.json()["message"]


# ==================== UPDATE / ARCHIVE TESTS ====================

class TestUpdateMedication:
    """Tests for medication update and archive endpoints"""

    @pytest.mark.api
    def test_update_medication(self, client: TestClient, test_medication):
        response = client.patch(
            f"/api/v1/medications/{test_medication.id}",
            json={"dosage": "250 mg", "food_rule": "before_food"},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["dosage"] == "250 mg"
        assert data["food_rule"] == "before_food"
        assert data["frequency_per_day"] == 3

    @pytest.mark.api
    def test_update_dates_out_of_order(self, client: TestClient, test_medication):
        response = client.patch(
            f"/api/v1/medications/{test_medication.id}",
            json={"start_date": "2030-01-01"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "start_date" in response.json()["message"]

    @pytest.mark.api
    def test_update_not_found(self, client: TestClient):
        response = client.patch("/api/v1/medications/missing", json={"dosage": "1 mg"})
        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.api
    def test_archive_medication(self, client: TestClient, owner_id, test_medication):
        response = client.delete(f"/api/v1/medications/{test_medication.id}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["is_archived"] is True

        listed = client.get(f"/api/v1/medications/owner/{owner_id}").json()
        assert listed["total"] == 0
        archived = client.get(f"/api/v1/medications/owner/{owner_id}?include_archived=true").json()
        assert archived["total"] == 1


# ==================== INTERACTION SUMMARY ====================

class TestOwnerInteractions:
    """Tests for the owner interaction summary endpoint"""

    @pytest.mark.api
    def test_summary_flags_conflict(self, client: TestClient, checker, owner_id):
        for name in ("Warfarin", "Advil"):
            client.post("/api/v1/medications/", json={"owner_id": owner_id, "name": name})

        with patch.object(medication_service_module, "interaction_checker", checker):
            response = client.get(f"/api/v1/medications/owner/{owner_id}/interactions")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["rules_loaded"] is True
        assert data["total_conflicts"] == 1
        assert data["avoid"] == 1
        assert data["conflicts"][0]["medications"] == ["warfarin", "advil"]
