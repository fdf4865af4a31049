"""
Reminders API tests
===================
Exercise /api/v1/reminders through the Flask test client against a
temporary database with weather integration disabled.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

BASE = "/api/v1/reminders"


@pytest.fixture()
def plant_id(client):
    resp = client.post(
        "/api/v1/plants",
        json={"name": "Basil", "wateringEveryDays": 7, "fertilizerEveryWeeks": 2},
    )
    assert resp.status_code == 201
    return resp.get_json()["data"]["plant_id"]


def _create(client, plant_id, **body):
    payload = {"plantId": plant_id, "careType": "watering"}
    payload.update(body)
    resp = client.post(BASE, json=payload)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["data"]


class TestCreateAndRead:
    def test_create_uses_plant_interval(self, client, plant_id):
        resp = client.post(BASE, json={"plantId": plant_id, "careType": "watering", "notes": "bottom water"})

        assert resp.status_code == 201
        body = resp.get_json()
        assert body["success"] is True
        data = body["data"]
        assert data["frequency"]["days"] == 7
        assert data["title"] == "Watering: Basil"
        assert data["status"] == "pending"
        assert data["scheduled_date"] == data["due_date"]
        assert datetime.fromisoformat(data["due_date"]) > datetime.now(timezone.utc)

    def test_explicit_due_date_and_derived_priority(self, client, plant_id):
        due = (datetime.now(timezone.utc) + timedelta(days=2)).replace(microsecond=0)
        data = _create(client, plant_id, dueDate=due.isoformat(), priority="critical", careType="pruning")

        # "critical" validates, but a reminder that is not overdue is medium
        assert data["priority"] == "medium"
        assert datetime.fromisoformat(data["due_date"]) == due

    def test_get_by_id(self, client, plant_id):
        created = _create(client, plant_id)
        resp = client.get(f"{BASE}/{created['reminder_id']}")
        assert resp.status_code == 200
        assert resp.get_json()["data"]["reminder_id"] == created["reminder_id"]

    def test_unknown_reminder(self, client):
        resp = client.get(f"{BASE}/999")
        assert resp.status_code == 404
        body = resp.get_json()
        assert body["success"] is False
        assert body["error"]["status"] == 404

    def test_other_user_cannot_see_reminder(self, client, plant_id):
        created = _create(client, plant_id)
        with client.session_transaction() as sess:
            sess["user_id"] = 2

        assert client.get(f"{BASE}/{created['reminder_id']}").status_code == 404
        assert client.get(BASE).get_json()["data"]["pagination"]["total"] == 0


class TestValidation:
    def test_missing_care_type(self, client, plant_id):
        resp = client.post(BASE, json={"plantId": plant_id})
        assert resp.status_code == 400
        fields = [e["field"] for e in resp.get_json()["error"]["errors"]]
        assert "careType" in fields

    def test_unknown_field_rejected(self, client, plant_id):
        resp = client.post(BASE, json={"plantId": plant_id, "careType": "watering", "colour": "green"})
        assert resp.status_code == 400
        assert resp.get_json()["error"]["errors"]

    def test_frequency_out_of_range(self, client, plant_id):
        resp = client.post(BASE, json={"plantId": plant_id, "careType": "watering", "frequencyDays": 0})
        assert resp.status_code == 400

    def test_body_must_be_object(self, client):
        resp = client.post(BASE, json=[1, 2, 3])
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Request body must be a JSON object"

    def test_unknown_plant(self, client):
        resp = client.post(BASE, json={"plantId": 4242, "careType": "watering"})
        assert resp.status_code == 404

    def test_no_interval_without_plant(self, client):
        resp = client.post(BASE, json={"careType": "watering"})
        assert resp.status_code == 400

    def test_upcoming_days_bound(self, client):
        assert client.get(f"{BASE}/upcoming?days=31").status_code == 400
        assert client.get(f"{BASE}/upcoming?days=0").status_code == 400


class TestListing:
    def test_pagination(self, client, plant_id):
        for care_type in ("watering", "pruning", "repotting"):
            _create(client, plant_id, careType=care_type)

        resp = client.get(f"{BASE}?limit=2&page=2")

        data = resp.get_json()["data"]
        assert resp.status_code == 200
        assert len(data["reminders"]) == 1
        assert data["pagination"] == {"page": 2, "limit": 2, "total": 3, "pages": 2}

    def test_filter_by_care_type(self, client, plant_id):
        _create(client, plant_id, careType="watering")
        _create(client, plant_id, careType="pruning")

        data = client.get(f"{BASE}?careType=pruning").get_json()["data"]
        assert [r["care_type"] for r in data["reminders"]] == ["pruning"]

    def test_invalid_sort(self, client):
        assert client.get(f"{BASE}?sortBy=title").status_code == 400

    def test_overdue_and_upcoming(self, client, plant_id):
        now = datetime.now(timezone.utc)
        late = _create(client, plant_id, dueDate=(now - timedelta(days=4)).isoformat())
        soon = _create(client, plant_id, careType="pruning", dueDate=(now + timedelta(days=2)).isoformat())

        overdue = client.get(f"{BASE}/overdue").get_json()["data"]
        assert [r["reminder_id"] for r in overdue["reminders"]] == [late["reminder_id"]]
        assert overdue["reminders"][0]["status"] == "overdue"
        assert overdue["reminders"][0]["priority"] == "high"

        upcoming = client.get(f"{BASE}/upcoming?days=3").get_json()["data"]
        assert [r["reminder_id"] for r in upcoming["reminders"]] == [soon["reminder_id"]]
        assert upcoming["days"] == 3


class TestUpdateAndDelete:
    def test_update_fields(self, client, plant_id):
        created = _create(client, plant_id)
        resp = client.put(
            f"{BASE}/{created['reminder_id']}",
            json={"title": "Water the basil", "frequencyDays": 3, "priority": "low"},
        )

        assert resp.status_code == 200
        data = resp.get_json()["data"]
        assert data["title"] == "Water the basil"
        assert data["frequency"]["days"] == 3
        assert data["priority"] == "medium"

    def test_due_date_cannot_be_cleared(self, client, plant_id):
        created = _create(client, plant_id)
        resp = client.put(f"{BASE}/{created['reminder_id']}", json={"dueDate": None})
        assert resp.status_code == 400

    def test_delete(self, client, plant_id):
        created = _create(client, plant_id)
        assert client.delete(f"{BASE}/{created['reminder_id']}").status_code == 200
        assert client.get(f"{BASE}/{created['reminder_id']}").status_code == 404


class TestActions:
    def test_snooze_until_cap(self, client, plant_id):
        created = _create(client, plant_id)
        url = f"{BASE}/{created['reminder_id']}/snooze"

        for expected in (1, 2, 3):
            resp = client.post(url, json={"hours": 2, "reason": "away"})
            assert resp.status_code == 200
            assert resp.get_json()["data"]["snooze_count"] == expected

        resp = client.post(url, json={"hours": 2})
        assert resp.status_code == 409
        assert resp.get_json()["success"] is False

    def test_snooze_hours_bound(self, client, plant_id):
        created = _create(client, plant_id)
        resp = client.post(f"{BASE}/{created['reminder_id']}/snooze", json={"hours": 169})
        assert resp.status_code == 400

    def test_complete_generates_next_occurrence(self, client, plant_id):
        created = _create(client, plant_id)

        resp = client.post(f"{BASE}/{created['reminder_id']}/complete", json={"notes": "done"})

        assert resp.status_code == 200
        data = resp.get_json()["data"]
        assert data["reminder"]["status"] == "completed"
        assert data["reminder"]["is_active"] is False
        assert data["completion"]["was_on_time"] is True
        assert data["next_reminder"]["parent_id"] == created["reminder_id"]
        assert data["next_reminder"]["status"] == "pending"
        assert data["care_log"]["care_type"] == "watering"

        plant = client.get(f"/api/v1/plants/{plant_id}").get_json()["data"]
        assert plant["last_watered_at"] is not None

    def test_complete_twice_conflicts(self, client, plant_id):
        created = _create(client, plant_id)
        client.post(f"{BASE}/{created['reminder_id']}/complete")
        assert client.post(f"{BASE}/{created['reminder_id']}/complete").status_code == 409

    def test_complete_without_care_log(self, client, plant_id):
        created = _create(client, plant_id, isRecurring=False)
        resp = client.post(f"{BASE}/{created['reminder_id']}/complete", json={"createCareLog": False})
        data = resp.get_json()["data"]
        assert data["care_log"] is None
        assert data["next_reminder"] is None

    def test_dismiss(self, client, plant_id):
        created = _create(client, plant_id)
        resp = client.post(f"{BASE}/{created['reminder_id']}/dismiss")
        assert resp.get_json()["data"]["status"] == "dismissed"
        assert client.post(f"{BASE}/{created['reminder_id']}/snooze").status_code == 409

    def test_bulk_reports_each_id(self, client, plant_id):
        first = _create(client, plant_id)
        second = _create(client, plant_id, careType="pruning")

        resp = client.post(
            f"{BASE}/bulk",
            json={"reminderIds": [first["reminder_id"], second["reminder_id"], 999], "operation": "dismiss"},
        )

        data = resp.get_json()["data"]
        assert resp.status_code == 200
        assert data["succeeded"] == [first["reminder_id"], second["reminder_id"]]
        assert data["failed"][0]["id"] == 999
        assert data["failed"][0]["status"] == 404

    def test_bulk_rejects_unknown_operation(self, client, plant_id):
        first = _create(client, plant_id)
        resp = client.post(f"{BASE}/bulk", json={"reminderIds": [first["reminder_id"]], "operation": "archive"})
        assert resp.status_code == 400


class TestSmartScheduling:
    def test_smart_schedule_creates_then_skips(self, client, plant_id):
        body = {"plantId": plant_id, "careTypes": ["watering", "fertilizing"], "considerWeather": False}

        first = client.post(f"{BASE}/smart-schedule", json=body)
        assert first.status_code == 201
        data = first.get_json()["data"]
        assert sorted(r["care_type"] for r in data["created"]) == ["fertilizing", "watering"]
        assert data["season"] in {"winter", "spring", "summer", "fall"}
        assert data["weather"] is None

        second = client.post(f"{BASE}/smart-schedule", json=body)
        assert second.status_code == 200
        assert {s["reason"] for s in second.get_json()["data"]["skipped"]} == {"active reminder exists"}

    def test_weather_adjust_disabled(self, client):
        resp = client.post(f"{BASE}/weather-adjust", json={})
        assert resp.status_code == 409

    def test_stats(self, client, plant_id):
        first = _create(client, plant_id)
        _create(client, plant_id, careType="pruning")
        client.post(f"{BASE}/{first['reminder_id']}/complete")

        stats = client.get(f"{BASE}/stats").get_json()["data"]

        # completed original, its next occurrence, and the pruning reminder
        assert stats["total"] == 3
        assert stats["completed"] == 1
        assert stats["completed_on_time"] == 1
        assert stats["compliance_rate"] == 1.0
        assert stats["by_care_type"] == {"watering": 2, "pruning": 1}


class TestNotifications:
    def test_created_reminders_notify_user(self, client, plant_id):
        _create(client, plant_id)

        listing = client.get("/api/v1/notifications?unreadOnly=true").get_json()["data"]
        assert listing["count"] == 1
        notification = listing["notifications"][0]
        assert notification["notification_type"] == "reminder_created"

        resp = client.post(f"/api/v1/notifications/{notification['notification_id']}/read")
        assert resp.get_json()["data"]["is_read"] is True
        assert client.get("/api/v1/notifications?unreadOnly=true").get_json()["data"]["count"] == 0

    def test_read_unknown_notification(self, client):
        assert client.post("/api/v1/notifications/555/read").status_code == 404
