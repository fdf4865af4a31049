"""
Tests for ReminderService.

Covers:
- Reminder creation (computed and explicit due dates, ownership)
- Listing, upcoming, overdue and statistics views
- Updates, snooze, dismiss and completion with next occurrence
- Bulk operations with per-id failures
- Smart scheduling and weather adjustment
- Background sweep
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from app.domain.exceptions import ConflictError, LimitExceededError, NotFoundError, UpstreamError, ValidationError
from app.enums.reminders import CareType, ReminderPriority, ReminderStatus, WeatherImpact

NOW = datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)
LAST_WATERED = datetime(2026, 6, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def basil(seed):
    return seed.create_plant("Basil", watering_every_days=7, fertilizer_every_weeks=2, last_watered_at=LAST_WATERED)


def _create(service, plant=None, user_id=1, **data):
    payload = {"care_type": "watering"}
    if plant is not None:
        payload["plant_id"] = plant.plant_id
    payload.update(data)
    return service.create_reminder(user_id, payload)


class TestCreateReminder:
    """create_reminder computes due dates from the plant and season."""

    def test_due_date_from_plant_history(self, reminder_service, basil):
        reminder = _create(reminder_service, basil)

        assert reminder.reminder_id is not None
        assert reminder.title == "Watering: Basil"
        assert reminder.frequency.days == 7
        assert reminder.last_care_date == LAST_WATERED
        # Summer: 7 * 1.3 = 9.1 -> 9 days after the last watering
        assert reminder.due_date == LAST_WATERED + timedelta(days=9)
        assert reminder.status is ReminderStatus.PENDING
        assert reminder.environmental_factors.current_season.value == "summer"

    def test_due_date_without_history(self, reminder_service):
        reminder = _create(reminder_service, frequency_days=10)
        # 10 * 1.3 = 13 days, halved
        assert reminder.due_date == NOW + timedelta(days=6, hours=12)
        assert reminder.plant_id is None

    def test_explicit_due_date_wins(self, reminder_service, basil):
        due = NOW + timedelta(days=1)
        reminder = _create(reminder_service, basil, due_date=due, title="Custom")
        assert reminder.due_date == due
        assert reminder.original_due_date == due
        assert reminder.title == "Custom"

    def test_past_due_date_is_overdue_immediately(self, reminder_service, basil):
        reminder = _create(reminder_service, basil, due_date=NOW - timedelta(days=4))
        assert reminder.status is ReminderStatus.OVERDUE
        assert reminder.priority is ReminderPriority.HIGH

    def test_frequency_required_without_plant(self, reminder_service):
        with pytest.raises(ValidationError):
            _create(reminder_service)

    def test_plant_of_another_user(self, reminder_service, seed):
        plant = seed.create_plant("Fern", user_id=2)
        with pytest.raises(NotFoundError):
            _create(reminder_service, plant)

    def test_custom_seasonal_adjustments_merge(self, reminder_service, basil):
        reminder = _create(reminder_service, basil, seasonal_adjustments={"summer": 2.0})
        assert reminder.seasonal_adjustments["summer"] == 2.0
        assert reminder.seasonal_adjustments["winter"] == 0.7
        assert reminder.due_date == LAST_WATERED + timedelta(days=14)

    def test_requested_priority_is_derived(self, reminder_service, basil):
        reminder = _create(reminder_service, basil, due_date=NOW + timedelta(days=2), priority="urgent")
        assert reminder.priority is ReminderPriority.MEDIUM

    def test_default_max_snoozes_from_scheduler(self, reminder_service, basil):
        assert _create(reminder_service, basil).max_snoozes == 3

    def test_creation_notifies(self, reminder_service, notifications_service, basil):
        _create(reminder_service, basil)
        messages = notifications_service.get_user_notifications(1)
        assert [m["notification_type"] for m in messages] == ["reminder_created"]


class TestReadViews:
    def test_get_reminder_is_owner_scoped(self, reminder_service, basil):
        reminder = _create(reminder_service, basil)
        assert reminder_service.get_reminder(1, reminder.reminder_id).title == reminder.title
        with pytest.raises(NotFoundError):
            reminder_service.get_reminder(2, reminder.reminder_id)

    def test_get_reminder_applies_overdue_transition(self, reminder_service, basil, clock):
        reminder = _create(reminder_service, basil, due_date=NOW + timedelta(hours=1))
        clock.advance(days=3, hours=2)

        loaded = reminder_service.get_reminder(1, reminder.reminder_id)

        assert loaded.status is ReminderStatus.OVERDUE
        assert loaded.priority is ReminderPriority.HIGH

    def test_list_filters_sorts_and_paginates(self, reminder_service, basil):
        for days in (5, 1, 3):
            _create(reminder_service, basil, due_date=NOW + timedelta(days=days))
        _create(reminder_service, basil, care_type="pruning", due_date=NOW + timedelta(days=2))

        page, total = reminder_service.list_reminders(1, care_type="watering", page=1, limit=2)
        assert total == 3
        assert [r.due_date for r in page] == [NOW + timedelta(days=1), NOW + timedelta(days=3)]

        page, total = reminder_service.list_reminders(1, sort_order="desc")
        assert total == 4
        assert page[0].due_date == NOW + timedelta(days=5)

    def test_list_status_filter(self, reminder_service, basil):
        _create(reminder_service, basil, due_date=NOW - timedelta(days=1))
        _create(reminder_service, basil, due_date=NOW + timedelta(days=1))

        overdue, total = reminder_service.list_reminders(1, status="overdue")
        assert total == 1
        assert overdue[0].status is ReminderStatus.OVERDUE

    def test_list_rejects_unknown_sort(self, reminder_service):
        with pytest.raises(ValidationError):
            reminder_service.list_reminders(1, sort_by="title")

    def test_upcoming_window(self, reminder_service, basil):
        soon = _create(reminder_service, basil, due_date=NOW + timedelta(days=2))
        _create(reminder_service, basil, due_date=NOW + timedelta(days=10))
        _create(reminder_service, basil, due_date=NOW - timedelta(days=1))

        upcoming = reminder_service.upcoming(1, 7)
        assert [r.reminder_id for r in upcoming] == [soon.reminder_id]

    @pytest.mark.parametrize("days", [0, 31])
    def test_upcoming_days_bounds(self, reminder_service, days):
        with pytest.raises(ValidationError):
            reminder_service.upcoming(1, days)

    def test_overdue_sorted_by_priority(self, reminder_service, basil):
        mild = _create(reminder_service, basil, due_date=NOW - timedelta(days=1))
        urgent = _create(reminder_service, basil, due_date=NOW - timedelta(days=8))
        _create(reminder_service, basil, due_date=NOW + timedelta(days=1))

        overdue = reminder_service.overdue(1)
        assert [r.reminder_id for r in overdue] == [urgent.reminder_id, mild.reminder_id]
        assert overdue[0].priority is ReminderPriority.URGENT

    def test_stats(self, reminder_service, basil):
        on_time = _create(reminder_service, basil, due_date=NOW + timedelta(hours=2))
        late = _create(reminder_service, basil, care_type="pruning", due_date=NOW - timedelta(days=2))
        _create(reminder_service, basil, care_type="repotting", due_date=NOW + timedelta(days=20))
        reminder_service.complete_reminder(1, on_time.reminder_id)
        reminder_service.complete_reminder(1, late.reminder_id)

        stats = reminder_service.stats(1)

        assert stats["total"] == 5  # three created plus two next occurrences
        assert stats["by_status"]["completed"] == 2
        assert stats["completed"] == 2
        assert stats["completed_on_time"] == 1
        assert stats["compliance_rate"] == 0.5
        assert stats["by_care_type"]["watering"] == 2

    def test_stats_without_completions_uses_default_rate(self, reminder_service):
        assert reminder_service.stats(1)["compliance_rate"] == 0.8


class TestUpdateReminder:
    def test_update_fields(self, reminder_service, basil):
        reminder = _create(reminder_service, basil)
        updated = reminder_service.update_reminder(
            1,
            reminder.reminder_id,
            {"title": "Water the basil", "priority": "critical", "frequency_days": 5, "notes": None},
        )
        assert updated.title == "Water the basil"
        assert updated.priority is ReminderPriority.MEDIUM
        assert updated.frequency.days == 5

        reloaded = reminder_service.get_reminder(1, reminder.reminder_id)
        assert reloaded.title == "Water the basil"

    def test_none_due_date_is_ignored(self, reminder_service, basil):
        reminder = _create(reminder_service, basil)
        updated = reminder_service.update_reminder(1, reminder.reminder_id, {"due_date": None})
        assert updated.due_date == reminder.due_date

    def test_max_snoozes_below_used(self, reminder_service, basil):
        reminder = _create(reminder_service, basil)
        reminder_service.snooze_reminder(1, reminder.reminder_id, 1)
        reminder_service.snooze_reminder(1, reminder.reminder_id, 1)
        with pytest.raises(ValidationError):
            reminder_service.update_reminder(1, reminder.reminder_id, {"max_snoozes": 1})

    def test_unknown_field(self, reminder_service, basil):
        reminder = _create(reminder_service, basil)
        with pytest.raises(ValidationError):
            reminder_service.update_reminder(1, reminder.reminder_id, {"status": "completed"})

    def test_completed_reminder_is_read_only(self, reminder_service, basil):
        reminder = _create(reminder_service, basil)
        reminder_service.complete_reminder(1, reminder.reminder_id)
        with pytest.raises(ConflictError):
            reminder_service.update_reminder(1, reminder.reminder_id, {"title": "x"})


class TestSnoozeAndDismiss:
    def test_snooze_persists(self, reminder_service, basil):
        reminder = _create(reminder_service, basil)
        reminder_service.snooze_reminder(1, reminder.reminder_id, 48, "away")

        loaded = reminder_service.get_reminder(1, reminder.reminder_id)
        assert loaded.status is ReminderStatus.SNOOZED
        assert loaded.snooze_count == 1
        assert loaded.due_date == reminder.due_date + timedelta(hours=48)

    def test_snoozing_an_overdue_reminder_drops_its_escalation(self, reminder_service, basil):
        reminder = _create(reminder_service, basil, due_date=NOW - timedelta(days=4))
        assert reminder.priority is ReminderPriority.HIGH

        reminder_service.snooze_reminder(1, reminder.reminder_id, 120)

        loaded = reminder_service.get_reminder(1, reminder.reminder_id)
        assert loaded.status is ReminderStatus.SNOOZED
        assert loaded.priority is ReminderPriority.MEDIUM

    def test_snooze_cap_persists_count(self, reminder_service, basil):
        reminder = _create(reminder_service, basil)
        for _ in range(3):
            reminder_service.snooze_reminder(1, reminder.reminder_id, 1)

        with pytest.raises(LimitExceededError):
            reminder_service.snooze_reminder(1, reminder.reminder_id, 1)
        assert reminder_service.get_reminder(1, reminder.reminder_id).snooze_count == 3

    def test_dismiss(self, reminder_service, basil):
        reminder = _create(reminder_service, basil)
        dismissed = reminder_service.dismiss_reminder(1, reminder.reminder_id)
        assert dismissed.status is ReminderStatus.DISMISSED
        with pytest.raises(ConflictError):
            reminder_service.snooze_reminder(1, reminder.reminder_id, 1)


class TestCompleteReminder:
    def test_complete_logs_care_and_schedules_next(self, reminder_service, basil, plant_service, care_log_service):
        reminder = _create(reminder_service, basil)

        result = reminder_service.complete_reminder(1, reminder.reminder_id, notes="Deep soak")

        completed = result["reminder"]
        next_reminder = result["next_reminder"]
        assert completed.status is ReminderStatus.COMPLETED
        assert completed.is_active is False
        assert completed.notes == "Deep soak"
        assert result["completion"].was_on_time is True

        # Fixed recurrence: no seasonal scaling
        assert next_reminder.reminder_id is not None
        assert next_reminder.parent_id == reminder.reminder_id
        assert next_reminder.due_date == NOW + timedelta(days=7)
        assert next_reminder.recurrence.current_occurrence == 2

        care_log = result["care_log"]
        assert care_log.reminder_id == reminder.reminder_id
        assert care_log.notes == "Deep soak"
        assert plant_service.get_plant(1, basil.plant_id).last_watered_at == NOW

        # The care log does not spawn a second open reminder
        reminders, total = reminder_service.list_reminders(1)
        assert total == 2

    def test_complete_without_care_log(self, reminder_service, basil, care_log_service):
        reminder = _create(reminder_service, basil)
        result = reminder_service.complete_reminder(1, reminder.reminder_id, create_care_log=False)
        assert result["care_log"] is None
        assert care_log_service.list_care_logs(1) == []

    def test_adaptive_watering_uses_weather(self, reminder_service, basil, mock_weather, weather_snapshot):
        mock_weather.get_weather.return_value = weather_snapshot(rainfall=(20.0,))
        reminder = _create(reminder_service, basil, recurrence={"pattern": "adaptive"})

        result = reminder_service.complete_reminder(1, reminder.reminder_id)

        next_reminder = result["next_reminder"]
        assert next_reminder.due_date == NOW + timedelta(days=11)
        assert next_reminder.environmental_factors.weather_impact is WeatherImpact.DECREASE
        assert next_reminder.environmental_factors.adjustment_reason

    def test_weather_failure_does_not_block_completion(self, reminder_service, basil, mock_weather):
        mock_weather.get_weather.side_effect = UpstreamError("down")
        reminder = _create(reminder_service, basil, recurrence={"pattern": "adaptive"})

        result = reminder_service.complete_reminder(1, reminder.reminder_id)

        assert result["reminder"].status is ReminderStatus.COMPLETED
        assert result["next_reminder"].due_date == NOW + timedelta(days=9)

    def test_late_completion(self, reminder_service, basil, clock):
        reminder = _create(reminder_service, basil, due_date=NOW + timedelta(hours=1))
        clock.advance(days=2)
        result = reminder_service.complete_reminder(1, reminder.reminder_id)
        assert result["completion"].was_on_time is False
        assert result["completion"].days_overdue == 2
        assert result["next_reminder"].compliance_rate == 0.0

    def test_non_recurring_has_no_next(self, reminder_service, basil):
        reminder = _create(reminder_service, basil, is_recurring=False)
        assert reminder_service.complete_reminder(1, reminder.reminder_id)["next_reminder"] is None

    def test_complete_twice_conflicts(self, reminder_service, basil):
        reminder = _create(reminder_service, basil)
        reminder_service.complete_reminder(1, reminder.reminder_id)
        with pytest.raises(ConflictError):
            reminder_service.complete_reminder(1, reminder.reminder_id)

    def test_deleting_parent_removes_generated_occurrences(self, reminder_service, basil):
        reminder = _create(reminder_service, basil)
        next_reminder = reminder_service.complete_reminder(1, reminder.reminder_id)["next_reminder"]

        reminder_service.delete_reminder(1, reminder.reminder_id)

        with pytest.raises(NotFoundError):
            reminder_service.get_reminder(1, next_reminder.reminder_id)


class TestBulk:
    def test_partial_failure(self, reminder_service, basil):
        first = _create(reminder_service, basil)
        second = _create(reminder_service, basil, care_type="pruning")

        result = reminder_service.bulk(1, [first.reminder_id, second.reminder_id, 999, first.reminder_id], "snooze", hours=2)

        assert result["operation"] == "snooze"
        assert result["succeeded"] == [first.reminder_id, second.reminder_id]
        assert result["failed"] == [{"id": 999, "error": "Reminder 999 not found", "status": 404}]
        assert reminder_service.get_reminder(1, first.reminder_id).snooze_count == 1

    def test_conflicts_reported_per_id(self, reminder_service, basil):
        reminder = _create(reminder_service, basil)
        reminder_service.dismiss_reminder(1, reminder.reminder_id)

        result = reminder_service.bulk(1, [reminder.reminder_id], "complete")

        assert result["succeeded"] == []
        assert result["failed"][0]["status"] == 409

    def test_bulk_delete(self, reminder_service, basil):
        reminder = _create(reminder_service, basil)
        result = reminder_service.bulk(1, [reminder.reminder_id], "delete")
        assert result["succeeded"] == [reminder.reminder_id]
        assert reminder_service.list_reminders(1)[1] == 0

    def test_unknown_operation(self, reminder_service):
        with pytest.raises(ValidationError):
            reminder_service.bulk(1, [1], "archive")

    def test_empty_ids(self, reminder_service):
        with pytest.raises(ValidationError):
            reminder_service.bulk(1, [], "dismiss")


class TestSmartSchedule:
    def test_creates_reminders_per_care_type(self, reminder_service, basil, mock_weather):
        result = reminder_service.smart_schedule(1, basil.plant_id, ["watering", "fertilizing"])

        assert result["season"] == "summer"
        assert result["weather"] == {"impact": "none", "reason": None}
        assert result["skipped"] == []
        by_type = {r.care_type: r for r in result["created"]}
        assert by_type[CareType.WATERING].due_date == LAST_WATERED + timedelta(days=9)
        # 14 * 1.3 = 18.2 -> 18 days, halved: no fertilizing history
        assert by_type[CareType.FERTILIZING].due_date == NOW + timedelta(days=9)
        mock_weather.get_weather.assert_called_once()

    def test_skips_care_types_with_open_reminder(self, reminder_service, basil):
        _create(reminder_service, basil)
        result = reminder_service.smart_schedule(1, basil.plant_id, ["watering"])
        assert result["created"] == []
        assert result["skipped"] == [{"care_type": "watering", "reason": "active reminder exists"}]

    def test_hot_dry_weather_advances_watering(self, reminder_service, basil, mock_weather, weather_snapshot):
        mock_weather.get_weather.return_value = weather_snapshot(temperature=33.0, humidity=25.0)

        result = reminder_service.smart_schedule(1, basil.plant_id, ["watering"])

        reminder = result["created"][0]
        assert reminder.due_date == LAST_WATERED + timedelta(days=9) - timedelta(hours=12)
        assert reminder.environmental_factors.weather_adjusted is True

    def test_without_season_or_weather(self, reminder_service, basil, mock_weather):
        result = reminder_service.smart_schedule(
            1, basil.plant_id, ["watering"], consider_weather=False, consider_season=False
        )
        assert result["season"] is None
        assert result["weather"] is None
        assert result["created"][0].due_date == LAST_WATERED + timedelta(days=7)
        mock_weather.get_weather.assert_not_called()

    def test_unknown_plant(self, reminder_service):
        with pytest.raises(NotFoundError):
            reminder_service.smart_schedule(1, 404, ["watering"])


class TestWeatherAdjust:
    def test_rain_delays_open_watering_once(self, reminder_service, basil, mock_weather, weather_snapshot):
        reminder = _create(reminder_service, basil)
        mock_weather.get_weather.return_value = weather_snapshot(rainfall=(0.0, 15.0))

        result = reminder_service.weather_adjust(1)

        assert result["checked"] == 1
        assert [r.reminder_id for r in result["adjusted"]] == [reminder.reminder_id]
        loaded = reminder_service.get_reminder(1, reminder.reminder_id)
        assert loaded.due_date == reminder.due_date + timedelta(days=2)

        again = reminder_service.weather_adjust(1)
        assert again["checked"] == 0
        assert again["adjusted"] == []

    def test_heat_does_not_pull_imminent_watering_into_the_past(
        self, reminder_service, basil, mock_weather, weather_snapshot
    ):
        reminder = _create(reminder_service, basil, due_date=NOW + timedelta(hours=6))
        mock_weather.get_weather.return_value = weather_snapshot(temperature=33.0, humidity=25.0)

        result = reminder_service.weather_adjust(1)

        assert result["checked"] == 1
        assert result["adjusted"] == []
        loaded = reminder_service.get_reminder(1, reminder.reminder_id)
        assert loaded.due_date == NOW + timedelta(hours=6)
        assert loaded.status is ReminderStatus.PENDING

    def test_other_care_types_untouched(self, reminder_service, basil, mock_weather, weather_snapshot):
        _create(reminder_service, basil, care_type="fertilizing")
        mock_weather.get_weather.return_value = weather_snapshot(rainfall=(15.0,))
        assert reminder_service.weather_adjust(1)["checked"] == 0

    def test_weather_failure_propagates(self, reminder_service, basil, mock_weather):
        _create(reminder_service, basil)
        mock_weather.get_weather.side_effect = UpstreamError("down")
        with pytest.raises(UpstreamError):
            reminder_service.weather_adjust(1)

    def test_disabled_weather(self, reminder_repo, plant_service, scheduler, clock):
        from app.services.application.reminder_service import ReminderService

        service = ReminderService(reminder_repo, plant_service, scheduler, clock=clock)
        with pytest.raises(ConflictError):
            service.weather_adjust(1)


class TestSweep:
    def test_sweep_transitions_and_notifies_once(self, reminder_service, basil, clock, notifications_service):
        reminder = _create(reminder_service, basil, due_date=NOW + timedelta(hours=2))
        clock.advance(hours=3)

        first = reminder_service.sweep()
        second = reminder_service.sweep()

        assert first == {"checked": 1, "transitioned": 1, "notified": 1}
        assert second == {"checked": 1, "transitioned": 0, "notified": 0}
        loaded = reminder_service.get_reminder(1, reminder.reminder_id)
        assert loaded.status is ReminderStatus.OVERDUE
        assert loaded.notified_at == clock.now
        due_messages = [
            m for m in notifications_service.get_user_notifications(1) if m["notification_type"] == "reminder_due"
        ]
        assert len(due_messages) == 1

    def test_due_soon_window(self, reminder_service, basil):
        _create(reminder_service, basil, due_date=NOW + timedelta(minutes=30))
        _create(reminder_service, basil, care_type="pruning", due_date=NOW + timedelta(hours=5))

        result = reminder_service.sweep()

        assert result == {"checked": 2, "transitioned": 0, "notified": 1}

    def test_dry_run_writes_nothing(self, reminder_service, reminder_repo, basil, clock):
        reminder = _create(reminder_service, basil, due_date=NOW + timedelta(hours=1))
        clock.advance(hours=2)

        result = reminder_service.sweep(dry_run=True)

        assert result["transitioned"] == 1
        assert result["notified"] == 1
        stored = reminder_repo.get_by_id(reminder.reminder_id)
        assert stored.status is ReminderStatus.PENDING
        assert stored.notified_at is None

    def test_completed_reminders_are_skipped(self, reminder_service, basil):
        reminder = _create(reminder_service, basil, due_date=NOW + timedelta(minutes=10), is_recurring=False)
        reminder_service.complete_reminder(1, reminder.reminder_id)
        assert reminder_service.sweep()["checked"] == 0
