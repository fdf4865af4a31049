"""
Reminder Service
================

Application service orchestrating plant-care reminders. Every scheduling
decision is delegated to :class:`~app.domain.reminders.ReminderScheduler`;
this layer handles ownership checks, persistence, care logs, weather lookups
and notifications.

Each operation is one read followed by one write. Concurrent writers to the
same reminder are last-write-wins.

Collaborator failures (weather, notifications) never block the primary
mutation: they are logged and the operation continues without them.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional

from app.constants import (
    DEFAULT_COMPLIANCE_RATE,
    Pagination,
    ReminderLimits,
)
from app.domain.exceptions import (
    ConflictError,
    NotFoundError,
    PlantCareError,
    RepositoryError,
    UpstreamError,
    ValidationError,
)
from app.domain.plant_entity import Plant
from app.domain.reminders import (
    EnvironmentalFactors,
    NotificationSettings,
    RecurrenceSettings,
    Reminder,
    ReminderFrequency,
    ReminderScheduler,
)
from app.domain.weather import WeatherAssessment
from app.enums.reminders import (
    CareType,
    NotificationMethod,
    RecurrencePattern,
    ReminderPriority,
    ReminderStatus,
)
from app.utils.time import coerce_datetime, utc_now

if TYPE_CHECKING:
    from app.domain.reminders import ReminderRepository
    from app.services.application.care_log_service import CareLogService
    from app.services.application.notifications_service import NotificationsService
    from app.services.application.plant_service import PlantService
    from app.services.utilities.weather_service import WeatherService

logger = logging.getLogger(__name__)

_SORT_FIELDS = ("due_date", "created_at", "priority")
_BULK_OPERATIONS = ("delete", "complete", "snooze", "dismiss")

_UPDATABLE_FIELDS = frozenset(
    {
        "title",
        "description",
        "notes",
        "due_date",
        "priority",
        "frequency_days",
        "is_flexible",
        "flexibility_days",
        "max_snoozes",
        "is_recurring",
        "recurrence",
        "notifications",
        "seasonal_adjustments",
    }
)
_NULLABLE_FIELDS = frozenset({"description", "notes"})


def _care_title(care_type: CareType, plant_name: str | None) -> str:
    label = care_type.value.replace("-", " ").capitalize()
    return f"{label}: {plant_name}" if plant_name else label


class ReminderService:
    """Reminder lifecycle for the HTTP API and background sweep."""

    def __init__(
        self,
        reminder_repo: "ReminderRepository",
        plant_service: "PlantService",
        scheduler: ReminderScheduler,
        *,
        care_log_service: Optional["CareLogService"] = None,
        notifications_service: Optional["NotificationsService"] = None,
        weather_service: Optional["WeatherService"] = None,
        due_soon_minutes: int = 60,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        Initialize ReminderService.

        Args:
            reminder_repo: Reminder persistence
            plant_service: Owner-scoped plant access
            scheduler: Scheduling rules
            care_log_service: Creates care logs on completion (optional)
            notifications_service: In-app notifications (optional)
            weather_service: Weather lookups for watering (optional)
            due_soon_minutes: Sweep notifies reminders due within this window
            clock: Returns the current UTC time
        """
        self._repo = reminder_repo
        self._plants = plant_service
        self.scheduler = scheduler
        self._care_logs = care_log_service
        self._notifications = notifications_service
        self._weather = weather_service
        self.due_soon_minutes = due_soon_minutes
        self._clock = clock

    # =========================================================================
    # Loading
    # =========================================================================

    def _save(self, reminder: Reminder) -> Reminder:
        if not self._repo.update(reminder):
            raise RepositoryError(f"Reminder {reminder.reminder_id} could not be saved")
        return reminder

    def _load_owned(self, user_id: int, reminder_id: int, now: datetime) -> Reminder:
        reminder = self._repo.get_by_id(reminder_id)
        if reminder is None or reminder.user_id != user_id:
            raise NotFoundError(f"Reminder {reminder_id} not found")
        if self.scheduler.refresh_status(reminder, now):
            self._save(reminder)
        return reminder

    def get_reminder(self, user_id: int, reminder_id: int) -> Reminder:
        """
        Load one reminder with time-driven transitions applied.

        Raises:
            NotFoundError: Unknown id or owned by another user
        """
        return self._load_owned(user_id, reminder_id, self._clock())

    # =========================================================================
    # Weather
    # =========================================================================

    def _assess_weather(self, plant: Plant | None) -> WeatherAssessment:
        """Weather directive for a plant, or no impact if weather is unavailable."""
        if self._weather is None:
            return WeatherAssessment()
        lat = plant.latitude if plant is not None else None
        lng = plant.longitude if plant is not None else None
        try:
            snapshot = self._weather.get_weather(lat, lng)
        except (UpstreamError, ValidationError) as exc:
            logger.warning("Scheduling without weather: %s", exc)
            return WeatherAssessment()
        return self.scheduler.assess_weather_impact(snapshot)

    # =========================================================================
    # Notifications
    # =========================================================================

    def _notify(self, method: str, *args: Any) -> None:
        if self._notifications is None:
            return
        try:
            getattr(self._notifications, method)(*args)
        except Exception as exc:
            logger.warning("Notification %s failed: %s", method, exc)

    # =========================================================================
    # Create
    # =========================================================================

    def create_reminder(self, user_id: int, data: dict[str, Any]) -> Reminder:
        """
        Create a reminder from validated request data.

        When ``due_date`` is omitted the scheduler computes it from the
        frequency, the last care date (given or from the plant) and the
        current season.

        Raises:
            NotFoundError: plant_id unknown or owned by another user
            ValidationError: Inconsistent input
        """
        now = self._clock()
        care_type = CareType(data["care_type"])

        plant = None
        if data.get("plant_id") is not None:
            plant = self._plants.get_plant(user_id, int(data["plant_id"]))

        frequency_days = data.get("frequency_days")
        if frequency_days is None:
            frequency_days = plant.base_frequency_days(care_type) if plant else None
        if frequency_days is None:
            raise ValidationError("frequencyDays is required when the plant has no care interval")

        last_care = coerce_datetime(data.get("last_care_date"))
        if last_care is None and plant is not None:
            last_care = plant.last_care_date(care_type)

        seasonal = dict(self.scheduler.seasonal_multipliers)
        seasonal.update(data.get("seasonal_adjustments") or {})

        season = self.scheduler.season_for(now)
        due_date = coerce_datetime(data.get("due_date"))
        if due_date is None:
            due_date = self.scheduler.compute_next_due_date(
                int(frequency_days), last_care, season, None, care_type, now, multipliers=seasonal
            )

        max_snoozes = data.get("max_snoozes")
        reminder = Reminder(
            user_id=user_id,
            plant_id=plant.plant_id if plant else None,
            plant_name=plant.name if plant else None,
            care_type=care_type,
            title=(data.get("title") or "").strip() or _care_title(care_type, plant.name if plant else None),
            description=data.get("description"),
            notes=data.get("notes"),
            due_date=due_date,
            frequency=ReminderFrequency(
                days=int(frequency_days),
                is_flexible=data.get("is_flexible", True),
                flexibility_days=data.get("flexibility_days", 1),
            ),
            max_snoozes=self.scheduler.default_max_snoozes if max_snoozes is None else int(max_snoozes),
            last_care_date=last_care,
            seasonal_adjustments=seasonal,
            environmental_factors=EnvironmentalFactors(current_season=season),
            confidence_score=self.scheduler.confidence(last_care is not None, DEFAULT_COMPLIANCE_RATE),
            is_recurring=data.get("is_recurring", True),
            recurrence=self._recurrence_from(data.get("recurrence")),
            notifications=self._notifications_from(data.get("notifications")),
            created_at=now,
            updated_at=now,
        )
        self.scheduler.refresh_status(reminder, now)
        created = self._repo.create(reminder)
        self._notify("notify_reminder_created", created)
        return created

    @staticmethod
    def _recurrence_from(data: dict[str, Any] | None) -> RecurrenceSettings:
        data = data or {}
        return RecurrenceSettings(
            enabled=data.get("enabled", True),
            pattern=RecurrencePattern(data.get("pattern") or "fixed"),
            end_date=coerce_datetime(data.get("end_date")),
            max_occurrences=data.get("max_occurrences"),
        )

    @staticmethod
    def _notifications_from(data: dict[str, Any] | None) -> NotificationSettings:
        data = data or {}
        methods = data.get("methods") or [NotificationMethod.IN_APP.value]
        return NotificationSettings(
            enabled=data.get("enabled", True),
            methods=[NotificationMethod(m) for m in methods],
            advance_notice_days=data.get("advance_notice_days", 0),
        )

    def ensure_reminder_for_care(self, plant: Plant, care_type: CareType, performed_at: datetime) -> Reminder | None:
        """
        Create the first reminder after a care event if none is open.

        Returns:
            The new reminder, or None if one already exists or no base
            frequency is known for the care type
        """
        existing = self._repo.find_active(plant.user_id, plant.plant_id, care_type.value)
        if existing is not None:
            return None
        base = plant.base_frequency_days(care_type)
        if base is None:
            return None
        return self.create_reminder(
            plant.user_id,
            {
                "plant_id": plant.plant_id,
                "care_type": care_type.value,
                "frequency_days": base,
                "last_care_date": performed_at,
            },
        )

    # =========================================================================
    # Read
    # =========================================================================

    def _refresh_all(self, reminders: Iterable[Reminder], now: datetime) -> list[Reminder]:
        refreshed = []
        for reminder in reminders:
            if self.scheduler.refresh_status(reminder, now):
                self._save(reminder)
            refreshed.append(reminder)
        return refreshed

    def list_reminders(
        self,
        user_id: int,
        *,
        status: str | None = None,
        plant_id: int | None = None,
        care_type: str | None = None,
        priority: str | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        is_recurring: bool | None = None,
        sort_by: str = "due_date",
        sort_order: str = "asc",
        page: int = Pagination.DEFAULT_PAGE,
        limit: int = Pagination.DEFAULT_PAGE_SIZE,
    ) -> tuple[list[Reminder], int]:
        """
        List a user's reminders.

        Returns:
            (page of reminders, total matching count)
        """
        if sort_by not in _SORT_FIELDS:
            raise ValidationError(f"sortBy must be one of {', '.join(_SORT_FIELDS)}")
        page = max(1, int(page))
        limit = min(max(1, int(limit)), Pagination.MAX_PAGE_SIZE)
        now = self._clock()

        reminders = self._refresh_all(
            self._repo.list_for_user(
                user_id,
                plant_id=plant_id,
                care_type=care_type,
                is_recurring=is_recurring,
                due_from=date_from,
                due_to=date_to,
            ),
            now,
        )

        if status:
            wanted_status = ReminderStatus(status)
            reminders = [r for r in reminders if r.status == wanted_status]
        if priority:
            wanted_priority = ReminderPriority.parse(priority)
            reminders = [r for r in reminders if r.priority == wanted_priority]

        reverse = sort_order == "desc"
        if sort_by == "priority":
            reminders.sort(key=lambda r: (r.priority.rank, r.due_date), reverse=reverse)
        elif sort_by == "created_at":
            reminders.sort(key=lambda r: r.created_at, reverse=reverse)
        else:
            reminders.sort(key=lambda r: r.due_date, reverse=reverse)

        total = len(reminders)
        start = (page - 1) * limit
        return reminders[start : start + limit], total

    def upcoming(self, user_id: int, days: int = ReminderLimits.UPCOMING_DAYS_DEFAULT) -> list[Reminder]:
        """Open reminders due between now and ``days`` from now."""
        if days < 1 or days > ReminderLimits.UPCOMING_DAYS_MAX:
            raise ValidationError(f"days must be between 1 and {ReminderLimits.UPCOMING_DAYS_MAX}")
        now = self._clock()
        reminders = self._refresh_all(
            self._repo.list_for_user(user_id, due_from=now, due_to=now + timedelta(days=days)), now
        )
        return [r for r in reminders if not r.is_terminal]

    def overdue(self, user_id: int) -> list[Reminder]:
        now = self._clock()
        reminders = self._refresh_all(self._repo.list_for_user(user_id, due_to=now), now)
        overdue = [r for r in reminders if r.status == ReminderStatus.OVERDUE]
        overdue.sort(key=lambda r: (-r.priority.rank, r.due_date))
        return overdue

    def stats(self, user_id: int) -> dict[str, Any]:
        now = self._clock()
        reminders = self._refresh_all(self._repo.list_for_user(user_id), now)

        by_status = {status.value: 0 for status in ReminderStatus}
        by_care_type: dict[str, int] = {}
        completed_on_time = 0
        completed_total = 0
        due_today = 0
        end_of_day = now.replace(hour=23, minute=59, second=59, microsecond=999999)

        for reminder in reminders:
            by_status[reminder.status.value] += 1
            by_care_type[reminder.care_type.value] = by_care_type.get(reminder.care_type.value, 0) + 1
            if reminder.status == ReminderStatus.COMPLETED and reminder.completion_history:
                completed_total += 1
                if reminder.completion_history[-1].was_on_time:
                    completed_on_time += 1
            elif not reminder.is_terminal and reminder.due_date <= end_of_day:
                due_today += 1

        compliance = completed_on_time / completed_total if completed_total else DEFAULT_COMPLIANCE_RATE
        return {
            "total": len(reminders),
            "by_status": by_status,
            "by_care_type": by_care_type,
            "due_today": due_today,
            "completed": completed_total,
            "completed_on_time": completed_on_time,
            "compliance_rate": round(compliance, 3),
        }

    # =========================================================================
    # Mutations
    # =========================================================================

    def update_reminder(self, user_id: int, reminder_id: int, changes: dict[str, Any]) -> Reminder:
        """
        Apply user edits to an open reminder. A ``priority`` edit is accepted
        but priority is re-derived on save.

        Raises:
            ConflictError: Reminder is completed or dismissed
            ValidationError: Unknown fields or max_snoozes below the current count
        """
        now = self._clock()
        reminder = self._load_owned(user_id, reminder_id, now)
        if reminder.is_terminal:
            raise ConflictError(f"Cannot edit a {reminder.status.value} reminder")
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown reminder fields: {', '.join(sorted(unknown))}")

        for key, value in changes.items():
            if value is None and key not in _NULLABLE_FIELDS:
                continue
            if key == "due_date":
                reminder.due_date = coerce_datetime(value)
            elif key == "priority":
                # Derived by refresh_status below
                continue
            elif key == "frequency_days":
                reminder.frequency.days = int(value)
            elif key == "is_flexible":
                reminder.frequency.is_flexible = bool(value)
            elif key == "flexibility_days":
                reminder.frequency.flexibility_days = int(value)
            elif key == "max_snoozes":
                if int(value) < reminder.snooze_count:
                    raise ValidationError("maxSnoozes cannot be lower than the snoozes already used")
                reminder.max_snoozes = int(value)
            elif key == "recurrence":
                current = reminder.recurrence.current_occurrence
                reminder.recurrence = self._recurrence_from(value)
                reminder.recurrence.current_occurrence = current
            elif key == "notifications":
                reminder.notifications = self._notifications_from(value)
            elif key == "seasonal_adjustments":
                reminder.seasonal_adjustments.update(value or {})
            else:
                setattr(reminder, key, value)

        reminder.updated_at = now
        self.scheduler.refresh_status(reminder, now)
        return self._save(reminder)

    def delete_reminder(self, user_id: int, reminder_id: int) -> None:
        """Delete a reminder; its generated occurrences cascade."""
        self._load_owned(user_id, reminder_id, self._clock())
        self._repo.delete(reminder_id)
        logger.info("Deleted reminder %s for user %s", reminder_id, user_id)

    def snooze_reminder(
        self,
        user_id: int,
        reminder_id: int,
        hours: int = ReminderLimits.DEFAULT_SNOOZE_HOURS,
        reason: str | None = None,
    ) -> Reminder:
        now = self._clock()
        reminder = self._load_owned(user_id, reminder_id, now)
        self.scheduler.snooze(reminder, hours, reason, now)
        return self._save(reminder)

    def dismiss_reminder(self, user_id: int, reminder_id: int) -> Reminder:
        now = self._clock()
        reminder = self._load_owned(user_id, reminder_id, now)
        self.scheduler.dismiss(reminder, now)
        return self._save(reminder)

    def complete_reminder(
        self,
        user_id: int,
        reminder_id: int,
        *,
        notes: str | None = None,
        create_care_log: bool = True,
    ) -> dict[str, Any]:
        """
        Complete an occurrence, log the care and schedule the next one.

        Returns:
            {"reminder", "next_reminder", "care_log", "completion"}
        """
        now = self._clock()
        reminder = self._load_owned(user_id, reminder_id, now)
        completion = self.scheduler.complete(reminder, user_id, now)
        if notes:
            reminder.notes = notes

        plant = None
        if reminder.plant_id is not None:
            try:
                plant = self._plants.get_plant(user_id, reminder.plant_id)
            except NotFoundError:
                logger.warning("Reminder %s references missing plant %s", reminder_id, reminder.plant_id)

        season = self.scheduler.season_for(now)
        assessment = WeatherAssessment()
        if (
            reminder.care_type == CareType.WATERING
            and reminder.recurrence.pattern == RecurrencePattern.ADAPTIVE
        ):
            assessment = self._assess_weather(plant)

        next_reminder = self.scheduler.next_occurrence(reminder, now, season, assessment.impact)
        if next_reminder is not None and assessment.has_impact:
            next_reminder.environmental_factors.adjustment_reason = assessment.reason
        self._save(reminder)

        if next_reminder is not None:
            next_reminder = self._repo.create(next_reminder)

        care_log = None
        if create_care_log and plant is not None and self._care_logs is not None:
            care_log = self._care_logs.log_care(
                user_id,
                plant.plant_id,
                reminder.care_type,
                notes=notes,
                performed_at=now,
                reminder_id=reminder.reminder_id,
                schedule_reminder=False,
            )

        self._notify("notify_reminder_completed", reminder, next_reminder)
        logger.info(
            "Completed reminder %s (on_time=%s, next=%s)",
            reminder_id,
            completion.was_on_time,
            next_reminder.reminder_id if next_reminder else None,
        )
        return {
            "reminder": reminder,
            "next_reminder": next_reminder,
            "care_log": care_log,
            "completion": completion,
        }

    def bulk(
        self,
        user_id: int,
        reminder_ids: list[int],
        operation: str,
        *,
        hours: int = ReminderLimits.DEFAULT_SNOOZE_HOURS,
        reason: str | None = None,
    ) -> dict[str, Any]:
        """
        Apply one operation to many reminders. Each id succeeds or fails on its own.

        Returns:
            {"operation", "succeeded": [ids], "failed": [{"id", "error"}]}
        """
        if operation not in _BULK_OPERATIONS:
            raise ValidationError(f"operation must be one of {', '.join(_BULK_OPERATIONS)}")
        if not reminder_ids or len(reminder_ids) > Pagination.BULK_MAX_IDS:
            raise ValidationError(f"reminderIds must contain 1 to {Pagination.BULK_MAX_IDS} ids")

        succeeded: list[int] = []
        failed: list[dict[str, Any]] = []
        for reminder_id in dict.fromkeys(reminder_ids):
            try:
                if operation == "delete":
                    self.delete_reminder(user_id, reminder_id)
                elif operation == "complete":
                    self.complete_reminder(user_id, reminder_id)
                elif operation == "snooze":
                    self.snooze_reminder(user_id, reminder_id, hours, reason)
                else:
                    self.dismiss_reminder(user_id, reminder_id)
                succeeded.append(reminder_id)
            except PlantCareError as exc:
                failed.append({"id": reminder_id, "error": str(exc), "status": exc.http_status})
        return {"operation": operation, "succeeded": succeeded, "failed": failed}

    # =========================================================================
    # Smart scheduling & weather
    # =========================================================================

    def smart_schedule(
        self,
        user_id: int,
        plant_id: int,
        care_types: list[str],
        *,
        consider_weather: bool = True,
        consider_season: bool = True,
    ) -> dict[str, Any]:
        """
        Create reminders for a plant from its care config and history.

        Care types that already have an open reminder, or no known base
        frequency, are skipped.
        """
        now = self._clock()
        plant = self._plants.get_plant(user_id, plant_id)
        season = self.scheduler.season_for(now) if consider_season else None

        created: list[Reminder] = []
        skipped: list[dict[str, str]] = []
        assessment: WeatherAssessment | None = None

        for raw in dict.fromkeys(care_types):
            care_type = CareType(raw)
            if self._repo.find_active(user_id, plant_id, care_type.value) is not None:
                skipped.append({"care_type": care_type.value, "reason": "active reminder exists"})
                continue
            base = plant.base_frequency_days(care_type)
            if base is None:
                skipped.append({"care_type": care_type.value, "reason": "no care interval known"})
                continue

            impact_assessment = WeatherAssessment()
            if consider_weather and care_type == CareType.WATERING:
                if assessment is None:
                    assessment = self._assess_weather(plant)
                impact_assessment = assessment

            last_care = plant.last_care_date(care_type)
            due = self.scheduler.compute_next_due_date(
                base, last_care, season, impact_assessment.impact, care_type, now
            )
            reminder = Reminder(
                user_id=user_id,
                plant_id=plant.plant_id,
                plant_name=plant.name,
                care_type=care_type,
                title=_care_title(care_type, plant.name),
                due_date=due,
                frequency=ReminderFrequency(days=base),
                max_snoozes=self.scheduler.default_max_snoozes,
                last_care_date=last_care,
                seasonal_adjustments=dict(self.scheduler.seasonal_multipliers),
                environmental_factors=EnvironmentalFactors(
                    current_season=season,
                    weather_impact=impact_assessment.impact,
                    weather_adjusted=impact_assessment.has_impact,
                    adjustment_reason=impact_assessment.reason,
                ),
                confidence_score=self.scheduler.confidence(last_care is not None, DEFAULT_COMPLIANCE_RATE),
                recurrence=RecurrenceSettings(
                    pattern=RecurrencePattern.SEASONAL if consider_season else RecurrencePattern.FIXED
                ),
                created_at=now,
                updated_at=now,
            )
            self.scheduler.refresh_status(reminder, now)
            created.append(self._repo.create(reminder))
            self._notify("notify_reminder_created", created[-1])

        return {
            "plant_id": plant_id,
            "season": season.value if season else None,
            "weather": {"impact": assessment.impact.value, "reason": assessment.reason} if assessment else None,
            "created": created,
            "skipped": skipped,
        }

    def weather_adjust(self, user_id: int, plant_id: int | None = None) -> dict[str, Any]:
        """
        Apply current weather to open, future watering reminders.

        Each reminder is adjusted at most once.

        Raises:
            UpstreamError: Weather service failed
            ConflictError: No weather service configured
        """
        if self._weather is None:
            raise ConflictError("Weather integration is disabled")
        now = self._clock()

        plants: dict[int | None, Plant | None] = {}
        if plant_id is not None:
            plants[plant_id] = self._plants.get_plant(user_id, plant_id)

        candidates = [
            r
            for r in self._refresh_all(
                self._repo.list_for_user(user_id, plant_id=plant_id, care_type=CareType.WATERING.value, due_from=now),
                now,
            )
            if not r.is_terminal and not r.environmental_factors.weather_adjusted
        ]

        adjusted: list[Reminder] = []
        assessments: dict[tuple, WeatherAssessment] = {}
        for reminder in candidates:
            if reminder.plant_id not in plants:
                plants[reminder.plant_id] = (
                    self._plants.get_plant(user_id, reminder.plant_id) if reminder.plant_id is not None else None
                )
            plant = plants[reminder.plant_id]
            key = (plant.latitude, plant.longitude) if plant is not None and plant.has_coordinates else (None, None)
            if key not in assessments:
                snapshot = self._weather.get_weather(*key)
                assessments[key] = self.scheduler.assess_weather_impact(snapshot)

            if self.scheduler.apply_weather_adjustment(reminder, assessments[key], now):
                self._save(reminder)
                adjusted.append(reminder)
                self._notify("notify_schedule_adjusted", reminder)

        return {"checked": len(candidates), "adjusted": adjusted}

    # =========================================================================
    # Background sweep
    # =========================================================================

    def sweep(self, *, dry_run: bool = False) -> dict[str, int]:
        """
        Persist time-driven transitions and notify reminders coming due.

        A reminder is notified once, when it is within ``due_soon_minutes``
        of its due date.
        """
        now = self._clock()
        window_end = now + timedelta(minutes=self.due_soon_minutes)
        reminders = self._repo.list_open()

        transitioned = 0
        notified = 0
        for reminder in reminders:
            changed = self.scheduler.refresh_status(reminder, now)
            if changed:
                transitioned += 1

            due_soon = (
                reminder.notifications.enabled
                and reminder.notified_at is None
                and reminder.status in (ReminderStatus.PENDING, ReminderStatus.OVERDUE)
                and reminder.due_date <= window_end
            )
            if due_soon:
                notified += 1
                if not dry_run:
                    self._notify("notify_reminder_due", reminder)
                    reminder.notified_at = now
                    changed = True

            if changed and not dry_run:
                self._save(reminder)

        logger.info(
            "Reminder sweep%s: %d open, %d transitioned, %d notified",
            " (dry run)" if dry_run else "",
            len(reminders),
            transitioned,
            notified,
        )
        return {"checked": len(reminders), "transitioned": transitioned, "notified": notified}


