"""
Reminder Scheduler
==================

Pure scheduling rules for plant-care reminders.

Responsibilities:
- Next-due-date computation with seasonal and weather adjustments
- Snooze / complete / dismiss state transitions
- Priority escalation from how long a reminder has been overdue
- Compliance and confidence scoring
- Generating the next occurrence of a recurring reminder

The scheduler holds no per-reminder state and performs no I/O. Every method
takes ``now`` explicitly so callers (and tests) control the clock.

State machine::

    pending --(now > due)--> overdue
    pending/overdue --snooze--> snoozed --(snoozed_until passes)--> pending
    pending/overdue/snoozed --complete--> completed   (terminal)
    pending/overdue/snoozed --dismiss--> dismissed    (terminal)
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from datetime import datetime, timedelta

from app.constants import (
    DEFAULT_COMPLIANCE_RATE,
    DEFAULT_SEASONAL_MULTIPLIERS,
    PRIORITY_HIGH_DAYS,
    PRIORITY_URGENT_DAYS,
    ReminderLimits,
    WeatherRules,
)
from app.domain.exceptions import ConflictError, LimitExceededError, ValidationError
from app.domain.reminders.reminder_entity import (
    CompletionRecord,
    EnvironmentalFactors,
    RecurrenceSettings,
    Reminder,
    SnoozeRecord,
)
from app.domain.weather import WeatherAssessment, WeatherSnapshot
from app.enums.reminders import (
    CareType,
    RecurrencePattern,
    ReminderPriority,
    ReminderStatus,
    Season,
    WeatherImpact,
)

logger = logging.getLogger(__name__)

_DAY_SECONDS = 86400.0

RAIN_DELAY_REASON = "Delayed due to expected rainfall"
HOT_DRY_REASON = "Advanced due to hot, dry conditions"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class ReminderScheduler:
    """Stateless reminder scheduling engine."""

    def __init__(
        self,
        seasonal_multipliers: dict[str, float] | None = None,
        *,
        default_max_snoozes: int = ReminderLimits.DEFAULT_MAX_SNOOZES,
    ) -> None:
        multipliers = dict(DEFAULT_SEASONAL_MULTIPLIERS)
        if seasonal_multipliers:
            multipliers.update({str(k): float(v) for k, v in seasonal_multipliers.items()})
        self._multipliers = multipliers
        self.default_max_snoozes = default_max_snoozes

    @property
    def seasonal_multipliers(self) -> dict[str, float]:
        return dict(self._multipliers)

    # =========================================================================
    # Seasons
    # =========================================================================

    @staticmethod
    def season_for_month(month0: int) -> Season:
        """Map a 0-indexed month (0 = January) to a northern-hemisphere season."""
        if not 0 <= month0 <= 11:
            raise ValidationError(f"month must be between 0 and 11, got {month0}")
        if 2 <= month0 <= 4:
            return Season.SPRING
        if 5 <= month0 <= 7:
            return Season.SUMMER
        if 8 <= month0 <= 10:
            return Season.FALL
        return Season.WINTER

    def season_for(self, when: datetime) -> Season:
        return self.season_for_month(when.month - 1)

    def multiplier_for(self, season: Season | None, overrides: dict[str, float] | None = None) -> float:
        if season is None:
            return 1.0
        table = overrides if overrides else self._multipliers
        return float(table.get(season.value, self._multipliers.get(season.value, 1.0)))

    def adjusted_frequency_days(
        self,
        base_frequency_days: int,
        season: Season | None,
        multipliers: dict[str, float] | None = None,
    ) -> int:
        """Base frequency scaled by the seasonal multiplier, never below one day."""
        if base_frequency_days is None or base_frequency_days < 1:
            raise ValidationError("base frequency must be at least 1 day")
        adjusted = _round_half_up(base_frequency_days * self.multiplier_for(season, multipliers))
        return max(1, adjusted)

    # =========================================================================
    # Due dates
    # =========================================================================

    def compute_next_due_date(
        self,
        base_frequency_days: int,
        last_care_date: datetime | None,
        season: Season | None,
        weather_impact: WeatherImpact | None,
        care_type: CareType,
        now: datetime,
        *,
        multipliers: dict[str, float] | None = None,
    ) -> datetime:
        """
        Compute when a care action is next due.

        Args:
            base_frequency_days: Unadjusted interval (>= 1)
            last_care_date: When the care was last performed, if known
            season: Season to scale by; None applies no seasonal scaling
            weather_impact: Weather directive; only affects watering
            care_type: Kind of care
            now: Current time

        Returns:
            Due date. Always strictly after ``last_care_date`` (or ``now``
            when there is no history).

        Raises:
            ValidationError: If base_frequency_days < 1
        """
        adjusted = self.adjusted_frequency_days(base_frequency_days, season, multipliers)

        if last_care_date is not None:
            start = last_care_date
            due = start + timedelta(days=adjusted)
        else:
            # No history: schedule halfway through the interval.
            start = now
            due = start + timedelta(days=adjusted / 2)

        return self._apply_weather_delta(due, start, weather_impact, care_type)

    @staticmethod
    def weather_delta(weather_impact: WeatherImpact | None, care_type: CareType) -> timedelta:
        if care_type != CareType.WATERING or not weather_impact:
            return timedelta(0)
        if weather_impact == WeatherImpact.DECREASE:
            return timedelta(days=WeatherRules.RAIN_DELAY_DAYS)
        if weather_impact == WeatherImpact.INCREASE:
            return -timedelta(hours=WeatherRules.HOT_DRY_ADVANCE_HOURS)
        return timedelta(0)

    def _apply_weather_delta(
        self,
        due: datetime,
        start: datetime,
        weather_impact: WeatherImpact | None,
        care_type: CareType,
    ) -> datetime:
        adjusted = due + self.weather_delta(weather_impact, care_type)
        if adjusted <= start:
            # Advancing would land on or before the start; keep the seasonal date.
            return due
        return adjusted

    @staticmethod
    def assess_weather_impact(weather: WeatherSnapshot | None) -> WeatherAssessment:
        """
        Derive a watering directive from current conditions.

        Rain takes precedence: more than 10 mm expected on any of the next
        3 days delays watering. Otherwise hot (> 30 C) and dry (< 40 %)
        conditions pull watering earlier.
        """
        if weather is None:
            return WeatherAssessment()

        rain_expected = any(
            day.days_ahead < WeatherRules.RAIN_LOOKAHEAD_DAYS
            and day.rainfall_mm > WeatherRules.RAIN_THRESHOLD_MM
            for day in weather.forecast
        )
        if rain_expected:
            return WeatherAssessment(WeatherImpact.DECREASE, RAIN_DELAY_REASON)

        if (
            weather.temperature_c > WeatherRules.HOT_TEMPERATURE_C
            and weather.humidity_pct < WeatherRules.DRY_HUMIDITY_PCT
        ):
            return WeatherAssessment(WeatherImpact.INCREASE, HOT_DRY_REASON)

        return WeatherAssessment()

    def apply_weather_adjustment(self, reminder: Reminder, assessment: WeatherAssessment, now: datetime) -> bool:
        """
        Shift an open watering reminder once for the given weather.

        An advance that would land at or before ``now`` is not applied.

        Returns:
            True if the due date moved
        """
        if reminder.is_terminal or reminder.care_type != CareType.WATERING:
            return False
        if not assessment.has_impact or reminder.environmental_factors.weather_adjusted:
            return False

        adjusted = self._apply_weather_delta(reminder.due_date, now, assessment.impact, reminder.care_type)
        if adjusted == reminder.due_date:
            return False

        reminder.due_date = adjusted
        reminder.environmental_factors.weather_impact = assessment.impact
        reminder.environmental_factors.weather_adjusted = True
        reminder.environmental_factors.adjustment_reason = assessment.reason
        reminder.updated_at = now
        self.refresh_status(reminder, now)
        return True

    # =========================================================================
    # Transitions
    # =========================================================================

    def snooze(self, reminder: Reminder, hours: int, reason: str | None, now: datetime) -> Reminder:
        """
        Push a reminder's due date forward by ``hours``.

        Raises:
            ConflictError: Reminder is completed or dismissed
            LimitExceededError: snooze_count already reached max_snoozes
            ValidationError: hours outside 1..168
        """
        if reminder.is_terminal:
            raise ConflictError(f"Cannot snooze a {reminder.status.value} reminder")
        if reminder.snooze_count >= reminder.max_snoozes:
            raise LimitExceededError(
                f"Maximum snoozes ({reminder.max_snoozes}) reached",
                detail={"reminder_id": reminder.reminder_id, "snooze_count": reminder.snooze_count},
            )
        if hours < 1 or hours > ReminderLimits.SNOOZE_HOURS_MAX:
            raise ValidationError(f"hours must be between 1 and {ReminderLimits.SNOOZE_HOURS_MAX}")

        from_date = reminder.due_date
        to_date = from_date + timedelta(hours=hours)

        reminder.due_date = to_date
        reminder.snoozed_until = to_date
        reminder.status = ReminderStatus.SNOOZED
        reminder.priority = ReminderPriority.MEDIUM
        reminder.snooze_count += 1
        reminder.snooze_history.append(
            SnoozeRecord(snoozed_at=now, from_date=from_date, to_date=to_date, hours=hours, reason=reason)
        )
        reminder.updated_at = now
        logger.debug(
            "Snoozed reminder %s by %sh (%s/%s)",
            reminder.reminder_id,
            hours,
            reminder.snooze_count,
            reminder.max_snoozes,
        )
        return reminder

    def complete(self, reminder: Reminder, completed_by: int | None, now: datetime) -> CompletionRecord:
        """
        Mark a reminder occurrence as done and update compliance.

        Raises:
            ConflictError: Reminder is already completed or dismissed
        """
        if reminder.is_terminal:
            raise ConflictError(f"Cannot complete a {reminder.status.value} reminder")

        was_on_time = now <= reminder.due_date
        days_overdue = 0
        if not was_on_time:
            days_overdue = max(0, math.ceil((now - reminder.due_date).total_seconds() / _DAY_SECONDS))

        record = CompletionRecord(
            completed_at=now,
            completed_by=completed_by,
            was_on_time=was_on_time,
            days_overdue=days_overdue,
        )
        reminder.completion_history.append(record)
        reminder.status = ReminderStatus.COMPLETED
        reminder.completed_at = now
        reminder.last_care_date = now
        reminder.snoozed_until = None
        reminder.is_active = False
        reminder.compliance_rate = self.compliance_rate(reminder.completion_history)
        reminder.updated_at = now
        return record

    def dismiss(self, reminder: Reminder, now: datetime) -> Reminder:
        if reminder.is_terminal:
            raise ConflictError(f"Cannot dismiss a {reminder.status.value} reminder")
        reminder.status = ReminderStatus.DISMISSED
        reminder.dismissed_at = now
        reminder.snoozed_until = None
        reminder.is_active = False
        reminder.updated_at = now
        return reminder

    @staticmethod
    def compliance_rate(history: list[CompletionRecord]) -> float:
        if not history:
            return DEFAULT_COMPLIANCE_RATE
        on_time = sum(1 for record in history if record.was_on_time)
        return on_time / len(history)

    # =========================================================================
    # Priority & status
    # =========================================================================

    @staticmethod
    def priority_for(due_date: datetime, now: datetime) -> ReminderPriority:
        if now <= due_date:
            return ReminderPriority.MEDIUM
        days_overdue = math.floor((now - due_date).total_seconds() / _DAY_SECONDS)
        if days_overdue >= PRIORITY_URGENT_DAYS:
            return ReminderPriority.URGENT
        if days_overdue >= PRIORITY_HIGH_DAYS:
            return ReminderPriority.HIGH
        return ReminderPriority.MEDIUM

    def update_priority(self, reminder: Reminder, now: datetime) -> ReminderPriority:
        reminder.priority = self.priority_for(reminder.due_date, now)
        return reminder.priority

    def refresh_status(self, reminder: Reminder, now: datetime) -> bool:
        """
        Apply time-driven transitions and re-derive priority. Run on every
        load and save. A snoozed reminder is not overdue, so it is medium.

        Returns:
            True if status or priority changed
        """
        if reminder.is_terminal:
            return False

        before = (reminder.status, reminder.priority)

        if reminder.status == ReminderStatus.SNOOZED:
            if reminder.snoozed_until is None or reminder.snoozed_until <= now:
                reminder.status = ReminderStatus.PENDING
                reminder.snoozed_until = None

        if reminder.status == ReminderStatus.PENDING and reminder.is_overdue(now):
            reminder.status = ReminderStatus.OVERDUE
        elif reminder.status == ReminderStatus.OVERDUE and not reminder.is_overdue(now):
            reminder.status = ReminderStatus.PENDING

        # Priority is derived; any stored value is overwritten.
        if reminder.status == ReminderStatus.SNOOZED:
            reminder.priority = ReminderPriority.MEDIUM
        else:
            self.update_priority(reminder, now)

        changed = (reminder.status, reminder.priority) != before
        if changed:
            reminder.updated_at = now
        return changed

    # =========================================================================
    # Recurrence & scoring
    # =========================================================================

    @staticmethod
    def confidence(has_history: bool, compliance_rate: float) -> float:
        score = 0.4
        if has_history:
            score += 0.3
        score += 0.3 * compliance_rate
        return round(min(1.0, max(0.0, score)), 3)

    def next_occurrence(
        self,
        reminder: Reminder,
        now: datetime,
        season: Season | None = None,
        weather_impact: WeatherImpact | None = None,
    ) -> Reminder | None:
        """
        Build the next pending occurrence of a completed recurring reminder.

        Fixed recurrence ignores season and weather; seasonal recurrence
        applies the season; adaptive recurrence applies season and weather.

        Returns:
            New unsaved Reminder, or None when recurrence has ended
        """
        if reminder.status != ReminderStatus.COMPLETED:
            return None
        if not reminder.is_recurring or not reminder.recurrence.enabled:
            return None

        recurrence = reminder.recurrence
        if recurrence.max_occurrences is not None and recurrence.current_occurrence >= recurrence.max_occurrences:
            return None

        if recurrence.pattern == RecurrencePattern.FIXED:
            season, weather_impact = None, None
        elif recurrence.pattern == RecurrencePattern.SEASONAL:
            weather_impact = None

        last_care = reminder.last_care_date or now
        due = self.compute_next_due_date(
            reminder.frequency.days,
            last_care,
            season,
            weather_impact,
            reminder.care_type,
            now,
            multipliers=reminder.seasonal_adjustments,
        )
        if recurrence.end_date is not None and due > recurrence.end_date:
            return None

        impact = weather_impact if reminder.care_type == CareType.WATERING and weather_impact else WeatherImpact.NONE
        successor = Reminder(
            user_id=reminder.user_id,
            plant_id=reminder.plant_id,
            plant_name=reminder.plant_name,
            care_type=reminder.care_type,
            title=reminder.title,
            description=reminder.description,
            due_date=due,
            original_due_date=due,
            frequency=replace(reminder.frequency),
            max_snoozes=reminder.max_snoozes,
            last_care_date=last_care,
            seasonal_adjustments=dict(reminder.seasonal_adjustments),
            environmental_factors=EnvironmentalFactors(
                current_season=season,
                weather_impact=impact,
                weather_adjusted=impact != WeatherImpact.NONE,
            ),
            completion_history=list(reminder.completion_history),
            compliance_rate=reminder.compliance_rate,
            confidence_score=self.confidence(True, reminder.compliance_rate),
            is_recurring=True,
            recurrence=RecurrenceSettings(
                enabled=True,
                pattern=recurrence.pattern,
                end_date=recurrence.end_date,
                max_occurrences=recurrence.max_occurrences,
                current_occurrence=recurrence.current_occurrence + 1,
            ),
            notifications=replace(reminder.notifications, methods=list(reminder.notifications.methods)),
            parent_id=reminder.reminder_id,
            created_at=now,
            updated_at=now,
        )
        if reminder.completion_history:
            reminder.completion_history[-1].next_reminder_generated = True
        self.refresh_status(successor, now)
        return successor
