"""
Application Constants
=====================

Centralized constants to replace magic numbers throughout the codebase.
Organized by domain for easy discovery and maintenance.

Usage:
    from app.constants import DEFAULT_SEASONAL_MULTIPLIERS
    from app.constants import Timeouts, Pagination, WeatherRules
"""

# =============================================================================
# Timing Constants (seconds unless otherwise noted)
# =============================================================================

class Timeouts:
    """Timeout values for various operations."""
    # Network/API
    HTTP_REQUEST_TIMEOUT = 10  # seconds

    # Database
    DB_QUERY_TIMEOUT = 30  # seconds


# =============================================================================
# Pagination Constants
# =============================================================================

class Pagination:
    """Pagination defaults and limits."""
    DEFAULT_PAGE_SIZE = 20
    MAX_PAGE_SIZE = 100
    DEFAULT_PAGE = 1

    # Specific endpoints
    CARE_LOGS_DEFAULT = 50
    NOTIFICATIONS_DEFAULT = 50
    BULK_MAX_IDS = 50


# =============================================================================
# Reminder Limits
# =============================================================================

class ReminderLimits:
    """Bounds enforced on reminder fields."""
    TITLE_MAX = 200
    DESCRIPTION_MAX = 1000
    NOTES_MAX = 1000
    SNOOZE_REASON_MAX = 200

    FREQUENCY_MIN_DAYS = 1
    FREQUENCY_MAX_DAYS = 365
    FLEXIBILITY_MAX_DAYS = 7

    DEFAULT_MAX_SNOOZES = 3
    MAX_SNOOZES_CAP = 10
    DEFAULT_SNOOZE_HOURS = 24
    SNOOZE_HOURS_MAX = 168  # one week

    UPCOMING_DAYS_DEFAULT = 7
    UPCOMING_DAYS_MAX = 30

    MAX_OCCURRENCES_CAP = 1000


# Overdue thresholds (whole days) for priority escalation
PRIORITY_URGENT_DAYS = 7
PRIORITY_HIGH_DAYS = 3

# Rolling compliance rate used when a reminder has no completions yet
DEFAULT_COMPLIANCE_RATE = 0.8
DEFAULT_CONFIDENCE_SCORE = 0.5


# =============================================================================
# Seasonal Scheduling
# =============================================================================

# Multipliers applied to the base care frequency, keyed by season.
# Single source of truth: the scheduler, smart scheduling and recurrence all
# read this map (or a configured override of it).
DEFAULT_SEASONAL_MULTIPLIERS: dict[str, float] = {
    "winter": 0.7,
    "spring": 1.2,
    "summer": 1.3,
    "fall": 0.9,
}

SEASONAL_MULTIPLIER_MIN = 0.1
SEASONAL_MULTIPLIER_MAX = 2.0


# =============================================================================
# Weather Rules
# =============================================================================

class WeatherRules:
    """Thresholds for weather-driven watering adjustments."""
    RAIN_THRESHOLD_MM = 10.0
    RAIN_LOOKAHEAD_DAYS = 3
    RAIN_DELAY_DAYS = 2

    HOT_TEMPERATURE_C = 30.0
    DRY_HUMIDITY_PCT = 40.0
    HOT_DRY_ADVANCE_HOURS = 12


# =============================================================================
# Care Defaults
# =============================================================================

# Base frequency (days) per care type when a plant has no explicit config.
DEFAULT_CARE_FREQUENCY_DAYS: dict[str, int] = {
    "watering": 7,
    "fertilizing": 14,
    "pruning": 30,
    "repotting": 365,
    "health-check": 30,
    "pest-treatment": 90,
    "soil-change": 180,
    "location-change": 180,
}
