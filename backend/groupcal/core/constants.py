"""
Centralized constants for the calendar engine and background jobs.

Change job IDs, tier names or thresholds here instead of scattering literals
across services and routes.
"""

# Scheduler job IDs (must match ids used in main.py add_job)
PRESENCE_SWEEP_JOB_ID = "presence_sweep"

# Global settings row
GLOBAL_SETTINGS_KEY = "global"

# Availability tiers, lowest to highest visibility
TIER_EMPTY = "empty"
TIER_NONE = "none"
TIER_LOW = "low"
TIER_LOW_MID = "low-mid"
TIER_MID_HIGH = "mid-high"
TIER_HIGH = "high"
TIER_FULL = "full"
TIER_SCHEDULED = "scheduled"

TIER_ORDER = (
    TIER_EMPTY,
    TIER_NONE,
    TIER_LOW,
    TIER_LOW_MID,
    TIER_MID_HIGH,
    TIER_HIGH,
    TIER_FULL,
    TIER_SCHEDULED,
)

# (lower bound inclusive, tier) for ratios strictly between 0 and 1; first match from the top wins
TIER_THRESHOLDS = (
    (0.75, TIER_HIGH),
    (0.5, TIER_MID_HIGH),
    (0.25, TIER_LOW_MID),
    (0.0, TIER_LOW),
)

# Zoom levels and their navigation step in days
ZOOM_COMPACT = "compact"
ZOOM_NORMAL = "normal"
ZOOM_WIDE = "wide"
ZOOM_STEP_DAYS = {
    ZOOM_COMPACT: 3,
    ZOOM_NORMAL: 7,
    ZOOM_WIDE: 14,
}

GRANULARITY_HOUR = "hour"
GRANULARITY_FINE = "fine"

# Date format used for day keys everywhere (stored session dates, slot keys)
DAY_FORMAT = "%Y-%m-%d"
