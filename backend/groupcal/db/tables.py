"""
Single source of truth for database tables that exist after migrations.

Use these names when writing raw SQL (e.g. TRUNCATE in scripts).
"""
# All tables that exist in the DB. Must match models and migration 001.
ALL_TABLE_NAMES = (
    "availability_records",
    "availability_slots",
    "scheduled_sessions",
    "campaigns",
    "campaign_members",
    "settings",
)

# Tables cleared when resetting calendar data. Children before parents.
AVAILABILITY_TABLE_NAMES = (
    "availability_slots",
    "availability_records",
)
