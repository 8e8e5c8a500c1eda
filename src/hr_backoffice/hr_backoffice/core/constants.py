"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Pending reviews older than this are escalated. Not configurable per workspace.
ESCALATION_THRESHOLD_HOURS = 48

ON_TIME_BASE_POINTS = 5
MAX_QUALITY_POINTS = 10
MAX_BONUS_POINTS = 5
POSSIBLE_POINTS_PER_TASK = ON_TIME_BASE_POINTS + MAX_QUALITY_POINTS + MAX_BONUS_POINTS

RECENT_REVIEWED_LIMIT = 10
DEFAULT_LIST_LIMIT = 500
