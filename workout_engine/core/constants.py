"""Application constants."""

# Rest timer
REST_ADJUST_STEP_SECONDS = 30
MAX_REST_SECONDS = 999

# Effort rating bounds (inclusive)
MIN_EFFORT_RATING = 1
MAX_EFFORT_RATING = 10

# History / dashboards
RECENT_PR_DAYS = 7
EXERCISE_HISTORY_LIMIT = 10
PROGRESSION_HISTORY_LIMIT = 100
ACTIVITY_DAYS = 7
