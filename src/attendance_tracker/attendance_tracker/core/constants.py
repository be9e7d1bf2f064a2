"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

SESSION_KEY = "user"

MIN_PHONE_DIGITS = 10
HISTORY_LIMIT = 10
ANALYTICS_DAYS = 7

# Denominator of the naive attendance percentage. Placeholder for the number of
# lectures in a term; overridable through EXPECTED_TOTAL_LECTURES.
DEFAULT_EXPECTED_TOTAL_LECTURES = 60
DEFAULT_REGISTER_REDIRECT_SECONDS = 2

DEFAULT_CLASSES = ("SE", "TE", "BE")
DEFAULT_DIVISIONS = ("A", "B", "C")

LECTURE_NUMBER_FALLBACK = "N/A"
