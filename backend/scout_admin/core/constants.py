# scout_admin/core/constants.py
from datetime import timedelta

SEASON = "2026"
SEASON_PREFIX = SEASON              # keys surfaced as events start with this
EVENT_KEY_PREFIX = f"{SEASON}_"     # prefix added to user-supplied event names
CURRENT_EVENT_FIELD = "event"       # reserved key: name of the active event

DEFAULT_EVENT_QUOTA = 1

SESSION_COOKIE_NAME = "session"
SESSION_TTL = timedelta(days=5)
SESSION_MAX_AGE_SECONDS = int(SESSION_TTL.total_seconds())

ROLES = ("member", "admin", "master")
LOGIN_ROLES = ("admin", "master")
ASSIGNABLE_MEMBER_ROLES = ("member", "admin")

MEMBER_PAGE_SIZE = 1000

TBA_CACHE_SECONDS = 3600
# Offseason (99) and preseason (100) event types
TBA_EXCLUDED_EVENT_TYPES = frozenset({99, 100})
