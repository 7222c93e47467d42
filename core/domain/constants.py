"""
Domain constants - limits, page sizes and timings.
Centralized here for easy modification.
"""

# === Auth ===
MIN_PASSWORD_LENGTH = 6
TOKEN_TTL_HOURS = 2
# Client refreshes well before the token expires
TOKEN_REFRESH_INTERVAL_SECONDS = 30 * 60

# === Events ===
UPCOMING_EVENTS_LIMIT = 6
EVENTS_PER_PAGE = 6
# Pagination shows every page number up to this many pages, ellipsis above
MAX_PLAIN_PAGES = 5

# === Messages (returned to clients as-is) ===
MSG_INVALID_TOKEN = "Invalid token"
MSG_USER_NOT_FOUND = "User not found"
MSG_EVENT_NOT_FOUND = "Event not found"
MSG_NOT_OWNER_UPDATE = "Not authorized to update this event"
MSG_NOT_OWNER_DELETE = "Not authorized to delete this event"
