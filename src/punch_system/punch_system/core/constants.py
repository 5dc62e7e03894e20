"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

# Subdomain value meaning "no company selected"; never valid for punches.
NO_TENANT = "main"

DEFAULT_TIMEZONE = "Asia/Kolkata"
DEFAULT_END_OF_SHIFT = time(19, 0)

DEFAULT_PUNCH_MAX_RETRIES = 3
DEFAULT_PUNCH_RETRY_BACKOFF = 0.05
