"""Rate limiting configuration using slowapi.

Report endpoints fold whole months of attendance per request, so they are
throttled per client IP. The limiter is wired into the app in main.py.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from hrms.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.RATE_LIMIT_ENABLED,
)

REPORT_LIMIT = settings.REPORT_RATE_LIMIT
