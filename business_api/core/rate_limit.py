"""
Rate Limiting Configuration

This module provides rate limiting functionality for API endpoints.
Rate limiting prevents abuse and ensures fair usage.

Design Decisions:
- Uses slowapi for rate limiting (lightweight, FastAPI-compatible)
- Different limits for reads, writes and the search endpoint
- IP-based limiting
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from business_api.core.setting import settings

# Initialize rate limiter
# Uses IP address for rate limiting
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

# Rate limit configurations per endpoint group
# Format: "count/period" (e.g., "10/minute" means 10 requests per minute)
RATE_LIMITS = {
    "search": "60/minute",  # Search compiles a multi-table query per call
    "read": "300/minute",  # Single business / child lookups
    "write": "60/minute",  # Creates, updates and deletes
}
