"""
API key authentication and rate limiting
"""

import secrets
import time
from collections import defaultdict
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader

from app.core.config import settings
from app.utils.responses import rate_limit_error, unauthorized_error

# Simple in-memory rate limiter
rate_limiter = defaultdict(list)

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)

def verify_api_key(api_key: Optional[str] = Depends(api_key_header)) -> str:
    """Verify the X-API-Key header sent by the organizer client"""
    if not api_key or not secrets.compare_digest(api_key, settings.API_KEY):
        unauthorized_error("Unauthorized: Invalid API key")
    return api_key

def rate_limit_check(client_ip: str, limit: int = None) -> bool:
    """Simple rate limiting by IP address"""
    if limit is None:
        limit = settings.RATE_LIMIT_PER_MINUTE

    current_time = time.time()
    minute_ago = current_time - 60

    # Drop clients with no request in the last minute
    for ip in [ip for ip, times in rate_limiter.items() if not times or times[-1] <= minute_ago]:
        del rate_limiter[ip]

    # Clean old requests
    rate_limiter[client_ip] = [
        req_time for req_time in rate_limiter[client_ip]
        if req_time > minute_ago
    ]

    if len(rate_limiter[client_ip]) >= limit:
        return False

    rate_limiter[client_ip].append(current_time)
    return True

def get_client_ip(request: Request) -> str:
    """Extract client IP from request"""
    # Check for forwarded IP first (for reverse proxy setups)
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    return request.client.host if request.client else "unknown"

def enforce_rate_limit(request: Request) -> None:
    """Dependency for public write routes"""
    if not rate_limit_check(get_client_ip(request)):
        rate_limit_error()
