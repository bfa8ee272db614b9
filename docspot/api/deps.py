from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Callable, Optional

from ..core.config import settings
from ..core.database import get_db, get_redis
from ..core.security import security, verify_token, AuthenticationError
from ..models.user import User

def _extract_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials]
) -> Optional[str]:
    if credentials and credentials.credentials:
        return credentials.credentials

    # Older clients send the bare token without the "Bearer" scheme
    raw = request.headers.get("Authorization", "").strip()
    if raw and " " not in raw:
        return raw
    return None

async def get_current_user_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> int:
    """Verify the bearer credential and return the user id it was issued to."""
    token = _extract_token(request, credentials)
    if not token:
        raise AuthenticationError("Unauthorized: No token provided")

    token_payload = verify_token(token)
    if not token_payload or not token_payload.sub:
        raise AuthenticationError()

    try:
        return int(token_payload.sub)
    except ValueError:
        raise AuthenticationError()

async def get_current_user(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
) -> User:
    """Get current authenticated user from database."""
    user = db.get(User, user_id)
    if not user:
        raise AuthenticationError()
    return user

# Rate limiting dependency
def rate_limit(scope: str) -> Callable:
    """Fixed-window request limit per client IP for one group of endpoints."""
    async def rate_limit_check(
        request: Request,
        redis_client = Depends(get_redis)
    ) -> None:
        if not settings.RATE_LIMIT_ENABLED:
            return

        client_ip = request.client.host if request.client else "unknown"
        key = f"rate_limit:{scope}:{client_ip}"

        current_requests = redis_client.get(key)
        if current_requests is None:
            redis_client.setex(key, settings.RATE_LIMIT_WINDOW_SECONDS, 1)
        else:
            if int(current_requests) >= settings.RATE_LIMIT_MAX_REQUESTS:
                raise HTTPException(
                    status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                    detail="Too many requests. Please try again later."
                )
            redis_client.incr(key)

    return rate_limit_check
