import os
from datetime import datetime, timedelta, timezone
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt, JWTError

from reclaim.models.user import Actor, UserProfile

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 24 * 60  # 1 day


def get_secret_key() -> str:
    secret = os.getenv("JWT_SECRET")
    if not secret:
        raise HTTPException(status_code=500, detail="JWT_SECRET is not configured")
    return secret


def create_access_token(user_id: str, profile: UserProfile) -> str:
    now = datetime.now(timezone.utc)

    payload = {
        "sub": user_id,
        "name": profile.full_name,
        "role": profile.role,
        "iat": now,
        "exp": now + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    }

    return jwt.encode(payload, get_secret_key(), algorithm=ALGORITHM)


bearer_scheme_optional = HTTPBearer(auto_error=False)


def get_current_user_optional(token: HTTPAuthorizationCredentials = Depends(bearer_scheme_optional)):
    if not token:
        return None

    try:
        return jwt.decode(token.credentials, get_secret_key(), algorithms=[ALGORITHM])
    except JWTError:
        return None


bearer_scheme_required = HTTPBearer(auto_error=True)


def get_current_user_required(token: HTTPAuthorizationCredentials = Depends(bearer_scheme_required)):
    try:
        return jwt.decode(token.credentials, get_secret_key(), algorithms=[ALGORITHM])
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")


def get_actor(current_user=Depends(get_current_user_required)) -> Actor:
    return Actor(
        user_id=current_user["sub"],
        name=current_user.get("name") or "Unknown User",
        role=current_user.get("role", "user"),
    )


def require_admin(actor: Actor = Depends(get_actor)) -> Actor:
    if not actor.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return actor
