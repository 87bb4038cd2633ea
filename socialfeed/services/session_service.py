from datetime import datetime, timedelta
from typing import Any, Dict, Optional
from jose import JWTError, jwt
from pydantic import BaseModel
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import logging

from socialfeed.config import settings
from socialfeed.services.redis_service import RedisService, get_redis

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


class Session(BaseModel):
    """Authenticated identity handed to every service call that needs one"""
    user_id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    access_token: str
    expires_at: Optional[datetime] = None


class SessionService:
    """Verifies access tokens issued by the identity provider and revokes them on sign-out"""

    def __init__(self, redis: RedisService):
        self.redis = redis

    def create_access_token(
        self,
        user_id: str,
        email: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """Issue a token in the identity provider's format"""
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

        to_encode = {
            "sub": user_id,
            "email": email,
            "aud": settings.JWT_AUDIENCE,
            "role": "authenticated",
            "user_metadata": metadata or {},
            "exp": datetime.utcnow() + expires_delta,
        }
        return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.JWT_ALGORITHM)

    async def verify_token(self, token: str) -> Optional[Session]:
        """Return the session for a valid, unrevoked token"""
        try:
            if await self.redis.get(f"revoked:{token}"):
                return None

            payload = jwt.decode(
                token,
                settings.jwt_secret,
                algorithms=[settings.JWT_ALGORITHM],
                audience=settings.JWT_AUDIENCE,
            )
        except JWTError as e:
            logger.info(f"Rejected access token: {e}")
            return None

        user_id = payload.get("sub")
        if not user_id:
            return None

        metadata = payload.get("user_metadata") or {}
        expires_at = datetime.utcfromtimestamp(payload["exp"]) if payload.get("exp") else None

        return Session(
            user_id=user_id,
            email=payload.get("email"),
            full_name=metadata.get("full_name"),
            avatar_url=metadata.get("avatar_url"),
            access_token=token,
            expires_at=expires_at,
        )

    async def sign_out(self, session: Session) -> None:
        """Revoke the session's token until it would have expired anyway"""
        if session.expires_at is not None:
            remaining = int((session.expires_at - datetime.utcnow()).total_seconds())
        else:
            remaining = settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60

        await self.redis.setex(f"revoked:{session.access_token}", max(remaining, 1), "1")
        logger.info(f"User {session.user_id} signed out")


def get_session_service(redis: RedisService = Depends(get_redis)) -> SessionService:
    return SessionService(redis)


async def get_optional_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session_service: SessionService = Depends(get_session_service)
) -> Optional[Session]:
    """Dependency returning the current session, or None for anonymous requests"""
    if credentials is None:
        return None
    return await session_service.verify_token(credentials.credentials)


async def get_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session_service: SessionService = Depends(get_session_service)
) -> Session:
    """Dependency to get the current authenticated session"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    session = await session_service.verify_token(credentials.credentials)
    if session is None:
        raise credentials_exception

    return session
