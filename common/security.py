import jwt
from datetime import datetime, timedelta
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from common.config import Config
from common.logging import logger
from common.models import UserContext

JWT_ALGORITHM = "HS256"

security = HTTPBearer(auto_error=False)


def verify_token(token: str) -> UserContext:
    """Verify JWT token and return the user it was issued for"""
    try:
        if not Config.JWT_SECRET:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="JWT secret not configured"
            )

        payload = jwt.decode(token, Config.JWT_SECRET, algorithms=[JWT_ALGORITHM])
        user_id = payload.get("user_id")

        if not user_id:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token: missing user_id"
            )

        return UserContext(
            user_id=user_id,
            email=payload.get("email"),
            is_demo=bool(payload.get("demo", False))
        )

    except HTTPException:
        raise
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired"
        )
    except jwt.InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token"
        )
    except Exception as e:
        logger.error(f"Token verification error: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token verification failed"
        )


def create_token(user_id: str, email: str = None, demo: bool = False,
                 expires_delta: timedelta = None) -> str:
    """Create JWT token for user"""
    if not Config.JWT_SECRET:
        raise ValueError("JWT secret not configured")

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(hours=Config.JWT_EXPIRATION_HOURS)

    payload = {
        "user_id": user_id,
        "email": email,
        "demo": demo,
        "exp": expire
    }

    return jwt.encode(payload, Config.JWT_SECRET, algorithm=JWT_ALGORITHM)


def get_optional_user(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)) -> Optional[UserContext]:
    """Signed-in user, or None for anonymous callers."""
    if credentials is None:
        return None
    return verify_token(credentials.credentials)


def get_current_user(user: Optional[UserContext] = Depends(get_optional_user)) -> UserContext:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )
    return user
