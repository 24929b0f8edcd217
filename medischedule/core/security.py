from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from medischedule.config import settings


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify a JWT issued by the authentication provider."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        return payload
    except JWTError:
        return None


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT the same way the authentication provider does.

    Only used by local tooling and tests; the running service never issues tokens.
    """
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(hours=1))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
