import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError
from jose.exceptions import ExpiredSignatureError
from fastapi import HTTPException, status

from auth.config import AccessTokenConfig, get_access_token_config


@dataclass
class AccessTokenClaims:
    user_id: str
    role_id: str
    role_name: str
    exp: int
    iat: int


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def create_access_token(
    user_id: str,
    role_id: str,
    role_name: str,
    config: AccessTokenConfig | None = None,
) -> str:
    """Sign an HS256 access token carrying the identity claim."""
    config = config or get_access_token_config()
    now = datetime.now(timezone.utc)
    payload = {
        "user_id": user_id,
        "role_id": role_id,
        "role_name": role_name,
        "jti": str(uuid.uuid4()),
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=config.expire_minutes)).timestamp()),
    }
    return jwt.encode(payload, config.secret_key, algorithm=config.algorithm)


def verify_access_token(token: str, config: AccessTokenConfig | None = None) -> AccessTokenClaims:
    """Verify signature and expiry; raise 401 on any failure."""
    config = config or get_access_token_config()
    try:
        payload = jwt.decode(token, config.secret_key, algorithms=[config.algorithm])
    except ExpiredSignatureError:
        raise _unauthorized("Access token is expired.")
    except JWTError:
        raise _unauthorized("Access token is invalid.")

    user_id = payload.get("user_id")
    role_id = payload.get("role_id")
    if not user_id or not role_id:
        raise _unauthorized("Access token is invalid.")

    return AccessTokenClaims(
        user_id=user_id,
        role_id=role_id,
        role_name=payload.get("role_name", ""),
        exp=payload.get("exp", 0),
        iat=payload.get("iat", 0),
    )
