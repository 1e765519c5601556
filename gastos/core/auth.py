from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from gastos.core.config import settings
from gastos.core.errors import Unauthenticated

security = HTTPBearer(auto_error=False)

def create_access_token(uid: str, expires_delta: timedelta | None = None) -> str:
    """Create JWT access token for a caller identity."""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    now = datetime.now(timezone.utc)
    expire = now + expires_delta

    payload = {
        "sub": uid,
        "exp": int(expire.timestamp()),
        "iat": int(now.timestamp())
    }

    return jwt.encode(
        payload,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )

def decode_uid(token: str) -> str:
    """Return the caller identity carried by a token."""
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )
    except JWTError:
        raise Unauthenticated("Token inválido")

    uid = payload.get("sub")
    if not uid:
        raise Unauthenticated("Token inválido")
    return uid

async def get_current_uid(
    credentials: HTTPAuthorizationCredentials | None = Depends(security)
) -> str:
    """Caller identity from the bearer token; every callable requires one."""
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("Usuario no autenticado")
    return decode_uid(credentials.credentials)
