import datetime
import hmac

from fastapi import Depends, HTTPException, Request, status
from jose import jwt, JWTError
from passlib.context import CryptContext

from .config import Settings
from .errors import AuthNotConfigured

ALGO = "HS256"
SESSION_COOKIE = "session"
SESSION_SUBJECT = "admin"

# bcrypt_sha256 admits long passwords and is the default; plain bcrypt kept for compat
pwd = CryptContext(
    schemes=["bcrypt_sha256", "bcrypt"],
    deprecated="auto"
)

def hash_password(password: str) -> str:
    return pwd.hash(password)

def verify_admin_password(candidate: str, settings: Settings) -> bool:
    if settings.ADMIN_PASSWORD_HASH:
        try:
            return pwd.verify(candidate, settings.ADMIN_PASSWORD_HASH)
        except ValueError:
            raise AuthNotConfigured("ADMIN_PASSWORD_HASH is not a recognised hash")
    if settings.ADMIN_PASSWORD:
        return hmac.compare_digest(candidate.encode("utf-8"), settings.ADMIN_PASSWORD.encode("utf-8"))
    raise AuthNotConfigured("Admin password not set")

def create_session_token(settings: Settings) -> str:
    now = datetime.datetime.now(datetime.timezone.utc)
    payload = {
        "sub": SESSION_SUBJECT,
        "iat": int(now.timestamp()),
        "exp": int((now + datetime.timedelta(seconds=settings.SESSION_MAX_AGE_S)).timestamp()),
    }
    return jwt.encode(payload, settings.SESSION_SECRET, algorithm=ALGO)

def is_authenticated(request: Request, settings: Settings) -> bool:
    token = request.cookies.get(SESSION_COOKIE)
    if not token:
        return False
    try:
        data = jwt.decode(token, settings.SESSION_SECRET, algorithms=[ALGO])
    except JWTError:
        return False
    return data.get("sub") == SESSION_SUBJECT

def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def require_session(request: Request, settings: Settings = Depends(get_settings)) -> None:
    if not is_authenticated(request, settings):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
