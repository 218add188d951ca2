from datetime import timedelta
from jose import jwt
from passlib.context import CryptContext
from kanban_api.config import Settings
from kanban_api.utils.clock import utcnow

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# verified against when the username does not resolve, so a miss costs
# about as much as a wrong password
_DUMMY_HASH = pwd_context.hash("kanban-api-dummy-password")


def hash_password(password: str):
    """Return the bcrypt hash stored in ``users.password_hash``.

    bcrypt only reads the first 72 bytes, so longer passwords are refused
    with ValueError instead of being silently truncated.
    """
    if isinstance(password, str):
        if len(password.encode("utf-8")) > 72:
            raise ValueError("password too long: must be at most 72 bytes when UTF-8 encoded")
    return pwd_context.hash(password)


def verify_password(plain, hashed):
    """True when ``plain`` matches a stored user hash.

    Inputs bcrypt cannot process count as a mismatch, so login answers with
    the usual invalid-credentials error.
    """
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False


def burn_password_check(plain):
    verify_password(plain, _DUMMY_HASH)


def create_token(data: dict, settings: Settings, expires_delta: timedelta = None):
    data = data.copy()
    now = utcnow()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    expire = now + expires_delta
    data.update({"iat": int(now.timestamp()), "exp": int(expire.timestamp())})  # JWT spec uses Unix timestamp
    return jwt.encode(data, settings.secret_key, algorithm=settings.algorithm)


def decode_token(token: str, settings: Settings) -> dict:
    """Return the token payload; raises jose.JWTError on bad signature or expiry."""
    return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
