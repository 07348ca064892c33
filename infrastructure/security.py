import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import jwt, JWTError

import config

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        logger.error("Stored password hash is malformed")
        return False


def create_access_token(username: str, ttl: Optional[timedelta] = None) -> tuple[str, datetime]:
    """Signs a token for `username`; returns the token and its expiry."""
    expires_at = datetime.now(timezone.utc) + (ttl or timedelta(minutes=config.TOKEN_TTL_MINUTES))
    payload = {"sub": username, "exp": expires_at}
    token = jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)
    return token, expires_at


def decode_access_token(token: str) -> str:
    """Returns the username a token was issued to.

    Raises JWTError when the signature is wrong, the token expired, or
    it carries no subject.
    """
    payload = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    username = payload.get("sub")
    if not username:
        raise JWTError("Token has no subject")
    return username
