"""
Authentication for the quotation API.

Login goes through a configurable credential verifier (username/password or a
shared access code). Successful logins receive a signed, expiring JWT that is
checked on every protected request.
"""

from __future__ import annotations

import hmac
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Protocol

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel
from sqlalchemy import Engine, insert, select, update

from .config import Settings
from .database import users
from .errors import ProviderNotConfiguredError

logger = logging.getLogger(__name__)

TOKEN_ALGORITHM = "HS256"


class LoginRequest(BaseModel):
    username: str | None = None
    password: str | None = None
    code: str | None = None


class CredentialVerifier(Protocol):
    required_fields: tuple[str, ...]

    def verify(self, request: LoginRequest) -> str | None:
        """Return the authenticated subject, or None when credentials are wrong."""
        ...


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a bcrypt hash")
        return False


class PasswordVerifier:
    """Checks username/password against bcrypt hashes in the ``users`` table."""

    required_fields = ("username", "password")

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def verify(self, request: LoginRequest) -> str | None:
        if not request.username or not request.password:
            return None
        with self._engine.connect() as conn:
            row = conn.execute(
                select(users.c.username, users.c.password).where(users.c.username == request.username)
            ).mappings().first()
        if row is None or not check_password(request.password, row["password"]):
            return None
        return row["username"]

    def set_password(self, username: str, password: str) -> bool:
        """Create ``username`` or reset its password; returns True when created."""
        hashed = hash_password(password)
        with self._engine.begin() as conn:
            result = conn.execute(
                update(users).where(users.c.username == username).values(password=hashed)
            )
            if result.rowcount:
                return False
            conn.execute(insert(users).values(username=username, password=hashed))
        return True


class AccessCodeVerifier:
    """Accepts a single shared access code."""

    required_fields = ("code",)
    subject = "access-code"

    def __init__(self, access_code: str) -> None:
        self._access_code = access_code.encode("utf-8")

    def verify(self, request: LoginRequest) -> str | None:
        if not request.code:
            return None
        if hmac.compare_digest(request.code.encode("utf-8"), self._access_code):
            return self.subject
        return None


class TokenService:
    """Issues and validates HS256 bearer tokens."""

    def __init__(self, secret_key: str, *, ttl_minutes: int = 720) -> None:
        self._secret_key = secret_key
        self._ttl = timedelta(minutes=ttl_minutes)

    def issue(self, subject: str, *, now: datetime | None = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            "sub": subject,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self._ttl).timestamp()),
        }
        return jwt.encode(claims, self._secret_key, algorithm=TOKEN_ALGORITHM)

    def verify(self, token: str) -> dict[str, Any] | None:
        try:
            claims = jwt.decode(token, self._secret_key, algorithms=[TOKEN_ALGORITHM])
        except ExpiredSignatureError:
            logger.info("Rejected expired token")
            return None
        except JWTError:
            logger.info("Rejected invalid token")
            return None
        if not claims.get("sub"):
            return None
        return claims


def build_verifier(settings: Settings, engine: Engine) -> CredentialVerifier:
    if settings.auth_mode == "access_code":
        if settings.access_code is None:
            raise ProviderNotConfiguredError("ACCESS_CODE is required when AUTH_MODE=access_code")
        return AccessCodeVerifier(settings.access_code.get_secret_value())
    return PasswordVerifier(engine)


def build_token_service(settings: Settings) -> TokenService:
    """Token service keyed by ``TOKEN_SECRET``.

    Outside dev a missing secret is a start-up error. In dev a random key is
    generated, so tokens stop validating when the process restarts.
    """
    if settings.token_secret is not None and settings.token_secret.get_secret_value():
        secret_key = settings.token_secret.get_secret_value()
    elif settings.environment == "dev":
        logger.warning("TOKEN_SECRET not set; signing tokens with a per-process random key")
        secret_key = secrets.token_urlsafe(32)
    else:
        raise ProviderNotConfiguredError("TOKEN_SECRET is required outside dev")
    return TokenService(secret_key, ttl_minutes=settings.token_ttl_minutes)


__all__ = [
    "AccessCodeVerifier",
    "CredentialVerifier",
    "LoginRequest",
    "PasswordVerifier",
    "TokenService",
    "build_token_service",
    "build_verifier",
    "check_password",
    "hash_password",
]
