"""
Credential handling: bcrypt password hashing, JWT issue/verify and the
identity gateway that turns an Authorization header into a username.

Nothing here is a module-level singleton. The FastAPI dependencies at the
bottom build instances from settings, and tests can override them.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from fastapi import Depends, Header

from cinebook.core.config import Settings, get_settings
from cinebook.core.exceptions import AuthenticationError
from cinebook.core.logging import get_logger

logger = get_logger(__name__)

BEARER_PREFIX = "Bearer "


class PasswordHasher:
    """bcrypt hashing. bcrypt ignores input past 72 bytes."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, plain_password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(plain_password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        try:
            return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
        except ValueError:
            # Malformed stored hash
            return False


class TokenCodec:
    """Signs and verifies access tokens whose subject is the username."""

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 60):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def encode(self, subject: str, expires_delta: Optional[timedelta] = None) -> str:
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(minutes=self.expire_minutes))
        payload = {"sub": subject, "iat": now, "exp": expire}
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def decode(self, token: str) -> str:
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token has expired")
        except jwt.PyJWTError:
            raise AuthenticationError("Invalid token")

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise AuthenticationError("Invalid token")
        return subject


class IdentityGateway:
    """Resolves a bearer credential to the username it was issued for."""

    def __init__(self, codec: TokenCodec):
        self.codec = codec

    def resolve(self, authorization: Optional[str]) -> str:
        if not authorization:
            raise AuthenticationError("Missing authorization header")
        if not authorization.startswith(BEARER_PREFIX):
            raise AuthenticationError("Invalid authorization header")

        token = authorization[len(BEARER_PREFIX):].strip()
        if not token:
            raise AuthenticationError("Invalid authorization header")

        username = self.codec.decode(token)
        logger.debug("identity_resolved", username=username)
        return username


def get_password_hasher() -> PasswordHasher:
    return PasswordHasher()


def get_token_codec(settings: Settings = Depends(get_settings)) -> TokenCodec:
    return TokenCodec(
        secret_key=settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
    )


def get_identity_gateway(codec: TokenCodec = Depends(get_token_codec)) -> IdentityGateway:
    return IdentityGateway(codec)


async def get_current_username(
    authorization: Optional[str] = Header(default=None),
    gateway: IdentityGateway = Depends(get_identity_gateway),
) -> str:
    """FastAPI dependency: the authenticated caller's username."""
    return gateway.resolve(authorization)
