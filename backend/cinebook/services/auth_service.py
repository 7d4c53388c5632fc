"""
Authentication service handling user registration and login.
"""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cinebook.models.user import User
from cinebook.schemas.user import UserCreate, UserLogin
from cinebook.core.exceptions import AuthenticationError, Conflict, ForbiddenError
from cinebook.core.logging import get_logger
from cinebook.core.metrics import record_auth_event
from cinebook.core.security import PasswordHasher, TokenCodec

logger = get_logger(__name__)


async def register_user(db: AsyncSession, user_data: UserCreate, hasher: PasswordHasher) -> User:
    """
    Register a new user with hashed password.
    Raises Conflict if email or username already exists.
    """
    result = await db.execute(select(User).where(User.username == user_data.username))
    if result.scalar_one_or_none():
        logger.warning("registration_failed", reason="username_exists", username=user_data.username)
        record_auth_event("register", False)
        raise Conflict("Username already exists")

    result = await db.execute(select(User).where(User.email == user_data.email))
    if result.scalar_one_or_none():
        logger.warning("registration_failed", reason="email_exists", email=user_data.email)
        record_auth_event("register", False)
        raise Conflict("Email already exists")

    user = User(
        email=user_data.email,
        username=user_data.username,
        hashed_password=hasher.hash(user_data.password),
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # A concurrent registration took the username or email after our check
        await db.rollback()
        if await db.scalar(select(User.id).where(User.username == user_data.username)) is not None:
            reason, message = "username_exists", "Username already exists"
        elif await db.scalar(select(User.id).where(User.email == user_data.email)) is not None:
            reason, message = "email_exists", "Email already exists"
        else:
            raise
        logger.warning("registration_failed", reason=reason, username=user_data.username)
        record_auth_event("register", False)
        raise Conflict(message)
    await db.refresh(user)

    record_auth_event("register", True)
    logger.info("user_registered", user_id=user.id, username=user.username)
    return user


async def authenticate_user(
    db: AsyncSession,
    login_data: UserLogin,
    hasher: PasswordHasher,
    codec: TokenCodec,
) -> tuple[str, User]:
    """
    Check email and password, then issue a token for the username.
    Raises AuthenticationError on bad credentials.
    """
    result = await db.execute(select(User).where(User.email == login_data.email))
    user = result.scalar_one_or_none()

    if not user or not hasher.verify(login_data.password, user.hashed_password):
        logger.warning("login_failed", email=login_data.email)
        record_auth_event("login", False)
        raise AuthenticationError("Invalid email or password")

    if not user.is_active:
        record_auth_event("login", False)
        raise ForbiddenError("Account is deactivated")

    token = codec.encode(user.username)
    record_auth_event("login", True)
    logger.info("user_logged_in", user_id=user.id, username=user.username)
    return token, user
