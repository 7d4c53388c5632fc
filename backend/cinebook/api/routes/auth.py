"""
Authentication endpoints: register and login.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from cinebook.db.session import get_db
from cinebook.schemas.user import UserCreate, UserResponse, UserLogin, UserSummary, Token
from cinebook.services.auth_service import register_user, authenticate_user
from cinebook.core.security import PasswordHasher, TokenCodec, get_password_hasher, get_token_codec

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """Register a new user account."""
    return await register_user(db, user_data, hasher)


@router.post("/login", response_model=Token)
async def login(
    login_data: UserLogin,
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    codec: TokenCodec = Depends(get_token_codec),
):
    """Authenticate and receive a JWT whose subject is the username."""
    token, user = await authenticate_user(db, login_data, hasher, codec)
    return Token(access_token=token, user=UserSummary.model_validate(user))
