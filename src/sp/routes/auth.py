"""Signup, login and logout endpoints."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from sp.auth import create_access_token
from sp.config import get_settings
from sp.db.base import get_db
from sp.schemas.auth import (
    LoginRequest,
    SignupRequest,
    SignupResponse,
    TokenResponse,
    User,
)
from sp.services.users import UserService

router = APIRouter()


@router.post("/signup", response_model=SignupResponse, status_code=201)
async def signup(
    payload: SignupRequest,
    db: AsyncSession = Depends(get_db),
) -> SignupResponse:
    """Create a new account."""
    service = UserService(db)
    user = await service.create_user(payload.name, payload.email, payload.password)
    return SignupResponse(user_id=user.id)


@router.post("/login", response_model=TokenResponse)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> TokenResponse:
    """Exchange credentials for an access token."""
    service = UserService(db)
    user = await service.authenticate(payload.email, payload.password)
    return TokenResponse(
        access_token=create_access_token(user.id),
        expires_in=get_settings().jwt_expires_minutes * 60,
        user=User.model_validate(user),
    )


@router.post("/logout")
async def logout() -> JSONResponse:
    """Clear the auth cookie. Tokens are stateless and simply expire."""
    response = JSONResponse(content={"message": "Logged out"})
    response.delete_cookie("auth-token", path="/", httponly=True)
    return response
