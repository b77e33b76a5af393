"""Authentication schemas."""

from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class SignupRequest(BaseModel):
    """Create account request."""

    name: str = Field(max_length=100)
    email: EmailStr
    password: str


class SignupResponse(BaseModel):
    """Created account."""

    user_id: UUID
    message: str = "Account created successfully"


class LoginRequest(BaseModel):
    """Credential login request."""

    email: EmailStr
    password: str


class User(BaseModel):
    """Public view of a user."""

    id: UUID
    name: str
    email: str

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    """Issued access token."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: User
