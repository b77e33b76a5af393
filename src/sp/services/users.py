"""Account creation and credential verification."""

import logging
from typing import Optional

from passlib.context import CryptContext
from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sp.config import get_settings
from sp.errors import AuthenticationError, ConflictError, ValidationError
from sp.models import User

logger = logging.getLogger(__name__)

_email_adapter = TypeAdapter(EmailStr)

MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 100
MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_LENGTH = 100


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_valid_email(email: str) -> bool:
    try:
        _email_adapter.validate_python(email.strip())
    except SchemaValidationError:
        return False
    return True


def validate_signup(name: str, email: str, password: str) -> None:
    """Raise ValidationError describing the first invalid field."""
    if not name or not email or not password:
        raise ValidationError("Name, email, and password are required")
    if len(name.strip()) < MIN_NAME_LENGTH:
        raise ValidationError("Name must be at least 2 characters")
    if len(name.strip()) > MAX_NAME_LENGTH:
        raise ValidationError("Name must be less than 100 characters")
    if not is_valid_email(email):
        raise ValidationError("Please enter a valid email address")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError("Password must be at least 6 characters")
    if len(password) > MAX_PASSWORD_LENGTH:
        raise ValidationError("Password must be less than 100 characters")


class UserService:
    """Operations on user accounts."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.settings = get_settings()
        self.pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=self.settings.bcrypt_rounds,
        )

    def hash_password(self, password: str) -> str:
        return self.pwd_context.hash(password)

    def verify_password(self, plain: str, hashed: str) -> bool:
        return self.pwd_context.verify(plain, hashed)

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by (normalized) email."""
        result = await self.db.execute(
            select(User).where(User.email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def create_user(self, name: str, email: str, password: str) -> User:
        """Register a new account."""
        validate_signup(name, email, password)

        if await self.get_by_email(email):
            raise ConflictError("User with this email already exists")

        user = User(
            name=name.strip(),
            email=normalize_email(email),
            password_hash=self.hash_password(password),
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise ConflictError("User with this email already exists") from exc

        logger.info("Created user %s", user.id)
        return user

    async def authenticate(self, email: str, password: str) -> User:
        """Return the user matching the credentials."""
        user = await self.get_by_email(email or "")
        if not user or not password:
            raise AuthenticationError()
        if not self.verify_password(password, user.password_hash):
            raise AuthenticationError()
        return user
