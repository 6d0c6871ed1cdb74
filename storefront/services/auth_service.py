"""
Authentication Service - password hashing and JWT issuance
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.config import settings
from storefront.models.user import User
from storefront.repositories.user_repository import UserRepository
from storefront.schemas.user import GoogleProfile, UserCreate, UserLogin

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class AuthError(Exception):
    """Base exception for authentication errors"""
    pass


class EmailAlreadyRegisteredError(AuthError):
    """Another account already uses this email"""
    pass


class InvalidCredentialsError(AuthError):
    """Email/password pair does not match"""
    pass


class InvalidTokenError(AuthError):
    """Token is malformed, expired or signed with another key"""
    pass


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a signed token carrying the user's id and admin flag"""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    payload = {
        "sub": str(user.id),
        "username": user.username,
        "is_admin": user.is_admin,
        "exp": expire
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> int:
    """
    Verify a token and return the user id it was issued for

    Raises:
        InvalidTokenError: If the token cannot be verified
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
        return int(payload["sub"])
    except (JWTError, KeyError, ValueError) as e:
        raise InvalidTokenError(str(e)) from e


class AuthService:
    """Service layer for registration and login"""

    def __init__(self, db: Session):
        self.db = db
        self.repository = UserRepository(db)

    def register(self, user_data: UserCreate) -> User:
        """
        Create a regular (non-admin) account

        Raises:
            EmailAlreadyRegisteredError: If the email is taken
        """
        if self.repository.get_by_email(user_data.email):
            raise EmailAlreadyRegisteredError("User with that email already exists.")

        try:
            user = self.repository.create(
                username=user_data.username,
                email=user_data.email,
                password_hash=hash_password(user_data.password)
            )
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            self.db.rollback()
            raise EmailAlreadyRegisteredError("User with that email already exists.")
        logger.info("Registered user %s", user.id)
        return user

    def login(self, credentials: UserLogin) -> tuple:
        """
        Check credentials and issue a token

        Returns:
            (token, user)

        Raises:
            InvalidCredentialsError: On unknown email or wrong password
        """
        user = self.repository.get_by_email(credentials.email)
        # Same error for every case so emails cannot be enumerated
        if not user or not user.password_hash or not verify_password(credentials.password, user.password_hash):
            raise InvalidCredentialsError("Invalid credentials.")

        return create_access_token(user), user

    def login_with_google(self, profile: GoogleProfile) -> User:
        """
        Resolve a Google identity to a local account

        Steps:
        1. Account already linked to this Google ID
        2. Account registered with the same email: link the Google ID to it
        3. Otherwise create a password-less account
        """
        user = self.repository.get_by_google_id(profile.google_id)
        if user:
            return user

        user = self.repository.get_by_email(profile.email)
        if user:
            logger.info("Linking Google account to user %s", user.id)
            return self.repository.update(user, {"google_id": profile.google_id})

        try:
            user = self.repository.create(
                username=profile.username,
                email=profile.email,
                google_id=profile.google_id,
                profile_pic=profile.profile_pic
            )
        except IntegrityError:
            # A concurrent callback for the same identity created the row first
            self.db.rollback()
            user = self.repository.get_by_google_id(profile.google_id)
            if user is None:
                raise
            return user
        logger.info("Created user %s from Google sign-in", user.id)
        return user

    def resolve_token(self, token: str) -> Optional[User]:
        """Return the user a token belongs to, or None if that user no longer exists"""
        user_id = decode_access_token(token)
        return self.repository.get_by_id(user_id)
