"""
Authentication API endpoints
"""
import logging
from urllib.parse import urlencode

from authlib.integrations.starlette_client import OAuthError
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from storefront.api.deps import get_current_user
from storefront.config import settings
from storefront.database import get_db
from storefront.models.user import User
from storefront.oauth import google_configured, oauth
from storefront.schemas.user import GoogleProfile, UserCreate, UserLogin, UserResponse, TokenResponse
from storefront.services.auth_service import (
    AuthService,
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    create_access_token
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    """Dependency to get AuthService instance"""
    return AuthService(db)


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED, summary="Register")
def register(
    user_data: UserCreate,
    service: AuthService = Depends(get_auth_service)
):
    """
    Create a new customer account

    - **username**: Display name (required)
    - **email**: Email address, must be unique (required)
    - **password**: At least 6 characters (required)
    """
    try:
        return service.register(user_data)
    except EmailAlreadyRegisteredError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )


@router.post("/login", response_model=TokenResponse, summary="Log in")
def login(
    credentials: UserLogin,
    service: AuthService = Depends(get_auth_service)
):
    """
    Exchange email and password for a bearer token
    """
    try:
        token, user = service.login(credentials)
    except InvalidCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e)
        )
    return TokenResponse(token=token, user=UserResponse.model_validate(user))


@router.get("/status", response_model=UserResponse, summary="Current user")
def auth_status(current_user: User = Depends(get_current_user)):
    """Return the user the bearer token belongs to"""
    return current_user


@router.get("/google", summary="Sign in with Google")
async def google_login(request: Request):
    """Redirect the browser to Google's consent screen"""
    if not google_configured():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Google sign-in is not configured."
        )
    redirect_uri = settings.GOOGLE_REDIRECT_URI or str(request.url_for("google_callback"))
    return await oauth.google.authorize_redirect(request, redirect_uri)


@router.get("/google/callback", name="google_callback", summary="Google sign-in callback")
async def google_callback(
    request: Request,
    service: AuthService = Depends(get_auth_service)
):
    """
    Finish Google sign-in and hand a bearer token to the frontend

    The browser is redirected to ``FRONTEND_URL/login-success?token=...`` on
    success and to ``FRONTEND_URL/login?error=google`` otherwise.
    """
    if not google_configured():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Google sign-in is not configured."
        )
    failure = RedirectResponse(f"{settings.FRONTEND_URL}/login?error=google", status_code=status.HTTP_302_FOUND)

    try:
        token = await oauth.google.authorize_access_token(request)
    except OAuthError as e:
        logger.warning("Google sign-in failed: %s", e.error)
        return failure

    userinfo = token.get("userinfo") or {}
    if not userinfo.get("email") or not userinfo.get("email_verified"):
        logger.warning("Google sign-in rejected: no verified email for subject %s", userinfo.get("sub"))
        return failure

    email = userinfo["email"]
    profile = GoogleProfile(
        google_id=userinfo["sub"],
        email=email,
        username=(userinfo.get("name") or email.split("@")[0])[:100],
        profile_pic=userinfo.get("picture")
    )
    user = await run_in_threadpool(service.login_with_google, profile)

    query = urlencode({"token": create_access_token(user)})
    return RedirectResponse(f"{settings.FRONTEND_URL}/login-success?{query}", status_code=status.HTTP_302_FOUND)
