from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel
from typing import Optional
import logging

from nichepulse.app.auth import (
    AuthService,
    AuthUser,
    LoginRequest,
    SignUpRequest,
    get_auth_service,
    get_current_user,
)
from nichepulse.app.database import UsageTrackingError
from nichepulse.app.dependencies import get_database
from nichepulse.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

# --- Schemas ---
class UserResponse(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None

class AuthResponse(BaseModel):
    success: bool
    user: Optional[UserResponse] = None
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    error: Optional[str] = None


def _auth_response(user: AuthUser) -> AuthResponse:
    return AuthResponse(
        success=True,
        user=UserResponse(id=user.id, email=user.email, full_name=user.full_name),
        access_token=user.access_token or None,
        refresh_token=user.refresh_token or None,
    )


def _set_session_cookie(response: Response, settings: Settings, access_token: str):
    response.set_cookie(
        key=settings.session_cookie_name,
        value=access_token,
        httponly=True,
        samesite="lax",
        secure=not settings.debug,
    )

# --- Routes ---

@router.post("/signup", response_model=AuthResponse)
async def signup(
    request: SignUpRequest,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    """Sign up a new user and create their profile."""
    result = await auth_service.sign_up(request)

    if not (result.success and result.user):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=result.error or "Signup failed"
        )

    try:
        db = get_database(settings)
        await db.create_user_profile(result.user.id, result.user.email, request.full_name)
    except UsageTrackingError as e:
        logger.warning(f"Profile not created for {result.user.id}: {e}")

    if result.user.access_token:
        _set_session_cookie(response, settings, result.user.access_token)
    return _auth_response(result.user)

@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    """Log in and set the session cookie."""
    result = await auth_service.login(request)

    if not (result.success and result.user):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=result.error or "Login failed"
        )

    _set_session_cookie(response, settings, result.user.access_token)
    return _auth_response(result.user)

@router.post("/logout")
async def logout(
    response: Response,
    user: Optional[AuthUser] = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    """Log out current user and clear the session cookie."""
    if user:
        await auth_service.logout()
    response.delete_cookie(settings.session_cookie_name)
    return {"success": True}

@router.get("/me", response_model=AuthResponse)
async def get_me(user: Optional[AuthUser] = Depends(get_current_user)):
    """Get current authenticated user."""
    if not user:
        return AuthResponse(success=False, error="Not authenticated")

    return AuthResponse(
        success=True,
        user=UserResponse(id=user.id, email=user.email, full_name=user.full_name)
    )
