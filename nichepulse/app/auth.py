"""
Authentication Service for NichePulse.

Uses Supabase Auth for:
- Email/password signup and login
- Session lookup from a bearer token or the session cookie
"""

import logging
from typing import Optional
from pydantic import BaseModel, EmailStr

from fastapi import Request, HTTPException, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from supabase import create_client, Client

from nichepulse.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)


# ============== Models ==============

class SignUpRequest(BaseModel):
    """User signup request."""
    email: EmailStr
    password: str
    full_name: Optional[str] = None


class LoginRequest(BaseModel):
    """User login request."""
    email: EmailStr
    password: str


class AuthUser(BaseModel):
    """Authenticated user."""
    id: str
    email: str
    full_name: Optional[str] = None
    access_token: str
    refresh_token: str = ""


class AuthResult(BaseModel):
    """Authentication result."""
    success: bool
    user: Optional[AuthUser] = None
    error: Optional[str] = None


# ============== Auth Service ==============

class AuthNotConfiguredError(Exception):
    """Raised when authentication service is not properly configured."""
    pass


NOT_CONFIGURED_MESSAGE = "Authentication service is not configured. Please contact support."


class AuthService:
    """
    Authentication service using Supabase Auth.

    Provides graceful degradation when Supabase is not configured.
    """

    def __init__(self, settings: Optional[Settings] = None, raise_on_error: bool = False):
        """
        Initialize auth service.

        Args:
            settings: Application settings (defaults to get_settings())
            raise_on_error: If True, raise when not configured.
                           If False, service will be in degraded mode.
        """
        settings = settings or get_settings()
        self.client: Optional[Client] = None
        self._error_message: Optional[str] = None

        missing = []
        if not settings.supabase_url:
            missing.append("SUPABASE_URL")
        if not settings.supabase_anon_key:
            missing.append("SUPABASE_ANON_KEY")

        if missing:
            self._error_message = f"Missing environment variables: {', '.join(missing)}"
            if raise_on_error:
                raise AuthNotConfiguredError(
                    f"{self._error_message}. "
                    "Please set these environment variables to enable authentication."
                )
            logger.warning(f"⚠️  Auth service disabled: {self._error_message}")
            return

        try:
            self.client = create_client(settings.supabase_url, settings.supabase_anon_key)
        except Exception as e:
            self._error_message = f"Failed to initialize Supabase client: {e}"
            if raise_on_error:
                raise AuthNotConfiguredError(self._error_message) from e
            logger.warning(f"⚠️  Auth service disabled: {self._error_message}")

    @property
    def is_available(self) -> bool:
        """Check if authentication service is available."""
        return self.client is not None

    @property
    def error_message(self) -> Optional[str]:
        return self._error_message

    async def sign_up(self, request: SignUpRequest) -> AuthResult:
        """
        Sign up a new user.

        Args:
            request: Signup request with email, password, and optional name

        Returns:
            AuthResult with user info or error
        """
        if not self.is_available:
            return AuthResult(success=False, error=NOT_CONFIGURED_MESSAGE)

        try:
            response = self.client.auth.sign_up({
                "email": request.email,
                "password": request.password,
                "options": {"data": {"full_name": request.full_name}},
            })
        except Exception as e:
            logger.error(f"Signup error: {e}")
            return AuthResult(success=False, error=str(e))

        if not response.user:
            return AuthResult(success=False, error="Signup failed")

        return AuthResult(
            success=True,
            user=AuthUser(
                id=response.user.id,
                email=response.user.email,
                full_name=request.full_name,
                access_token=response.session.access_token if response.session else "",
                refresh_token=response.session.refresh_token if response.session else "",
            )
        )

    async def login(self, request: LoginRequest) -> AuthResult:
        """
        Log in an existing user.

        Returns:
            AuthResult with user info and tokens or error
        """
        if not self.is_available:
            return AuthResult(success=False, error=NOT_CONFIGURED_MESSAGE)

        try:
            response = self.client.auth.sign_in_with_password({
                "email": request.email,
                "password": request.password,
            })
        except Exception as e:
            logger.error(f"Login error: {e}")
            error_msg = str(e)
            if "Invalid login" in error_msg:
                error_msg = "Invalid email or password"
            return AuthResult(success=False, error=error_msg)

        if not (response.user and response.session):
            return AuthResult(success=False, error="Login failed")

        return AuthResult(
            success=True,
            user=AuthUser(
                id=response.user.id,
                email=response.user.email,
                full_name=(response.user.user_metadata or {}).get("full_name"),
                access_token=response.session.access_token,
                refresh_token=response.session.refresh_token,
            )
        )

    async def logout(self) -> bool:
        """Log out the current Supabase session."""
        if not self.is_available:
            return False
        try:
            self.client.auth.sign_out()
            return True
        except Exception as e:
            logger.error(f"Logout error: {e}")
            return False

    async def get_user(self, access_token: str) -> Optional[AuthUser]:
        """
        Get current user from access token.

        Returns:
            AuthUser if valid, None otherwise
        """
        if not self.is_available or not access_token:
            return None

        try:
            response = self.client.auth.get_user(access_token)
        except Exception as e:
            logger.error(f"Get user error: {e}")
            return None

        if not response or not response.user:
            return None

        return AuthUser(
            id=response.user.id,
            email=response.user.email,
            full_name=(response.user.user_metadata or {}).get("full_name"),
            access_token=access_token,
        )


# ============== FastAPI Dependencies ==============

security = HTTPBearer(auto_error=False)


def get_auth_service(settings: Settings = Depends(get_settings)) -> AuthService:
    return AuthService(settings)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> Optional[AuthUser]:
    """
    FastAPI dependency to get the current user.

    Reads the bearer token first, then the session cookie.
    """
    token = credentials.credentials if credentials else request.cookies.get(settings.session_cookie_name)
    if not token:
        return None
    return await auth_service.get_user(token)


async def require_auth(
    user: Optional[AuthUser] = Depends(get_current_user)
) -> AuthUser:
    """
    FastAPI dependency that requires authentication.
    Raises 401 if not authenticated.
    """
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user
