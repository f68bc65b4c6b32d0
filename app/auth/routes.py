# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Registration, login, token refresh, email verification, email change
# and password reset. Tokens are issued here (no external identity provider).
# =============================================================================

import logging

from fastapi import APIRouter, HTTPException, Query, status

from app.auth.dependencies import CurrentUser
from app.auth.models import AuthResponse
from app.dependencies import UserServiceDep
from core.models.common import MessageResponse
from core.models.user import (
    ChangeEmailRequest,
    ForgotPasswordRequest,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    ResetPasswordRequest,
    User,
    UserResponse,
)
from lib.security import TokenError, TokenPair

logger = logging.getLogger(__name__)

router = APIRouter()


def _auth_response(user: User, tokens: TokenPair) -> AuthResponse:
    return AuthResponse(**tokens.model_dump(), user=UserResponse.from_user(user))


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, users: UserServiceDep) -> AuthResponse:
    """
    Create an account.

    The very first account becomes the super admin. A verification email
    is sent when SMTP is configured.

    Raises:
        409: Email or username already taken
    """
    user, tokens = users.register(request.email, request.username, request.password)
    return _auth_response(user, tokens)


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest, users: UserServiceDep) -> AuthResponse:
    """
    Exchange email and password for a token pair.

    Raises:
        403: Invalid credentials or banned account
    """
    user, tokens = users.authenticate(request.email, request.password)
    return _auth_response(user, tokens)


@router.post("/refresh", response_model=TokenPair)
async def refresh(request: RefreshRequest, users: UserServiceDep) -> TokenPair:
    """
    Exchange a refresh token for a new pair.

    The new access token carries the account's current role.

    Raises:
        401: Refresh token invalid or expired
    """
    try:
        return users.refresh(request.refresh_token)
    except TokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )


@router.get("/verify", response_model=MessageResponse)
async def verify_email(
    users: UserServiceDep,
    token: str = Query(..., min_length=1, description="Token from the welcome email"),
) -> MessageResponse:
    users.verify_email(token)
    return MessageResponse(message="Email verified")


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(request: ForgotPasswordRequest, users: UserServiceDep) -> MessageResponse:
    """Always succeeds so the response does not reveal whether the email exists."""
    users.request_password_reset(request.email)
    return MessageResponse(message="If the account exists, a reset link has been sent")


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(request: ResetPasswordRequest, users: UserServiceDep) -> MessageResponse:
    users.reset_password(request.token, request.new_password)
    return MessageResponse(message="Password has been reset")


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(user: CurrentUser, users: UserServiceDep) -> UserResponse:
    """
    Get the current authenticated user's account.

    Raises:
        401: If not authenticated
    """
    return UserResponse.from_user(users.get(user.id))


@router.post("/change-email", response_model=MessageResponse)
async def change_email(request: ChangeEmailRequest, user: CurrentUser, users: UserServiceDep) -> MessageResponse:
    """
    Send a confirmation link to a new address.

    Raises:
        401: If not authenticated
        409: Address already belongs to an account
    """
    users.request_email_change(user.id, request.new_email)
    return MessageResponse(message="Check your new inbox to confirm the change")


@router.get("/verify-email-change", response_model=MessageResponse)
async def verify_email_change(
    users: UserServiceDep,
    token: str = Query(..., min_length=1, description="Token from the email change message"),
) -> MessageResponse:
    users.verify_email_change(token)
    return MessageResponse(message="Email address updated")
