from fastapi import APIRouter, Cookie, Depends, Header, Response
from typing import Optional
import jwt

from models import BusinessPartner, User
from schemas.user import AuthResponse, ForgotPasswordRequest, LoginRequest, UserCreate, UserResponse
from services import accounts, events
from services.errors import AuthenticationError
from stores.interfaces import PortalStore
from stores.sql_store import get_store
from utils.auth import JWT_EXPIRATION_HOURS, SESSION_COOKIE_NAME, create_access_token, verify_access_token
from utils.logging_config import get_logger

router = APIRouter(prefix="/api/auth")
logger = get_logger("api")


def get_current_user(
    authorization: Optional[str] = Header(None),
    session_token: Optional[str] = Cookie(None, alias=SESSION_COOKIE_NAME),
    store: PortalStore = Depends(get_store),
) -> User:
    """
    Dependency resolving the authenticated user
    Accepts a bearer token or the session cookie set at login
    """
    token = None
    if authorization:
        # Remove "Bearer " prefix if present
        token = authorization.replace("Bearer ", "").strip()
    elif session_token:
        token = session_token

    if not token:
        raise AuthenticationError("Not authenticated")

    try:
        user_id = verify_access_token(token)
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired - Please login again")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid token")

    if not user_id:
        raise AuthenticationError("Invalid token type")

    user = store.get_user(user_id)
    if not user:
        raise AuthenticationError("User not found")

    return user


def get_current_partner(
    user: User = Depends(get_current_user),
    store: PortalStore = Depends(get_store),
) -> BusinessPartner:
    """Dependency resolving the caller's business partner profile"""
    return events.require_partner(store, user)


def _login_response(response: Response, user: User) -> AuthResponse:
    token = create_access_token(user.id)
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        max_age=JWT_EXPIRATION_HOURS * 3600,
        httponly=True,
        samesite="lax",
    )
    return AuthResponse(success=True, token=token, user=UserResponse.model_validate(user))


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(data: UserCreate, response: Response, store: PortalStore = Depends(get_store)):
    """Create an account and log it in"""
    user = accounts.register_user(store, data.model_dump())
    return _login_response(response, user)


@router.post("/login", response_model=AuthResponse)
def login(credentials: LoginRequest, response: Response, store: PortalStore = Depends(get_store)):
    """
    Login endpoint with JWT token generation
    The token is returned in the body and also set as an HTTP-only cookie
    """
    user = accounts.authenticate(store, credentials.email, credentials.password)
    logger.info(f"User {user.id} logged in")
    return _login_response(response, user)


@router.post("/logout")
def logout(response: Response):
    """Clear the session cookie; bearer tokens simply expire"""
    response.delete_cookie(SESSION_COOKIE_NAME)
    return {"message": "Logged out successfully"}


@router.get("/user", response_model=UserResponse)
def current_user(user: User = Depends(get_current_user)):
    return user


@router.post("/forgot-password")
def forgot_password(data: ForgotPasswordRequest, store: PortalStore = Depends(get_store)):
    """
    Password reset stub
    Always answers the same way so account existence is not revealed
    """
    if store.get_user_by_email(data.email):
        logger.info(f"Password reset requested for {data.email}")
    return {"message": "If an account with that email exists, a password reset link will be sent."}
