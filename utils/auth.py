"""
Authentication utilities for JWT token generation and validation
Tokens identify a user; the portal trusts the decoded user id unconditionally
"""
import jwt
import os
from datetime import datetime, timedelta
from typing import Optional


# Secret key for JWT - MUST be set in environment variables for production
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "dev-secret-key-change-in-production")
JWT_ALGORITHM = "HS256"
JWT_EXPIRATION_HOURS = int(os.getenv("JWT_EXPIRATION_HOURS", 8))

# Cookie carrying the same token for browser sessions
SESSION_COOKIE_NAME = "flypside_session"


def create_access_token(user_id: str) -> str:
    """
    Create a JWT token for an authenticated user

    Args:
        user_id: UUID of the user

    Returns:
        Encoded JWT token string

    Token includes:
        - sub: The user id
        - exp: Expiration timestamp (JWT_EXPIRATION_HOURS from now)
        - iat: Issued at timestamp
        - type: Token type identifier
    """
    now = datetime.utcnow()
    payload = {
        "sub": user_id,
        "exp": now + timedelta(hours=JWT_EXPIRATION_HOURS),
        "iat": now,
        "type": "partner"
    }

    return jwt.encode(payload, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def verify_access_token(token: str) -> Optional[str]:
    """
    Verify and decode a user JWT token

    Args:
        token: JWT token string to verify

    Returns:
        The user id if the token is valid and of the right type, None otherwise

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid
    """
    payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])

    if payload.get("type") != "partner":
        return None

    return payload.get("sub")
