# staff_portal/core/security.py
"""
Security module for authentication.
Handles password hashing and signing/verifying access and refresh tokens.
"""
import datetime as dt
import uuid

import jwt  # PyJWT
from passlib.context import CryptContext

# Password hashing context
# Argon2 is a modern, secure password hashing algorithm
pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
)

JWT_ALG = "HS256"  # JWT signing algorithm (HMAC SHA-256)

def hash_password(plain: str) -> str:
    """
    Hash a plain text password using Argon2.

    Args:
        plain: Plain text password to hash

    Returns:
        Hashed password string (safe to store in the user collection)
    """
    return pwd_context.hash(plain)

def verify_password(plain: str, hashed: str) -> bool:
    """
    Verify a plain text password against a hashed password.

    Returns:
        True if password matches, False otherwise (including malformed hashes)
    """
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False

def create_access_token(user_id: str, secret: str, expire_minutes: int) -> str:
    """
    Create a short-lived JWT access token.

    Args:
        user_id: User identifier stored as the ``sub`` claim
        secret: Signing secret for access tokens
        expire_minutes: Lifetime of the token

    Token payload includes:
        - sub: Subject (user ID)
        - iat: Issued at timestamp
        - exp: Expiration timestamp
    """
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": now + dt.timedelta(minutes=expire_minutes),
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALG)

def create_refresh_token(user_id: str, secret: str) -> str:
    """
    Create a refresh token.

    Refresh tokens do not expire on their own; they stay valid while they
    are a member of the token set and are revoked by removing them.
    The ``jti`` claim keeps two tokens for the same user distinct.
    """
    payload = {
        "sub": user_id,
        "jti": uuid.uuid4().hex,
        "iat": dt.datetime.now(dt.timezone.utc),
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALG)

def decode_token(token: str, secret: str) -> dict:
    """
    Decode and validate a signed token.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid or malformed
    """
    return jwt.decode(token, secret, algorithms=[JWT_ALG])
