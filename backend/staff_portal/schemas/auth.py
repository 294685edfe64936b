# staff_portal/schemas/auth.py
"""
Pydantic schemas for authentication endpoints.
Defines request/response models for register, login, token refresh and logout.
"""
from pydantic import BaseModel, Field

class RegisterIn(BaseModel):
    """Request model for the register endpoint."""
    username: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)  # Plain text, hashed server-side

class LoginIn(BaseModel):
    """
    Request model for the login endpoint.
    ``login`` is treated as an email address when it contains "@",
    otherwise as a username.
    """
    login: str
    password: str

class TokenIn(BaseModel):
    """Request model carrying a refresh token (token refresh and logout)."""
    token: str

class TokenPairOut(BaseModel):
    """Response model for a successful login."""
    accessToken: str  # Short-lived JWT for the Authorization header
    refreshToken: str  # Long-lived token, valid while it is in the token set

class AccessTokenOut(BaseModel):
    """Response model for a token refresh."""
    accessToken: str
