"""Auth schemas."""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Admin sign-in."""

    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class SessionResponse(BaseModel):
    """Signed-in admin."""

    email: str
    access_token: str = ""
    token_type: str = "bearer"
