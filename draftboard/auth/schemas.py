"""Pydantic schemas for the auth API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class DevTokenRequest(BaseModel):
    """Request body for dev token creation."""

    email: str = Field(..., min_length=3, description="Email for the test owner")


class TokenResponse(BaseModel):
    """Access token returned by the dev token endpoint."""

    access_token: str
    token_type: str = "bearer"
    owner_id: str
    expires_in: int = Field(description="Access token lifetime in seconds")
