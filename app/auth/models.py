# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from pydantic import BaseModel, ConfigDict
from uuid import UUID
from typing import Optional


class AuthUser(BaseModel):
    """
    Authenticated user extracted from a Supabase JWT.

    Only what the token itself carries; no database lookup.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID
    email: Optional[str] = None


class ProfileResponse(BaseModel):
    """
    The current user's profile (public.profiles row).

    Falls back to token data when the profile row doesn't exist yet.
    """
    id: UUID
    email: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
