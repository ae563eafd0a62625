# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Sign-up/sign-in happen client-side with Supabase Auth. These routes only
# report who the bearer token belongs to.
# =============================================================================

import logging
from fastapi import APIRouter, Depends

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, ProfileResponse
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me", response_model=ProfileResponse)
async def get_current_user_profile(
    user: AuthUser = Depends(get_current_user)
) -> ProfileResponse:
    """
    Get the current authenticated user's profile.

    Raises:
        401: If not authenticated
    """
    client = SupabaseClient.get_client()

    try:
        response = (
            client.table("profiles")
            .select("id, email, full_name, avatar_url")
            .eq("id", str(user.id))
            .limit(1)
            .execute()
        )
        if response.data:
            return ProfileResponse(**response.data[0])

    except Exception as e:
        logger.warning(f"Could not fetch profile for {user.id}: {e}")

    # Profile row is created by a trigger; it may not exist yet
    return ProfileResponse(id=user.id, email=user.email)
