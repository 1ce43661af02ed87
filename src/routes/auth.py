"""
Authentication Routes
Identity of the upstream-authenticated user
"""

from fastapi import APIRouter, Depends

from src.schemas.user import UserProfile
from src.services.auth_service import auth_service

router = APIRouter()


@router.get("/me", response_model=UserProfile)
async def get_me(current_user: UserProfile = Depends(auth_service.get_current_user)):
    """Get current user info"""
    return current_user
