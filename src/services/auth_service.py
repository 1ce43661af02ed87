"""
Authentication Service
Resolves the current user and guards routes by module

Users are authenticated upstream; the gateway forwards the user id in the
``X-User-Id`` header (see settings.USER_ID_HEADER).
"""

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from src.config.database import get_db
from src.config.settings import settings
from src.models.user import User
from src.schemas.user import UserProfile
from src.utils.logger import setup_logger

logger = setup_logger()


class AuthService:
    """Authentication service"""

    async def get_current_user(
        self,
        request: Request,
        db: Session = Depends(get_db)
    ) -> UserProfile:
        """
        Get current user from the forwarded identity

        Args:
            request: Incoming request
            db: Database session

        Returns:
            UserProfile: Current user

        Raises:
            HTTPException: 401 if no or unknown identity, 403 if inactive
        """
        credentials_exception = HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )

        user_id = getattr(request.state, "user_id", None) or request.headers.get(settings.USER_ID_HEADER)
        if not user_id:
            raise credentials_exception

        user = db.query(User).filter(User.id == user_id).first()
        if user is None:
            logger.warning(f"Unknown user id forwarded: {user_id}")
            raise credentials_exception

        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="User account is inactive"
            )

        return UserProfile.model_validate(user)

    def require_module(self, module: str):
        """
        Dependency factory requiring access to a module

        Args:
            module: Module name, e.g. "approvals" or "settings"
        """
        async def module_checker(current_user: UserProfile = Depends(self.get_current_user)):
            if not current_user.can_access(module):
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail=f"Permission denied: {module} module access required"
                )
            return current_user

        return module_checker


# Create singleton instance
auth_service = AuthService()
