"""
User Schemas
Pydantic models for the user directory
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from enum import Enum

from src.config.defaults import ALL_MODULES


class UserRole(str, Enum):
    """User role enumeration"""
    EMPLOYEE = "employee"
    MANAGER = "manager"
    FINANCE = "finance"
    ADMIN = "admin"


def _check_modules(modules: Optional[List[str]]) -> Optional[List[str]]:
    if modules is None:
        return modules
    unknown = [m for m in modules if m not in ALL_MODULES]
    if unknown:
        raise ValueError(f"Unknown modules: {', '.join(unknown)}")
    # De-duplicate, keep order
    return list(dict.fromkeys(modules))


class UserProfile(BaseModel):
    """User as seen by the workflow: id, display name and role"""
    id: str
    name: str
    email: str
    role: UserRole = UserRole.EMPLOYEE
    accessible_modules: List[str] = []
    is_active: bool = True

    class Config:
        from_attributes = True

    def can_access(self, module: str) -> bool:
        """Check module access; admins can reach every module"""
        return self.role == UserRole.ADMIN or module in self.accessible_modules


class UserCreate(BaseModel):
    """Schema for creating a new user"""
    id: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    role: UserRole = UserRole.EMPLOYEE
    accessible_modules: List[str] = ["dashboard", "new-claim"]
    is_active: bool = True

    @field_validator("accessible_modules")
    @classmethod
    def validate_modules(cls, value):
        return _check_modules(value)


class UserUpdate(BaseModel):
    """Schema for updating user information"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    role: Optional[UserRole] = None
    accessible_modules: Optional[List[str]] = None
    is_active: Optional[bool] = None

    @field_validator("accessible_modules")
    @classmethod
    def validate_modules(cls, value):
        return _check_modules(value)
