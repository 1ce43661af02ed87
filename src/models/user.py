"""
User Model
Directory of employees, approvers and administrators
"""

from sqlalchemy import Column, String, Boolean, DateTime, Enum, JSON

from src.config.database import Base
from src.schemas.user import UserRole
from src.utils.helpers import utcnow


class User(Base):
    """User model"""
    __tablename__ = "users"

    id = Column(String(50), primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)

    # Role drives the approver matrix; admins can never sign
    role = Column(Enum(UserRole), default=UserRole.EMPLOYEE, nullable=False)

    # Permissions
    accessible_modules = Column(JSON, default=list, nullable=False)
    is_active = Column(Boolean, default=True)

    # Timestamps
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<User {self.id} {self.name} ({self.role.value})>"
