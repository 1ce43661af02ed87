"""
Approver Matrix Schemas
Amount/currency tiers mapped to the roles that must sign off
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List

from src.schemas.user import UserRole


class ApproverMatrixTier(BaseModel):
    """
    One matrix rule

    ``min_amount`` is inclusive, ``max_amount`` is inclusive and ``None`` means
    unbounded. Overlaps between tiers are allowed; list order decides.
    """
    id: str
    currency: str
    min_amount: float = Field(0, ge=0)
    max_amount: Optional[float] = None
    required_roles: List[UserRole] = []

    class Config:
        from_attributes = True

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, value: str) -> str:
        return value.strip().upper()

    @field_validator("required_roles")
    @classmethod
    def unique_roles(cls, value: List[UserRole]) -> List[UserRole]:
        return list(dict.fromkeys(value))

    @model_validator(mode='after')
    def validate_range(self):
        """Upper bound must not be below the lower bound"""
        if self.max_amount is not None and self.max_amount < self.min_amount:
            raise ValueError("max_amount must be greater than or equal to min_amount")
        return self

    def covers(self, amount: float) -> bool:
        """Inclusive range check"""
        if amount < self.min_amount:
            return False
        return self.max_amount is None or amount <= self.max_amount


class MatrixTierCreate(BaseModel):
    """Schema for appending a tier"""
    id: Optional[str] = None
    currency: str
    min_amount: float = Field(0, ge=0)
    max_amount: Optional[float] = None
    required_roles: List[UserRole] = []


class MatrixReplace(BaseModel):
    """Replace the whole ordered tier list"""
    tiers: List[ApproverMatrixTier]

    @model_validator(mode='after')
    def unique_ids(self):
        ids = [tier.id for tier in self.tiers]
        if len(ids) != len(set(ids)):
            raise ValueError("Tier ids must be unique")
        return self
