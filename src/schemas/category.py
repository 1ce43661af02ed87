"""
Expense Category Schemas
"""

from pydantic import BaseModel, Field


class ExpenseCategory(BaseModel):
    """Expense category with its general-ledger code"""
    id: str
    name: str
    gl_code: str

    class Config:
        from_attributes = True


class CategoryCreate(BaseModel):
    """Schema for creating a category"""
    id: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=200)
    gl_code: str = Field(..., min_length=1, max_length=20)
