"""
Expense Category Model
"""

from sqlalchemy import Column, String

from src.config.database import Base


class ExpenseCategoryRecord(Base):
    """Expense category with general-ledger code"""
    __tablename__ = "expense_categories"

    id = Column(String(50), primary_key=True)
    name = Column(String, nullable=False)
    gl_code = Column(String(20), nullable=False)

    def __repr__(self):
        return f"<ExpenseCategory {self.id} {self.name} ({self.gl_code})>"
