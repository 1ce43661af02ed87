"""
Expense Report Model
Persisted form of the expense report aggregate
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, Enum, Text, JSON

from src.config.database import Base
from src.schemas.report import ClaimStatus
from src.utils.helpers import utcnow


class ExpenseReportRecord(Base):
    """Expense report row; line items and the signature log are stored as JSON"""
    __tablename__ = "expense_reports"

    # Surrogate key; a higher value means newer in the collection
    row_id = Column(Integer, primary_key=True, autoincrement=True)
    report_id = Column(String(32), unique=True, index=True, nullable=False)

    # Owner, captured at submission
    user_id = Column(String(50), index=True, nullable=False)
    user_name = Column(String, nullable=False)

    # Claim details
    title = Column(String, nullable=False)
    claim_currency = Column(String(3), default="USD", nullable=False)
    total_claim_amount = Column(Float, default=0.0, nullable=False)
    items = Column(JSON, default=list, nullable=False)
    attachments = Column(JSON, default=list, nullable=False)

    # Workflow
    approvers = Column(JSON, default=list, nullable=False)
    approved_by = Column(JSON, default=list, nullable=False)
    status = Column(Enum(ClaimStatus), default=ClaimStatus.PENDING, nullable=False, index=True)
    rejection_comment = Column(Text, nullable=True)
    signature_log = Column(JSON, default=list, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<ExpenseReport {self.report_id} - {self.status.value}>"
