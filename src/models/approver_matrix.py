"""
Approver Matrix Model
Ordered amount/currency tiers and the roles each one requires
"""

from sqlalchemy import Column, Integer, String, Float, JSON

from src.config.database import Base


class ApproverMatrixTierRecord(Base):
    """Matrix tier row; ``position`` preserves list order"""
    __tablename__ = "approver_matrix_tiers"

    id = Column(String(50), primary_key=True)
    position = Column(Integer, nullable=False, index=True)
    currency = Column(String(3), nullable=False)
    min_amount = Column(Float, default=0.0, nullable=False)
    max_amount = Column(Float, nullable=True)  # NULL = unbounded
    required_roles = Column(JSON, default=list, nullable=False)

    def __repr__(self):
        upper = "inf" if self.max_amount is None else self.max_amount
        return f"<MatrixTier {self.id} {self.currency} {self.min_amount}-{upper}>"
