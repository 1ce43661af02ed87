"""
Sequence Counter Model
Persisted state of the report-id allocator
"""

from sqlalchemy import Column, Integer, String

from src.config.database import Base

REPORT_SEQUENCE = "expense_report"


class SequenceCounter(Base):
    """
    Named counter; ``value`` is the next number to hand out

    The counter is the only source of truth for the next id. It is never
    recomputed from the highest existing report id.
    """
    __tablename__ = "sequence_counters"

    name = Column(String(50), primary_key=True)
    value = Column(Integer, default=1, nullable=False)

    def __repr__(self):
        return f"<SequenceCounter {self.name}={self.value}>"
