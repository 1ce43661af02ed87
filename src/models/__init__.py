from src.models.user import User
from src.models.report import ExpenseReportRecord
from src.models.approver_matrix import ApproverMatrixTierRecord
from src.models.category import ExpenseCategoryRecord
from src.models.sequence import SequenceCounter, REPORT_SEQUENCE

__all__ = [
    "User",
    "ExpenseReportRecord",
    "ApproverMatrixTierRecord",
    "ExpenseCategoryRecord",
    "SequenceCounter",
    "REPORT_SEQUENCE",
]
