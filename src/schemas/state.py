"""
Application State Schemas
Snapshot passed into and returned from the workflow core
"""

from pydantic import BaseModel, Field
from typing import List

from src.schemas.matrix import ApproverMatrixTier
from src.schemas.report import ExpenseReport, SaveOutcome


class SequenceState(BaseModel):
    """Persisted report-id counter; next_value is the next number handed out"""
    next_value: int = Field(1, ge=1)


class AppState(BaseModel):
    """Reports (newest first), the ordered matrix and the sequence counter"""
    reports: List[ExpenseReport] = []
    matrix: List[ApproverMatrixTier] = []
    sequence: SequenceState = SequenceState()


class SaveResult(BaseModel):
    """Outcome of routing a save through the resubmission policy"""
    reports: List[ExpenseReport]
    sequence: SequenceState
    assigned_id: str
    outcome: SaveOutcome
