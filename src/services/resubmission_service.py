"""
Resubmission Service
Routes a report save to create, update or resubmit

    incoming id matches a REJECTED report  -> resubmit under a new id
    incoming id matches any other report   -> update in place, approvals reset
    no match                               -> create under a new id

Rejected reports are history: a resubmission leaves them in the collection
untouched and prepends the successor.
"""

from datetime import datetime
from typing import Optional, Sequence

from src.schemas.report import ClaimStatus, ExpenseReport, SaveOutcome
from src.schemas.state import SaveResult, SequenceState
from src.services.sequence_service import allocate_report_id
from src.utils.helpers import utcnow


def classify_save(
    existing_reports: Sequence[ExpenseReport],
    incoming: ExpenseReport
) -> SaveOutcome:
    """Decide how a save will be routed without performing it"""
    if incoming.id:
        for report in existing_reports:
            if report.id == incoming.id:
                if report.status == ClaimStatus.REJECTED:
                    return SaveOutcome.RESUBMITTED
                return SaveOutcome.UPDATED
    return SaveOutcome.CREATED


def submit_or_update_report(
    existing_reports: Sequence[ExpenseReport],
    incoming: ExpenseReport,
    sequence: SequenceState,
    now: Optional[datetime] = None
) -> SaveResult:
    """
    Save a report into the collection

    Args:
        existing_reports: Current collection, newest first
        incoming: Report as built by the caller
        sequence: Current id counter
        now: Creation timestamp for new and resubmitted reports

    Returns:
        SaveResult: New collection, new counter, assigned id and outcome
    """
    outcome = classify_save(existing_reports, incoming)

    if outcome == SaveOutcome.RESUBMITTED:
        new_id, sequence = allocate_report_id(sequence)
        successor = incoming.model_copy(update={
            "id": new_id,
            "status": ClaimStatus.PENDING,
            "signature_log": [],
            "approved_by": [],
            "rejection_comment": None,
            "created_at": now or utcnow(),
        })
        return SaveResult(
            reports=[successor, *existing_reports],
            sequence=sequence,
            assigned_id=new_id,
            outcome=outcome,
        )

    elif outcome == SaveOutcome.UPDATED:
        # An edit always restarts approval progress
        updated = incoming.model_copy(update={
            "approved_by": [],
            "rejection_comment": None,
            "status": ClaimStatus.PENDING,
        })
        reports = [updated if report.id == incoming.id else report for report in existing_reports]
        return SaveResult(
            reports=reports,
            sequence=sequence,
            assigned_id=incoming.id,
            outcome=outcome,
        )

    new_id, sequence = allocate_report_id(sequence)
    created = incoming.model_copy(update={
        "id": new_id,
        "status": ClaimStatus.PENDING,
        "approved_by": [],
        "signature_log": [],
        "rejection_comment": None,
        "created_at": now or incoming.created_at,
    })
    return SaveResult(
        reports=[created, *existing_reports],
        sequence=sequence,
        assigned_id=new_id,
        outcome=outcome,
    )
