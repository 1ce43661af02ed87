"""
Workflow Service
Approval state machine for expense reports

    PENDING --APPROVE (k < n)--> PENDING
    PENDING --APPROVE (k >= n)-> APPROVED
    PENDING --REJECT----------> REJECTED

APPROVED is terminal. REJECTED is terminal for the report instance; a later
save is routed through the resubmission policy, which creates a successor.
All functions here are pure: they return new reports and never mutate input.
"""

from datetime import datetime
from typing import List, Optional, Sequence

from src.schemas.report import (
    ApprovalAction,
    ClaimStatus,
    ExpenseReport,
    Signature,
    SignatureAction,
)
from src.schemas.user import UserProfile, UserRole
from src.utils.exceptions import ReportNotFoundError
from src.utils.helpers import utcnow

REJECTED_PROGRESS = "Rejected"


def apply_approval_action(
    report: ExpenseReport,
    action: ApprovalAction,
    acting_user_id: str,
    remark: Optional[str],
    acting_user_role: UserRole,
    signer_name: Optional[str] = None,
    now: Optional[datetime] = None
) -> ExpenseReport:
    """
    Apply an approve or reject to a report

    Admins can never sign: the report comes back unchanged. Membership of
    ``acting_user_id`` in ``report.approvers`` is not checked here.

    Args:
        report: Report to act on
        action: APPROVE or REJECT
        acting_user_id: Signer id
        remark: Optional remark; defaults to "Approved"/"Rejected"
        acting_user_role: Signer role, passed in so no directory lookup is needed
        signer_name: Display name captured on the signature
        now: Signature timestamp, defaults to the current UTC time

    Returns:
        ExpenseReport: Updated copy of the report
    """
    if acting_user_role == UserRole.ADMIN:
        return report

    timestamp = now or utcnow()
    name = signer_name or "Unknown"

    if action == ApprovalAction.REJECT:
        text = remark or SignatureAction.REJECTED.value
        signature = Signature(
            signer_id=acting_user_id,
            signer_name=name,
            timestamp=timestamp,
            action=SignatureAction.REJECTED,
            remark=text,
            progress=REJECTED_PROGRESS,
        )
        return report.model_copy(update={
            "status": ClaimStatus.REJECTED,
            "rejection_comment": text,
            "approved_by": [],
            "signature_log": [*report.signature_log, signature],
        })

    elif action == ApprovalAction.APPROVE:
        approved_by = list(report.approved_by)
        if acting_user_id not in approved_by:
            approved_by.append(acting_user_id)
        current_step = len(approved_by)
        total_steps = len(report.approvers)

        signature = Signature(
            signer_id=acting_user_id,
            signer_name=name,
            timestamp=timestamp,
            action=SignatureAction.APPROVED,
            remark=remark or SignatureAction.APPROVED.value,
            progress=f"{current_step} of {total_steps}",
        )
        fully_approved = current_step >= total_steps
        return report.model_copy(update={
            "approved_by": approved_by,
            "status": ClaimStatus.APPROVED if fully_approved else ClaimStatus.PENDING,
            "rejection_comment": None,
            "signature_log": [*report.signature_log, signature],
        })

    raise ValueError(f"Unsupported approval action: {action}")


def find_report(reports: Sequence[ExpenseReport], report_id: str) -> ExpenseReport:
    """
    Look up a report by id

    Raises:
        ReportNotFoundError: If no report has this id
    """
    for report in reports:
        if report.id == report_id:
            return report
    raise ReportNotFoundError(report_id)


def apply_action_to_collection(
    reports: Sequence[ExpenseReport],
    report_id: str,
    action: ApprovalAction,
    acting_user: UserProfile,
    remark: Optional[str] = None,
    now: Optional[datetime] = None
) -> List[ExpenseReport]:
    """
    Apply an action to one report in a collection

    Raises:
        ReportNotFoundError: If report_id is not in the collection
    """
    target = find_report(reports, report_id)
    updated = apply_approval_action(
        target,
        action,
        acting_user.id,
        remark,
        acting_user.role,
        signer_name=acting_user.name,
        now=now,
    )
    return [updated if report.id == report_id else report for report in reports]


def pending_for_approver(
    reports: Sequence[ExpenseReport],
    user: UserProfile
) -> List[ExpenseReport]:
    """
    Reports waiting on this user's signature

    Designated approver, report still pending, not yet signed by the user.
    Admins never have actionable reports.
    """
    if user.role == UserRole.ADMIN:
        return []
    return [
        report for report in reports
        if user.id in report.approvers
        and report.status == ClaimStatus.PENDING
        and user.id not in report.approved_by
    ]
