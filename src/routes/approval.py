"""
Approval Routes
Sign-off endpoints for designated approvers
"""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session
from typing import List

from src.config.database import get_db
from src.schemas.approval import ApprovalCreate, SignatureLogRow
from src.schemas.report import ApprovalAction
from src.schemas.user import UserProfile
from src.services import state_store
from src.services.auth_service import auth_service
from src.services.claim_service import claim_service
from src.services.report_service import report_service
from src.utils.helpers import utcnow
from src.utils.logger import setup_logger

logger = setup_logger()
router = APIRouter()


def _report_summary(report) -> dict:
    return {
        "id": report.id,
        "title": report.title,
        "user_id": report.user_id,
        "user_name": report.user_name,
        "total_claim_amount": report.total_claim_amount,
        "claim_currency": report.claim_currency,
        "status": report.status.value,
        "approvers": report.approvers,
        "approved_by": report.approved_by,
        "progress": report.progress,
        "created_at": report.created_at,
        "rejection_comment": report.rejection_comment,
    }


@router.get("/pending")
async def get_pending_approvals(
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(auth_service.require_module("approvals"))
):
    """
    Get reports waiting on the current user's signature

    Designated approver, report pending, not yet signed by this user.
    Admins never have actionable reports.
    """
    reports = claim_service.pending_approvals(db, current_user)
    logger.info(f"{current_user.id} ({current_user.role.value}) viewing {len(reports)} pending approvals")
    return {
        "reports": [_report_summary(r) for r in reports],
        "count": len(reports),
    }


@router.get("/history")
async def get_signature_history(
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(auth_service.require_module("approvals"))
):
    """Reports the current user has approved or rejected"""
    reports = claim_service.signed_history(db, current_user)
    return {
        "reports": [_report_summary(r) for r in reports],
        "count": len(reports),
    }


@router.get("/signature-log", response_model=List[SignatureLogRow])
async def get_signature_log(
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(auth_service.require_module("settings"))
):
    """Flattened audit trail of every signature across all reports"""
    return claim_service.signature_log_rows(state_store.load_reports(db))


@router.get("/signature-log/export", response_class=PlainTextResponse)
async def export_signature_log(
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(auth_service.require_module("settings"))
):
    """Download the signature log as CSV"""
    rows = claim_service.signature_log_rows(state_store.load_reports(db))
    filename = f"Finance_Signature_Log_{utcnow().strftime('%Y%m%d%H%M%S')}.csv"
    logger.info(f"{current_user.id} exported {len(rows)} signature log rows")
    return PlainTextResponse(
        report_service.signature_log_csv(rows),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.post("/{report_id}/approve")
async def approve_report(
    report_id: str,
    approval_data: ApprovalCreate,
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(auth_service.get_current_user)
):
    """
    Approve a report

    The report becomes APPROVED once every designated approver has signed.
    Admin sign-offs are ignored and the report is returned unchanged.
    """
    logger.info(f"User {current_user.id} attempting to approve report {report_id}")
    report = claim_service.act_on_report(
        db, report_id, ApprovalAction.APPROVE, current_user, approval_data.remark
    )
    return {
        "success": True,
        "message": f"Report {report_id} is {report.status.value} ({report.progress})",
        "report": report.model_dump(mode="json"),
    }


@router.post("/{report_id}/reject")
async def reject_report(
    report_id: str,
    approval_data: ApprovalCreate,
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(auth_service.get_current_user)
):
    """
    Reject a report

    Approvals are cleared; the owner can resubmit, which creates a new report.
    """
    logger.info(f"User {current_user.id} attempting to reject report {report_id}")
    report = claim_service.act_on_report(
        db, report_id, ApprovalAction.REJECT, current_user, approval_data.remark
    )
    return {
        "success": True,
        "message": f"Report {report_id} is {report.status.value}",
        "report": report.model_dump(mode="json"),
    }
