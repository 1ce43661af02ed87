"""
Claim Routes
Expense report submission, editing and resubmission endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from src.config.database import get_db
from src.schemas.report import (
    ReportListResponse,
    ReportSaveResponse,
    ReportSubmission,
    RequiredRolesRequest,
    RequiredRolesResponse,
    SaveOutcome,
)
from src.schemas.user import UserProfile
from src.services import state_store
from src.services.auth_service import auth_service
from src.services.claim_service import claim_service
from src.services.workflow_service import find_report
from src.utils.logger import setup_logger

logger = setup_logger()
router = APIRouter()

SAVE_MESSAGES = {
    SaveOutcome.CREATED: "Expense report submitted for approval",
    SaveOutcome.UPDATED: "Expense report updated; approvals restarted",
    SaveOutcome.RESUBMITTED: "Rejected report resubmitted under a new id",
}


@router.post("/required-roles", response_model=RequiredRolesResponse)
async def preview_required_roles(
    request: RequiredRolesRequest,
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(auth_service.get_current_user)
):
    """
    Evaluate the approver matrix for a prospective claim

    Returns the required roles, the roles the selected approvers leave
    uncovered, and whether the selection would pass submission.
    """
    return claim_service.preview_required_roles(db, request)


@router.post("/submit", response_model=ReportSaveResponse, status_code=status.HTTP_201_CREATED)
async def submit_report(
    submission: ReportSubmission,
    response: Response,
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(auth_service.require_module("new-claim"))
):
    """
    Submit or save an expense report

    **Routing:**
    - No id, or an unknown id: new report, new REQ id (201)
    - Id of your pending/approved report: updated in place, approvals restart (200)
    - Id of your rejected report: resubmitted under a new REQ id, the rejected
      report stays in history (201)
    """
    result = claim_service.submit_report(db, current_user, submission)

    if result.outcome == SaveOutcome.UPDATED:
        response.status_code = status.HTTP_200_OK

    return ReportSaveResponse(
        message=SAVE_MESSAGES[result.outcome],
        outcome=result.outcome,
        report_id=result.assigned_id,
        report=find_report(result.reports, result.assigned_id),
    )


@router.get("/my-claims", response_model=ReportListResponse)
async def get_my_claims(
    skip: int = 0,
    limit: int = 50,
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(auth_service.get_current_user)
):
    """Get current user's reports, newest first"""
    reports = claim_service.list_user_reports(db, current_user)
    return ReportListResponse(total=len(reports), reports=reports[skip:skip + limit])


@router.get("/{report_id}")
async def get_report(
    report_id: str,
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(auth_service.get_current_user)
):
    """Get one report with its signature log and approval progress"""
    report = find_report(state_store.load_reports(db), report_id)

    if not claim_service.can_view(report, current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You don't have access to this report"
        )

    return {
        **report.model_dump(mode="json"),
        "progress": report.progress,
    }
