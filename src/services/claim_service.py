"""
Claim Service
Business logic for expense report submission and approval

Loads the workflow snapshot, validates, runs the pure workflow core, saves the
returned snapshot and writes the audit trail.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from src.config.settings import settings
from src.schemas.report import (
    ApprovalAction,
    ClaimItem,
    ClaimStatus,
    ExpenseReport,
    ReportSubmission,
    RequiredRolesRequest,
    RequiredRolesResponse,
)
from src.schemas.approval import SignatureLogRow
from src.schemas.state import SaveResult
from src.schemas.user import UserProfile, UserRole
from src.services import state_store
from src.services.matrix_service import evaluate_required_roles, select_tier, unmet_roles
from src.services.resubmission_service import submit_or_update_report
from src.services.validation_service import validation_service
from src.services.workflow_service import (
    apply_action_to_collection,
    find_report,
    pending_for_approver,
)
from src.utils.exceptions import (
    InvalidTransitionError,
    OwnershipError,
    UnauthorizedSignerError,
)
from src.utils.helpers import default_report_title, format_currency, round_money, utcnow
from src.utils.logger import setup_logger, log_audit

logger = setup_logger()


class ClaimService:
    """Service for expense-report workflow operations"""

    def __init__(self):
        """Initialize with dependent services"""
        self.validation_service = validation_service

    def build_report(
        self,
        current_user: UserProfile,
        submission: ReportSubmission,
        existing: Optional[ExpenseReport] = None
    ) -> ExpenseReport:
        """
        Assemble a report from a client submission

        Line amounts and the report total are computed here; the matrix
        evaluator trusts the resulting total.
        """
        items = [ClaimItem(**item.model_dump(exclude_none=True)) for item in submission.items]
        total = round_money(sum(item.claim_amount for item in items))
        now = utcnow()

        return ExpenseReport(
            id=submission.id or "",
            user_id=current_user.id,
            user_name=current_user.name,
            title=submission.title or default_report_title(current_user.name, now),
            items=items,
            total_claim_amount=total,
            claim_currency=submission.claim_currency,
            attachments=submission.attachments,
            approvers=submission.approvers,
            approved_by=[],
            status=ClaimStatus.PENDING,
            created_at=existing.created_at if existing else now,
            signature_log=list(existing.signature_log) if existing else [],
        )

    def preview_required_roles(
        self,
        db: Session,
        request: RequiredRolesRequest
    ) -> RequiredRolesResponse:
        """Evaluate the matrix for a prospective claim without saving anything"""
        matrix = state_store.load_matrix(db)
        users = state_store.load_users(db)
        tier = select_tier(request.total_amount, request.currency, matrix)
        required = evaluate_required_roles(request.total_amount, request.currency, matrix)
        missing = unmet_roles(required, request.approvers, users)
        return RequiredRolesResponse(
            tier_id=tier.id if tier else None,
            required_roles=required,
            unmet_roles=missing,
            satisfied=not missing,
        )

    def submit_report(
        self,
        db: Session,
        current_user: UserProfile,
        submission: ReportSubmission
    ) -> SaveResult:
        """
        Submit a new report, update an existing one, or resubmit a rejected one

        Args:
            db: Database session
            current_user: Report owner
            submission: Client payload

        Returns:
            SaveResult: Saved collection, assigned id and how the save was routed

        Raises:
            OwnershipError: If the id belongs to another user's report
            EmptyClaimError, PolicyViolationError, ClaimValidationError
        """
        state = state_store.load_state(db)

        existing = None
        if submission.id:
            existing = next((r for r in state.reports if r.id == submission.id), None)
            if existing is not None and existing.user_id != current_user.id:
                logger.warning(
                    f"{current_user.id} attempted to save report {submission.id} "
                    f"owned by {existing.user_id}"
                )
                raise OwnershipError(submission.id)

        report = self.build_report(current_user, submission, existing)
        self.validation_service.validate_submission(
            report,
            state.matrix,
            state_store.load_users(db),
            state_store.load_categories(db),
        )

        result = submit_or_update_report(state.reports, report, state.sequence)
        state_store.save_state(
            db,
            state.model_copy(update={"reports": result.reports, "sequence": result.sequence}),
        )

        log_audit(
            current_user.id,
            f"{result.outcome.value.upper()}_REPORT",
            f"report={result.assigned_id} previous={submission.id or '-'} "
            f"total={format_currency(report.total_claim_amount, report.claim_currency)} "
            f"approvers={','.join(report.approvers)}"
        )
        logger.info(
            f"Report {result.assigned_id} {result.outcome.value} by {current_user.id} "
            f"({format_currency(report.total_claim_amount, report.claim_currency)})"
        )
        return result

    def act_on_report(
        self,
        db: Session,
        report_id: str,
        action: ApprovalAction,
        current_user: UserProfile,
        remark: Optional[str] = None
    ) -> ExpenseReport:
        """
        Approve or reject a pending report

        Admin actions are ignored and the report is returned unchanged.

        Raises:
            ReportNotFoundError: If the report does not exist
            InvalidTransitionError: If the report is not pending
            UnauthorizedSignerError: If the user is not a designated approver
        """
        state = state_store.load_state(db)
        report = find_report(state.reports, report_id)

        if current_user.role == UserRole.ADMIN:
            logger.warning(f"Admin {current_user.id} attempted to {action.value} {report_id}; ignored")
            log_audit(current_user.id, "ADMIN_SIGN_IGNORED", f"report={report_id} action={action.value}")
            return report

        if report.status != ClaimStatus.PENDING:
            raise InvalidTransitionError(report_id, report.status.value)

        # A report with no approvers (possible only under an empty matrix) has no
        # designated signers: the first non-admin signer approves it, owner
        # included, and approved_by ends up outside the empty approvers list.
        if (
            settings.ENFORCE_DESIGNATED_SIGNERS
            and report.approvers
            and current_user.id not in report.approvers
        ):
            logger.warning(f"{current_user.id} is not a designated approver of {report_id}")
            raise UnauthorizedSignerError(report_id, current_user.id)

        reports = apply_action_to_collection(state.reports, report_id, action, current_user, remark)
        state_store.save_state(db, state.model_copy(update={"reports": reports}))

        updated = find_report(reports, report_id)
        signature = updated.signature_log[-1]
        log_audit(
            current_user.id,
            f"{action.value}_REPORT",
            f"report={report_id} progress={signature.progress} status={updated.status.value} "
            f"remark={signature.remark}"
        )
        logger.info(
            f"Report {report_id} {signature.action.value.lower()} by {current_user.name}. "
            f"Progress: {signature.progress}. New status: {updated.status.value}"
        )
        return updated

    def list_user_reports(self, db: Session, current_user: UserProfile) -> List[ExpenseReport]:
        """Reports owned by the user, newest first"""
        return [r for r in state_store.load_reports(db) if r.user_id == current_user.id]

    def pending_approvals(self, db: Session, current_user: UserProfile) -> List[ExpenseReport]:
        """Reports waiting on the user's signature"""
        return pending_for_approver(state_store.load_reports(db), current_user)

    def signed_history(self, db: Session, current_user: UserProfile) -> List[ExpenseReport]:
        """Reports the user has signed, approve or reject"""
        return [
            report for report in state_store.load_reports(db)
            if any(sig.signer_id == current_user.id for sig in report.signature_log)
        ]

    def can_view(self, report: ExpenseReport, current_user: UserProfile) -> bool:
        """Owner, designated approvers, finance and admins may view a report"""
        return (
            report.user_id == current_user.id
            or current_user.id in report.approvers
            or current_user.role in (UserRole.FINANCE, UserRole.ADMIN)
        )

    def signature_log_rows(self, reports: List[ExpenseReport]) -> List[SignatureLogRow]:
        """Flatten every report's signature log with report context"""
        rows = []
        for report in reports:
            for sig in report.signature_log:
                rows.append(SignatureLogRow(
                    report_id=report.id,
                    title=report.title,
                    report_status=report.status.value,
                    signer_name=sig.signer_name,
                    signer_id=sig.signer_id,
                    action=sig.action.value,
                    total_required_approvals=len(report.approvers),
                    progress=sig.progress,
                    timestamp=sig.timestamp,
                    remark=sig.remark,
                ))
        return rows


# Create singleton instance
claim_service = ClaimService()
