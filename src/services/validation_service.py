"""
Validation Service
Checks a report against submission rules before it enters the workflow
"""

from typing import Iterable, List, Sequence

from src.config.settings import settings
from src.schemas.category import ExpenseCategory
from src.schemas.matrix import ApproverMatrixTier
from src.schemas.report import ExpenseReport
from src.schemas.user import UserProfile, UserRole
from src.services.matrix_service import evaluate_required_roles, unmet_roles
from src.utils.exceptions import ClaimValidationError, EmptyClaimError, PolicyViolationError
from src.utils.logger import setup_logger

logger = setup_logger()


class ValidationService:
    """Service for validating expense report submissions"""

    def validate_currency(self, currency: str):
        """
        Reject currencies outside the supported list

        Raises:
            ClaimValidationError: If the currency is not supported
        """
        supported = settings.supported_currencies_list
        if currency not in supported:
            raise ClaimValidationError(
                f"Currency '{currency}' is not supported. Supported: {', '.join(supported)}"
            )

    def validate_categories(self, report: ExpenseReport, categories: Iterable[ExpenseCategory]):
        """
        Every line must reference a known category

        Raises:
            ClaimValidationError: If any category id is unknown
        """
        known = {category.id for category in categories}
        unknown = sorted({item.category_id for item in report.items if item.category_id not in known})
        if unknown:
            raise ClaimValidationError(f"Unknown expense categories: {', '.join(unknown)}")

    def validate_approver_ids(self, report: ExpenseReport, users: Sequence[UserProfile]):
        """
        Every selected approver must be an active, non-admin user other than the claimant

        Admins never sign, so an admin slot could never be filled.

        Raises:
            ClaimValidationError: On the first offending approver
        """
        directory = {user.id: user for user in users}
        for approver_id in report.approvers:
            user = directory.get(approver_id)
            if user is None:
                raise ClaimValidationError(f"Unknown approver: {approver_id}")
            if approver_id == report.user_id:
                raise ClaimValidationError("You cannot approve your own expense report")
            if not user.is_active:
                raise ClaimValidationError(f"Approver {approver_id} is inactive")
            if user.role == UserRole.ADMIN:
                raise ClaimValidationError(f"Administrator {approver_id} cannot be an approver")

    def validate_approver_selection(
        self,
        report: ExpenseReport,
        matrix: Sequence[ApproverMatrixTier],
        users: Sequence[UserProfile]
    ) -> List[UserRole]:
        """
        Check the selected approvers cover the roles the matrix requires

        Args:
            report: Report with total, currency and approvers filled in
            matrix: Ordered matrix tiers
            users: User directory

        Returns:
            List of required roles

        Raises:
            PolicyViolationError: If a required role is not covered
        """
        required = evaluate_required_roles(report.total_claim_amount, report.claim_currency, matrix)
        missing = unmet_roles(required, report.approvers, users)
        if missing:
            logger.info(
                f"Validation failed: {report.claim_currency} {report.total_claim_amount:,.2f} "
                f"requires {[r.value for r in required]}, missing {[r.value for r in missing]}"
            )
            raise PolicyViolationError(
                required_roles=[role.value for role in required],
                unmet_roles=[role.value for role in missing],
            )
        return required

    def validate_submission(
        self,
        report: ExpenseReport,
        matrix: Sequence[ApproverMatrixTier],
        users: Sequence[UserProfile],
        categories: Iterable[ExpenseCategory]
    ) -> List[UserRole]:
        """
        Run all submission checks; empty claims are rejected before the matrix

        Returns:
            List of required roles for the report

        Raises:
            EmptyClaimError: If the report has no items
            ClaimValidationError: If currency or categories are invalid, or an approver is
                unknown, inactive, an admin or the claimant
            PolicyViolationError: If approver coverage is incomplete
        """
        if not report.items:
            raise EmptyClaimError()

        self.validate_currency(report.claim_currency)
        self.validate_categories(report, categories)
        self.validate_approver_ids(report, users)
        required = self.validate_approver_selection(report, matrix, users)

        logger.info(
            f"Validation passed for {report.claim_currency} {report.total_claim_amount:,.2f} "
            f"with {len(report.approvers)} approver(s)"
        )
        return required


# Create singleton instance
validation_service = ValidationService()
