"""
Typed Exceptions for the claim workflow

    ExpenseClaimError (base)
    |
    +-- ClaimValidationError
    |   +-- EmptyClaimError
    |   +-- PolicyViolationError
    |
    +-- ReportNotFoundError
    +-- UserNotFoundError
    +-- UnauthorizedSignerError
    +-- InvalidTransitionError
    +-- OwnershipError

Every exception carries a machine-readable ``code`` and the HTTP status the
API layer answers with. ``to_dict()`` adds the structured details.
"""

from typing import Any, Dict, List, Optional


class ExpenseClaimError(Exception):
    """Base exception for all claim workflow errors"""

    code: str = "EXPENSE_CLAIM_ERROR"
    status_code: int = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def details(self) -> Dict[str, Any]:
        return {}

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for API error responses"""
        return {"code": self.code, "message": self.message, **self.details()}


# ============================================
# VALIDATION ERRORS
# ============================================

class ClaimValidationError(ExpenseClaimError):
    """Submission rejected before any state change"""

    code = "CLAIM_VALIDATION_ERROR"


class EmptyClaimError(ClaimValidationError):
    """Submission has no line items"""

    code = "EMPTY_CLAIM"

    def __init__(self):
        super().__init__("Please add at least one expense item.")


class PolicyViolationError(ClaimValidationError):
    """Selected approvers do not cover the roles the matrix requires"""

    code = "POLICY_VIOLATION"

    def __init__(self, required_roles: List[str], unmet_roles: List[str]):
        self.required_roles = list(required_roles)
        self.unmet_roles = list(unmet_roles)
        super().__init__(
            f"Incomplete selection: matrix requires {' & '.join(self.required_roles)} "
            f"sign-off for this amount (missing: {', '.join(self.unmet_roles)})"
        )

    def details(self) -> Dict[str, Any]:
        return {"required_roles": self.required_roles, "unmet_roles": self.unmet_roles}


# ============================================
# LOOKUP ERRORS
# ============================================

class ReportNotFoundError(ExpenseClaimError):
    """Report id is not in the collection"""

    code = "REPORT_NOT_FOUND"
    status_code = 404

    def __init__(self, report_id: str):
        self.report_id = report_id
        super().__init__(f"Expense report {report_id} not found")

    def details(self) -> Dict[str, Any]:
        return {"report_id": self.report_id}


class UserNotFoundError(ExpenseClaimError):
    """User id is not in the directory"""

    code = "USER_NOT_FOUND"
    status_code = 404

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User {user_id} not found")

    def details(self) -> Dict[str, Any]:
        return {"user_id": self.user_id}


# ============================================
# WORKFLOW ERRORS
# ============================================

class UnauthorizedSignerError(ExpenseClaimError):
    """Acting user is not a designated approver of the report"""

    code = "UNAUTHORIZED_SIGNER"
    status_code = 403

    def __init__(self, report_id: str, user_id: str):
        self.report_id = report_id
        self.user_id = user_id
        super().__init__(f"User {user_id} is not a designated approver of {report_id}")

    def details(self) -> Dict[str, Any]:
        return {"report_id": self.report_id, "user_id": self.user_id}


class InvalidTransitionError(ExpenseClaimError):
    """Approval action on a report that is no longer pending"""

    code = "INVALID_TRANSITION"
    status_code = 409

    def __init__(self, report_id: str, status: str, message: Optional[str] = None):
        self.report_id = report_id
        self.status = status
        super().__init__(message or f"Report {report_id} is {status} and cannot be signed")

    def details(self) -> Dict[str, Any]:
        return {"report_id": self.report_id, "status": self.status}


class OwnershipError(ExpenseClaimError):
    """User tried to save a report owned by someone else"""

    code = "NOT_REPORT_OWNER"
    status_code = 403

    def __init__(self, report_id: str):
        self.report_id = report_id
        super().__init__("You can only update your own expense reports")

    def details(self) -> Dict[str, Any]:
        return {"report_id": self.report_id}
