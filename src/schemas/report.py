"""
Expense Report Schemas - Pydantic V2
Claim items, signatures and the expense report aggregate
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime, date
from enum import Enum
import uuid

from src.config.settings import settings
from src.schemas.user import UserRole
from src.utils.helpers import round_money, utcnow


class ClaimStatus(str, Enum):
    """
    Report status enumeration

    DRAFT is reserved for client-side drafts; the workflow never produces it.
    """
    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ApprovalAction(str, Enum):
    """Actions an approver can take"""
    APPROVE = "APPROVE"
    REJECT = "REJECT"


class SignatureAction(str, Enum):
    """Action recorded on a signature"""
    APPROVED = "Approved"
    REJECTED = "Rejected"


class SaveOutcome(str, Enum):
    """How a save was routed"""
    CREATED = "created"
    UPDATED = "updated"
    RESUBMITTED = "resubmitted"


def new_item_id() -> str:
    return f"ITM-{uuid.uuid4().hex[:12].upper()}"


class ClaimItem(BaseModel):
    """One expense line; claim_amount is always derived"""
    id: str = Field(default_factory=new_item_id)
    date: date
    category_id: str
    description: str = ""
    base_amount: float = Field(0, ge=0)
    tax_amount: float = Field(0, ge=0)
    expense_currency: str = "USD"
    exchange_rate: float = Field(1.0, gt=0)
    claim_amount: float = 0.0

    @field_validator("expense_currency")
    @classmethod
    def normalize_currency(cls, value: str) -> str:
        return value.strip().upper()

    @model_validator(mode='after')
    def compute_claim_amount(self):
        """claim_amount = (base + tax) * exchange rate"""
        self.claim_amount = round_money((self.base_amount + self.tax_amount) * self.exchange_rate)
        return self


class Attachment(BaseModel):
    """Attachment metadata, opaque to the workflow"""
    id: str
    name: str
    type: str = "application/octet-stream"
    size: int = Field(0, ge=0)
    data_url: Optional[str] = None


class Signature(BaseModel):
    """Immutable audit record of one approve/reject action"""
    signer_id: str
    signer_name: str
    timestamp: datetime
    action: SignatureAction
    remark: str
    progress: str  # "1 of 2" or "Rejected"

    class Config:
        frozen = True


class ExpenseReport(BaseModel):
    """
    Expense report aggregate

    ``id`` is empty until the sequence allocator assigns one. ``approved_by``
    is always a subset of ``approvers``; both keep insertion order.
    """
    id: str = ""
    user_id: str
    user_name: str
    title: str
    items: List[ClaimItem] = []
    total_claim_amount: float = 0.0
    claim_currency: str = "USD"
    attachments: List[Attachment] = []
    approvers: List[str] = []
    approved_by: List[str] = []
    status: ClaimStatus = ClaimStatus.PENDING
    created_at: datetime = Field(default_factory=utcnow)
    rejection_comment: Optional[str] = None
    signature_log: List[Signature] = []

    class Config:
        from_attributes = True

    @property
    def progress(self) -> str:
        """Approval progress as "<k> of <n>"."""
        return f"{len(self.approved_by)} of {len(self.approvers)}"


# ============================================================================
# REQUEST / RESPONSE SCHEMAS
# ============================================================================

class ClaimItemCreate(BaseModel):
    """Claim line as submitted by the client"""
    id: Optional[str] = None
    date: date
    category_id: str
    description: str = Field("", max_length=1000)
    base_amount: float = Field(0, ge=0)
    tax_amount: float = Field(0, ge=0)
    expense_currency: str = "USD"
    exchange_rate: float = Field(1.0, gt=0)


class ReportSubmission(BaseModel):
    """
    Submit a new report or save an existing one

    ``id`` is omitted for brand-new reports. Saving a rejected report's id
    resubmits it under a fresh identifier.
    """
    id: Optional[str] = None
    title: Optional[str] = Field(None, max_length=300)
    claim_currency: str = settings.DEFAULT_CLAIM_CURRENCY
    items: List[ClaimItemCreate] = []
    attachments: List[Attachment] = []
    approvers: List[str] = []

    @field_validator("claim_currency")
    @classmethod
    def normalize_currency(cls, value: str) -> str:
        return value.strip().upper()

    @field_validator("approvers")
    @classmethod
    def unique_approvers(cls, value: List[str]) -> List[str]:
        return list(dict.fromkeys(value))


class ReportSaveResponse(BaseModel):
    """Result of a submit/save"""
    success: bool = True
    message: str
    outcome: SaveOutcome
    report_id: str
    report: ExpenseReport


class RequiredRolesRequest(BaseModel):
    """Preview the matrix for an amount, currency and approver selection"""
    total_amount: float = Field(..., ge=0)
    currency: str = "USD"
    approvers: List[str] = []


class RequiredRolesResponse(BaseModel):
    """Matrix evaluation result"""
    tier_id: Optional[str] = None
    required_roles: List[UserRole]
    unmet_roles: List[UserRole]
    satisfied: bool


class ReportListResponse(BaseModel):
    """Schema for list of reports"""
    total: int
    reports: List[ExpenseReport]
