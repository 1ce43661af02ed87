"""
Approval Schemas
Pydantic models for approval workflow
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class ApprovalCreate(BaseModel):
    """Schema for approving/rejecting a report"""
    remark: Optional[str] = Field(None, max_length=1000)


class SignatureLogRow(BaseModel):
    """One signature flattened with its report context"""
    report_id: str
    title: str
    report_status: str
    signer_name: str
    signer_id: str
    action: str
    total_required_approvals: int
    progress: str
    timestamp: datetime
    remark: str
