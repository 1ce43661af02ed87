"""
State Store
Persistence boundary around the workflow core

The core works on an ``AppState`` snapshot and returns a new one. This module
loads that snapshot from the database and writes the returned snapshot back
in a single transaction.
"""

from typing import Dict, List, Sequence

from sqlalchemy.orm import Session

from src.models import (
    ApproverMatrixTierRecord,
    ExpenseCategoryRecord,
    ExpenseReportRecord,
    REPORT_SEQUENCE,
    SequenceCounter,
    User,
)
from src.schemas.category import ExpenseCategory
from src.schemas.matrix import ApproverMatrixTier
from src.schemas.report import ExpenseReport
from src.schemas.state import AppState, SequenceState
from src.schemas.user import UserProfile
from src.utils.logger import setup_logger

logger = setup_logger()


# ============================================
# RECORD <-> DOMAIN CONVERSION
# ============================================

def report_from_record(record: ExpenseReportRecord) -> ExpenseReport:
    """Build the domain report from its row"""
    return ExpenseReport(
        id=record.report_id,
        user_id=record.user_id,
        user_name=record.user_name,
        title=record.title,
        items=record.items or [],
        total_claim_amount=record.total_claim_amount,
        claim_currency=record.claim_currency,
        attachments=record.attachments or [],
        approvers=record.approvers or [],
        approved_by=record.approved_by or [],
        status=record.status,
        created_at=record.created_at,
        rejection_comment=record.rejection_comment,
        signature_log=record.signature_log or [],
    )


def _apply_report(record: ExpenseReportRecord, report: ExpenseReport):
    data = report.model_dump(mode="json")
    record.report_id = report.id
    record.user_id = report.user_id
    record.user_name = report.user_name
    record.title = report.title
    record.claim_currency = report.claim_currency
    record.total_claim_amount = report.total_claim_amount
    record.items = data["items"]
    record.attachments = data["attachments"]
    record.approvers = list(report.approvers)
    record.approved_by = list(report.approved_by)
    record.status = report.status
    record.rejection_comment = report.rejection_comment
    record.signature_log = data["signature_log"]
    record.created_at = report.created_at


def tier_from_record(record: ApproverMatrixTierRecord) -> ApproverMatrixTier:
    return ApproverMatrixTier(
        id=record.id,
        currency=record.currency,
        min_amount=record.min_amount,
        max_amount=record.max_amount,
        required_roles=record.required_roles or [],
    )


# ============================================
# LOAD
# ============================================

def load_reports(db: Session) -> List[ExpenseReport]:
    """All reports, newest first"""
    records = db.query(ExpenseReportRecord).order_by(ExpenseReportRecord.row_id.desc()).all()
    return [report_from_record(record) for record in records]


def load_matrix(db: Session) -> List[ApproverMatrixTier]:
    """Matrix tiers in stored order"""
    records = db.query(ApproverMatrixTierRecord).order_by(ApproverMatrixTierRecord.position).all()
    return [tier_from_record(record) for record in records]


def _get_counter(db: Session) -> SequenceCounter:
    counter = db.query(SequenceCounter).filter(SequenceCounter.name == REPORT_SEQUENCE).first()
    if counter is None:
        counter = SequenceCounter(name=REPORT_SEQUENCE, value=1)
        db.add(counter)
        db.flush()
    return counter


def load_sequence(db: Session) -> SequenceState:
    counter = db.query(SequenceCounter).filter(SequenceCounter.name == REPORT_SEQUENCE).first()
    return SequenceState(next_value=counter.value if counter else 1)


def load_state(db: Session) -> AppState:
    """
    Load the full workflow snapshot

    Args:
        db: Database session

    Returns:
        AppState: Reports, matrix and sequence counter
    """
    db.expire_all()  # Force fresh data from database
    return AppState(
        reports=load_reports(db),
        matrix=load_matrix(db),
        sequence=load_sequence(db),
    )


def load_users(db: Session) -> List[UserProfile]:
    users = db.query(User).order_by(User.id).all()
    return [UserProfile.model_validate(user) for user in users]


def load_categories(db: Session) -> List[ExpenseCategory]:
    records = db.query(ExpenseCategoryRecord).order_by(ExpenseCategoryRecord.id).all()
    return [ExpenseCategory.model_validate(record) for record in records]


# ============================================
# SAVE
# ============================================

def _sync_reports(db: Session, reports: Sequence[ExpenseReport]):
    existing: Dict[str, ExpenseReportRecord] = {
        record.report_id: record for record in db.query(ExpenseReportRecord).all()
    }

    # Oldest first so that newer reports get higher row ids
    for report in reversed(list(reports)):
        record = existing.get(report.id)
        if record is None:
            record = ExpenseReportRecord()
            _apply_report(record, report)
            db.add(record)
            db.flush()
        else:
            _apply_report(record, report)


def _sync_matrix(db: Session, matrix: Sequence[ApproverMatrixTier]):
    existing: Dict[str, ApproverMatrixTierRecord] = {
        record.id: record for record in db.query(ApproverMatrixTierRecord).all()
    }
    keep = {tier.id for tier in matrix}
    for tier_id, record in existing.items():
        if tier_id not in keep:
            db.delete(record)

    for position, tier in enumerate(matrix):
        record = existing.get(tier.id)
        if record is None:
            record = ApproverMatrixTierRecord(id=tier.id)
            db.add(record)
        record.position = position
        record.currency = tier.currency
        record.min_amount = tier.min_amount
        record.max_amount = tier.max_amount
        record.required_roles = [role.value for role in tier.required_roles]


def save_state(db: Session, state: AppState):
    """
    Write a snapshot back in one transaction

    Reports are upserted by id and never deleted; the matrix is synced to the
    snapshot's order; the sequence counter is overwritten.

    Args:
        db: Database session
        state: Snapshot returned by the workflow core
    """
    try:
        _sync_reports(db, state.reports)
        _sync_matrix(db, state.matrix)
        _get_counter(db).value = state.sequence.next_value
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Failed to persist workflow state")
        raise

    logger.debug(
        f"Saved state: {len(state.reports)} reports, {len(state.matrix)} tiers, "
        f"next sequence {state.sequence.next_value}"
    )
