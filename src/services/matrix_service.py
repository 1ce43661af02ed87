"""
Matrix Service
Decides which approver roles a claim needs

Evaluation is advisory at submission time only. Editing the matrix later does
not touch the approvers already recorded on pending reports.
"""

from typing import Dict, Iterable, List, Optional, Sequence

from src.schemas.matrix import ApproverMatrixTier
from src.schemas.user import UserProfile, UserRole


def select_tier(
    total_amount: float,
    currency: str,
    matrix: Sequence[ApproverMatrixTier]
) -> Optional[ApproverMatrixTier]:
    """
    Pick the governing tier, first match in list order

    1. First tier with the same currency whose range covers the amount
    2. Otherwise the first tier whose range covers the amount, any currency
    3. Otherwise the first tier in the list

    Args:
        total_amount: Report total in the claim currency
        currency: Claim currency code
        matrix: Ordered tier list

    Returns:
        The selected tier, or None for an empty matrix
    """
    if not matrix:
        return None

    currency = (currency or "").strip().upper()

    for tier in matrix:
        if tier.currency == currency and tier.covers(total_amount):
            return tier

    for tier in matrix:
        if tier.covers(total_amount):
            return tier

    return matrix[0]


def evaluate_required_roles(
    total_amount: float,
    currency: str,
    matrix: Sequence[ApproverMatrixTier]
) -> List[UserRole]:
    """
    Roles that must sign off on a claim

    Returns an empty list (no restriction) when the matrix is empty.
    """
    tier = select_tier(total_amount, currency, matrix)
    if tier is None:
        return []
    return list(dict.fromkeys(tier.required_roles))


def unmet_roles(
    required_roles: Iterable[UserRole],
    selected_approver_ids: Iterable[str],
    users: Iterable[UserProfile]
) -> List[UserRole]:
    """Required roles not held by any selected approver, in requirement order"""
    selected = set(selected_approver_ids)
    directory: Dict[str, UserProfile] = {user.id: user for user in users}
    covered = {directory[user_id].role for user_id in selected if user_id in directory}
    return [role for role in dict.fromkeys(required_roles) if role not in covered]


def check_matrix_satisfaction(
    required_roles: Iterable[UserRole],
    selected_approver_ids: Iterable[str],
    users: Iterable[UserProfile]
) -> bool:
    """
    Coverage check: every required role is held by at least one selected user

    Unknown approver ids contribute no role. Selecting extra approvers never
    turns a satisfied selection into an unsatisfied one.
    """
    return not unmet_roles(required_roles, selected_approver_ids, users)
