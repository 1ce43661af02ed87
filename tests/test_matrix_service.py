"""
Approver Matrix Tests
Tests for tier selection, required roles and approver coverage
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from src.config.defaults import DEFAULT_APPROVER_MATRIX, DEFAULT_USERS
from src.schemas.matrix import ApproverMatrixTier
from src.schemas.user import UserProfile, UserRole
from src.services.matrix_service import (
    check_matrix_satisfaction,
    evaluate_required_roles,
    select_tier,
    unmet_roles,
)


@pytest.fixture
def matrix():
    """Default three-tier USD matrix"""
    return [ApproverMatrixTier(**tier) for tier in DEFAULT_APPROVER_MATRIX]


@pytest.fixture
def users():
    """Default directory: u1 employee, u2 manager, u3 finance, u4 admin"""
    return [UserProfile(**user) for user in DEFAULT_USERS]


class TestTierSelection:
    """Test first-match tier selection"""

    def test_small_claim_needs_manager(self, matrix):
        """Test a 300 USD claim falls in the manager-only tier"""
        assert select_tier(300, "USD", matrix).id == "m1"
        assert evaluate_required_roles(300, "USD", matrix) == [UserRole.MANAGER]

    def test_bounds_are_inclusive(self, matrix):
        """Test both ends of a range belong to the tier"""
        assert select_tier(500, "USD", matrix).id == "m1"
        assert select_tier(501, "USD", matrix).id == "m2"
        assert select_tier(5000, "USD", matrix).id == "m2"

    def test_unbounded_upper_tier(self, matrix):
        """Test a tier without max_amount covers any larger amount"""
        assert select_tier(1_000_000, "USD", matrix).id == "m3"
        assert evaluate_required_roles(1_000_000, "USD", matrix) == [
            UserRole.MANAGER, UserRole.FINANCE
        ]

    def test_list_order_breaks_overlaps(self):
        """Test the earlier tier wins when ranges overlap"""
        matrix = [
            ApproverMatrixTier(id="a", currency="USD", min_amount=0, max_amount=1000,
                               required_roles=["finance"]),
            ApproverMatrixTier(id="b", currency="USD", min_amount=0, max_amount=500,
                               required_roles=["manager"]),
        ]
        assert select_tier(100, "USD", matrix).id == "a"

    def test_same_currency_preferred(self):
        """Test a same-currency tier beats an earlier other-currency tier"""
        matrix = [
            ApproverMatrixTier(id="usd", currency="USD", min_amount=0, max_amount=1000,
                               required_roles=["manager"]),
            ApproverMatrixTier(id="eur", currency="EUR", min_amount=0, max_amount=1000,
                               required_roles=["finance"]),
        ]
        assert select_tier(100, "EUR", matrix).id == "eur"
        assert select_tier(100, "eur", matrix).id == "eur"

    def test_falls_back_to_any_currency(self, matrix):
        """Test a currency without tiers uses the first covering tier"""
        assert select_tier(2000, "GBP", matrix).id == "m2"

    def test_falls_back_to_first_tier(self):
        """Test an uncovered amount uses the first tier in the list"""
        matrix = [
            ApproverMatrixTier(id="mid", currency="USD", min_amount=100, max_amount=200,
                               required_roles=["finance"]),
            ApproverMatrixTier(id="high", currency="USD", min_amount=1000, max_amount=2000,
                               required_roles=["manager"]),
        ]
        assert select_tier(50, "USD", matrix).id == "mid"
        assert evaluate_required_roles(50, "USD", matrix) == [UserRole.FINANCE]

    def test_empty_matrix_requires_nothing(self):
        """Test an empty matrix places no restriction"""
        assert select_tier(300, "USD", []) is None
        assert evaluate_required_roles(300, "USD", []) == []

    def test_same_inputs_same_result(self, matrix):
        """Test evaluation is deterministic"""
        first = evaluate_required_roles(2500, "USD", matrix)
        second = evaluate_required_roles(2500, "USD", matrix)
        assert first == second


class TestTierSchema:
    """Test tier validation"""

    def test_max_below_min_rejected(self):
        """Test an inverted range is refused"""
        with pytest.raises(ValueError):
            ApproverMatrixTier(id="bad", currency="USD", min_amount=500, max_amount=100)

    def test_roles_deduplicated(self):
        """Test repeated roles collapse, keeping order"""
        tier = ApproverMatrixTier(
            id="t", currency="usd", min_amount=0,
            required_roles=["finance", "manager", "finance"]
        )
        assert tier.required_roles == [UserRole.FINANCE, UserRole.MANAGER]
        assert tier.currency == "USD"


class TestSatisfaction:
    """Test approver coverage checks"""

    def test_manager_covers_small_claim(self, users):
        """Test a manager alone satisfies the manager tier"""
        assert check_matrix_satisfaction([UserRole.MANAGER], ["u2"], users)

    def test_missing_finance(self, users):
        """Test a manager alone does not satisfy manager & finance"""
        required = [UserRole.MANAGER, UserRole.FINANCE]
        assert not check_matrix_satisfaction(required, ["u2"], users)
        assert unmet_roles(required, ["u2"], users) == [UserRole.FINANCE]

    def test_coverage_not_cardinality(self, users):
        """Test one approver per role is enough regardless of count"""
        required = [UserRole.MANAGER, UserRole.FINANCE]
        assert check_matrix_satisfaction(required, ["u3", "u2"], users)

    def test_extra_approvers_keep_satisfaction(self, users):
        """Test adding approvers never breaks a satisfied selection"""
        required = [UserRole.MANAGER]
        assert check_matrix_satisfaction(required, ["u2"], users)
        assert check_matrix_satisfaction(required, ["u2", "u1", "u3"], users)

    def test_unknown_ids_contribute_nothing(self, users):
        """Test ids missing from the directory cover no role"""
        assert not check_matrix_satisfaction([UserRole.MANAGER], ["ghost"], users)

    def test_no_requirements(self, users):
        """Test an empty requirement is always satisfied"""
        assert check_matrix_satisfaction([], [], users)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
