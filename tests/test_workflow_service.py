"""
Report Lifecycle Tests
Tests for the approval state machine
"""

import sys
import os
import itertools
from datetime import datetime

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from src.schemas.report import ApprovalAction, ClaimStatus, ExpenseReport, SignatureAction
from src.schemas.user import UserProfile, UserRole
from src.services.workflow_service import (
    apply_action_to_collection,
    apply_approval_action,
    find_report,
    pending_for_approver,
)
from src.utils.exceptions import ReportNotFoundError

NOW = datetime(2026, 3, 14, 9, 30)


def make_report(report_id="REQ-0001", approvers=("M1", "F1"), **overrides):
    data = {
        "id": report_id,
        "user_id": "E1",
        "user_name": "Alex Rivera",
        "title": "Client visit",
        "total_claim_amount": 2000.0,
        "approvers": list(approvers),
    }
    data.update(overrides)
    return ExpenseReport(**data)


def approve(report, user_id, role=UserRole.MANAGER, remark=None):
    return apply_approval_action(
        report, ApprovalAction.APPROVE, user_id, remark, role, signer_name=user_id, now=NOW
    )


def reject(report, user_id, remark=None, role=UserRole.MANAGER):
    return apply_approval_action(
        report, ApprovalAction.REJECT, user_id, remark, role, signer_name=user_id, now=NOW
    )


class TestApprove:
    """Test approval progress"""

    def test_two_step_approval(self):
        """Test progress goes 1 of 2 then 2 of 2 and the report is approved"""
        report = make_report()

        first = approve(report, "M1")
        assert first.approved_by == ["M1"]
        assert first.status == ClaimStatus.PENDING
        assert first.signature_log[-1].progress == "1 of 2"

        second = approve(first, "F1", role=UserRole.FINANCE)
        assert second.approved_by == ["M1", "F1"]
        assert second.status == ClaimStatus.APPROVED
        assert second.signature_log[-1].progress == "2 of 2"
        assert len(second.signature_log) == 2

    def test_input_not_mutated(self):
        """Test the original report is left untouched"""
        report = make_report()
        approve(report, "M1")
        assert report.approved_by == []
        assert report.signature_log == []
        assert report.status == ClaimStatus.PENDING

    def test_repeat_approval_is_idempotent_for_progress(self):
        """Test a second approve by the same user keeps approved_by unchanged"""
        once = approve(make_report(), "M1")
        twice = approve(once, "M1")
        assert twice.approved_by == ["M1"]
        assert twice.status == ClaimStatus.PENDING
        # Each action is still audited
        assert len(twice.signature_log) == 2
        assert twice.signature_log[-1].progress == "1 of 2"

    def test_default_remark(self):
        """Test an empty remark is recorded as Approved"""
        result = approve(make_report(), "M1", remark="")
        signature = result.signature_log[-1]
        assert signature.remark == "Approved"
        assert signature.action == SignatureAction.APPROVED
        assert signature.timestamp == NOW
        assert signature.signer_name == "M1"

    def test_single_approver(self):
        """Test one approver finishes the report"""
        result = approve(make_report(approvers=["M1"]), "M1", remark="ok")
        assert result.status == ClaimStatus.APPROVED
        assert result.signature_log[-1].progress == "1 of 1"
        assert result.signature_log[-1].remark == "ok"

    def test_zero_approvers(self):
        """Test a report without approvers is approved by the first signer"""
        result = approve(make_report(approvers=[]), "M1")
        assert result.status == ClaimStatus.APPROVED
        assert result.approved_by == ["M1"]
        assert result.signature_log[-1].progress == "1 of 0"

    def test_approval_clears_rejection_comment(self):
        """Test approving drops a stale rejection comment"""
        report = make_report(rejection_comment="old")
        assert approve(report, "M1").rejection_comment is None


class TestReject:
    """Test rejection"""

    def test_reject_keeps_history(self):
        """Test rejection after approvals keeps every prior signature"""
        report = approve(approve(make_report(), "M1"), "F1", role=UserRole.FINANCE)
        result = reject(report, "F1", remark="Missing receipt", role=UserRole.FINANCE)

        assert result.status == ClaimStatus.REJECTED
        assert result.approved_by == []
        assert result.rejection_comment == "Missing receipt"
        assert len(result.signature_log) == 3
        assert result.signature_log[:2] == report.signature_log
        assert result.signature_log[-1].progress == "Rejected"
        assert result.signature_log[-1].action == SignatureAction.REJECTED

    def test_default_rejection_remark(self):
        """Test an empty remark is recorded as Rejected"""
        result = reject(make_report(), "M1")
        assert result.rejection_comment == "Rejected"
        assert result.signature_log[-1].remark == "Rejected"


class TestApprovedBySubset:
    """Test approved_by stays within approvers whatever the signing order"""

    SIGNERS = [("M1", UserRole.MANAGER), ("F1", UserRole.FINANCE)]

    @pytest.mark.parametrize("length", [1, 2, 3, 4])
    def test_every_action_sequence(self, length):
        """Test all approve/reject sequences with repeated and alternating signers"""
        steps = list(itertools.product([ApprovalAction.APPROVE, ApprovalAction.REJECT], self.SIGNERS))
        for sequence in itertools.product(steps, repeat=length):
            report = make_report()
            for action, (signer, role) in sequence:
                report = apply_approval_action(report, action, signer, None, role, now=NOW)
                assert set(report.approved_by) <= set(report.approvers)
                assert len(report.approved_by) <= len(report.approvers)
                assert len(report.approved_by) == len(set(report.approved_by))
                if action == ApprovalAction.REJECT:
                    assert report.approved_by == []
            assert len(report.signature_log) == length


class TestAdminCannotSign:
    """Test administrators are never signers"""

    @pytest.mark.parametrize("action", [ApprovalAction.APPROVE, ApprovalAction.REJECT])
    def test_admin_action_is_noop(self, action):
        """Test an admin action returns the report unchanged"""
        report = make_report(approvers=["A1"])
        result = apply_approval_action(report, action, "A1", "x", UserRole.ADMIN, now=NOW)
        assert result == report
        assert result.signature_log == []
        assert result.status == ClaimStatus.PENDING


class TestCollection:
    """Test actions on a report collection"""

    def test_only_target_changes(self):
        """Test other reports in the collection stay as they were"""
        reports = [make_report("REQ-0002"), make_report("REQ-0001")]
        manager = UserProfile(id="M1", name="Sarah", email="m@x.com", role=UserRole.MANAGER)

        result = apply_action_to_collection(
            reports, "REQ-0001", ApprovalAction.APPROVE, manager, now=NOW
        )
        assert [r.id for r in result] == ["REQ-0002", "REQ-0001"]
        assert result[0] == reports[0]
        assert result[1].approved_by == ["M1"]
        assert result[1].signature_log[-1].signer_name == "Sarah"

    def test_unknown_report(self):
        """Test acting on a missing id raises"""
        manager = UserProfile(id="M1", name="Sarah", email="m@x.com", role=UserRole.MANAGER)
        with pytest.raises(ReportNotFoundError):
            apply_action_to_collection([make_report()], "REQ-9999", ApprovalAction.APPROVE, manager)
        with pytest.raises(ReportNotFoundError):
            find_report([], "REQ-0001")


class TestPendingForApprover:
    """Test the approver work queue"""

    def test_queue(self):
        """Test only pending, designated, unsigned reports are listed"""
        manager = UserProfile(id="M1", name="Sarah", email="m@x.com", role=UserRole.MANAGER)
        waiting = make_report("REQ-0001")
        signed = approve(make_report("REQ-0002"), "M1")
        other = make_report("REQ-0003", approvers=["F1"])
        rejected = reject(make_report("REQ-0004"), "F1")

        result = pending_for_approver([waiting, signed, other, rejected], manager)
        assert [r.id for r in result] == ["REQ-0001"]

    def test_admin_queue_empty(self):
        """Test admins have nothing to sign"""
        admin = UserProfile(id="A1", name="Admin", email="a@x.com", role=UserRole.ADMIN)
        assert pending_for_approver([make_report(approvers=["A1"])], admin) == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
