"""
Reports Tests
Tests for the dashboard summary and ERP export
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from src.utils.helpers import period_of, utcnow
from tests.test_auth import client, test_db, as_user, EMPLOYEE, MANAGER, FINANCE, ADMIN
from tests.test_claims import claim_payload, submit


@pytest.fixture
def mixed_reports(test_db):
    """One approved, one rejected and one pending report for the employee"""
    approved = submit(claim_payload()).json()["report_id"]
    rejected = submit(claim_payload()).json()["report_id"]
    submit(claim_payload())

    client.post(f"/api/approvals/{approved}/approve", json={}, headers=as_user(MANAGER))
    client.post(f"/api/approvals/{rejected}/reject", json={"remark": "No"}, headers=as_user(MANAGER))
    return approved


class TestDashboard:
    """Test the monthly summary"""

    def test_employee_summary(self, mixed_reports):
        """Test counts and approved totals for the claimant"""
        response = client.get("/api/reports/dashboard", headers=as_user(EMPLOYEE))
        assert response.status_code == 200
        data = response.json()
        assert data["period"] == period_of(utcnow())
        assert data["total"] == 3
        assert data["approved"] == 1
        assert data["rejected"] == 1
        assert data["pending"] == 1
        assert data["approved_totals_by_currency"] == {"USD": 300.0}

    def test_approver_signed_count(self, mixed_reports):
        """Test the approver's own counts and signed reports"""
        data = client.get("/api/reports/dashboard", headers=as_user(MANAGER)).json()
        assert data["total"] == 0
        assert data["signed_count"] == 1

    def test_admin_sees_everything(self, mixed_reports):
        """Test admins count every report"""
        data = client.get("/api/reports/dashboard", headers=as_user(ADMIN)).json()
        assert data["total"] == 3

    def test_other_period_is_empty(self, mixed_reports):
        """Test reports outside the period are not counted"""
        data = client.get(
            "/api/reports/dashboard", params={"period": "2001-01"}, headers=as_user(EMPLOYEE)
        ).json()
        assert data["total"] == 0

    def test_bad_period(self, test_db):
        """Test malformed periods are refused"""
        response = client.get(
            "/api/reports/dashboard", params={"period": "January"}, headers=as_user(EMPLOYEE)
        )
        assert response.status_code == 400


class TestExport:
    """Test the ERP line export"""

    def test_export_all(self, mixed_reports):
        """Test one CSV row per claim line with the GL code"""
        response = client.get("/api/reports/export", headers=as_user(FINANCE))
        assert response.status_code == 200
        assert "text/csv" in response.headers["content-type"]
        assert "attachment" in response.headers["content-disposition"]

        lines = response.text.strip().split("\n")
        assert lines[0].startswith('"LINE_ID","REPORT_ID"')
        assert len(lines) == 4
        assert '"60110"' in lines[1]

    def test_export_by_status(self, mixed_reports):
        """Test the status filter"""
        response = client.get(
            "/api/reports/export", params={"status": "approved"}, headers=as_user(FINANCE)
        )
        lines = response.text.strip().split("\n")
        assert len(lines) == 2
        assert f'"{mixed_reports}"' in lines[1]

    def test_export_nothing_matches(self, test_db):
        """Test an empty selection answers 404"""
        response = client.get("/api/reports/export", headers=as_user(FINANCE))
        assert response.status_code == 404

    def test_export_bad_range(self, test_db):
        """Test to_date before from_date is refused"""
        response = client.get(
            "/api/reports/export",
            params={"from_date": "2026-02-01", "to_date": "2026-01-01"},
            headers=as_user(FINANCE)
        )
        assert response.status_code == 400

    def test_export_requires_module(self, test_db):
        """Test employees cannot export"""
        response = client.get("/api/reports/export", headers=as_user(EMPLOYEE))
        assert response.status_code == 403


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
