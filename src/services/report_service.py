"""
Report Service
Dashboard statistics and ERP / signature-log CSV exports
"""

import csv
import io
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

from src.schemas.approval import SignatureLogRow
from src.schemas.category import ExpenseCategory
from src.schemas.report import ClaimStatus, ExpenseReport, SignatureAction
from src.schemas.user import UserProfile, UserRole
from src.utils.helpers import format_datetime, period_of, round_money

ERP_EXPORT_COLUMNS = [
    "LINE_ID",
    "REPORT_ID",
    "STATUS",
    "EMPLOYEE_NAME",
    "EXPENSE_DATE",
    "GL_SEGMENT1",
    "CATEGORY",
    "DESCRIPTION",
    "CURRENCY",
    "CLAIM_AMOUNT",
    "EXCHANGE_RATE",
    "TAX_AMOUNT",
]

SIGNATURE_LOG_COLUMNS = [
    "Report ID",
    "Title",
    "Current Request Status",
    "Signer Name",
    "Signer ID",
    "Action Taken",
    "Total Required Approvals",
    "Signing Step Sequence",
    "Timestamp",
    "Remark",
]


class ReportService:
    """Read-only reporting over the report collection"""

    def dashboard_summary(
        self,
        reports: Sequence[ExpenseReport],
        current_user: UserProfile,
        period: str
    ) -> Dict:
        """
        Monthly summary for the dashboard

        Counts and approved totals cover the user's own reports (all reports
        for admins). ``signed_count`` counts reports in the period the user
        approved at least once.

        Args:
            reports: Report collection
            current_user: Viewing user
            period: Month key, YYYY-MM

        Returns:
            dict: period, counts by status, approved totals by currency, signed_count
        """
        in_period = [r for r in reports if period_of(r.created_at) == period]
        mine = [
            r for r in in_period
            if r.user_id == current_user.id or current_user.role == UserRole.ADMIN
        ]

        totals: Dict[str, float] = {}
        for report in mine:
            if report.status == ClaimStatus.APPROVED:
                totals[report.claim_currency] = round_money(
                    totals.get(report.claim_currency, 0.0) + report.total_claim_amount
                )

        signed = sum(
            1 for r in in_period
            if any(
                s.signer_id == current_user.id and s.action == SignatureAction.APPROVED
                for s in r.signature_log
            )
        )

        return {
            "period": period,
            "total": len(mine),
            "pending": sum(1 for r in mine if r.status == ClaimStatus.PENDING),
            "approved": sum(1 for r in mine if r.status == ClaimStatus.APPROVED),
            "rejected": sum(1 for r in mine if r.status == ClaimStatus.REJECTED),
            "approved_totals_by_currency": totals,
            "signed_count": signed,
        }

    def filter_reports(
        self,
        reports: Iterable[ExpenseReport],
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        status: Optional[ClaimStatus] = None
    ) -> List[ExpenseReport]:
        """Filter by creation date range (inclusive) and status"""
        selected = []
        for report in reports:
            created = report.created_at.date()
            if from_date and created < from_date:
                continue
            if to_date and created > to_date:
                continue
            if status and report.status != status:
                continue
            selected.append(report)
        return selected

    def export_lines_csv(
        self,
        reports: Iterable[ExpenseReport],
        categories: Iterable[ExpenseCategory]
    ) -> str:
        """
        ERP line export, one row per claim item

        Unknown categories are written as ERROR so the import side rejects them.
        """
        by_id = {category.id: category for category in categories}
        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(ERP_EXPORT_COLUMNS)

        for report in reports:
            for item in report.items:
                category = by_id.get(item.category_id)
                writer.writerow([
                    item.id,
                    report.id,
                    report.status.value,
                    report.user_name,
                    item.date.isoformat(),
                    category.gl_code if category else "ERROR",
                    category.name if category else "ERROR",
                    item.description,
                    report.claim_currency,
                    f"{item.claim_amount:.2f}",
                    item.exchange_rate,
                    f"{item.tax_amount:.2f}",
                ])
        return buffer.getvalue()

    def signature_log_csv(self, rows: Iterable[SignatureLogRow]) -> str:
        """Signature log export"""
        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(SIGNATURE_LOG_COLUMNS)
        for row in rows:
            writer.writerow([
                row.report_id,
                row.title,
                row.report_status,
                row.signer_name,
                row.signer_id,
                row.action,
                row.total_required_approvals,
                row.progress or "N/A",
                format_datetime(row.timestamp),
                row.remark,
            ])
        return buffer.getvalue()


# Create singleton instance
report_service = ReportService()
