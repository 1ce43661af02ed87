"""
Reports Routes
Dashboard statistics and ERP export endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date

from src.config.database import get_db
from src.schemas.report import ClaimStatus
from src.schemas.user import UserProfile
from src.services import state_store
from src.services.auth_service import auth_service
from src.services.report_service import report_service
from src.utils.helpers import parse_period, utcnow
from src.utils.logger import setup_logger

logger = setup_logger()
router = APIRouter()


@router.get("/dashboard")
async def get_dashboard(
    period: Optional[str] = Query(None, description="Month in YYYY-MM format, defaults to current month"),
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(auth_service.require_module("dashboard"))
):
    """
    Monthly performance summary

    **Returns:**
    - Report counts by status (own reports; admins see all)
    - Approved totals per claim currency
    - Number of reports the user signed off in the period
    """
    try:
        period_key = parse_period(period)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="period must be in YYYY-MM format"
        )

    summary = report_service.dashboard_summary(state_store.load_reports(db), current_user, period_key)
    return {"success": True, **summary}


@router.get("/export", response_class=PlainTextResponse)
async def export_erp_lines(
    from_date: Optional[date] = Query(None, description="From date (YYYY-MM-DD), inclusive"),
    to_date: Optional[date] = Query(None, description="To date (YYYY-MM-DD), inclusive"),
    report_status: Optional[ClaimStatus] = Query(None, alias="status", description="Filter by report status"),
    db: Session = Depends(get_db),
    current_user: UserProfile = Depends(auth_service.require_module("export"))
):
    """
    ERP gateway export

    One CSV row per claim item with the category GL code, filtered by report
    creation date and status.
    """
    if from_date and to_date and to_date < from_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="to_date must be on or after from_date"
        )

    reports = report_service.filter_reports(
        state_store.load_reports(db),
        from_date=from_date,
        to_date=to_date,
        status=report_status,
    )
    if not reports:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No reports match the export filters"
        )

    content = report_service.export_lines_csv(reports, state_store.load_categories(db))
    line_count = sum(len(r.items) for r in reports)
    logger.info(f"{current_user.id} exported {len(reports)} reports ({line_count} lines)")

    filename = f"Finance_Export_{utcnow().strftime('%Y%m%d%H%M%S')}.csv"
    return PlainTextResponse(
        content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
