from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from foodbridge.core.database import get_db
from foodbridge.core.errors import ValidationFailed
from foodbridge.schemas.analytics import (
    CategoryCount, QuantityPoint, RecentDonation, ReportRow, StatisticsSummary, StatusPoint, TopDonor,
)
from foodbridge.services.analytics_service import AnalyticsService, report_to_csv

router = APIRouter()


@router.get("/category-wise-donations", response_model=List[CategoryCount])
def category_wise_donations(db: Session = Depends(get_db)):
    return AnalyticsService(db).category_breakdown()


@router.get("/quantity-over-time", response_model=List[QuantityPoint])
def quantity_over_time(db: Session = Depends(get_db)):
    return AnalyticsService(db).quantity_over_time()


@router.get("/status-comparison", response_model=List[StatusPoint])
def status_comparison(db: Session = Depends(get_db)):
    return AnalyticsService(db).status_comparison()


@router.get("/top-donors", response_model=List[TopDonor])
def top_donors(limit: int = Query(10, ge=1, le=10), db: Session = Depends(get_db)):
    return AnalyticsService(db).top_donors(limit=limit)


@router.get("/statistics-summary", response_model=StatisticsSummary)
def statistics_summary(db: Session = Depends(get_db)):
    return AnalyticsService(db).statistics_summary()


@router.get("/recent-donations", response_model=List[RecentDonation])
def recent_donations(limit: int = Query(5, ge=1, le=50), db: Session = Depends(get_db)):
    return AnalyticsService(db).recent_donations(limit=limit)


@router.get(
    "/custom-report",
    response_model=List[ReportRow],
    responses={204: {"description": "No data for the selected range"}},
)
def custom_report(
    start_date: date,
    end_date: date,
    category: Optional[str] = None,
    export_format: str = Query("json", alias="format", pattern="^(json|csv)$"),
    db: Session = Depends(get_db),
):
    """
    Totals per food, donor and receiver for claimed donations created in the range.

    Answers 204 No Content when nothing matches; `format=csv` returns a CSV attachment.
    """
    if start_date > end_date:
        raise ValidationFailed("start_date must not be after end_date")
    rows = AnalyticsService(db).custom_report(start_date, end_date, category=category)
    if not rows:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    if export_format == "csv":
        return Response(
            content=report_to_csv(rows),
            media_type="text/csv",
            headers={"Content-Disposition": f"attachment; filename=donation_report_{start_date}_{end_date}.csv"},
        )
    return rows
