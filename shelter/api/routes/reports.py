from datetime import datetime
from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from shelter.api.deps import ShelterStores, get_now, get_stores
from shelter.infra.pdf_utils import generate_pdf_for_month
from shelter.logic.reporting.aggregation import monthly_meal_report, build_trend_series

router = APIRouter()
logger = logging.getLogger(__name__)


def _report(year: int, month: int, stores: ShelterStores, now: datetime):
    # URL months are 1-12, report months are 0-11
    if not 1 <= month <= 12:
        raise HTTPException(status_code=400, detail="Month must be between 1 and 12")
    report = monthly_meal_report(stores.meals.records_by_category(), year, month - 1, now=now)
    if not report['consistent']:
        logger.warning("Meal report totals differ for %s: trend=%s pdf=%s summary=%s", report['title'],
                       report['trend']['total'], report['pdf']['total'], report['summary']['total'])
    return report


@router.get("/api/reports/meals/trend")
def meal_trend(year: Optional[int] = Query(default=None), stores: ShelterStores = Depends(get_stores),
               now: datetime = Depends(get_now)):
    """Monthly trend totals for a year, up to the current month."""
    year = year or now.year
    return {'year': year, 'months': build_trend_series(stores.meals.records_by_category(), year, now)}


@router.get("/api/reports/meals/{year}/{month}")
def meal_report(year: int, month: int, stores: ShelterStores = Depends(get_stores),
                now: datetime = Depends(get_now)):
    return _report(year, month, stores, now)


@router.get("/api/reports/meals/{year}/{month}/pdf")
def meal_report_pdf(year: int, month: int, stores: ShelterStores = Depends(get_stores),
                    now: datetime = Depends(get_now)):
    report = _report(year, month, stores, now)
    pdf_bytes = generate_pdf_for_month(report)
    filename = f"meal_report_{year}_{month:02d}.pdf"
    headers = {"Content-Disposition": f"attachment; filename={filename}"}
    return Response(content=pdf_bytes, media_type="application/pdf", headers=headers)
