from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List
from tour_booking.database import get_db
from tour_booking.repositories.statistics_repo import StatisticsRepository
from tour_booking.schemas.statistics import (
    TourRevenue,
    TourBookingsCount,
    RecentBooking,
    OverviewStatistics,
)
from tour_booking.utils.helpers import utcnow

router = APIRouter(prefix="/api/v1/statistics", tags=["Statistics"])

TOP_TOURS = 5
# month_range needs the following January to exist
MAX_YEAR = 9998


@router.get("/monthly-revenue")
def get_monthly_revenue(
    year: int = Query(..., ge=1900, le=MAX_YEAR),
    month: int = Query(..., ge=1, le=12),
    db: Session = Depends(get_db)
):
    """Revenue from confirmed bookings created in the given month"""
    revenue = StatisticsRepository(db).monthly_revenue(year, month)
    return {"year": year, "month": month, "total_revenue": revenue}


@router.get("/monthly-bookings-count")
def get_monthly_bookings_count(
    year: int = Query(..., ge=1900, le=MAX_YEAR),
    month: int = Query(..., ge=1, le=12),
    db: Session = Depends(get_db)
):
    count = StatisticsRepository(db).monthly_bookings_count(year, month)
    return {"year": year, "month": month, "bookings_count": count}


@router.get("/monthly-participants")
def get_monthly_participants(
    year: int = Query(..., ge=1900, le=MAX_YEAR),
    month: int = Query(..., ge=1, le=12),
    db: Session = Depends(get_db)
):
    """People on confirmed bookings created in the given month"""
    participants = StatisticsRepository(db).monthly_participants(year, month)
    return {"year": year, "month": month, "total_participants": participants}


@router.get("/active-tours-count")
def get_active_tours_count(db: Session = Depends(get_db)):
    return {"active_tours_count": StatisticsRepository(db).active_tours_count()}


@router.get("/top-revenue-tours", response_model=List[TourRevenue])
def get_top_revenue_tours(db: Session = Depends(get_db)):
    return StatisticsRepository(db).tours_revenue(limit=TOP_TOURS)


@router.get("/tours-revenue", response_model=List[TourRevenue])
def get_tours_revenue(db: Session = Depends(get_db)):
    return StatisticsRepository(db).tours_revenue()


@router.get("/tours-bookings-count", response_model=List[TourBookingsCount])
def get_tours_bookings_count(db: Session = Depends(get_db)):
    return StatisticsRepository(db).tours_bookings_count()


@router.get("/recent-bookings", response_model=List[RecentBooking])
def get_recent_bookings(
    limit: int = Query(5, ge=1, le=100),
    db: Session = Depends(get_db)
):
    return StatisticsRepository(db).recent_bookings(limit)


@router.get("/overview", response_model=OverviewStatistics)
def get_overview_statistics(db: Session = Depends(get_db)):
    """Dashboard summary for the current month plus all-time totals"""
    repo = StatisticsRepository(db)
    now = utcnow()
    return {
        "monthly_revenue": repo.monthly_revenue(now.year, now.month),
        "monthly_bookings_count": repo.monthly_bookings_count(now.year, now.month),
        "monthly_participants": repo.monthly_participants(now.year, now.month),
        "active_tours_count": repo.active_tours_count(),
        "total_revenue": repo.total_revenue(),
        "total_bookings": repo.total_bookings(),
        "month": now.month,
        "year": now.year,
    }
