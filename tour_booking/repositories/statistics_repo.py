from sqlalchemy.orm import Session, joinedload
from sqlalchemy import func, case
from typing import List
from decimal import Decimal
from tour_booking.models.booking import Booking
from tour_booking.models.tour import Tour
from tour_booking.utils.helpers import month_range

CONFIRMED = "Confirmed"


class StatisticsRepository:
    """Aggregates over bookings and tours for the dashboard"""

    def __init__(self, db: Session):
        self.db = db

    def _in_month(self, query, year: int, month: int):
        start, end = month_range(year, month)
        return query.filter(Booking.created_date >= start, Booking.created_date < end)

    def monthly_revenue(self, year: int, month: int) -> Decimal:
        """Sum of confirmed bookings' totals created in the month"""
        query = self.db.query(func.coalesce(func.sum(Booking.total_amount), 0)).filter(
            Booking.status == CONFIRMED
        )
        return self._in_month(query, year, month).scalar() or Decimal(0)

    def monthly_bookings_count(self, year: int, month: int) -> int:
        query = self.db.query(func.count(Booking.id))
        return self._in_month(query, year, month).scalar() or 0

    def monthly_participants(self, year: int, month: int) -> int:
        """Sum of people on confirmed bookings created in the month"""
        query = self.db.query(func.coalesce(func.sum(Booking.number_of_people), 0)).filter(
            Booking.status == CONFIRMED
        )
        return int(self._in_month(query, year, month).scalar() or 0)

    def active_tours_count(self) -> int:
        return self.db.query(func.count(Tour.id)).filter(
            Tour.is_active.is_(True),
            Tour.is_delete.is_(False),
        ).scalar() or 0

    def total_revenue(self) -> Decimal:
        return self.db.query(func.coalesce(func.sum(Booking.total_amount), 0)).filter(
            Booking.status == CONFIRMED
        ).scalar() or Decimal(0)

    def total_bookings(self) -> int:
        return self.db.query(func.count(Booking.id)).scalar() or 0

    def tours_revenue(self, limit: int = None) -> List[dict]:
        """Revenue, bookings and participants per tour from confirmed bookings, highest revenue first"""
        revenue = func.sum(Booking.total_amount)
        query = self.db.query(
            Booking.tour_id,
            Tour.tour_name,
            revenue,
            func.count(Booking.id),
            func.sum(Booking.number_of_people),
        ).join(Tour, Tour.id == Booking.tour_id).filter(
            Booking.status == CONFIRMED
        ).group_by(Booking.tour_id, Tour.tour_name).order_by(revenue.desc())

        if limit:
            query = query.limit(limit)

        return [
            {
                "tour_id": tour_id,
                "tour_name": tour_name,
                "total_revenue": total or Decimal(0),
                "bookings_count": count,
                "total_participants": int(people or 0),
            }
            for tour_id, tour_name, total, count, people in query.all()
        ]

    def tours_bookings_count(self) -> List[dict]:
        """Bookings per tour split by status, busiest first"""
        def status_count(value):
            return func.sum(case((Booking.status == value, 1), else_=0))

        total = func.count(Booking.id)
        rows = self.db.query(
            Booking.tour_id,
            Tour.tour_name,
            total,
            status_count(CONFIRMED),
            status_count("Pending"),
            status_count("Cancelled"),
        ).join(Tour, Tour.id == Booking.tour_id).group_by(
            Booking.tour_id, Tour.tour_name
        ).order_by(total.desc()).all()

        return [
            {
                "tour_id": tour_id,
                "tour_name": tour_name,
                "bookings_count": count,
                "confirmed_bookings": int(confirmed or 0),
                "pending_bookings": int(pending or 0),
                "cancelled_bookings": int(cancelled or 0),
            }
            for tour_id, tour_name, count, confirmed, pending, cancelled in rows
        ]

    def recent_bookings(self, limit: int) -> List[Booking]:
        return self.db.query(Booking).options(
            joinedload(Booking.user),
            joinedload(Booking.tour),
        ).order_by(Booking.created_date.desc(), Booking.id.desc()).limit(limit).all()
