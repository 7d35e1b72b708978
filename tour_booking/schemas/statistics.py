from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from decimal import Decimal


class TourRevenue(BaseModel):
    tour_id: int
    tour_name: Optional[str] = None
    total_revenue: Decimal
    bookings_count: int
    total_participants: int


class TourBookingsCount(BaseModel):
    tour_id: int
    tour_name: Optional[str] = None
    bookings_count: int
    confirmed_bookings: int
    pending_bookings: int
    cancelled_bookings: int


class RecentBooking(BaseModel):
    id: int
    user_id: int
    user_name: Optional[str] = None
    tour_id: int
    tour_name: Optional[str] = None
    number_of_people: int
    total_amount: Decimal
    status: Optional[str] = None
    payment_status: Optional[str] = None
    created_date: Optional[datetime] = None

    class Config:
        from_attributes = True


class OverviewStatistics(BaseModel):
    monthly_revenue: Decimal
    monthly_bookings_count: int
    monthly_participants: int
    active_tours_count: int
    total_revenue: Decimal
    total_bookings: int
    month: int
    year: int
