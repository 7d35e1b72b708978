from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from tour_booking.schemas.payment import PaymentResponse


class BookingOptionCreate(BaseModel):
    option_id: int
    quantity: Optional[int] = Field(None, ge=0)
    unit_price: Decimal = Field(..., ge=0)
    total_price: Decimal = Field(..., ge=0)


class BookingOptionResponse(BaseModel):
    id: int
    booking_id: int
    option_id: int
    option_name: Optional[str] = None
    quantity: Optional[int] = None
    unit_price: Decimal
    total_price: Decimal

    class Config:
        from_attributes = True


class BookingCreate(BaseModel):
    user_id: int
    tour_id: int
    number_of_people: int = Field(..., gt=0)
    total_amount: Decimal = Field(..., ge=0)
    status: Optional[str] = Field(None, max_length=20)
    notes: Optional[str] = None
    voucher_id: Optional[int] = None
    discount_amount: Optional[Decimal] = Field(None, ge=0)
    booking_options: Optional[List[BookingOptionCreate]] = None


class BookingUpdate(BaseModel):
    number_of_people: Optional[int] = Field(None, gt=0)
    total_amount: Optional[Decimal] = Field(None, ge=0)
    status: Optional[str] = Field(None, max_length=20)
    payment_status: Optional[str] = Field(None, max_length=20)
    notes: Optional[str] = None
    voucher_id: Optional[int] = None
    discount_amount: Optional[Decimal] = Field(None, ge=0)


class BookingStatusUpdate(BaseModel):
    status: str = Field(..., min_length=1, max_length=20)


class BookingPaymentStatusUpdate(BaseModel):
    payment_status: str = Field(..., min_length=1, max_length=20)


class BookingResponse(BaseModel):
    id: int
    user_id: int
    user_name: Optional[str] = None
    tour_id: int
    tour_name: Optional[str] = None
    booking_date: Optional[datetime] = None
    number_of_people: int
    total_amount: Decimal
    status: Optional[str] = None
    payment_status: Optional[str] = None
    notes: Optional[str] = None
    voucher_id: Optional[int] = None
    voucher_code: Optional[str] = None
    discount_amount: Optional[Decimal] = None
    created_date: Optional[datetime] = None
    booking_options: List[BookingOptionResponse] = []
    payments: List[PaymentResponse] = []

    class Config:
        from_attributes = True


class BookingListResponse(BaseModel):
    total: int
    page: int
    page_size: int
    bookings: List[BookingResponse]


class BookingStatisticsResponse(BaseModel):
    total_bookings: int
    pending_bookings: int
    confirmed_bookings: int
    completed_bookings: int
    cancelled_bookings: int
    total_revenue: Decimal
