from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal


class PaymentCreate(BaseModel):
    # Range checks on booking_id/payment_amount are done in the router so the
    # caller gets the same 400 message on create and update.
    booking_id: int
    payment_amount: Decimal
    payment_date: Optional[datetime] = None
    payment_method: Optional[str] = Field(None, max_length=50)
    payment_status: Optional[str] = Field(None, max_length=20)
    transaction_id: Optional[str] = Field(None, max_length=100)


class PaymentUpdate(PaymentCreate):
    pass


class PaymentStatusUpdate(BaseModel):
    status: str


class PaymentResponse(BaseModel):
    id: int
    booking_id: int
    payment_amount: Decimal
    payment_date: Optional[datetime] = None
    payment_method: Optional[str] = None
    payment_status: Optional[str] = None
    transaction_id: Optional[str] = None

    class Config:
        from_attributes = True


class PaymentGroupStat(BaseModel):
    key: Optional[str] = None
    count: int
    total_amount: Decimal


class PaymentStatisticsResponse(BaseModel):
    total_payments: int
    total_amount: Decimal
    status_breakdown: List[PaymentGroupStat]
