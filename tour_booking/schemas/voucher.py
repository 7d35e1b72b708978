from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal
from tour_booking.models.voucher import DiscountType, VoucherStatus


class VoucherCreate(BaseModel):
    # Business rules (non-empty, known type, ranges) are checked by the voucher
    # service so they surface as voucher validation errors.
    voucher_code: str
    voucher_name: str
    description: Optional[str] = Field(None, max_length=300)
    discount_type: str = Field(..., description="percentage or fixed")
    discount_value: Decimal
    min_order_amount: Optional[Decimal] = None
    max_discount_amount: Optional[Decimal] = None
    usage_limit: Optional[int] = None
    valid_from: datetime
    valid_to: datetime
    status: Optional[VoucherStatus] = None


class VoucherUpdate(VoucherCreate):
    used_count: Optional[int] = Field(None, ge=0)


class VoucherResponse(BaseModel):
    id: int
    voucher_code: str
    voucher_name: str
    description: Optional[str] = None
    discount_type: DiscountType
    discount_value: Decimal
    min_order_amount: Optional[Decimal] = None
    max_discount_amount: Optional[Decimal] = None
    usage_limit: Optional[int] = None
    used_count: int
    valid_from: datetime
    valid_to: datetime
    status: VoucherStatus
    created_date: Optional[datetime] = None

    class Config:
        from_attributes = True
        use_enum_values = True


class ApplyVoucherRequest(BaseModel):
    voucher_code: str = Field(..., min_length=1)
    order_amount: Decimal = Field(..., gt=0, description="Order amount before discount")


class ApplyVoucherResponse(BaseModel):
    voucher_id: int
    voucher_code: str
    voucher_name: str
    original_amount: Decimal
    discount_amount: Decimal
    final_amount: Decimal
    message: str
