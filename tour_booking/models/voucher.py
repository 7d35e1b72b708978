from sqlalchemy import Column, Integer, String, DateTime, Numeric, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from tour_booking.database import Base
import enum


class DiscountType(str, enum.Enum):
    """How a voucher's discount value is interpreted"""
    PERCENTAGE = "percentage"  # discount_value is a percent of the order
    FIXED = "fixed"  # discount_value is an absolute amount


class VoucherStatus(str, enum.Enum):
    """Voucher lifecycle. DELETED is terminal."""
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    DELETED = "Deleted"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Voucher(Base):
    __tablename__ = "voucher"

    id = Column(Integer, primary_key=True, index=True)
    voucher_code = Column(String(50), unique=True, nullable=False, index=True)
    voucher_name = Column(String(100), nullable=False)
    description = Column(String(300))

    # Discount rule
    discount_type = Column(
        Enum(DiscountType, native_enum=False, length=20, values_callable=_enum_values),
        nullable=False,
    )
    discount_value = Column(Numeric(10, 2), nullable=False)
    min_order_amount = Column(Numeric(10, 2))
    max_discount_amount = Column(Numeric(10, 2))

    # Usage
    usage_limit = Column(Integer)  # NULL = unlimited
    used_count = Column(Integer, nullable=False, default=0)

    # Validity window (inclusive on both ends)
    valid_from = Column(DateTime, nullable=False)
    valid_to = Column(DateTime, nullable=False)

    status = Column(
        Enum(VoucherStatus, native_enum=False, length=20, values_callable=_enum_values),
        nullable=False,
        default=VoucherStatus.ACTIVE,
        index=True,
    )
    created_date = Column(DateTime, server_default=func.now())

    bookings = relationship("Booking", back_populates="voucher")
