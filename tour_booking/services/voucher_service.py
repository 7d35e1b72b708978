"""
Voucher rules: eligibility checks, discount arithmetic and usage consumption.

Previewing a discount (apply) never consumes a usage slot. Consuming a slot
(use / redeem) is a single conditional UPDATE so concurrent callers cannot
push used_count past usage_limit.
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional
from sqlalchemy.orm import Session
from tour_booking.config import settings
from tour_booking.models.voucher import Voucher, DiscountType, VoucherStatus
from tour_booking.repositories.voucher_repo import VoucherRepository
from tour_booking.utils.helpers import utcnow, to_naive_utc, format_currency

logger = logging.getLogger(__name__)


class VoucherError(Exception):
    """Base class for voucher errors surfaced to the caller"""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class VoucherNotFound(VoucherError):
    status_code = 404


class VoucherExpired(VoucherError):
    pass


class VoucherUsageExhausted(VoucherError):
    pass


class BelowMinimumOrder(VoucherError):
    pass


class VoucherValidationError(VoucherError):
    pass


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def check_validity_window(voucher: Voucher, now: datetime) -> None:
    if now < voucher.valid_from or now > voucher.valid_to:
        raise VoucherExpired("Voucher has expired or is not yet valid")


def check_usage_available(voucher: Voucher) -> None:
    if voucher.usage_limit is not None and (voucher.used_count or 0) >= voucher.usage_limit:
        raise VoucherUsageExhausted("Voucher usage limit has been reached")


def check_minimum_order(voucher: Voucher, order_amount: Decimal) -> None:
    if voucher.min_order_amount is not None and order_amount < voucher.min_order_amount:
        raise BelowMinimumOrder(
            f"Order amount must be at least {format_currency(voucher.min_order_amount, settings.CURRENCY)}"
        )


def compute_discount(
    discount_type,
    discount_value,
    order_amount,
    max_discount_amount=None,
) -> Decimal:
    """
    Discount for an order.

    percentage: order * value / 100, capped at max_discount_amount when set.
    fixed: value, capped at the order amount.
    """
    order_amount = _to_decimal(order_amount)
    discount_value = _to_decimal(discount_value)

    if DiscountType(discount_type) == DiscountType.PERCENTAGE:
        discount = order_amount * discount_value / Decimal(100)
        if max_discount_amount is not None and discount > _to_decimal(max_discount_amount):
            discount = _to_decimal(max_discount_amount)
    else:
        discount = discount_value
        if discount > order_amount:
            discount = order_amount

    return discount


def validate_voucher_fields(
    voucher_code: Optional[str],
    voucher_name: Optional[str],
    discount_type: Optional[str],
    discount_value,
    valid_from: datetime,
    valid_to: datetime,
    usage_limit: Optional[int] = None,
) -> DiscountType:
    """Check voucher fields on create/update. Returns the parsed discount type."""
    if not voucher_code or not voucher_code.strip():
        raise VoucherValidationError("Voucher code must not be empty")

    if not voucher_name or not voucher_name.strip():
        raise VoucherValidationError("Voucher name must not be empty")

    if not discount_type or not discount_type.strip():
        raise VoucherValidationError("Discount type must not be empty")

    try:
        parsed_type = DiscountType(discount_type.strip().lower())
    except ValueError:
        raise VoucherValidationError("Discount type must be 'percentage' or 'fixed'")

    if discount_value is None or _to_decimal(discount_value) <= 0:
        raise VoucherValidationError("Discount value must be greater than 0")

    if parsed_type == DiscountType.PERCENTAGE and _to_decimal(discount_value) > 100:
        raise VoucherValidationError("Percentage discount cannot exceed 100")

    if to_naive_utc(valid_from) >= to_naive_utc(valid_to):
        raise VoucherValidationError("Valid-from date must be earlier than valid-to date")

    if usage_limit is not None and usage_limit <= 0:
        raise VoucherValidationError("Usage limit must be greater than 0")

    return parsed_type


class VoucherApplicator:
    """Looks vouchers up by code, previews discounts and consumes usage slots."""

    def __init__(self, db: Session, clock: Callable[[], datetime] = utcnow):
        self.repo = VoucherRepository(db)
        self.clock = clock

    def get_valid_by_code(self, code: str) -> Voucher:
        """Active voucher that is inside its validity window and not exhausted"""
        voucher = self.repo.get_active_by_code(code)
        if not voucher:
            raise VoucherNotFound("Voucher code does not exist or is no longer active")

        check_validity_window(voucher, self.clock())
        check_usage_available(voucher)
        return voucher

    def apply(self, code: str, order_amount) -> dict:
        """Preview the discount for an order. Does not consume a usage slot."""
        order_amount = _to_decimal(order_amount)
        voucher = self.get_valid_by_code(code)
        check_minimum_order(voucher, order_amount)

        discount = compute_discount(
            voucher.discount_type,
            voucher.discount_value,
            order_amount,
            voucher.max_discount_amount,
        )

        return {
            "voucher_id": voucher.id,
            "voucher_code": voucher.voucher_code,
            "voucher_name": voucher.voucher_name,
            "original_amount": order_amount,
            "discount_amount": discount,
            "final_amount": order_amount - discount,
            "message": "Voucher applied successfully",
        }

    def use(self, voucher_id: int) -> Voucher:
        """Consume one usage slot of an active voucher"""
        if self.repo.try_consume(voucher_id):
            voucher = self.repo.get_by_id(voucher_id)
            logger.info(f"Voucher {voucher_id} used ({voucher.used_count}/{voucher.usage_limit or 'unlimited'})")
            return voucher

        voucher = self.repo.get_by_id(voucher_id)
        if not voucher or voucher.status != VoucherStatus.ACTIVE:
            raise VoucherNotFound("Voucher not found")
        raise VoucherUsageExhausted("Voucher usage limit has been reached")

    def redeem(self, code: str, order_amount) -> dict:
        """Validate, compute the discount and consume a usage slot in one call"""
        result = self.apply(code, order_amount)
        if not self.repo.try_consume(result["voucher_id"]):
            raise VoucherUsageExhausted("Voucher usage limit has been reached")
        logger.info(f"Voucher {result['voucher_code']} redeemed for order {result['original_amount']}")
        result["message"] = "Voucher redeemed successfully"
        return result
