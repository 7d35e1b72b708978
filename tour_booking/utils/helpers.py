from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, Tuple


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (the columns store naive UTC)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC already"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def month_range(year: int, month: int) -> Tuple[datetime, datetime]:
    """Return [start, end) datetimes covering the given calendar month"""
    start = datetime(year, month, 1)
    if month == 12:
        end = datetime(year + 1, 1, 1)
    else:
        end = datetime(year, month + 1, 1)
    return start, end


def format_currency(amount: Decimal, currency: str = "VND") -> str:
    """Format amount with thousands separators, no decimals (e.g. 100,000 VND)"""
    return f"{amount:,.0f} {currency}"
