from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import Optional, List
from decimal import Decimal
from tour_booking.models.payment import Payment


class PaymentRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, payment_id: int) -> Optional[Payment]:
        return self.db.query(Payment).filter(Payment.id == payment_id).first()

    def get_all(self) -> List[Payment]:
        return self.db.query(Payment).order_by(Payment.id).all()

    def get_by_booking(self, booking_id: int) -> List[Payment]:
        return self.db.query(Payment).filter(Payment.booking_id == booking_id).order_by(Payment.id).all()

    def get_recent(self, count: int = 10) -> List[Payment]:
        """Newest payments first"""
        return self.db.query(Payment).order_by(
            Payment.payment_date.desc(), Payment.id.desc()
        ).limit(count).all()

    def create(self, **fields) -> Payment:
        payment = Payment(**fields)
        self.db.add(payment)
        self.db.commit()
        self.db.refresh(payment)
        return payment

    def update(self, payment: Payment, **fields) -> Payment:
        for key, value in fields.items():
            if hasattr(payment, key):
                setattr(payment, key, value)
        self.db.commit()
        self.db.refresh(payment)
        return payment

    def delete(self, payment: Payment) -> None:
        self.db.delete(payment)
        self.db.commit()

    def totals(self) -> tuple[int, Decimal]:
        count, total = self.db.query(
            func.count(Payment.id),
            func.coalesce(func.sum(Payment.payment_amount), 0),
        ).one()
        return count or 0, total or Decimal(0)

    def _group_by(self, column) -> List[dict]:
        rows = self.db.query(
            column,
            func.count(Payment.id),
            func.coalesce(func.sum(Payment.payment_amount), 0),
        ).group_by(column).order_by(column).all()
        return [
            {"key": key, "count": count, "total_amount": total or Decimal(0)}
            for key, count, total in rows
        ]

    def breakdown_by_status(self) -> List[dict]:
        return self._group_by(Payment.payment_status)

    def breakdown_by_method(self) -> List[dict]:
        return self._group_by(Payment.payment_method)
