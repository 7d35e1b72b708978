from fastapi import APIRouter, Depends, HTTPException, status, Query, Response
from sqlalchemy.orm import Session
from typing import List
from tour_booking.config import settings
from tour_booking.database import get_db
from tour_booking.models.payment import PAYMENT_STATUSES
from tour_booking.repositories.booking_repo import BookingRepository
from tour_booking.repositories.payment_repo import PaymentRepository
from tour_booking.schemas.payment import (
    PaymentCreate,
    PaymentUpdate,
    PaymentStatusUpdate,
    PaymentResponse,
    PaymentGroupStat,
    PaymentStatisticsResponse,
)
from tour_booking.utils.helpers import utcnow, to_naive_utc

router = APIRouter(prefix="/api/v1/payments", tags=["Payments"])


def _validate_payment(payment_data: PaymentCreate, db: Session) -> None:
    if payment_data.booking_id <= 0:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="BookingId is required")

    if payment_data.payment_amount <= 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="PaymentAmount must be greater than 0"
        )

    if not BookingRepository(db).exists(payment_data.booking_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Booking not found")

    if payment_data.payment_status is not None and payment_data.payment_status not in PAYMENT_STATUSES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid payment status")


def _get_payment_or_404(repo: PaymentRepository, payment_id: int):
    payment = repo.get_by_id(payment_id)
    if not payment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment not found")
    return payment


@router.get("", response_model=List[PaymentResponse])
def list_payments(db: Session = Depends(get_db)):
    return PaymentRepository(db).get_all()


@router.get("/statistics", response_model=PaymentStatisticsResponse)
def get_payment_statistics(db: Session = Depends(get_db)):
    """Total count and amount, plus a breakdown by payment status"""
    repo = PaymentRepository(db)
    total_payments, total_amount = repo.totals()
    return {
        "total_payments": total_payments,
        "total_amount": total_amount,
        "status_breakdown": repo.breakdown_by_status(),
    }


@router.get("/by-method", response_model=List[PaymentGroupStat])
def get_payments_by_method(db: Session = Depends(get_db)):
    """Count and amount per payment method"""
    return PaymentRepository(db).breakdown_by_method()


@router.get("/recent", response_model=List[PaymentResponse])
def get_recent_payments(
    count: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=100),
    db: Session = Depends(get_db)
):
    """Most recent payments, newest first"""
    return PaymentRepository(db).get_recent(count)


@router.get("/booking/{booking_id}", response_model=List[PaymentResponse])
def get_payments_by_booking(booking_id: int, db: Session = Depends(get_db)):
    return PaymentRepository(db).get_by_booking(booking_id)


@router.get("/{payment_id}", response_model=PaymentResponse)
def get_payment(payment_id: int, db: Session = Depends(get_db)):
    return _get_payment_or_404(PaymentRepository(db), payment_id)


@router.post("", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
def create_payment(payment_data: PaymentCreate, db: Session = Depends(get_db)):
    """Record a payment. Date defaults to now and status to Pending."""
    _validate_payment(payment_data, db)

    fields = payment_data.model_dump()
    fields["payment_date"] = to_naive_utc(payment_data.payment_date) or utcnow()
    fields["payment_status"] = payment_data.payment_status or settings.DEFAULT_PAYMENT_STATUS
    return PaymentRepository(db).create(**fields)


@router.put("/{payment_id}", response_model=PaymentResponse)
def update_payment(payment_id: int, payment_data: PaymentUpdate, db: Session = Depends(get_db)):
    """Replace a payment's fields"""
    repo = PaymentRepository(db)
    payment = _get_payment_or_404(repo, payment_id)
    _validate_payment(payment_data, db)

    fields = payment_data.model_dump()
    fields["payment_date"] = to_naive_utc(payment_data.payment_date) or payment.payment_date
    fields["payment_status"] = payment_data.payment_status or payment.payment_status
    return repo.update(payment, **fields)


@router.patch("/{payment_id}/status", response_model=PaymentResponse)
def update_payment_status(payment_id: int, update: PaymentStatusUpdate, db: Session = Depends(get_db)):
    """Change the payment status (Pending, Completed, Failed, Cancelled, Refunded)"""
    repo = PaymentRepository(db)
    payment = _get_payment_or_404(repo, payment_id)

    if update.status not in PAYMENT_STATUSES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid payment status")

    return repo.update(payment, payment_status=update.status)


@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_payment(payment_id: int, db: Session = Depends(get_db)):
    repo = PaymentRepository(db)
    repo.delete(_get_payment_or_404(repo, payment_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
