from fastapi import APIRouter, Depends, HTTPException, status, Query, Response
from sqlalchemy.orm import Session
from typing import Optional, List
from tour_booking.config import settings
from tour_booking.database import get_db
from tour_booking.repositories.booking_repo import BookingRepository
from tour_booking.repositories.tour_repo import TourRepository
from tour_booking.repositories.user_repo import UserRepository
from tour_booking.repositories.voucher_repo import VoucherRepository
from tour_booking.schemas.booking import (
    BookingCreate,
    BookingUpdate,
    BookingResponse,
    BookingListResponse,
    BookingOptionResponse,
    BookingStatusUpdate,
    BookingPaymentStatusUpdate,
    BookingStatisticsResponse,
)
from tour_booking.schemas.payment import PaymentResponse

router = APIRouter(prefix="/api/v1/bookings", tags=["Bookings"])

# Bookings in these states are kept for accounting
UNDELETABLE_STATUS = "Completed"
UNDELETABLE_PAYMENT_STATUS = "Paid"


def _get_booking_or_404(repo: BookingRepository, booking_id: int):
    booking = repo.get_by_id(booking_id)
    if not booking:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Booking with ID {booking_id} not found."
        )
    return booking


@router.get("", response_model=BookingListResponse)
def list_bookings(
    user_id: Optional[int] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=100),
    db: Session = Depends(get_db)
):
    """List bookings, optionally filtered by user and status"""
    bookings, total = BookingRepository(db).get_all(
        skip=(page - 1) * page_size,
        limit=page_size,
        user_id=user_id,
        status=status_filter,
    )
    return {
        "total": total,
        "page": page,
        "page_size": page_size,
        "bookings": bookings,
    }


@router.get("/statistics", response_model=BookingStatisticsResponse)
def get_booking_statistics(db: Session = Depends(get_db)):
    """Booking counts by status and total revenue"""
    repo = BookingRepository(db)
    return {
        "total_bookings": repo.count_by_status(),
        "pending_bookings": repo.count_by_status("Pending"),
        "confirmed_bookings": repo.count_by_status("Confirmed"),
        "completed_bookings": repo.count_by_status("Completed"),
        "cancelled_bookings": repo.count_by_status("Cancelled"),
        "total_revenue": repo.total_revenue(),
    }


@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(booking_id: int, db: Session = Depends(get_db)):
    """Get booking by ID"""
    return _get_booking_or_404(BookingRepository(db), booking_id)


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(booking_data: BookingCreate, db: Session = Depends(get_db)):
    """Create a booking. Tour, user and voucher (if given) must exist."""
    if not TourRepository(db).exists(booking_data.tour_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid Tour ID.")

    if not UserRepository(db).exists(booking_data.user_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid User ID.")

    if booking_data.voucher_id is not None and not VoucherRepository(db).get_by_id(booking_data.voucher_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid Voucher ID.")

    options = [o.model_dump() for o in booking_data.booking_options or []]
    tour_repo = TourRepository(db)
    for option in options:
        if not tour_repo.option_exists(option["option_id"]):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid Option ID.")

    return BookingRepository(db).create(
        user_id=booking_data.user_id,
        tour_id=booking_data.tour_id,
        number_of_people=booking_data.number_of_people,
        total_amount=booking_data.total_amount,
        status=booking_data.status,
        notes=booking_data.notes,
        voucher_id=booking_data.voucher_id,
        discount_amount=booking_data.discount_amount,
        booking_options=options,
    )


@router.put("/{booking_id}", response_model=BookingResponse)
def update_booking(booking_id: int, booking_data: BookingUpdate, db: Session = Depends(get_db)):
    """Update booking (only supplied fields change)"""
    repo = BookingRepository(db)
    booking = _get_booking_or_404(repo, booking_id)

    if booking_data.voucher_id is not None and not VoucherRepository(db).get_by_id(booking_data.voucher_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid Voucher ID.")

    return repo.update(booking, **booking_data.model_dump())


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_booking(booking_id: int, db: Session = Depends(get_db)):
    """Delete a booking unless it is completed or paid"""
    repo = BookingRepository(db)
    booking = _get_booking_or_404(repo, booking_id)

    if booking.status == UNDELETABLE_STATUS or booking.payment_status == UNDELETABLE_PAYMENT_STATUS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete completed or paid bookings."
        )

    repo.delete(booking)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{booking_id}/status", response_model=BookingResponse)
def update_booking_status(booking_id: int, update: BookingStatusUpdate, db: Session = Depends(get_db)):
    repo = BookingRepository(db)
    booking = _get_booking_or_404(repo, booking_id)
    return repo.update(booking, status=update.status)


@router.put("/{booking_id}/payment-status", response_model=BookingResponse)
def update_booking_payment_status(
    booking_id: int,
    update: BookingPaymentStatusUpdate,
    db: Session = Depends(get_db)
):
    repo = BookingRepository(db)
    booking = _get_booking_or_404(repo, booking_id)
    return repo.update(booking, payment_status=update.payment_status)


@router.get("/{booking_id}/options", response_model=List[BookingOptionResponse])
def get_booking_options(booking_id: int, db: Session = Depends(get_db)):
    """List the options attached to a booking"""
    repo = BookingRepository(db)
    if not repo.exists(booking_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Booking with ID {booking_id} not found."
        )
    return repo.get_options(booking_id)


@router.get("/{booking_id}/payments", response_model=List[PaymentResponse])
def get_booking_payments(booking_id: int, db: Session = Depends(get_db)):
    """List payments made against a booking"""
    repo = BookingRepository(db)
    if not repo.exists(booking_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Booking with ID {booking_id} not found."
        )
    return repo.get_payments(booking_id)
