from sqlalchemy.orm import Session, joinedload, selectinload
from sqlalchemy import func
from typing import Optional, List, Tuple
from decimal import Decimal
from tour_booking.config import settings
from tour_booking.models.booking import Booking, BookingOption
from tour_booking.models.payment import Payment
from tour_booking.utils.helpers import utcnow


class BookingRepository:
    def __init__(self, db: Session):
        self.db = db

    def _with_details(self):
        return self.db.query(Booking).options(
            joinedload(Booking.user),
            joinedload(Booking.tour),
            joinedload(Booking.voucher),
            selectinload(Booking.booking_options).joinedload(BookingOption.option),
            selectinload(Booking.payments),
        )

    def get_by_id(self, booking_id: int) -> Optional[Booking]:
        """Get booking with user, tour, voucher, options and payments"""
        return self._with_details().filter(Booking.id == booking_id).first()

    def exists(self, booking_id: int) -> bool:
        return self.db.query(Booking.id).filter(Booking.id == booking_id).first() is not None

    def get_all(
        self,
        skip: int = 0,
        limit: int = 10,
        user_id: Optional[int] = None,
        status: Optional[str] = None,
    ) -> Tuple[List[Booking], int]:
        query = self.db.query(Booking)

        if user_id is not None:
            query = query.filter(Booking.user_id == user_id)

        if status:
            query = query.filter(Booking.status == status)

        total = query.count()
        bookings = query.options(
            joinedload(Booking.user),
            joinedload(Booking.tour),
            joinedload(Booking.voucher),
            selectinload(Booking.booking_options).joinedload(BookingOption.option),
            selectinload(Booking.payments),
        ).order_by(Booking.id.desc()).offset(skip).limit(limit).all()
        return bookings, total

    def create(
        self,
        user_id: int,
        tour_id: int,
        number_of_people: int,
        total_amount: Decimal,
        status: Optional[str] = None,
        notes: Optional[str] = None,
        voucher_id: Optional[int] = None,
        discount_amount: Optional[Decimal] = None,
        booking_options: Optional[List[dict]] = None,
    ) -> Booking:
        """Create a booking together with its options"""
        booking = Booking(
            user_id=user_id,
            tour_id=tour_id,
            number_of_people=number_of_people,
            total_amount=total_amount,
            status=status or settings.DEFAULT_BOOKING_STATUS,
            payment_status=settings.DEFAULT_PAYMENT_STATUS,
            notes=notes,
            booking_date=utcnow(),
            created_date=utcnow(),
            voucher_id=voucher_id,
            discount_amount=discount_amount if discount_amount is not None else Decimal(0),
        )

        for option_data in booking_options or []:
            booking.booking_options.append(BookingOption(
                option_id=option_data["option_id"],
                quantity=option_data.get("quantity"),
                unit_price=option_data["unit_price"],
                total_price=option_data["total_price"],
            ))

        self.db.add(booking)
        self.db.commit()
        return self.get_by_id(booking.id)

    def update(self, booking: Booking, **kwargs) -> Booking:
        """Update booking; None values leave the field unchanged"""
        for key, value in kwargs.items():
            if hasattr(booking, key) and value is not None:
                setattr(booking, key, value)
        self.db.commit()
        return self.get_by_id(booking.id)

    def delete(self, booking: Booking) -> None:
        self.db.delete(booking)
        self.db.commit()

    def get_options(self, booking_id: int) -> List[BookingOption]:
        return self.db.query(BookingOption).options(joinedload(BookingOption.option)).filter(
            BookingOption.booking_id == booking_id
        ).order_by(BookingOption.id).all()

    def get_payments(self, booking_id: int) -> List[Payment]:
        return self.db.query(Payment).filter(Payment.booking_id == booking_id).order_by(Payment.id).all()

    def count_by_status(self, status: Optional[str] = None) -> int:
        query = self.db.query(func.count(Booking.id))
        if status:
            query = query.filter(Booking.status == status)
        return query.scalar() or 0

    def total_revenue(self) -> Decimal:
        return self.db.query(func.coalesce(func.sum(Booking.total_amount), 0)).scalar() or Decimal(0)
