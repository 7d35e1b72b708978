from sqlalchemy import Column, Integer, String, DateTime, Numeric, Text, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from tour_booking.database import Base


class Booking(Base):
    __tablename__ = "booking"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user_account.id"), nullable=False, index=True)
    tour_id = Column(Integer, ForeignKey("tour.id"), nullable=False, index=True)

    booking_date = Column(DateTime, server_default=func.now())
    number_of_people = Column(Integer, nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)

    # Status
    status = Column(String(20), default="Pending", index=True)  # Pending, Confirmed, Completed, Cancelled
    payment_status = Column(String(20), default="Pending")  # Pending, Paid, Refunded
    notes = Column(Text)

    # Voucher snapshot: the discount is frozen at booking time
    voucher_id = Column(Integer, ForeignKey("voucher.id"), nullable=True)
    discount_amount = Column(Numeric(10, 2), default=0)

    created_date = Column(DateTime, server_default=func.now(), index=True)

    # Relationships
    user = relationship("User", back_populates="bookings")
    tour = relationship("Tour", back_populates="bookings")
    voucher = relationship("Voucher", back_populates="bookings")
    booking_options = relationship("BookingOption", back_populates="booking", cascade="all, delete-orphan")
    payments = relationship("Payment", back_populates="booking", cascade="all, delete-orphan")

    @property
    def user_name(self):
        return self.user.full_name if self.user else None

    @property
    def tour_name(self):
        return self.tour.tour_name if self.tour else None

    @property
    def voucher_code(self):
        return self.voucher.voucher_code if self.voucher else None


class BookingOption(Base):
    __tablename__ = "booking_option"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("booking.id"), nullable=False, index=True)
    option_id = Column(Integer, ForeignKey("tour_option.id"), nullable=False)
    quantity = Column(Integer)
    unit_price = Column(Numeric(10, 2), nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)

    booking = relationship("Booking", back_populates="booking_options")
    option = relationship("TourOption", back_populates="booking_options")

    @property
    def option_name(self):
        return self.option.option_name if self.option else None
