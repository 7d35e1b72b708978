from sqlalchemy import Column, Integer, String, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from tour_booking.database import Base


PAYMENT_STATUSES = ("Pending", "Completed", "Failed", "Cancelled", "Refunded")


class Payment(Base):
    __tablename__ = "payment"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("booking.id"), nullable=False, index=True)
    payment_amount = Column(Numeric(10, 2), nullable=False)
    payment_date = Column(DateTime)
    payment_method = Column(String(50))
    payment_status = Column(String(20))  # one of PAYMENT_STATUSES
    transaction_id = Column(String(100))

    booking = relationship("Booking", back_populates="payments")
