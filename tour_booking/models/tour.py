from sqlalchemy import Column, Integer, String, Boolean, DateTime, Numeric, Text, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from tour_booking.database import Base


class Tour(Base):
    __tablename__ = "tour"

    id = Column(Integer, primary_key=True, index=True)
    tour_name = Column(String(150), nullable=False)
    destination = Column(String(100), nullable=False)
    description = Column(Text)

    duration = Column(Integer, nullable=False)  # days
    price = Column(Numeric(10, 2), nullable=False)
    max_participants = Column(Integer, nullable=False)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)

    status = Column(String(20))
    transport = Column(String(100))
    thumbnail = Column(String(255))
    is_active = Column(Boolean, nullable=False, default=True)
    is_delete = Column(Boolean, nullable=False, default=False)
    created_date = Column(DateTime, server_default=func.now())

    # Relationships
    bookings = relationship("Booking", back_populates="tour")
    conditions = relationship("TourCondition", back_populates="tour", cascade="all, delete-orphan")
    images = relationship("TourImage", back_populates="tour", cascade="all, delete-orphan")
    option_links = relationship("TourOptionAvailable", back_populates="tour", cascade="all, delete-orphan")


class TourOption(Base):
    """Add-on that can be attached to a booking (meal, insurance, room upgrade...)"""
    __tablename__ = "tour_option"

    id = Column(Integer, primary_key=True, index=True)
    option_name = Column(String(100), nullable=False)
    description = Column(String(300))
    category = Column(String(50), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    price_type = Column(String(20), default="PerPerson")
    status = Column(String(20), default="Active")
    created_date = Column(DateTime, server_default=func.now())

    booking_options = relationship("BookingOption", back_populates="option")
    tour_links = relationship("TourOptionAvailable", back_populates="option")


class TourOptionAvailable(Base):
    __tablename__ = "tour_option_available"

    tour_id = Column(Integer, ForeignKey("tour.id"), primary_key=True)
    option_id = Column(Integer, ForeignKey("tour_option.id"), primary_key=True)
    is_default = Column(Boolean, default=False)

    tour = relationship("Tour", back_populates="option_links")
    option = relationship("TourOption", back_populates="tour_links")


class TourCondition(Base):
    __tablename__ = "tour_condition"

    id = Column(Integer, primary_key=True, index=True)
    tour_id = Column(Integer, ForeignKey("tour.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    created_date = Column(DateTime, server_default=func.now())

    tour = relationship("Tour", back_populates="conditions")


class TourImage(Base):
    __tablename__ = "tour_image"

    id = Column(Integer, primary_key=True, index=True)
    tour_id = Column(Integer, ForeignKey("tour.id"), nullable=False, index=True)
    image_url = Column(String(255), nullable=False)
    caption = Column(String(255))
    created_date = Column(DateTime, server_default=func.now())

    tour = relationship("Tour", back_populates="images")
