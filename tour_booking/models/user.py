"""
User, role and role-assignment tables.

Users are never physically removed: deleting a user sets is_delete and
clears is_active.
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Date, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from tour_booking.database import Base


class Role(Base):
    __tablename__ = "role"

    id = Column(Integer, primary_key=True, index=True)
    role_name = Column(String(50), unique=True, nullable=False)
    display_name = Column(String(100), nullable=False)
    description = Column(String(300))
    is_active = Column(Boolean, default=True)
    created_date = Column(DateTime, server_default=func.now())
    modify_date = Column(DateTime)

    users = relationship("User", back_populates="default_role")
    user_roles = relationship("UserRole", back_populates="role")


class User(Base):
    __tablename__ = "user_account"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(100))
    email = Column(String(100), index=True)
    phone = Column(String(15))
    address = Column(String(200))
    date_of_birth = Column(Date)

    created_date = Column(DateTime, server_default=func.now())
    modify_date = Column(DateTime)
    is_active = Column(Boolean, default=True)
    is_delete = Column(Boolean, default=False)

    default_role_id = Column(Integer, ForeignKey("role.id"))

    # Relationships
    default_role = relationship("Role", back_populates="users")
    bookings = relationship("Booking", back_populates="user")
    user_roles = relationship("UserRole", back_populates="user", foreign_keys="UserRole.user_id")

    @property
    def default_role_name(self):
        return self.default_role.role_name if self.default_role else None


class UserRole(Base):
    __tablename__ = "user_role"
    __table_args__ = (UniqueConstraint("user_id", "role_id", name="uq_user_role"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user_account.id"), nullable=False, index=True)
    role_id = Column(Integer, ForeignKey("role.id"), nullable=False)
    assigned_date = Column(DateTime, server_default=func.now())
    assigned_by = Column(Integer, ForeignKey("user_account.id"))
    is_active = Column(Boolean, default=True)

    user = relationship("User", back_populates="user_roles", foreign_keys=[user_id])
    role = relationship("Role", back_populates="user_roles")
    assigner = relationship("User", foreign_keys=[assigned_by])

    @property
    def role_name(self):
        return self.role.role_name if self.role else None
