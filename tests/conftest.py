import os
import sys
from datetime import datetime, timedelta
from decimal import Decimal
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DB_AUTO_CREATE", "false")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tour_booking.main import app
from tour_booking.database import Base, get_db
from tour_booking.models.tour import Tour, TourOption
from tour_booking.models.user import User
from tour_booking.models.voucher import Voucher, DiscountType, VoucherStatus
from tour_booking.utils.helpers import utcnow
from tour_booking.utils.security import hash_password


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_voucher(db):
    def _make(**overrides):
        now = utcnow()
        fields = {
            "voucher_code": "SUMMER20",
            "voucher_name": "Summer sale",
            "discount_type": DiscountType.PERCENTAGE,
            "discount_value": Decimal("20"),
            "valid_from": now - timedelta(days=1),
            "valid_to": now + timedelta(days=30),
            "used_count": 0,
            "status": VoucherStatus.ACTIVE,
        }
        fields.update(overrides)
        voucher = Voucher(**fields)
        db.add(voucher)
        db.commit()
        db.refresh(voucher)
        return voucher

    return _make


@pytest.fixture
def user(db):
    user = User(
        username="alice",
        password_hash=hash_password("secret"),
        full_name="Alice Nguyen",
        email="alice@example.com",
        phone="0901234567",
        is_active=True,
        is_delete=False,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def tour(db):
    tour = Tour(
        tour_name="Ha Long Bay Cruise",
        destination="Ha Long",
        duration=3,
        price=Decimal("3500000"),
        max_participants=20,
        start_date=datetime(2030, 5, 1),
        end_date=datetime(2030, 5, 3),
        is_active=True,
        is_delete=False,
    )
    db.add(tour)
    db.commit()
    db.refresh(tour)
    return tour


@pytest.fixture
def tour_option(db):
    option = TourOption(
        option_name="Kayaking",
        category="Activity",
        price=Decimal("200000"),
    )
    db.add(option)
    db.commit()
    db.refresh(option)
    return option
