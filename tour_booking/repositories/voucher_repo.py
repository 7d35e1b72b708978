from sqlalchemy.orm import Session
from sqlalchemy import update, or_
from typing import Optional, List
from datetime import datetime
from tour_booking.models.voucher import Voucher, VoucherStatus


class VoucherRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, voucher_id: int, include_deleted: bool = True) -> Optional[Voucher]:
        query = self.db.query(Voucher).filter(Voucher.id == voucher_id)
        if not include_deleted:
            query = query.filter(Voucher.status != VoucherStatus.DELETED)
        return query.first()

    def get_active_by_code(self, code: str) -> Optional[Voucher]:
        """Get an Active voucher by its code"""
        return self.db.query(Voucher).filter(
            Voucher.voucher_code == code,
            Voucher.status == VoucherStatus.ACTIVE,
        ).first()

    def code_exists(self, code: str, exclude_id: Optional[int] = None) -> bool:
        query = self.db.query(Voucher).filter(Voucher.voucher_code == code)
        if exclude_id is not None:
            query = query.filter(Voucher.id != exclude_id)
        return query.first() is not None

    def list_vouchers(self) -> List[Voucher]:
        """All non-deleted vouchers, newest first"""
        return self.db.query(Voucher).filter(
            Voucher.status != VoucherStatus.DELETED
        ).order_by(Voucher.created_date.desc(), Voucher.id.desc()).all()

    def list_active(self, now: datetime) -> List[Voucher]:
        """Active vouchers that are currently valid and still have usage left"""
        return self.db.query(Voucher).filter(
            Voucher.status == VoucherStatus.ACTIVE,
            Voucher.valid_from <= now,
            Voucher.valid_to >= now,
            or_(Voucher.usage_limit.is_(None), Voucher.used_count < Voucher.usage_limit),
        ).order_by(Voucher.valid_to.asc()).all()

    def create(self, **fields) -> Voucher:
        voucher = Voucher(**fields)
        if voucher.used_count is None:
            voucher.used_count = 0
        if voucher.status is None:
            voucher.status = VoucherStatus.ACTIVE
        self.db.add(voucher)
        self.db.commit()
        self.db.refresh(voucher)
        return voucher

    def update(self, voucher: Voucher, **fields) -> Voucher:
        for key, value in fields.items():
            if hasattr(voucher, key):
                setattr(voucher, key, value)
        self.db.commit()
        self.db.refresh(voucher)
        return voucher

    def soft_delete(self, voucher: Voucher) -> Voucher:
        voucher.status = VoucherStatus.DELETED
        self.db.commit()
        self.db.refresh(voucher)
        return voucher

    def try_consume(self, voucher_id: int) -> bool:
        """
        Increment used_count by one if the voucher is Active and below its
        usage limit. The check and the increment are one UPDATE statement.
        Returns False when no row matched.
        """
        result = self.db.execute(
            update(Voucher)
            .where(
                Voucher.id == voucher_id,
                Voucher.status == VoucherStatus.ACTIVE,
                or_(Voucher.usage_limit.is_(None), Voucher.used_count < Voucher.usage_limit),
            )
            .values(used_count=Voucher.used_count + 1)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount == 1
