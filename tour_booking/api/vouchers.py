from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
import logging
from tour_booking.database import get_db
from tour_booking.models.voucher import VoucherStatus
from tour_booking.repositories.voucher_repo import VoucherRepository
from tour_booking.schemas.voucher import (
    VoucherCreate,
    VoucherUpdate,
    VoucherResponse,
    ApplyVoucherRequest,
    ApplyVoucherResponse,
)
from tour_booking.services.voucher_service import (
    VoucherApplicator,
    VoucherError,
    VoucherValidationError,
    validate_voucher_fields,
)
from tour_booking.utils.helpers import utcnow, to_naive_utc

router = APIRouter(prefix="/api/v1/vouchers", tags=["Vouchers"])
logger = logging.getLogger(__name__)


def _http_error(exc: VoucherError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.message)


def _validated_fields(voucher_data: VoucherCreate) -> dict:
    """Run the voucher rules and return normalised column values"""
    discount_type = validate_voucher_fields(
        voucher_code=voucher_data.voucher_code,
        voucher_name=voucher_data.voucher_name,
        discount_type=voucher_data.discount_type,
        discount_value=voucher_data.discount_value,
        valid_from=voucher_data.valid_from,
        valid_to=voucher_data.valid_to,
        usage_limit=voucher_data.usage_limit,
    )
    return {
        "voucher_code": voucher_data.voucher_code.strip(),
        "voucher_name": voucher_data.voucher_name.strip(),
        "description": voucher_data.description,
        "discount_type": discount_type,
        "discount_value": voucher_data.discount_value,
        "min_order_amount": voucher_data.min_order_amount,
        "max_discount_amount": voucher_data.max_discount_amount,
        "usage_limit": voucher_data.usage_limit,
        "valid_from": to_naive_utc(voucher_data.valid_from),
        "valid_to": to_naive_utc(voucher_data.valid_to),
    }


@router.get("", response_model=List[VoucherResponse])
def list_vouchers(db: Session = Depends(get_db)):
    """List all non-deleted vouchers, newest first"""
    return VoucherRepository(db).list_vouchers()


@router.get("/active", response_model=List[VoucherResponse])
def list_active_vouchers(db: Session = Depends(get_db)):
    """List vouchers that can be applied right now"""
    return VoucherRepository(db).list_active(utcnow())


@router.get("/code/{code}", response_model=VoucherResponse)
def get_voucher_by_code(code: str, db: Session = Depends(get_db)):
    """Get an active, currently valid, not exhausted voucher by code"""
    try:
        return VoucherApplicator(db).get_valid_by_code(code)
    except VoucherError as e:
        raise _http_error(e)


@router.post("/apply", response_model=ApplyVoucherResponse)
def apply_voucher(request: ApplyVoucherRequest, db: Session = Depends(get_db)):
    """Preview the discount for an order without consuming a usage slot"""
    try:
        return VoucherApplicator(db).apply(request.voucher_code, request.order_amount)
    except VoucherError as e:
        raise _http_error(e)


@router.post("/redeem", response_model=ApplyVoucherResponse)
def redeem_voucher(request: ApplyVoucherRequest, db: Session = Depends(get_db)):
    """Apply a voucher and consume one usage slot"""
    try:
        return VoucherApplicator(db).redeem(request.voucher_code, request.order_amount)
    except VoucherError as e:
        raise _http_error(e)


@router.get("/{voucher_id}", response_model=VoucherResponse)
def get_voucher(voucher_id: int, db: Session = Depends(get_db)):
    """Get voucher by ID"""
    voucher = VoucherRepository(db).get_by_id(voucher_id, include_deleted=False)
    if not voucher:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Voucher not found")
    return voucher


@router.post("", response_model=VoucherResponse, status_code=status.HTTP_201_CREATED)
def create_voucher(voucher_data: VoucherCreate, db: Session = Depends(get_db)):
    """Create a new voucher"""
    repo = VoucherRepository(db)
    try:
        fields = _validated_fields(voucher_data)
        if voucher_data.status == VoucherStatus.DELETED:
            raise VoucherValidationError("A voucher cannot be created as Deleted")
        if repo.code_exists(fields["voucher_code"]):
            raise VoucherValidationError("Voucher code already exists")
    except VoucherError as e:
        raise _http_error(e)

    voucher = repo.create(
        **fields,
        used_count=0,
        status=voucher_data.status or VoucherStatus.ACTIVE,
        created_date=utcnow(),
    )
    logger.info(f"Voucher {voucher.voucher_code} created (id={voucher.id})")
    return voucher


@router.put("/{voucher_id}", response_model=VoucherResponse)
def update_voucher(voucher_id: int, voucher_data: VoucherUpdate, db: Session = Depends(get_db)):
    """Replace a voucher's fields. Deleted vouchers cannot be updated."""
    repo = VoucherRepository(db)
    voucher = repo.get_by_id(voucher_id, include_deleted=False)
    if not voucher:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Voucher not found")

    try:
        fields = _validated_fields(voucher_data)
        if voucher_data.status == VoucherStatus.DELETED:
            raise VoucherValidationError("Use DELETE to remove a voucher")
        if repo.code_exists(fields["voucher_code"], exclude_id=voucher_id):
            raise VoucherValidationError("Voucher code already exists")
    except VoucherError as e:
        raise _http_error(e)

    if voucher_data.used_count is not None:
        fields["used_count"] = voucher_data.used_count
    if voucher_data.status is not None:
        fields["status"] = voucher_data.status

    return repo.update(voucher, **fields)


@router.delete("/{voucher_id}")
def delete_voucher(voucher_id: int, db: Session = Depends(get_db)):
    """Soft delete a voucher"""
    repo = VoucherRepository(db)
    voucher = repo.get_by_id(voucher_id, include_deleted=False)
    if not voucher:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Voucher not found")

    repo.soft_delete(voucher)
    logger.info(f"Voucher {voucher_id} soft-deleted")
    return {"message": "Voucher deleted successfully"}


@router.post("/{voucher_id}/use", response_model=VoucherResponse)
def use_voucher(voucher_id: int, db: Session = Depends(get_db)):
    """Consume one usage slot. Fails if the voucher is not active or is exhausted."""
    try:
        return VoucherApplicator(db).use(voucher_id)
    except VoucherError as e:
        raise _http_error(e)
