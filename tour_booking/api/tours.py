from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import Optional, List
from tour_booking.database import get_db
from tour_booking.repositories.tour_repo import TourRepository
from tour_booking.schemas.tour import (
    TourCreate,
    TourUpdate,
    TourResponse,
    TourDetailResponse,
    TourOptionCreate,
    TourOptionResponse,
    TourOptionAttach,
    TourOptionAvailableResponse,
)
from tour_booking.utils.helpers import to_naive_utc

router = APIRouter(prefix="/api/v1/tours", tags=["Tours"])


@router.get("", response_model=List[TourResponse])
def list_tours(
    active_only: Optional[bool] = Query(None, description="Only tours marked active"),
    db: Session = Depends(get_db)
):
    """List all tours that have not been deleted"""
    return TourRepository(db).get_all(active_only=active_only)


@router.get("/options", response_model=List[TourOptionResponse])
def list_tour_options(db: Session = Depends(get_db)):
    """List the catalogue of bookable add-on options"""
    return TourRepository(db).list_options()


@router.post("/options", response_model=TourOptionResponse, status_code=status.HTTP_201_CREATED)
def create_tour_option(option_data: TourOptionCreate, db: Session = Depends(get_db)):
    return TourRepository(db).create_option(**option_data.model_dump())


@router.get("/{tour_id}", response_model=TourDetailResponse)
def get_tour(tour_id: int, db: Session = Depends(get_db)):
    """Get tour with images, conditions and available options"""
    tour = TourRepository(db).get_by_id(tour_id)
    if not tour:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tour not found")
    return tour


@router.post("", response_model=TourResponse, status_code=status.HTTP_201_CREATED)
def create_tour(tour_data: TourCreate, db: Session = Depends(get_db)):
    """Create a new tour"""
    fields = tour_data.model_dump()
    fields["start_date"] = to_naive_utc(tour_data.start_date)
    fields["end_date"] = to_naive_utc(tour_data.end_date)

    if fields["start_date"] > fields["end_date"]:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Start date must not be after end date"
        )

    return TourRepository(db).create(**fields)


@router.put("/{tour_id}", response_model=TourResponse)
def update_tour(tour_id: int, tour_data: TourUpdate, db: Session = Depends(get_db)):
    """Update tour (only supplied fields change)"""
    repo = TourRepository(db)
    tour = repo.get_by_id(tour_id)
    if not tour:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tour not found")

    update_data = {k: v for k, v in tour_data.model_dump().items() if v is not None}
    for key in ("start_date", "end_date"):
        if key in update_data:
            update_data[key] = to_naive_utc(update_data[key])

    start = update_data.get("start_date", tour.start_date)
    end = update_data.get("end_date", tour.end_date)
    if start > end:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Start date must not be after end date"
        )

    return repo.update(tour, **update_data)


@router.delete("/{tour_id}")
def delete_tour(tour_id: int, db: Session = Depends(get_db)):
    """Soft delete a tour"""
    repo = TourRepository(db)
    tour = repo.get_by_id(tour_id)
    if not tour:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tour not found")

    repo.soft_delete(tour)
    return {"message": "Tour deleted successfully"}


@router.post("/{tour_id}/options", response_model=TourOptionAvailableResponse)
def attach_tour_option(tour_id: int, attach: TourOptionAttach, db: Session = Depends(get_db)):
    """Make an option available on a tour"""
    repo = TourRepository(db)
    if not repo.get_by_id(tour_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tour not found")
    if not repo.option_exists(attach.option_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid Option ID")

    return repo.attach_option(tour_id, attach.option_id, attach.is_default)
