from sqlalchemy.orm import Session, selectinload
from typing import Optional, List
from tour_booking.models.tour import Tour, TourOption, TourOptionAvailable


class TourRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, tour_id: int) -> Optional[Tour]:
        """Get a non-deleted tour with its images, conditions and options"""
        return self.db.query(Tour).options(
            selectinload(Tour.images),
            selectinload(Tour.conditions),
            selectinload(Tour.option_links).selectinload(TourOptionAvailable.option),
        ).filter(Tour.id == tour_id, Tour.is_delete.is_(False)).first()

    def exists(self, tour_id: int) -> bool:
        return self.db.query(Tour.id).filter(Tour.id == tour_id).first() is not None

    def get_all(self, active_only: Optional[bool] = None) -> List[Tour]:
        query = self.db.query(Tour).filter(Tour.is_delete.is_(False))
        if active_only:
            query = query.filter(Tour.is_active.is_(True))
        return query.order_by(Tour.start_date.asc()).all()

    def create(self, **fields) -> Tour:
        tour = Tour(**fields, is_delete=False)
        self.db.add(tour)
        self.db.commit()
        self.db.refresh(tour)
        return tour

    def update(self, tour: Tour, **kwargs) -> Tour:
        for key, value in kwargs.items():
            if hasattr(tour, key) and value is not None:
                setattr(tour, key, value)
        self.db.commit()
        self.db.refresh(tour)
        return tour

    def soft_delete(self, tour: Tour) -> None:
        tour.is_delete = True
        tour.is_active = False
        self.db.commit()

    def option_exists(self, option_id: int) -> bool:
        return self.db.query(TourOption.id).filter(TourOption.id == option_id).first() is not None

    def list_options(self) -> List[TourOption]:
        return self.db.query(TourOption).order_by(TourOption.category, TourOption.option_name).all()

    def create_option(self, **fields) -> TourOption:
        option = TourOption(**fields)
        self.db.add(option)
        self.db.commit()
        self.db.refresh(option)
        return option

    def attach_option(self, tour_id: int, option_id: int, is_default: bool = False) -> TourOptionAvailable:
        """Make an option available on a tour (updates is_default if already attached)"""
        link = self.db.query(TourOptionAvailable).filter(
            TourOptionAvailable.tour_id == tour_id,
            TourOptionAvailable.option_id == option_id,
        ).first()
        if link:
            link.is_default = is_default
        else:
            link = TourOptionAvailable(tour_id=tour_id, option_id=option_id, is_default=is_default)
            self.db.add(link)
        self.db.commit()
        self.db.refresh(link)
        return link
