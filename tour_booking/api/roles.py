from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from tour_booking.database import get_db
from tour_booking.repositories.user_repo import UserRepository
from tour_booking.schemas.user import RoleCreate, RoleResponse

router = APIRouter(prefix="/api/v1/roles", tags=["Roles"])


@router.get("", response_model=List[RoleResponse])
def list_roles(db: Session = Depends(get_db)):
    return UserRepository(db).list_roles()


@router.post("", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
def create_role(role_data: RoleCreate, db: Session = Depends(get_db)):
    """Create a new role"""
    repo = UserRepository(db)
    if repo.role_name_taken(role_data.role_name):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Role already exists")
    return repo.create_role(**role_data.model_dump())
