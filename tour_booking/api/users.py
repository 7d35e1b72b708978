from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import Optional, List
import math
from tour_booking.config import settings
from tour_booking.database import get_db
from tour_booking.repositories.user_repo import UserRepository
from tour_booking.schemas.user import (
    UserResponse,
    UserListResponse,
    UserCreate,
    UserUpdate,
    UserRoleAssign,
    UserRoleResponse,
)

router = APIRouter(prefix="/api/v1/users", tags=["Users"])


def _page(users, total: int, page: int, page_size: int) -> dict:
    return {
        "data": users,
        "total_count": total,
        "page": page,
        "page_size": page_size,
        "total_pages": math.ceil(total / page_size) if page_size else 0,
    }


def _get_user_or_404(repo: UserRepository, user_id: int):
    user = repo.get_by_id(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


def _check_role(repo: UserRepository, role_id: Optional[int]):
    if role_id is not None and not repo.get_role(role_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid Role ID")


@router.get("", response_model=UserListResponse)
def list_users(
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=100),
    include_deleted: bool = Query(False),
    db: Session = Depends(get_db)
):
    """List users page by page"""
    users, total = UserRepository(db).get_all(
        skip=(page - 1) * page_size,
        limit=page_size,
        include_deleted=include_deleted,
    )
    return _page(users, total, page, page_size)


@router.get("/search", response_model=UserListResponse)
def search_users(
    keyword: Optional[str] = Query(None),
    role_id: Optional[int] = Query(None),
    is_active: Optional[bool] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=100),
    db: Session = Depends(get_db)
):
    """Search users by keyword, role and active flag"""
    users, total = UserRepository(db).search(
        keyword=keyword,
        role_id=role_id,
        is_active=is_active,
        skip=(page - 1) * page_size,
        limit=page_size,
    )
    return _page(users, total, page, page_size)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: Session = Depends(get_db)):
    """Get user by ID"""
    return _get_user_or_404(UserRepository(db), user_id)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(user_data: UserCreate, db: Session = Depends(get_db)):
    """Create a new user"""
    repo = UserRepository(db)

    if repo.username_taken(user_data.username):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already exists")

    if user_data.email and repo.email_taken(user_data.email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already exists")

    _check_role(repo, user_data.default_role_id)

    fields = user_data.model_dump(exclude={"password"})
    return repo.create(password=user_data.password, **fields)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(user_id: int, user_data: UserUpdate, db: Session = Depends(get_db)):
    """Update user profile; password is re-hashed only when provided"""
    repo = UserRepository(db)
    user = _get_user_or_404(repo, user_id)

    if user_data.username != user.username and repo.username_taken(user_data.username, exclude_id=user_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already exists")

    if user_data.email and user_data.email != user.email and repo.email_taken(user_data.email, exclude_id=user_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already exists")

    _check_role(repo, user_data.default_role_id)

    fields = user_data.model_dump(exclude={"password"})
    return repo.update(user, password=user_data.password, **fields)


@router.delete("/{user_id}")
def delete_user(user_id: int, db: Session = Depends(get_db)):
    """Soft delete a user"""
    repo = UserRepository(db)
    user = _get_user_or_404(repo, user_id)
    repo.soft_delete(user)
    return {"message": "User deleted successfully"}


@router.put("/{user_id}/activate", response_model=UserResponse)
def activate_user(user_id: int, db: Session = Depends(get_db)):
    repo = UserRepository(db)
    return repo.set_active(_get_user_or_404(repo, user_id), True)


@router.put("/{user_id}/deactivate", response_model=UserResponse)
def deactivate_user(user_id: int, db: Session = Depends(get_db)):
    repo = UserRepository(db)
    return repo.set_active(_get_user_or_404(repo, user_id), False)


@router.get("/{user_id}/roles", response_model=List[UserRoleResponse])
def list_user_roles(user_id: int, db: Session = Depends(get_db)):
    """List roles assigned to a user"""
    repo = UserRepository(db)
    _get_user_or_404(repo, user_id)
    return repo.get_user_roles(user_id)


@router.post("/{user_id}/roles", response_model=UserRoleResponse, status_code=status.HTTP_201_CREATED)
def assign_user_role(user_id: int, assign: UserRoleAssign, db: Session = Depends(get_db)):
    """Assign a role to a user"""
    repo = UserRepository(db)
    _get_user_or_404(repo, user_id)

    if not repo.get_role(assign.role_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid Role ID")

    if assign.assigned_by is not None and not repo.exists(assign.assigned_by):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid assigning user ID")

    return repo.assign_role(user_id, assign.role_id, assign.assigned_by)
