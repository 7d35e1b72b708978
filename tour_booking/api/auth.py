from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import logging
from tour_booking.config import settings
from tour_booking.database import get_db
from tour_booking.middleware.auth import get_current_user
from tour_booking.models.user import User
from tour_booking.repositories.user_repo import UserRepository
from tour_booking.schemas.auth import LoginRequest, LoginResponse
from tour_booking.schemas.user import UserResponse
from tour_booking.utils.security import create_access_token, verify_password

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)


@router.post("/login", response_model=LoginResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    """Exchange username and password for a JWT"""
    user = UserRepository(db).get_by_username(request.username)

    if not user or not verify_password(request.password, user.password_hash):
        logger.warning(f"Failed login for username '{request.username}'")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is deactivated",
        )

    token = create_access_token({"sub": str(user.id), "username": user.username})
    return {
        "access_token": token,
        "token_type": "bearer",
        "expires_in": settings.JWT_EXPIRE_MINUTES * 60,
        "user": user,
    }


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """Get the authenticated user"""
    return current_user
