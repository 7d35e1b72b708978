from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime, date


class UserResponse(BaseModel):
    """User response schema (never exposes the password hash)"""
    id: int
    username: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    created_date: Optional[datetime] = None
    modify_date: Optional[datetime] = None
    is_active: Optional[bool] = None
    default_role_id: Optional[int] = None
    default_role_name: Optional[str] = None

    class Config:
        from_attributes = True


class UserListResponse(BaseModel):
    data: List[UserResponse]
    total_count: int
    page: int
    page_size: int
    total_pages: int


class UserCreate(BaseModel):
    """Schema for creating a new user"""
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1)
    full_name: Optional[str] = Field(None, max_length=100)
    email: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=15)
    address: Optional[str] = Field(None, max_length=200)
    date_of_birth: Optional[date] = None
    default_role_id: Optional[int] = None


class UserUpdate(BaseModel):
    """Schema for updating a user. Password is only changed when given."""
    username: str = Field(..., min_length=1, max_length=50)
    password: Optional[str] = None
    full_name: Optional[str] = Field(None, max_length=100)
    email: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=15)
    address: Optional[str] = Field(None, max_length=200)
    date_of_birth: Optional[date] = None
    is_active: Optional[bool] = True
    default_role_id: Optional[int] = None


class RoleCreate(BaseModel):
    role_name: str = Field(..., min_length=1, max_length=50)
    display_name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=300)


class RoleResponse(BaseModel):
    id: int
    role_name: str
    display_name: str
    description: Optional[str] = None
    is_active: Optional[bool] = None

    class Config:
        from_attributes = True


class UserRoleAssign(BaseModel):
    role_id: int
    assigned_by: Optional[int] = None


class UserRoleResponse(BaseModel):
    id: int
    user_id: int
    role_id: int
    role_name: Optional[str] = None
    assigned_date: Optional[datetime] = None
    assigned_by: Optional[int] = None
    is_active: Optional[bool] = None

    class Config:
        from_attributes = True
