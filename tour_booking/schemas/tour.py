from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal


class TourImageResponse(BaseModel):
    id: int
    image_url: str
    caption: Optional[str] = None

    class Config:
        from_attributes = True


class TourConditionResponse(BaseModel):
    id: int
    title: str
    content: str

    class Config:
        from_attributes = True


class TourOptionResponse(BaseModel):
    id: int
    option_name: str
    description: Optional[str] = None
    category: str
    price: Decimal
    price_type: Optional[str] = None
    status: Optional[str] = None

    class Config:
        from_attributes = True


class TourOptionAvailableResponse(BaseModel):
    option_id: int
    is_default: Optional[bool] = None
    option: TourOptionResponse

    class Config:
        from_attributes = True


class TourCreate(BaseModel):
    tour_name: str = Field(..., min_length=1, max_length=150)
    destination: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    duration: int = Field(..., gt=0, description="Duration in days")
    price: Decimal = Field(..., ge=0)
    max_participants: int = Field(..., gt=0)
    start_date: datetime
    end_date: datetime
    status: Optional[str] = Field(None, max_length=20)
    transport: Optional[str] = Field(None, max_length=100)
    thumbnail: Optional[str] = Field(None, max_length=255)
    is_active: bool = True


class TourUpdate(BaseModel):
    tour_name: Optional[str] = Field(None, min_length=1, max_length=150)
    destination: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    duration: Optional[int] = Field(None, gt=0)
    price: Optional[Decimal] = Field(None, ge=0)
    max_participants: Optional[int] = Field(None, gt=0)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: Optional[str] = Field(None, max_length=20)
    transport: Optional[str] = Field(None, max_length=100)
    thumbnail: Optional[str] = Field(None, max_length=255)
    is_active: Optional[bool] = None


class TourResponse(BaseModel):
    id: int
    tour_name: str
    destination: str
    description: Optional[str] = None
    duration: int
    price: Decimal
    max_participants: int
    start_date: datetime
    end_date: datetime
    status: Optional[str] = None
    transport: Optional[str] = None
    thumbnail: Optional[str] = None
    is_active: bool
    created_date: Optional[datetime] = None

    class Config:
        from_attributes = True


class TourDetailResponse(TourResponse):
    images: List[TourImageResponse] = []
    conditions: List[TourConditionResponse] = []
    option_links: List[TourOptionAvailableResponse] = []


class TourOptionCreate(BaseModel):
    option_name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=300)
    category: str = Field(..., min_length=1, max_length=50)
    price: Decimal = Field(..., ge=0)
    price_type: Optional[str] = Field("PerPerson", max_length=20)
    status: Optional[str] = Field("Active", max_length=20)


class TourOptionAttach(BaseModel):
    option_id: int
    is_default: bool = False
