"""
Pydantic schemas for business settings
"""
import datetime
from datetime import time
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class OperatingHoursItem(BaseModel):
    """One day of the week; 0=Sunday ... 6=Saturday"""
    day_of_week: int = Field(..., ge=0, le=6)
    open_time: time
    close_time: time
    is_open: bool

    @field_validator("open_time", "close_time", mode="before")
    @classmethod
    def validate_hhmm(cls, v):
        if isinstance(v, str) and len(v) != 5:
            raise ValueError("Time must be in HH:MM format")
        return v


class OperatingHoursUpdateRequest(BaseModel):
    operating_hours: List[OperatingHoursItem]


class HolidayCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    date: datetime.date
    is_recurring: bool = False


class ServiceCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    duration: int = Field(..., gt=0, le=24 * 60, description="Minutes")
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)


class ServiceUpdateRequest(BaseModel):
    """Partial update; only the fields sent are changed"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    duration: Optional[int] = Field(None, gt=0, le=24 * 60)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)

    @field_validator("name", "duration")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("May be omitted but not null")
        return v


class ServiceStatusUpdateRequest(BaseModel):
    is_active: bool
