# ============================================================================
# FILE: jongque/api/v1/dashboard/holidays.py
# Holiday closures
# ============================================================================
from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session
from uuid import UUID

from jongque.api.dependencies import get_current_business_id
from jongque.config.database import get_db
from jongque.schemas.business import HolidayCreateRequest
from jongque.services.business.business_service import BusinessService

router = APIRouter(prefix="/holidays", tags=["dashboard-settings"])


@router.get("")
def list_holidays(
        business_id: UUID = Depends(get_current_business_id),
        db: Session = Depends(get_db)
):
    return {
        "success": True,
        "holidays": BusinessService.list_holidays(db, business_id)
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_holiday(
        request: HolidayCreateRequest,
        business_id: UUID = Depends(get_current_business_id),
        db: Session = Depends(get_db)
):
    """Close the business on a date; recurring holidays repeat every year"""
    holiday = BusinessService.add_holiday(
        db,
        business_id,
        name=request.name,
        holiday_date=request.date,
        is_recurring=request.is_recurring
    )
    await BusinessService.invalidate_profile_cache(business_id)

    return {
        "success": True,
        "holiday": holiday
    }


@router.delete("/{holiday_id}")
async def delete_holiday(
        holiday_id: UUID = Path(..., description="The holiday ID"),
        business_id: UUID = Depends(get_current_business_id),
        db: Session = Depends(get_db)
):
    BusinessService.delete_holiday(db, business_id, holiday_id)
    await BusinessService.invalidate_profile_cache(business_id)

    return {
        "success": True,
        "message": "Holiday removed"
    }
