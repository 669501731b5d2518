# ============================================================================
# FILE: jongque/api/v1/dashboard/operating_hours.py
# Weekly operating hours
# ============================================================================
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from uuid import UUID

from jongque.api.dependencies import get_current_business_id
from jongque.config.database import get_db
from jongque.schemas.business import OperatingHoursUpdateRequest
from jongque.services.business.business_service import BusinessService

router = APIRouter(prefix="/operating-hours", tags=["dashboard-settings"])


@router.get("")
def get_operating_hours(
        business_id: UUID = Depends(get_current_business_id),
        db: Session = Depends(get_db)
):
    return {
        "success": True,
        "operating_hours": BusinessService.get_operating_hours(db, business_id)
    }


@router.put("")
async def update_operating_hours(
        request: OperatingHoursUpdateRequest,
        business_id: UUID = Depends(get_current_business_id),
        db: Session = Depends(get_db)
):
    """
    Replace the whole week at once. Exactly one entry per day
    (0=Sunday ... 6=Saturday) is required.
    """
    hours = BusinessService.replace_operating_hours(
        db,
        business_id,
        [item.model_dump() for item in request.operating_hours]
    )
    await BusinessService.invalidate_profile_cache(business_id)

    return {
        "success": True,
        "operating_hours": hours
    }
