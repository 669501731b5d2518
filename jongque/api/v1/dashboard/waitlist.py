# ============================================================================
# FILE: jongque/api/v1/dashboard/waitlist.py
# Business-side waitlist actions
# ============================================================================
from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session
from uuid import UUID

from jongque.api.dependencies import get_current_business_id
from jongque.config.database import get_db
from jongque.services.waitlist.waitlist_service import WaitlistService

router = APIRouter(prefix="/waitlist", tags=["dashboard-waitlist"])


@router.post("/{waitlist_id}/convert")
def convert_waitlist_entry(
        waitlist_id: UUID = Path(..., description="The waitlist entry ID"),
        business_id: UUID = Depends(get_current_business_id),
        db: Session = Depends(get_db)
):
    """Give a freed slot to a waiting customer"""
    booking = WaitlistService.convert_entry(db, waitlist_id, business_id=business_id)
    return {
        "success": True,
        "booking": booking.to_dict()
    }
