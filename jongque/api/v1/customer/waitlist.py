# ============================================================================
# FILE: jongque/api/v1/customer/waitlist.py
# Customer waitlist - JWT authenticated
# ============================================================================
from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session
from uuid import UUID

from jongque.api.dependencies import get_current_user_id
from jongque.config.database import get_db
from jongque.schemas.booking import WaitlistJoinRequest
from jongque.services.waitlist.waitlist_service import WaitlistService

router = APIRouter(prefix="/waitlist", tags=["customer-waitlist"])


@router.post("", status_code=status.HTTP_201_CREATED)
def join_waitlist(
        request: WaitlistJoinRequest,
        customer_id: UUID = Depends(get_current_user_id),
        db: Session = Depends(get_db)
):
    """Wait for a slot that is currently taken"""
    entry = WaitlistService.join(
        db=db,
        customer_id=customer_id,
        business_id=request.business_id,
        service_id=request.service_id,
        booking_date=request.booking_date,
        booking_time=request.booking_time,
        staff_id=request.staff_id,
        notes=request.notes
    )

    return {
        "success": True,
        "waitlist_id": str(entry.id),
        "position": entry.position,
        "message": f"You are number {entry.position} on the waitlist"
    }


@router.get("")
def list_waitlist(
        customer_id: UUID = Depends(get_current_user_id),
        db: Session = Depends(get_db)
):
    entries = WaitlistService.list_for_customer(db, customer_id)
    return {
        "success": True,
        "entries": [e.to_dict() for e in entries],
        "total": len(entries)
    }


@router.delete("/{waitlist_id}")
def leave_waitlist(
        waitlist_id: UUID = Path(..., description="The waitlist entry ID"),
        customer_id: UUID = Depends(get_current_user_id),
        db: Session = Depends(get_db)
):
    WaitlistService.leave(db, waitlist_id, customer_id)
    return {
        "success": True,
        "message": "Removed from the waitlist"
    }
