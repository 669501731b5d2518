# ============================================================================
# FILE: jongque/api/v1/public/queue.py
# Live queue board - no authentication
# ============================================================================
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from datetime import date
from typing import Optional
from uuid import UUID

from jongque.config.database import get_db
from jongque.services.queue.queue_status_service import QueueStatusService

router = APIRouter(prefix="/queue", tags=["public-queue"])


@router.get("/status")
def get_queue_status(
        business_id: UUID = Query(..., description="Business whose queue to show"),
        queue_date: Optional[date] = Query(None, alias="date", description="Queue day, defaults to today"),
        db: Session = Depends(get_db)
):
    """Who is being served, how many are waiting, and the estimated wait"""
    return QueueStatusService.get_queue_status(
        db=db,
        business_id=business_id,
        queue_date=queue_date or date.today()
    )
