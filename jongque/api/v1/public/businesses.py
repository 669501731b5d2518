# ============================================================================
# FILE: jongque/api/v1/public/businesses.py
# Public business profile (served from cache when available)
# ============================================================================
from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session
from uuid import UUID

from jongque.config.database import get_db
from jongque.services.business.business_service import BusinessService

router = APIRouter(prefix="/businesses", tags=["public-businesses"])


@router.get("/{business_id}")
async def get_business(
        business_id: UUID = Path(..., description="The business ID"),
        db: Session = Depends(get_db)
):
    """Name, operating hours and active services of a business"""
    return await BusinessService.get_business_profile(db, business_id)
