# ============================================================================
# FILE: jongque/api/v1/dashboard/services.py
# Service catalogue management
# ============================================================================
from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session
from uuid import UUID

from jongque.api.dependencies import get_current_business_id
from jongque.config.database import get_db
from jongque.schemas.business import ServiceCreateRequest, ServiceStatusUpdateRequest, ServiceUpdateRequest
from jongque.services.business.business_service import BusinessService

router = APIRouter(prefix="/services", tags=["dashboard-services"])


@router.get("")
def list_services(
        business_id: UUID = Depends(get_current_business_id),
        db: Session = Depends(get_db)
):
    return {
        "success": True,
        "services": BusinessService.list_services(db, business_id)
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_service(
        request: ServiceCreateRequest,
        business_id: UUID = Depends(get_current_business_id),
        db: Session = Depends(get_db)
):
    service = BusinessService.create_service(
        db,
        business_id,
        name=request.name,
        duration=request.duration,
        price=request.price,
        description=request.description
    )
    await BusinessService.invalidate_profile_cache(business_id)

    return {
        "success": True,
        "service": service.to_dict()
    }


@router.put("/{service_id}")
async def update_service(
        request: ServiceUpdateRequest,
        service_id: UUID = Path(..., description="The service ID"),
        business_id: UUID = Depends(get_current_business_id),
        db: Session = Depends(get_db)
):
    """
    Partial update. Name and duration are frozen while upcoming bookings
    use the service (409 service_in_use); description and price are not.
    """
    service = BusinessService.update_service(
        db,
        business_id,
        service_id,
        request.model_dump(exclude_unset=True)
    )
    await BusinessService.invalidate_profile_cache(business_id)

    return {
        "success": True,
        "service": service.to_dict()
    }


@router.put("/{service_id}/status")
async def update_service_status(
        request: ServiceStatusUpdateRequest,
        service_id: UUID = Path(..., description="The service ID"),
        business_id: UUID = Depends(get_current_business_id),
        db: Session = Depends(get_db)
):
    service = BusinessService.set_service_active(db, business_id, service_id, request.is_active)
    await BusinessService.invalidate_profile_cache(business_id)

    return {
        "success": True,
        "service": service.to_dict()
    }


@router.delete("/{service_id}")
async def delete_service(
        service_id: UUID = Path(..., description="The service ID"),
        business_id: UUID = Depends(get_current_business_id),
        db: Session = Depends(get_db)
):
    BusinessService.delete_service(db, business_id, service_id)
    await BusinessService.invalidate_profile_cache(business_id)

    return {
        "success": True,
        "message": "Service deleted"
    }
