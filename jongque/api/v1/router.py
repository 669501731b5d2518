"""
API v1 router setup
Organized into: public, customer (JWT) and dashboard (JWT + business claim) routes
"""
from fastapi import APIRouter

from jongque.api.v1.public import availability, queue, businesses, guest_bookings
from jongque.api.v1.customer import bookings, waitlist
from jongque.api.v1.dashboard import (
    bookings as dashboard_bookings,
    waitlist as dashboard_waitlist,
    operating_hours,
    holidays,
    services as dashboard_services,
)

api_v1_router = APIRouter()

# ============================================================================
# PUBLIC ROUTES (No authentication required)
# ============================================================================
api_v1_router.include_router(availability.router, prefix="/public", tags=["Public"])
api_v1_router.include_router(queue.router, prefix="/public", tags=["Public"])
api_v1_router.include_router(businesses.router, prefix="/public", tags=["Public"])
api_v1_router.include_router(guest_bookings.router, prefix="/public", tags=["Public"])

# ============================================================================
# CUSTOMER ROUTES (JWT authentication required)
# ============================================================================
api_v1_router.include_router(bookings.router, tags=["Customer"])
api_v1_router.include_router(waitlist.router, tags=["Customer"])

# ============================================================================
# DASHBOARD ROUTES (JWT with a business_id claim required)
# ============================================================================
api_v1_router.include_router(
    dashboard_bookings.router,
    prefix="/dashboard",
    tags=["Dashboard"]
)
api_v1_router.include_router(
    dashboard_waitlist.router,
    prefix="/dashboard",
    tags=["Dashboard"]
)
api_v1_router.include_router(
    operating_hours.router,
    prefix="/dashboard",
    tags=["Dashboard"]
)
api_v1_router.include_router(
    holidays.router,
    prefix="/dashboard",
    tags=["Dashboard"]
)
api_v1_router.include_router(
    dashboard_services.router,
    prefix="/dashboard",
    tags=["Dashboard"]
)


# ============================================================================
# ROOT ENDPOINT - API Info
# ============================================================================
@api_v1_router.get("/", tags=["Info"])
async def api_info():
    """Structure of the API routes by authentication type"""
    return {
        "version": "1.0",
        "authentication": {
            "public": "No authentication required",
            "customer": "JWT Bearer token required (sub = customer id)",
            "dashboard": "JWT Bearer token with a business_id claim required"
        }
    }
