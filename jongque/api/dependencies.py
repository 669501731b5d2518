# ============================================================================
# FILE: jongque/api/dependencies.py
# Bearer token verification for customer and dashboard routes
# ============================================================================
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional
from jose import JWTError, jwt
from uuid import UUID

from jongque.config.settings import get_settings

# ============================================================================
# Security Schemes
# ============================================================================

jwt_security = HTTPBearer(
    scheme_name="JWT Bearer Token",
    description="Enter your JWT access token"
)


# ============================================================================
# JWT Token Functions
# ============================================================================

def verify_access_token(token: str) -> dict:
    """
    Verify and decode a JWT access token.

    Tokens are issued elsewhere; this service only checks the signature,
    the expiry and the token type.

    Raises:
        HTTPException: If token is invalid or expired
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Could not validate credentials: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token_type = payload.get("type", "access")
    if token_type != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return payload


def _claim_uuid(payload: dict, claim: str) -> Optional[UUID]:
    value = payload.get(claim)
    if value is None:
        return None
    try:
        return UUID(str(value))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid {claim} in token",
            headers={"WWW-Authenticate": "Bearer"},
        )


# ============================================================================
# Authentication Dependencies
# ============================================================================

async def get_token_payload(
        credentials: HTTPAuthorizationCredentials = Depends(jwt_security)
) -> dict:
    return verify_access_token(credentials.credentials)


async def get_current_user_id(payload: dict = Depends(get_token_payload)) -> UUID:
    """
    Customer id taken from the token's `sub` claim.

    Usage in routes:
        @router.get("/bookings")
        async def list_bookings(customer_id: UUID = Depends(get_current_user_id)):
            ...
    """
    user_id = _claim_uuid(payload, "sub")
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_id


async def get_current_business_id(payload: dict = Depends(get_token_payload)) -> UUID:
    """Business the operator acts for; tokens without a business_id claim are refused"""
    business_id = _claim_uuid(payload, "business_id")
    if business_id is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User not associated with a business"
        )
    return business_id
