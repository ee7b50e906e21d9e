"""
Session context supplied by the host. Authentication happens upstream; the
API only receives the resolved user and organization ids as headers.
"""
import uuid
from typing import Optional

from fastapi import Header, HTTPException, status


async def get_current_user_id(
    x_user_id: Optional[uuid.UUID] = Header(default=None),
) -> uuid.UUID:
    if x_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="X-User-Id header is required"
        )
    return x_user_id


async def get_optional_user_id(
    x_user_id: Optional[uuid.UUID] = Header(default=None),
) -> Optional[uuid.UUID]:
    return x_user_id


async def get_current_organization_id(
    x_organization_id: Optional[uuid.UUID] = Header(default=None),
) -> uuid.UUID:
    if x_organization_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-Organization-Id header is required",
        )
    return x_organization_id
