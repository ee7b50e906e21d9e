import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core import store
from taskboard.core.daily import ensure_daily_snapshots_for_organization
from taskboard.core.services import redis_ensure_daily_snapshots
from taskboard.db.session import get_db
from taskboard.schemas.organization import (
    DailyEnsureRequest,
    DailyEnsureResult,
    EnqueuedJob,
    ForegroundRequest,
    ForegroundResult,
    OrganizationCreate,
    OrganizationRead,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/organizations", tags=["organizations"])


async def _require_organization(db: AsyncSession, organization_id: uuid.UUID):
    org = await store.get_organization(db, organization_id)
    if not org:
        raise HTTPException(status_code=404, detail="Organization not found")
    return org


@router.post("/", response_model=OrganizationRead, status_code=status.HTTP_201_CREATED)
async def create_organization(
    data: OrganizationCreate,
    db: AsyncSession = Depends(get_db),
):
    if not data.name.strip():
        raise HTTPException(status_code=422, detail="Name is required")
    if data.code and await store.get_organization_by_invite_code(db, data.code):
        raise HTTPException(status_code=409, detail="Invite code already in use")
    return await store.create_organization(db, data.name, data.code)


@router.get("/by-code/{code}", response_model=OrganizationRead)
async def get_organization_by_code(
    code: str,
    db: AsyncSession = Depends(get_db),
):
    org = await store.get_organization_by_invite_code(db, code)
    if not org:
        raise HTTPException(status_code=404, detail="Organization not found")
    return org


@router.get("/{organization_id}", response_model=OrganizationRead)
async def get_organization(
    organization_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    return await _require_organization(db, organization_id)


@router.post("/{organization_id}/daily-snapshots")
async def ensure_daily_snapshots(
    request: Request,
    organization_id: uuid.UUID,
    data: DailyEnsureRequest,
    background: bool = False,
    db: AsyncSession = Depends(get_db),
):
    """
    Ensure every active board has a snapshot for ``utc_date``. Safe to repeat.
    With ``background=true`` the sweep is handed to the worker instead.
    """
    await _require_organization(db, organization_id)

    if background:
        redis = getattr(request.app.state, "redis", None)
        if redis is None:
            raise HTTPException(status_code=503, detail="Background worker is not available")
        job = await redis_ensure_daily_snapshots(
            redis, organization_id, data.utc_date
        )
        return EnqueuedJob(job_id=job.job_id if job else None)

    results = await ensure_daily_snapshots_for_organization(db, organization_id, data.utc_date)
    return DailyEnsureResult(utc_date=data.utc_date, snapshots=results)


@router.post("/{organization_id}/foreground", response_model=ForegroundResult)
async def on_foreground(
    request: Request,
    organization_id: uuid.UUID,
    data: ForegroundRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Called by clients when the app comes to the foreground. Covers the days
    missed since the last call, then today.
    """
    await _require_organization(db, organization_id)

    tracker = request.app.state.daily_tracker
    covered = await tracker.on_foreground(db, organization_id, data.local_date)
    return {
        "ensured": [
            {"utc_date": day, "snapshots": results} for day, results in covered.items()
        ]
    }
