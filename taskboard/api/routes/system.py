from fastapi import APIRouter, Depends, Request
from fastapi.openapi.utils import get_openapi
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.db.session import get_db
from taskboard.schemas.system import SystemStats

router = APIRouter(prefix="/api/system", tags=["system"])


@router.get("/stats", response_model=SystemStats)
async def get_stats(db: AsyncSession = Depends(get_db)):
    """Return system-wide statistics."""
    sql = text("""
        SELECT
            (SELECT COUNT(*) FROM organizations) AS organizations,
            (SELECT COUNT(*) FROM myboard_boards) AS boards,
            (SELECT COUNT(*) FROM myboard_boards WHERE finished_at IS NULL) AS active_boards,
            (SELECT COUNT(*) FROM myboard_tasks) AS tasks,
            (SELECT COUNT(*) FROM myboard_board_snapshots) AS snapshots
    """)
    result = await db.execute(sql)
    return result.mappings().first()


@router.get("/docs.json", include_in_schema=False)
async def get_openapi_json(request: Request):
    """Return the full OpenAPI schema in JSON format."""
    app = request.app
    return get_openapi(
        title="Taskboard API",
        version=app.version,
        description="Full OpenAPI specification for the Taskboard backend.",
        routes=app.routes,
    )
