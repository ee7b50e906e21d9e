import logging
from datetime import date

logger = logging.getLogger(__name__)


# --- Job enqueue helpers --- #
async def redis_ensure_daily_snapshots(redis, organization_id, utc_date: date):
    """Queue the daily snapshot sweep for the worker; returns the arq job."""
    logger.info(f"Enqueuing daily snapshot sweep for {organization_id} on {utc_date}")
    return await redis.enqueue_job(
        "ensure_daily_snapshots", str(organization_id), utc_date.isoformat()
    )
