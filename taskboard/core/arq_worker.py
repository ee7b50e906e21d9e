import asyncio
import logging
import sys
import time
import uuid
from datetime import date

from arq import cron, Worker
from arq.connections import RedisSettings

from taskboard.core.config import HEARTBEAT_KEY, REDIS_URL
from taskboard.core.daily import ensure_daily_snapshots_for_organization
from taskboard.db.session import async_session

# Logging configuration
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    stream=sys.stdout,
    force=True,
)
logger = logging.getLogger(__name__)


async def ensure_daily_snapshots(ctx, organization_id: str, utc_date: str):
    """Background job: run the daily snapshot sweep for one organization."""
    org_id = uuid.UUID(organization_id)
    day = date.fromisoformat(utc_date)
    logger.info(f"🔹 Ensuring daily snapshots for organization {org_id} on {day}")

    async with async_session() as db:
        results = await ensure_daily_snapshots_for_organization(db, org_id, day)

    failed = [str(board_id) for board_id, snapshot_id in results.items() if snapshot_id is None]
    if failed:
        logger.error(f"❌ Daily snapshots failed for boards: {', '.join(failed)}")
    logger.info(f"✅ Daily snapshots ensured for {len(results) - len(failed)} boards")
    return {str(k): (str(v) if v else None) for k, v in results.items()}


# A failed sweep is safe to repeat: snapshots are deduplicated per day
ensure_daily_snapshots.max_tries = 3
ensure_daily_snapshots.retry_delay = 10  # seconds


async def worker_heartbeat(ctx):
    redis = ctx["redis"]
    await redis.set(
        HEARTBEAT_KEY, str(time.time()), ex=60
    )  # expire in 60 seconds


def build_worker() -> Worker:
    return Worker(
        functions=[
            ensure_daily_snapshots,
        ],
        redis_settings=RedisSettings.from_dsn(REDIS_URL),
        cron_jobs=[
            cron(worker_heartbeat, second=0),
        ],
        keep_result=0,
        max_jobs=5,
    )


async def run_worker_forever():
    """
    Resilient loop that keeps the ARQ worker running.
    Restarts worker on failure with exponential backoff.
    """
    backoff = 1
    while True:
        try:
            worker = build_worker()
            logger.info("🚀 Starting ARQ worker...")
            await worker.async_run()
        except asyncio.CancelledError:
            logger.warning("🌀 Worker shutdown triggered by CancelledError, exiting.")
            return
        except Exception as e:
            logger.error(f"❌ Worker crashed: {e}", exc_info=True)
            logger.info(f"🔁 Restarting worker in {backoff} seconds...")
            await asyncio.sleep(backoff)
            backoff = min(backoff * 2, 60)  # Max backoff 1 minute
        else:
            backoff = 1  # Reset backoff on clean exit


if __name__ == "__main__":
    try:
        asyncio.run(run_worker_forever())
    except KeyboardInterrupt:
        logger.info("🛑 Worker manually stopped.")
