"""
Daily snapshot coverage.

Nothing here runs on a timer. The host calls the sweep when it sees fit
(app foreground, an enqueued worker job) and the per-day dedup makes every
repeat call a no-op.
"""
import logging
from datetime import date, timedelta
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.config import DAILY_BACKFILL_DAYS
from taskboard.core.errors import TaskboardError
from taskboard.core.snapshots import snapshot_board
from taskboard.core.store import list_active_boards

logger = logging.getLogger(__name__)


async def ensure_daily_snapshots_for_organization(
    db: AsyncSession, organization_id, utc_date: date
) -> Dict[object, Optional[object]]:
    """
    Make sure every active board of the organization has a snapshot for
    ``utc_date``.

    Returns ``{board_id: snapshot_id}``; a failed board maps to None and does
    not stop the sweep.
    """
    boards = await list_active_boards(db, organization_id)
    board_ids = [board.id for board in boards]
    logger.info(
        f"Ensuring {utc_date} snapshots for {len(board_ids)} active boards "
        f"of organization {organization_id}"
    )

    results: Dict[object, Optional[object]] = {}
    for board_id in board_ids:
        try:
            results[board_id] = await snapshot_board(
                db, board_id, finished_on=utc_date, dedupe=True
            )
        except (TaskboardError, SQLAlchemyError) as e:
            # Leave the session usable for the next board
            await db.rollback()
            logger.error(
                f"Daily snapshot failed for board {board_id} on {utc_date}: {e}",
                exc_info=True,
            )
            results[board_id] = None
    return results


class DailyEnsureTracker:
    """
    Remembers, per organization, the last day the sweep ran in this process
    and decides which days a foreground event has to cover.

    Without a remembered day only yesterday and today are ensured. With one,
    every missed day after it is backfilled, up to ``max_backfill_days``
    before today.
    """

    def __init__(self, max_backfill_days: int = DAILY_BACKFILL_DAYS):
        self.max_backfill_days = max(1, max_backfill_days)
        self._last_processed: Dict[object, date] = {}

    def last_processed(self, organization_id) -> Optional[date]:
        return self._last_processed.get(organization_id)

    def days_to_ensure(self, organization_id, today: date) -> List[date]:
        last = self._last_processed.get(organization_id)
        if last == today:
            return []
        if last is None:
            return [today - timedelta(days=1), today]
        if last > today:
            # Clock moved backwards; cover today only
            return [today]

        first = max(last + timedelta(days=1), today - timedelta(days=self.max_backfill_days))
        return [first + timedelta(days=n) for n in range((today - first).days + 1)]

    async def on_foreground(
        self, db: AsyncSession, organization_id, today: date
    ) -> Dict[date, Dict[object, Optional[object]]]:
        days = self.days_to_ensure(organization_id, today)
        covered = {}
        for day in days:
            covered[day] = await ensure_daily_snapshots_for_organization(
                db, organization_id, day
            )
        if days:
            self._last_processed[organization_id] = today
        return covered
