import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

from taskboard.core.config import DATABASE_URL, SQL_ECHO
from taskboard.core.errors import StoreWriteFailure, TaskboardError

logger = logging.getLogger(__name__)

engine = create_async_engine(DATABASE_URL, echo=SQL_ECHO, future=True)

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

async def get_db():
    async with async_session() as session:
        yield session


@asynccontextmanager
async def write_transaction(db: AsyncSession, action: str):
    """
    Run a block of writes as one unit: commit on success, roll back on any
    failure. Store errors surface as StoreWriteFailure, domain errors as-is.
    """
    try:
        yield db
        await db.commit()
    except TaskboardError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Store write failed during {action}: {e}", exc_info=True)
        raise StoreWriteFailure(f"{action} failed") from e
