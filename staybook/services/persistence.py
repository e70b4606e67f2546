"""Session helpers shared by the services: conflict-aware flush and pagination."""

from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from staybook.exceptions import ConflictError

_CONCURRENT_UPDATE = "The resource was modified concurrently; retry the operation"


async def flush_or_conflict(db: AsyncSession, conflict_message: str = _CONCURRENT_UPDATE) -> None:
    """Flush pending changes, turning write races into a retryable ``ConflictError``.

    A version-column mismatch means another transaction updated the row
    first; an integrity error means a storage constraint (exclusion or unique
    index) caught a race the application-level check could not see.
    """
    try:
        await db.flush()
    except StaleDataError as exc:
        raise ConflictError(conflict_message, retryable=True) from exc
    except IntegrityError as exc:
        raise ConflictError(conflict_message, retryable=True) from exc


async def flush_and_refresh(
    db: AsyncSession,
    instance: Any,
    conflict_message: str = _CONCURRENT_UPDATE,
) -> None:
    """Flush like ``flush_or_conflict`` and reload server-generated columns of ``instance``."""
    await flush_or_conflict(db, conflict_message)
    await db.refresh(instance)


async def paginate(
    db: AsyncSession,
    query: Select,
    skip: int,
    limit: int,
) -> tuple[list[Any], int]:
    """Run ``query`` for one page and count all its rows.

    ``query`` must already carry a stable ORDER BY.
    """
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_query)).scalar_one()

    result = await db.execute(query.offset(skip).limit(limit))
    return list(result.scalars().all()), total
