import logging
from typing import Any, List

from fastapi import HTTPException, status

from ..database import StoreResult

logger = logging.getLogger(__name__)


def rows(result: StoreResult, what: str) -> List[Any]:
    """Rows of a list call; an unavailable store reads as empty."""
    if result.is_unavailable:
        logger.warning("Listing %s without a database, returning no rows", what)
    return result.rows_or_empty()


def mutation(result: StoreResult, what: str) -> Any:
    """Value of a write call.

    Missing rows (including rows of other users) are 404. An unavailable
    store gives None: the request was accepted but nothing was written.
    """
    if result.is_not_found:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{what} not found",
        )
    if result.is_unavailable:
        logger.warning("%s write accepted without a database", what)
        return None
    return result.value


def deleted(result: StoreResult, what: str) -> Any:
    row = mutation(result, what)
    if row is None:
        return None
    return {"success": True, "id": row.id}
