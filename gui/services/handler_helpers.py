"""Handler Helpers — field validation, paging and the sequential bulk policy.

Invariants:
    - require() raises MalformedDataError naming every empty field at once
    - create_sequentially() issues one call per entity in input order and
      stops at the first failure; entities created before it stay created
"""

import logging
from typing import Any, Awaitable, Callable

from gui.core.errors import BulkImportError, GuiError, MalformedDataError
from gui.sdk.models import PageMetadata

logger = logging.getLogger(__name__)


def require(**fields: Any) -> None:
    """Raise MalformedDataError if any keyword value is empty."""
    missing = [name for name, value in fields.items() if not value]
    if missing:
        raise MalformedDataError(f"missing {', '.join(missing)}")


def page_metadata(req, **filters: Any) -> PageMetadata:
    """PageMetadata from a request's offset/limit plus explicit filters."""
    return PageMetadata(
        offset=getattr(req, "offset", 0),
        limit=getattr(req, "limit", 0),
        **filters,
    )


async def create_sequentially(
    entities: list, create_one: Callable[[Any], Awaitable[Any]],
) -> list:
    """Create entities one by one; on failure raise BulkImportError."""
    if not entities:
        raise MalformedDataError("upload contains no rows")
    total = len(entities)
    created: list = []
    for row, entity in enumerate(entities, start=1):
        try:
            created.append(await create_one(entity))
        except GuiError as e:
            logger.warning(
                f"Bulk import stopped at row {row}/{total}, "
                f"{len(created)} created",
                extra={"error_code": e.code},
            )
            raise BulkImportError(e, row, total, created) from e
    logger.info(f"Bulk import created {total} entities")
    return created
