"""
Cursor-chained iteration over a paged query.
"""

import asyncio
from typing import AsyncIterator, Optional

from civitai_client.kernel.result import Failure, Result
from civitai_client.logging_config import get_logger
from civitai_client.query.base import RequestBuilder
from civitai_client.schemas.common import PagedResult

logger = get_logger(__name__)


async def iterate_pages(
    builder: RequestBuilder,
    cancel: Optional[asyncio.Event] = None,
    max_pages: Optional[int] = None,
) -> AsyncIterator[Result[PagedResult]]:
    """
    Yield the result of each page, following next_cursor.

    Stops after the first Failure (which is yielded), when a page has no
    next cursor, or after `max_pages` pages.

        async for result in iterate_pages(client.images.where_username("alice")):
            match result:
                case Success(page): ...
                case Failure(error): ...
    """
    cursor: Optional[str] = None
    fetched = 0
    while max_pages is None or fetched < max_pages:
        result = await builder.execute(cursor=cursor, cancel=cancel)
        fetched += 1
        yield result
        if isinstance(result, Failure):
            return
        cursor = result.value.next_cursor
        if not cursor:
            return
        logger.debug("Following cursor %s (page %d)", cursor, fetched + 1)
