"""
LocalLibrary — Parallel Read Aggregation
=========================================

What:  Runs named, independent read operations concurrently and joins them.
How:   Each awaitable becomes an asyncio task. We wait until every task is
       done or one fails. On failure the still-pending tasks are cancelled,
       their outcomes discarded, and the first failure is raised unchanged.
Who:   Services assembling view data (dashboard counts, detail pages with
       dependents, form choice lists).

Each repository call opens its own session, so the tasks share nothing.

Example:
    results = await gather({
        "book": books.find_by_id(book_id, expand=("author", "genre")),
        "book_instances": instances.find_by_book(book_id),
    })
    results["book"], results["book_instances"]
"""

import asyncio
import logging
from typing import Any, Awaitable, Dict, Mapping

logger = logging.getLogger(__name__)


async def gather(tasks: Mapping[str, Awaitable[Any]]) -> Dict[str, Any]:
    """
    Await every named operation concurrently; first error wins.

    Args:
        tasks: task name → awaitable read operation

    Returns:
        task name → result, once all operations succeeded

    Raises:
        The exception of the first operation that failed.
    """
    if not tasks:
        return {}

    running = {name: asyncio.ensure_future(op) for name, op in tasks.items()}
    done, pending = await asyncio.wait(
        running.values(), return_when=asyncio.FIRST_EXCEPTION
    )

    failed = [task for task in done if not task.cancelled() and task.exception()]
    if failed:
        for task in pending:
            task.cancel()
        # Drain cancelled/failed siblings so no "exception never retrieved" noise
        await asyncio.gather(*running.values(), return_exceptions=True)
        first = failed[0]
        name = next(n for n, t in running.items() if t is first)
        logger.warning("Aggregated read '%s' failed: %s", name, first.exception())
        raise first.exception()

    return {name: task.result() for name, task in running.items()}
