"""
# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# Created Date: Wed Oct 08 2025
# SPDX-License-Identifier: MIT
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from mauka.errors import PartialDataUnavailable

logger = logging.getLogger(__name__)


def with_session(session_factory: Callable[[], Session], query: Callable[..., Any], *args, **kwargs):
    """
    Wraps a query so that it runs on its own session. Sessions are not shared between threads.
    """

    def run():
        db = session_factory()
        try:
            return query(db, *args, **kwargs)
        finally:
            db.close()

    return run


async def load_independently(
    fetchers: Dict[str, Callable[[], Any]],
    defaults: Dict[str, Any],
    timeout: Optional[float] = None,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Runs every fetcher concurrently on the worker pool and waits for all of them together.

    A fetcher that fails, or is still running when ``timeout`` expires, does not
    affect the others: its widget falls back to its default value and its name is
    reported in the returned list of unavailable widgets.
    """
    results: Dict[str, Any] = {}
    unavailable: List[str] = []
    if not fetchers:
        return results, unavailable

    tasks = {name: asyncio.ensure_future(run_in_threadpool(fetcher)) for name, fetcher in fetchers.items()}
    await asyncio.wait(tasks.values(), timeout=timeout)

    for name, task in tasks.items():
        if not task.done():
            # The worker thread keeps running; its result is discarded
            task.cancel()
            logger.warning("%s", PartialDataUnavailable(name, TimeoutError(f"no answer within {timeout}s")))
        elif task.exception() is not None:
            logger.warning("%s", PartialDataUnavailable(name, task.exception()))
        else:
            results[name] = task.result()
            continue
        unavailable.append(name)
        results[name] = defaults.get(name)
    return results, unavailable
