# -*- coding: utf-8 -*-
"""Bounded execution of blocking store calls from async resolvers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional, TypeVar

from .config import settings
from .errors import StoreTimeout

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def run_store_call(
    fn: Callable[..., T],
    *args: Any,
    timeout: Optional[float] = None,
    **kwargs: Any,
) -> T:
    """Run ``fn`` in a worker thread, failing with ``StoreTimeout`` past the bound."""
    limit = settings.store_timeout_sec if timeout is None else timeout
    try:
        return await asyncio.wait_for(asyncio.to_thread(fn, *args, **kwargs), timeout=limit)
    except asyncio.TimeoutError as exc:
        name = getattr(fn, "__name__", repr(fn))
        logger.error("Store call %s exceeded %.2fs", name, limit)
        raise StoreTimeout(f"Interaction store did not respond within {limit:g}s") from exc
