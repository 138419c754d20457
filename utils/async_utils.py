"""
Async utilities for the Portfolio Panel
"""

import asyncio
import logging
import functools
from typing import Callable, Any
from concurrent.futures import ThreadPoolExecutor

# Set up logging
logger = logging.getLogger(__name__)

# Global thread pool executor for blocking store I/O
_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="async_worker")


async def run_in_executor(func: Callable, *args, **kwargs) -> Any:
    """
    Run a synchronous function in the thread pool executor

    Raises:
        RuntimeError: If no event loop is running
    """
    try:
        # Get the currently running event loop - fail fast if none exists
        loop = asyncio.get_running_loop()
    except RuntimeError as e:
        logger.error("No event loop available for run_in_executor")
        raise RuntimeError("No async event loop available") from e

    bound_func = functools.partial(func, *args, **kwargs)
    return await loop.run_in_executor(_executor, bound_func)


def run_sync(coro) -> Any:
    """Run a coroutine to completion from synchronous code"""
    return asyncio.run(coro)


def shutdown_all():
    """Shutdown the shared executor"""
    logger.info("Shutting down async resources")
    _executor.shutdown(wait=False)  # Don't wait for threads to finish
