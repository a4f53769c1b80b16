import asyncio
import logging
from typing import Awaitable, Dict, Optional

from brainbytes.core.config import settings

FALLBACK_REPLY = {
    "category": "error",
    "response": "I'm sorry, but I couldn't process your request in time. Please try again later.",
}


def _discard_late_result(task: asyncio.Task):
    """Retrieve the outcome of a gateway call that lost the race."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logging.warning(f"Late gateway call failed after the deadline: {exc}")
    else:
        logging.info("Late gateway reply discarded")


async def guarded_reply(call: Awaitable[Dict[str, str]], timeout: Optional[float] = None) -> Dict[str, str]:
    """
    Race a gateway call against a deadline.

    The gateway result wins if it settles first. A deadline or any error
    yields FALLBACK_REPLY instead. The losing call keeps running; its
    result is dropped.
    """
    if timeout is None:
        timeout = settings.AI_TIMEOUT_SECONDS

    task = asyncio.ensure_future(call)
    done, _ = await asyncio.wait({task}, timeout=timeout)

    if task not in done:
        logging.error(f"Gateway call timed out after {timeout}s")
        task.add_done_callback(_discard_late_result)
        return dict(FALLBACK_REPLY)

    try:
        return task.result()
    except Exception as e:
        logging.error(f"Gateway call failed: {e}")
        return dict(FALLBACK_REPLY)
