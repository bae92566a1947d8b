import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


@dataclass
class SideCallOutcome:
    name: str
    ok: bool
    detail: Optional[str] = None


async def fire_and_report(name: str, call: Callable[[], Awaitable[Any]]) -> SideCallOutcome:
    """Run a side effect whose failure must not affect the caller.

    ``call`` may return a string to use as the outcome detail. Any exception is
    logged and turned into a failed outcome, never re-raised.
    """
    try:
        detail = await call()
    except Exception as exc:
        logger.exception("%s failed (non-blocking)", name)
        return SideCallOutcome(name=name, ok=False, detail=str(exc) or exc.__class__.__name__)
    logger.info("%s completed", name)
    return SideCallOutcome(name=name, ok=True, detail=detail if isinstance(detail, str) else None)
