"""
Middleware for gateway request tracking and logging.
"""
import time
import uuid
from typing import Callable, Optional

from fastapi import Request, Response
from structlog.contextvars import bind_contextvars, clear_contextvars

from .logging_config import get_logger
from .psp.adapter import PSPProvider

logger = get_logger(__name__)

NOTIFY_PREFIX = "/v1/notify/"


def provider_from_path(path: str) -> Optional[str]:
    """Provider name for notification paths, ``None`` for anything else."""
    if not path.startswith(NOTIFY_PREFIX):
        return None
    name = path[len(NOTIFY_PREFIX):].strip("/").lower()
    return name if name in {p.value for p in PSPProvider} else None


async def request_id_middleware(request: Request, call_next: Callable) -> Response:
    """
    Tag each request with a request_id (echoed back as X-Request-ID) and,
    on notification paths, the provider that is calling.

    The query string is never logged: provider pushes carry the signature
    in it.
    """
    request_id = request.headers.get('X-Request-ID') or str(uuid.uuid4())

    clear_contextvars()
    bind_contextvars(
        request_id=request_id,
        method=request.method,
        path=request.url.path,
    )
    provider = provider_from_path(request.url.path)
    if provider:
        bind_contextvars(provider=provider)

    request.state.request_id = request_id

    logger.info(
        "request_started",
        client_host=request.client.host if request.client else None,
        # An empty User-Agent is how server pushes identify themselves
        has_user_agent=bool(request.headers.get("user-agent")),
    )

    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception as exc:
        logger.error(
            "request_failed",
            exc_info=exc,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        raise
    else:
        log = logger.warning if response.status_code >= 400 else logger.info
        log(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        response.headers['X-Request-ID'] = request_id
        return response
    finally:
        clear_contextvars()
