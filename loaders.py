import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, NamedTuple, Optional

from streamlit.runtime.scriptrunner import add_script_run_ctx, get_script_run_ctx

from api_client import ApiError

logger = logging.getLogger(__name__)


class Result(NamedTuple):
    value: Any = None
    error: Optional[ApiError] = None

    @property
    def ok(self):
        return self.error is None


def _settle(call):
    try:
        return Result(value=call())
    except ApiError as e:
        return Result(error=e)


def fetch_all(**calls):
    """Run independent backend calls together and wait for all of them.

    Each call settles on its own: an ApiError becomes ``Result.error`` while
    the others still complete. The pool lives only as long as this call, so
    nothing keeps running after the page that asked for it has moved on.
    """
    if not calls:
        return {}

    ctx = get_script_run_ctx()

    def attach_context():
        if ctx is not None:
            add_script_run_ctx(threading.current_thread(), ctx)

    pool = ThreadPoolExecutor(max_workers=len(calls), initializer=attach_context)
    try:
        futures = {name: pool.submit(_settle, call) for name, call in calls.items()}
        results = {name: future.result() for name, future in futures.items()}
    finally:
        pool.shutdown(wait=False, cancel_futures=True)

    failed = [name for name, result in results.items() if not result.ok]
    if failed:
        logger.debug("fetch_all: %d of %d calls failed: %s", len(failed), len(results), ", ".join(failed))
    return results
