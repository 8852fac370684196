"""GET-JSON helper used by the NBP rate provider.

Built on stdlib urllib. A failed fetch does not raise: after the last attempt
the caller receives an `Err` describing the final failure. Transport errors,
timeouts, 5xx and 429 responses are retried with exponential backoff; other
4xx responses and undecodable bodies fail at once.
"""

from __future__ import annotations

import json
import logging
import time
import urllib.error
import urllib.request
from typing import Any, Callable, Optional

from spendbook.models.result import Err, Ok, Result

logger = logging.getLogger("spendbook.http")


class HttpError(Exception):
    """One failed attempt."""

    def __init__(self, message: str, retryable: bool = True):
        super().__init__(message)
        self.retryable = retryable


def _status_error(status: int) -> HttpError:
    return HttpError(f"HTTP {status}", retryable=status >= 500 or status == 429)


def _attempt(request: urllib.request.Request, timeout: float) -> Any:
    try:
        with urllib.request.urlopen(request, timeout=timeout) as resp:  # nosec B310
            status = getattr(resp, "status", 200)
            if status >= 400:
                raise _status_error(status)
            body = resp.read()
    except urllib.error.HTTPError as e:
        raise _status_error(e.code) from e
    except OSError as e:  # URLError, timeouts, resets
        raise HttpError(f"transport error: {e}") from e
    try:
        return json.loads(body.decode("utf-8"))
    except ValueError as e:
        raise HttpError("response body is not JSON", retryable=False) from e


def get_json(
    url: str,
    *,
    timeout: float = 5.0,
    retries: int = 2,
    backoff: float = 0.5,
    sleep: Callable[[float], None] = time.sleep,
) -> Result[Any]:
    request = urllib.request.Request(url, headers={"Accept": "application/json"})
    attempts = retries + 1
    failure: Optional[HttpError] = None
    for attempt in range(attempts):
        try:
            return Ok(_attempt(request, timeout))
        except HttpError as e:
            failure = e
            logger.warning(
                "GET %s failed (attempt %d of %d): %s", url, attempt + 1, attempts, e
            )
        if not failure.retryable or attempt == retries:
            break
        sleep(backoff * (2**attempt))
    return Err(f"GET {url} failed: {failure}")
