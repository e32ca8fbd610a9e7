"""
JSON GET with bounded retries for static remote resources.
Transient failures (timeouts, connection errors, 502/503/504) are retried with
exponential backoff; client errors and bad JSON are final.
"""
import logging
import time
from typing import Any, Optional, Tuple

import requests

logger = logging.getLogger(__name__)

RETRY_STATUSES = (502, 503, 504)
DEFAULT_INITIAL_BACKOFF = 0.5


def get_json_with_retries(
    url: str,
    timeout: int = 10,
    max_retries: int = 1,
    initial_backoff: float = DEFAULT_INITIAL_BACKOFF,
) -> Tuple[Optional[Any], Optional[str]]:
    """Returns (payload, None) on success, (None, error_message) on failure."""
    last_error: Optional[str] = None
    for attempt in range(max(1, max_retries)):
        try:
            resp = requests.get(url, headers={"Accept": "application/json"}, timeout=timeout)
        except requests.Timeout as e:
            last_error = f"Read timed out: {e}"
        except requests.RequestException as e:
            last_error = f"{type(e).__name__}: {e}"
        else:
            if resp.status_code in RETRY_STATUSES:
                last_error = f"HTTP {resp.status_code}"
            else:
                try:
                    resp.raise_for_status()
                except requests.HTTPError as e:
                    return None, f"HTTP {resp.status_code}: {e}"
                try:
                    return resp.json(), None
                except ValueError:
                    return None, "invalid JSON"
        logger.warning(
            "HTTP_FETCH attempt=%s/%s url=%s error=%s",
            attempt + 1, max_retries, url[:60], last_error,
        )
        if attempt < max_retries - 1:
            delay = initial_backoff * (2 ** attempt)
            logger.info("HTTP_FETCH backoff %.1fs before retry", delay)
            time.sleep(delay)
    return None, last_error
