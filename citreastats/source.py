"""Fetching and parsing the counters endpoint."""

import logging
from typing import Any

import requests

from .config import DEFAULT_SOURCE_URL
from .models import CounterRecord

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Raised when counters cannot be fetched.

    All causes (transport errors, non-2xx responses, malformed bodies) are
    collapsed into this one kind. The cause is kept as ``__cause__`` for
    logging only.
    """

    def __init__(self, message: str = "failed") -> None:
        super().__init__(message)


def parse_counters(payload: Any) -> list[CounterRecord]:
    """Parse a decoded response body into counter records.

    Order is preserved exactly as received.

    Args:
        payload: Decoded JSON body, expected as ``{"counters": [...]}``.

    Returns:
        List of CounterRecord in response order.

    Raises:
        ValueError: If the body does not have the expected shape.
    """
    if not isinstance(payload, dict):
        raise ValueError("Response body must be a JSON object")

    counters = payload.get("counters")
    if not isinstance(counters, list):
        raise ValueError("Response body 'counters' field must be a list")

    return [CounterRecord.from_dict(entry) for entry in counters]


def fetch_counters(
    url: str = DEFAULT_SOURCE_URL,
    session: requests.Session | None = None,
) -> list[CounterRecord]:
    """Fetch the current counters with a single GET request.

    No retries, no timeout and no backoff: one attempt per call.

    Args:
        url: Endpoint returning the counters envelope.
        session: Optional session for connection reuse.

    Returns:
        List of CounterRecord in response order.

    Raises:
        FetchError: If the request fails, the status is not 2xx, or the body
            is malformed.
    """
    http = session if session is not None else requests

    try:
        response = http.get(url, headers={"Accept": "application/json"})
    except requests.RequestException as e:
        logger.warning("Error fetching counters from %s: %s", url, e)
        raise FetchError() from e

    if not 200 <= response.status_code < 300:
        logger.warning("Counters endpoint %s returned HTTP %d", url, response.status_code)
        raise FetchError()

    try:
        counters = parse_counters(response.json())
    except (ValueError, RecursionError) as e:
        # ValueError covers requests' JSONDecodeError; deeply nested bodies overflow the decoder
        logger.warning("Malformed counters response from %s: %s", url, e)
        raise FetchError() from e

    logger.debug("Fetched %d counters from %s", len(counters), url)
    return counters
