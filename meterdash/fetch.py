from __future__ import annotations
import logging
from typing import Any

import httpx

from . import exceptions, validate

logger = logging.getLogger(__name__)


async def fetch_records(client: httpx.AsyncClient, url: str) -> list[Any]:
    """
    GET the readings endpoint and return its decoded JSON array.

    Raises:
        FetchError: transport failure, non-2xx status or an undecodable body
        PayloadError: the body decoded but is not an array
    """
    try:
        resp = await client.get(url)
        resp.raise_for_status()
    except httpx.HTTPError as e:
        raise exceptions.FetchError(f"Request to {url} failed: {e}") from e

    try:
        payload = resp.json()
    except ValueError as e:
        raise exceptions.FetchError(f"Response from {url} is not valid JSON.") from e

    records = validate.validate_payload(payload)
    logger.debug("Fetched %d record(s) from %s", len(records), url)
    return records
