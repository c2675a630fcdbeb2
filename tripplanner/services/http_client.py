from __future__ import annotations

"""Async HTTP JSON client with retry.

Focus: GET JSON with limited retries and exponential backoff. Callers map
``HttpError`` onto their own domain errors.
"""
import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger("tripplanner.http")


class HttpError(Exception):
    pass


async def get_json(
    url: str,
    *,
    timeout: float = 5.0,
    retries: int = 2,
    backoff: float = 0.5,
    client: Optional[httpx.AsyncClient] = None,
) -> Dict[str, Any]:
    last_err: Optional[Exception] = None
    owns_client = client is None
    client = client or httpx.AsyncClient(timeout=timeout)
    try:
        for attempt in range(retries + 1):
            try:
                resp = await client.get(url, timeout=timeout)
                if resp.status_code >= 400:
                    raise HttpError(f"HTTP {resp.status_code} for {url}")
                data = resp.json()
                if not isinstance(data, dict):
                    raise HttpError(f"Unexpected JSON payload from {url}")
                return data
            except (httpx.HTTPError, HttpError, ValueError) as e:  # ValueError for JSON decode
                last_err = e
                logger.debug("GET %s failed (attempt %d): %s", url, attempt + 1, e)
                if attempt == retries:
                    break
                await asyncio.sleep(backoff * (2**attempt))
    finally:
        if owns_client:
            await client.aclose()
    raise HttpError(f"Failed to fetch JSON from {url}: {last_err}")
