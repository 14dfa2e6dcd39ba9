"""HTTP plumbing shared by every endpoint."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import httpx

from umi_ocr_client.config import get_settings
from umi_ocr_client.errors import RequestFailed

logger = logging.getLogger(__name__)


@asynccontextmanager
async def client_scope(client: httpx.AsyncClient | None) -> AsyncIterator[httpx.AsyncClient]:
    """Use the caller's client, or open a short-lived one for a single call."""
    if client is not None:
        yield client
        return
    settings = get_settings()
    async with httpx.AsyncClient(timeout=settings.timeout) as owned:
        yield owned


def _check_status(operation: str, resp: httpx.Response) -> None:
    try:
        resp.raise_for_status()
    except httpx.HTTPStatusError as exc:
        logger.warning("%s: HTTP %d %s", operation, resp.status_code, resp.reason_phrase)
        raise RequestFailed(
            operation, resp.reason_phrase, status_code=resp.status_code, url=str(resp.url),
        ) from exc


async def request_json(
    operation: str,
    method: str,
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
    **kwargs: Any,
) -> Any:
    """Send one request and return the decoded JSON body.

    Transport errors and non-2xx statuses raise RequestFailed before the
    body is parsed.
    """
    logger.debug("%s: %s %s", operation, method, url)
    async with client_scope(client) as c:
        try:
            resp = await c.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s: transport error for %s: %s", operation, url, exc)
            raise RequestFailed(operation, str(exc) or type(exc).__name__, url=url) from exc
        _check_status(operation, resp)
        try:
            return resp.json()
        except ValueError as exc:
            raise RequestFailed(
                operation, "response is not valid JSON", status_code=resp.status_code, url=url,
            ) from exc


async def download_to(
    url: str,
    dest: Path,
    *,
    client: httpx.AsyncClient | None = None,
) -> Path:
    """Stream ``url`` into ``dest`` and return the written path."""
    async with client_scope(client) as c:
        try:
            async with c.stream("GET", url) as resp:
                _check_status("download", resp)
                with open(dest, "wb") as f:
                    async for chunk in resp.aiter_bytes():
                        f.write(chunk)
        except httpx.HTTPError as exc:
            # No truncated file is left behind
            Path(dest).unlink(missing_ok=True)
            raise RequestFailed("download", str(exc) or type(exc).__name__, url=url) from exc
    logger.info("Saved %s to %s", url, dest)
    return dest
