"""Outbound HTTP for the scraper.

Requests go through playwright's APIRequestContext, so the scraper needs the
playwright driver but never launches a browser. Each call opens its own
context and disposes it before returning; nothing is shared across requests.
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from .errors import FetchError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchedDocument:
    url: str
    status: int
    content: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.content)


async def _request(
    method: str,
    url: str,
    headers: Dict[str, str],
    timeout: int,
    form: Optional[Dict[str, str]] = None,
    data: Any = None,
    raise_for_status: bool = True,
) -> FetchedDocument:
    async with async_playwright() as p:
        context = await p.request.new_context(extra_http_headers=headers)
        try:
            if method == "POST":
                response = await context.post(url, form=form, data=data, timeout=timeout)
            else:
                response = await context.get(url, timeout=timeout)
            body = await response.body()
            status = response.status
        except PlaywrightError as e:
            logger.error(f"[FETCH] {method} {url} failed: {e}")
            raise FetchError(f"{method} {url} failed: {e}", url=url) from e
        finally:
            await context.dispose()

    document = FetchedDocument(url=url, status=status, content=body)
    logger.debug(f"[FETCH] {method} {url} -> {status} ({len(body)} bytes)")
    if raise_for_status and not document.ok:
        raise FetchError(f"{method} {url} -> {status}", url=url, status=status)
    return document


async def get_document(url: str, headers: Dict[str, str], timeout: int) -> FetchedDocument:
    return await _request("GET", url, headers, timeout)


async def post_form(url: str, form: Dict[str, str], headers: Dict[str, str], timeout: int) -> FetchedDocument:
    return await _request("POST", url, headers, timeout, form=form)


async def post_json(
    url: str,
    payload: Dict[str, Any],
    headers: Optional[Dict[str, str]] = None,
    timeout: int = 120000,
    raise_for_status: bool = True,
) -> FetchedDocument:
    """POST a JSON body. Used by the dashboard to call the register API.

    With ``raise_for_status=False`` error statuses are returned rather than
    raised, so the caller can read the JSON error envelope.
    """
    return await _request(
        "POST", url, headers or {"Accept": "application/json"}, timeout,
        data=payload, raise_for_status=raise_for_status,
    )
