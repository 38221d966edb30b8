"""Thin async wrapper around the Confluence REST content API."""

from __future__ import annotations

import asyncio
import base64
import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from decision_sync.config import SyncConfig
from decision_sync.models.document import DocumentRef, FetchOutcome

logger = logging.getLogger(__name__)

SEARCH_PATH = "/wiki/rest/api/content/search"
CONTENT_PATH = "/wiki/rest/api/content/{page_id}"


class ConfluenceError(RuntimeError):
    """Base error for failed Confluence requests."""


class DiscoveryError(ConfluenceError):
    """Listing the pages under the root failed; the run cannot continue."""


class PageFetchError(ConfluenceError):
    """A single page body could not be fetched."""

    def __init__(self, page_id: int, message: str) -> None:
        super().__init__(message)
        self.page_id = page_id


def build_credential(email: Optional[str], api_token: Optional[str]) -> str:
    """Encode the e-mail/token pair used for Basic auth."""
    if not email or not api_token:
        raise ValueError("CONFLUENCE_EMAIL and CONFLUENCE_API_TOKEN must be set.")
    return base64.b64encode(f"{email}:{api_token}".encode("utf-8")).decode("ascii")


def _has_next_page(payload: Dict[str, Any], collected: int) -> bool:
    total = payload.get("totalSize")
    if total is not None:
        return collected < int(total)
    links = payload.get("_links") or {}
    return bool(links.get("next"))


class ConfluenceClient:
    """Discovers decision pages and fetches their storage-format bodies."""

    def __init__(
        self,
        config: SyncConfig,
        credential: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not credential:
            raise ValueError("A Confluence credential is required.")
        self.config = config
        self.client = httpx.AsyncClient(
            base_url=config.base_url,
            headers={
                "Authorization": f"Basic {credential}",
                "Accept": "application/json",
            },
            timeout=httpx.Timeout(config.request_timeout),
            transport=transport,
        )

    async def __aenter__(self) -> "ConfluenceClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _get(self, path: str, params: Dict[str, Any]) -> httpx.Response:
        """GET bounded end to end by ``request_timeout``, not per phase."""
        return await asyncio.wait_for(
            self.client.get(path, params=params), timeout=self.config.request_timeout
        )

    async def discover_all(self) -> List[DocumentRef]:
        """Return every page under the configured root, in store order.

        A page id reported twice is kept at its first position only.
        """
        refs: List[DocumentRef] = []
        seen_ids = set()
        cql = f"ancestor={self.config.root_id} AND type=page"
        start = 0

        while True:
            params = {"cql": cql, "limit": self.config.page_size, "start": start}
            logger.info("GET %s start=%s limit=%s", SEARCH_PATH, start, self.config.page_size)
            try:
                response = await self._get(SEARCH_PATH, params)
            except (httpx.HTTPError, asyncio.TimeoutError) as exc:
                raise DiscoveryError(f"Request failed fetching page list: {exc!r}") from exc
            if not response.is_success:
                raise DiscoveryError(
                    f"HTTP {response.status_code} fetching page list: {response.text}"
                )

            try:
                payload = response.json()
                results = payload.get("results", [])
                page_refs = [
                    DocumentRef(id=int(result["id"]), title=result["title"]) for result in results
                ]
                size = int(payload.get("size", len(results)))
                has_next = _has_next_page(payload, start + size)
            except (ValueError, KeyError, TypeError, AttributeError) as exc:
                raise DiscoveryError(f"Malformed page list response: {exc!r}") from exc

            for ref in page_refs:
                if ref.id in seen_ids:
                    logger.warning("Ignoring duplicate page [%s] %s", ref.id, ref.title)
                    continue
                seen_ids.add(ref.id)
                refs.append(ref)

            start += size
            logger.info("Received %s results (%s collected so far)", size, start)

            if size == 0 or not has_next:
                break
        return refs

    async def fetch_body(self, ref: DocumentRef) -> str:
        """Return the storage-format markup of one page."""
        path = CONTENT_PATH.format(page_id=ref.id)
        try:
            response = await self._get(path, {"expand": "body.storage"})
        except (httpx.HTTPError, asyncio.TimeoutError) as exc:
            raise PageFetchError(ref.id, f"Request failed fetching page {ref.id}: {exc!r}") from exc
        if not response.is_success:
            raise PageFetchError(
                ref.id, f"HTTP {response.status_code} fetching page {ref.id}: {response.text}"
            )
        return response.json()["body"]["storage"]["value"]

    async def fetch_bodies(self, refs: Sequence[DocumentRef]) -> List[FetchOutcome]:
        """Fetch every body concurrently and wait until all of them settle.

        One page failing never cancels the others. Outcomes come back in the
        same order as ``refs``.
        """
        limit = self.config.fetch_concurrency
        semaphore = asyncio.Semaphore(limit) if limit else None

        async def fetch(ref: DocumentRef) -> str:
            if semaphore is None:
                return await self.fetch_body(ref)
            async with semaphore:
                return await self.fetch_body(ref)

        results = await asyncio.gather(*(fetch(ref) for ref in refs), return_exceptions=True)

        outcomes: List[FetchOutcome] = []
        for ref, result in zip(refs, results):
            if isinstance(result, Exception):
                message = str(result) if isinstance(result, ConfluenceError) else (
                    f"Failed to fetch page {ref.id}: {result!r}"
                )
                outcomes.append(FetchOutcome(ref=ref, error=message))
            elif isinstance(result, BaseException):
                raise result
            else:
                outcomes.append(FetchOutcome(ref=ref, body=result))
        return outcomes
