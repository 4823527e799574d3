"""Async client for the Feishu open platform.

Wraps the Feishu HTTP API (tenant access token, docx content, wiki page
detail) with timeout handling and typed errors.  All methods are async so
they integrate cleanly with the rest of the pipeline.

Typical usage::

    client = FeishuClient(FeishuConfig(app_id="cli_xxx", app_secret="..."))
    text = await client.get_document(extract_doc_token(url))
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

import httpx

from docforge.config import FeishuConfig
from docforge.errors import DocumentFetchError, InvalidReference, ValidationError

logger = logging.getLogger(__name__)

_DOC_TOKEN_PATTERN = re.compile(r"/docx/([^/?#]+)")
_WIKI_TOKEN_PATTERN = re.compile(r"/wiki/([^/?#]+)")


# ---------------------------------------------------------------------------
# Token extraction
# ---------------------------------------------------------------------------


def extract_doc_token(url: str) -> str:
    """Return the document token from a ``.../docx/<token>`` URL.

    Raises:
        InvalidReference: If the URL has no ``/docx/`` segment.
    """
    match = _DOC_TOKEN_PATTERN.search(url)
    if not match:
        raise InvalidReference(f"Invalid Feishu document URL: {url}", reference=url)
    return match.group(1)


def extract_wiki_token(url: str) -> str:
    """Return the page token from a ``.../wiki/<token>`` URL.

    Raises:
        InvalidReference: If the URL has no ``/wiki/`` segment.
    """
    match = _WIKI_TOKEN_PATTERN.search(url)
    if not match:
        raise InvalidReference(f"Invalid Feishu wiki URL: {url}", reference=url)
    return match.group(1)


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class FeishuClient:
    """Async client for the Feishu REST API.

    A tenant access token is requested for every public call; nothing is
    cached between calls.
    """

    def __init__(self, config: FeishuConfig) -> None:
        self.config = config
        self.base_url = config.base_url.rstrip("/")
        self.timeout = config.timeout

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` configured with our base URL and timeout."""
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout, connect=10.0),
        )

    async def _request(
        self,
        method: str,
        path: str,
        action: str,
        access_token: Optional[str] = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Send one request and return the decoded JSON body.

        Feishu reports application errors as a non-zero ``code`` inside a
        200 response; both that and non-success HTTP statuses raise.
        """
        headers = {"Content-Type": "application/json; charset=utf-8"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"

        try:
            async with self._client() as client:
                response = await client.request(method, path, headers=headers, **kwargs)
        except httpx.TimeoutException as exc:
            raise DocumentFetchError(f"{action} timed out after {self.timeout}s") from exc
        except httpx.HTTPError as exc:
            raise DocumentFetchError(f"{action} failed: {exc}") from exc

        if not response.is_success:
            raise DocumentFetchError(
                f"{action} failed: HTTP {response.status_code} {response.reason_phrase}".rstrip(),
                status=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise DocumentFetchError(
                f"{action} returned a non-JSON body", status=response.status_code
            ) from exc

        if not isinstance(data, dict):
            raise DocumentFetchError(f"{action} returned an unexpected body", status=response.status_code)
        if data.get("code", 0) != 0:
            raise DocumentFetchError(
                f"{action} failed: code {data.get('code')} {data.get('msg', '')}".rstrip(),
                status=response.status_code,
            )
        return data

    @staticmethod
    def _document_text(data: Any) -> str:
        """Pull the document text out of a docx content payload.

        Plain-text payloads carry the text under ``content``; anything else
        is rendered as indented JSON.
        """
        if isinstance(data, dict) and isinstance(data.get("content"), str):
            return data["content"]
        return json.dumps(data, ensure_ascii=False, indent=2)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get_tenant_access_token(self) -> str:
        """Exchange the app credentials for a tenant access token.

        Raises:
            ValidationError: If the app ID or secret is not configured.
            DocumentFetchError: If the exchange fails.
        """
        if not self.config.has_credentials:
            raise ValidationError(
                "Feishu credentials are not configured; set FEISHU_APP_ID and FEISHU_APP_SECRET"
            )

        data = await self._request(
            "POST",
            "/auth/v3/tenant_access_token/internal",
            "Requesting Feishu access token",
            json={"app_id": self.config.app_id, "app_secret": self.config.app_secret},
        )
        token = data.get("tenant_access_token")
        if not token:
            raise DocumentFetchError("Feishu access token response had no tenant_access_token")
        return token

    async def get_document(self, doc_token: str, access_token: Optional[str] = None) -> str:
        """Return the content of the docx document *doc_token* as text."""
        access_token = access_token or await self.get_tenant_access_token()
        logger.info("Fetching Feishu document %s", doc_token)
        data = await self._request(
            "GET",
            f"/docx/v1/documents/{doc_token}/content",
            "Fetching document content",
            access_token=access_token,
        )
        return self._document_text(data.get("data"))

    async def get_wiki_page(self, page_token: str, access_token: str) -> dict[str, Any]:
        """Return the detail record of wiki page *page_token*."""
        data = await self._request(
            "GET",
            "/wiki/v2/page/detail",
            "Fetching wiki page detail",
            access_token=access_token,
            params={"page_token": page_token},
        )
        return data.get("data") or {}

    async def get_wiki_document(self, wiki_url: str) -> str:
        """Return the text of the docx document bound to a wiki page.

        Raises:
            InvalidReference: If *wiki_url* has no ``/wiki/`` segment.
            DocumentFetchError: If the page is not bound to a docx document.
        """
        page_token = extract_wiki_token(wiki_url)
        access_token = await self.get_tenant_access_token()
        logger.info("Resolving Feishu wiki page %s", page_token)
        page = await self.get_wiki_page(page_token, access_token)

        if page.get("obj_type") == "docx" and page.get("obj_token"):
            return await self.get_document(page["obj_token"], access_token=access_token)

        raise DocumentFetchError(
            f"Wiki page {page_token} is not bound to a docx document "
            f"(type: {page.get('obj_type') or 'none'})"
        )
