"""Knowledge-base resolution.

Turns a knowledge-base source descriptor into one
:class:`ResolvedConfiguration`.  Sources are tried in a fixed priority order:

1. Local file -- read and parsed as a JSON object.
2. Remote with an analysis endpoint -- the endpoint's answer is authoritative.
3. Remote frontend project with a built-in preset -- preset plus
   conversation overrides, no network traffic.
4. Any other remote -- the knowledge-base URL is fetched as JSON.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Optional, Sequence, Union

import httpx

from docforge.errors import RemoteResolutionFailed, SourceUnavailable

from .models import LocalSource, ProjectKind, ProjectSpec, RemoteSource, ResolvedConfiguration
from .overrides import DEFAULT_RULES, OverrideRule, apply_overrides
from .presets import lookup_preset

logger = logging.getLogger(__name__)


class KnowledgeBaseResolver:
    """Resolves knowledge-base sources into configurations.

    The resolver holds no per-request state; one instance can serve any
    number of sequential requests.  HTTP timeouts are owned by the
    ``httpx`` client it creates for each remote call.
    """

    def __init__(
        self,
        timeout: int = 60,
        rules: Sequence[OverrideRule] = DEFAULT_RULES,
    ) -> None:
        self.timeout = timeout
        self.rules = tuple(rules)

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` configured with our timeout."""
        return httpx.AsyncClient(timeout=httpx.Timeout(self.timeout, connect=10.0))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def resolve(
        self,
        source: Union[LocalSource, RemoteSource],
        project_spec: ProjectSpec,
        conversation: str = "",
    ) -> ResolvedConfiguration:
        """Resolve *source* for *project_spec*.

        Args:
            source: Where the knowledge base lives.
            project_spec: The project the configuration is for.
            conversation: Free-form text that may trigger preset overrides.

        Returns:
            The resolved configuration.

        Raises:
            SourceUnavailable: A local file is missing, unreadable or not a
                JSON object.
            RemoteResolutionFailed: A remote request failed or returned a
                non-success status.
        """
        if isinstance(source, LocalSource):
            return await self._load_local(source.path)

        if source.analysis_endpoint:
            return await self._request_analysis(source, project_spec, conversation)

        preset = self._match_preset(project_spec)
        if preset is not None:
            logger.info("Using built-in %s preset", project_spec.framework)
            return apply_overrides(preset, conversation, self.rules)

        return await self._fetch_remote(source.url)

    # ------------------------------------------------------------------
    # Sources
    # ------------------------------------------------------------------

    async def _load_local(self, path: str) -> ResolvedConfiguration:
        """Read a local knowledge-base file."""
        file_path = Path(path)
        logger.info("Loading local knowledge base %s", file_path)
        try:
            raw = await asyncio.to_thread(file_path.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceUnavailable(
                f"Cannot read knowledge base {file_path}: {exc}", path=file_path
            ) from exc

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise SourceUnavailable(
                f"Knowledge base {file_path} is not valid JSON: {exc}",
                path=file_path,
                reason="malformed",
            ) from exc

        if not isinstance(data, dict):
            raise SourceUnavailable(
                f"Knowledge base {file_path} must contain a JSON object",
                path=file_path,
                reason="malformed",
            )

        return ResolvedConfiguration.model_validate(data)

    async def _request_analysis(
        self,
        source: RemoteSource,
        project_spec: ProjectSpec,
        conversation: str,
    ) -> ResolvedConfiguration:
        """Ask the remote analysis endpoint for a ready-made configuration."""
        endpoint = source.analysis_endpoint or ""
        payload = {
            "knowledgeBaseUrl": source.url,
            "projectSpec": project_spec.to_wire(),
            "conversation": conversation,
        }
        logger.info("Requesting knowledge-base analysis from %s", endpoint)
        try:
            async with self._client() as client:
                response = await client.post(endpoint, json=payload)
        except httpx.HTTPError as exc:
            raise RemoteResolutionFailed(
                f"Knowledge-base analysis request to {endpoint} failed: {exc}", url=endpoint
            ) from exc
        return self._parse_response(response, endpoint, "knowledge-base analysis")

    async def _fetch_remote(self, url: str) -> ResolvedConfiguration:
        """Fetch the raw remote knowledge base."""
        logger.info("Fetching remote knowledge base %s", url)
        try:
            async with self._client() as client:
                response = await client.get(url)
        except httpx.HTTPError as exc:
            raise RemoteResolutionFailed(
                f"Fetching remote knowledge base {url} failed: {exc}", url=url
            ) from exc
        return self._parse_response(response, url, "remote knowledge base")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _match_preset(project_spec: ProjectSpec) -> Optional[ResolvedConfiguration]:
        if project_spec.kind is not ProjectKind.FRONTEND:
            return None
        return lookup_preset(project_spec.framework)

    @staticmethod
    def _parse_response(response: httpx.Response, url: str, what: str) -> ResolvedConfiguration:
        status = response.status_code
        if not response.is_success:
            raise RemoteResolutionFailed(
                f"Fetching {what} failed: HTTP {status} {response.reason_phrase}".rstrip(),
                url=url,
                status=status,
            )

        try:
            data: Any = response.json()
        except ValueError as exc:
            raise RemoteResolutionFailed(
                f"{what.capitalize()} at {url} did not return JSON", url=url, status=status
            ) from exc

        if not isinstance(data, dict):
            raise RemoteResolutionFailed(
                f"{what.capitalize()} at {url} must return a JSON object", url=url, status=status
            )

        return ResolvedConfiguration.model_validate(data)
