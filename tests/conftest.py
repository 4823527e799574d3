"""Shared pytest fixtures for the docforge test suite.

Provides reusable fixtures for:
- Project specifications and resolved configurations
- Knowledge-base files on disk
- Mocked ``httpx.AsyncClient`` instances
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock

import pytest

from docforge.knowledge.models import ProjectSpec, ResolvedConfiguration


# ---------------------------------------------------------------------------
# Project specifications
# ---------------------------------------------------------------------------

@pytest.fixture
def react_spec() -> ProjectSpec:
    """A frontend React project with default directories."""
    return ProjectSpec(type="frontend", framework="React")


@pytest.fixture
def backend_spec() -> ProjectSpec:
    """A backend Express project with custom directories and conventions."""
    return ProjectSpec(
        type="backend",
        framework="Express",
        structure={"src": "lib", "test": "spec"},
        conventions=["Use ESM modules"],
    )


# ---------------------------------------------------------------------------
# Configurations
# ---------------------------------------------------------------------------

KNOWLEDGE_BASE_DOCUMENT: dict[str, Any] = {
    "naming": {"components": "PascalCase", "files": "kebab-case"},
    "structure": {"components": "src/components", "utils": "src/utils"},
    "conventions": ["Use TypeScript", "Use CSS Modules for styling"],
    "templates": {
        "component": {"path": "templates/component.tsx", "content": "export {}"},
    },
    "owner": "platform-team",
}


@pytest.fixture
def kb_document() -> dict[str, Any]:
    """A flat knowledge-base document (fresh copy per test)."""
    return json.loads(json.dumps(KNOWLEDGE_BASE_DOCUMENT))


@pytest.fixture
def sample_configuration(kb_document: dict[str, Any]) -> ResolvedConfiguration:
    """The sample knowledge base as a resolved configuration."""
    return ResolvedConfiguration.model_validate(kb_document)


@pytest.fixture
def kb_file(tmp_path: Path, kb_document: dict[str, Any]) -> Path:
    """The sample knowledge base written to a local JSON file."""
    path = tmp_path / "knowledge-base.json"
    path.write_text(json.dumps(kb_document, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def analysis_document() -> dict[str, Any]:
    """A finished analysis as returned by a remote analysis endpoint."""
    return {
        "analysis": {"modules": ["accounts"], "requirements": ["REST API"]},
        "structure": {
            "src": {"accounts": {"service.ts": "export const service = {};\n"}},
            "README.md": "# Accounts\n",
        },
        "code": {},
        "conventions": ["Remote convention"],
    }


# ---------------------------------------------------------------------------
# HTTP mocking
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_async_client() -> Callable[..., AsyncMock]:
    """Factory for a mocked ``httpx.AsyncClient`` usable as ``async with``.

    Each keyword names a client method (``get``, ``post``, ``request``).  A
    response becomes its return value; an exception or a list becomes its
    side effect.

    Usage:
        client = mock_async_client(get=httpx.Response(200, json={}))
        with patch("httpx.AsyncClient", return_value=client):
            ...
    """

    def _factory(**methods: Any) -> AsyncMock:
        client = AsyncMock()
        for name, value in methods.items():
            if isinstance(value, (list, BaseException)):
                setattr(client, name, AsyncMock(side_effect=value))
            else:
                setattr(client, name, AsyncMock(return_value=value))
        client.__aenter__ = AsyncMock(return_value=client)
        client.__aexit__ = AsyncMock(return_value=False)
        return client

    return _factory
