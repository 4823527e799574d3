"""docforge configuration.

Centralised, typed configuration for the pipeline.  All settings use Pydantic
v2 models so they can be validated at construction time and serialised
to/from JSON.  Credentials are carried explicitly on a ``Config`` instance that
is handed to ``Pipeline``; only :meth:`Config.from_env` touches the process
environment, and only the CLI calls it.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class FeishuConfig(BaseModel):
    """Credentials and endpoint for the Feishu open platform."""

    app_id: str = Field(default="", description="Feishu application ID")
    app_secret: str = Field(default="", description="Feishu application secret")
    base_url: str = Field(default="https://open.feishu.cn/open-apis")
    timeout: int = Field(default=30, ge=1, description="Per-request timeout in seconds")

    @property
    def has_credentials(self) -> bool:
        """``True`` when both the app ID and the app secret are set."""
        return bool(self.app_id and self.app_secret)


class HttpConfig(BaseModel):
    """Settings for knowledge-base and analysis-endpoint requests."""

    timeout: int = Field(default=60, ge=1, description="Per-request timeout in seconds")


class Config(BaseModel):
    """Global docforge configuration.

    Instances are typically created once by the CLI entry point and then
    passed to :class:`docforge.pipeline.Pipeline`.
    """

    feishu: FeishuConfig = Field(default_factory=FeishuConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls, base: "Config | None" = None) -> "Config":
        """Build a ``Config`` from environment variables.

        Values found in the environment override the matching fields of
        *base* (or of the defaults).  Recognised variables (all optional):
            FEISHU_APP_ID, FEISHU_APP_SECRET, FEISHU_BASE_URL,
            DOCFORGE_HTTP_TIMEOUT.
        """
        base = base or cls()

        feishu_kwargs: dict[str, Any] = base.feishu.model_dump()
        if os.environ.get("FEISHU_APP_ID"):
            feishu_kwargs["app_id"] = os.environ["FEISHU_APP_ID"]
        if os.environ.get("FEISHU_APP_SECRET"):
            feishu_kwargs["app_secret"] = os.environ["FEISHU_APP_SECRET"]
        if os.environ.get("FEISHU_BASE_URL"):
            feishu_kwargs["base_url"] = os.environ["FEISHU_BASE_URL"]

        http_kwargs: dict[str, Any] = base.http.model_dump()
        if os.environ.get("DOCFORGE_HTTP_TIMEOUT"):
            http_kwargs["timeout"] = int(os.environ["DOCFORGE_HTTP_TIMEOUT"])

        return cls(
            feishu=FeishuConfig(**feishu_kwargs),
            http=HttpConfig(**http_kwargs),
        )
