"""Pydantic v2 models for knowledge-base resolution.

Defines the knowledge-base source descriptors, the project specification a
caller supplies, and the resolved configuration every source is turned into.
"""

from __future__ import annotations

from enum import Enum
from pathlib import PurePosixPath
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    TypeAdapter,
    ValidatorFunctionWrapHandler,
    field_validator,
    model_validator,
)
from pydantic import ValidationError as PydanticValidationError

from docforge.errors import ValidationError


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class ProjectKind(str, Enum):
    """Kind of project being scaffolded."""
    FRONTEND = "frontend"
    BACKEND = "backend"
    FULLSTACK = "fullstack"


# ---------------------------------------------------------------------------
# Knowledge-base sources
# ---------------------------------------------------------------------------

class LocalSource(BaseModel):
    """A knowledge base stored as a JSON file on the local filesystem."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    type: Literal["local"] = "local"
    path: str = Field(..., min_length=1, description="Path to the knowledge-base JSON file")


class RemoteSource(BaseModel):
    """A knowledge base served over HTTP, optionally behind an analysis endpoint."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, populate_by_name=True)

    type: Literal["remote"] = "remote"
    url: str = Field(..., min_length=1, description="Knowledge-base URL")
    analysis_endpoint: Optional[str] = Field(
        default=None,
        alias="analysisEndpoint",
        description="Endpoint that analyses the knowledge base on the server side",
    )

    @field_validator("analysis_endpoint")
    @classmethod
    def _blank_endpoint_is_absent(cls, value: Optional[str]) -> Optional[str]:
        return value or None


KnowledgeBaseSource = Annotated[Union[LocalSource, RemoteSource], Field(discriminator="type")]

_SOURCE_ADAPTER: TypeAdapter[Any] = TypeAdapter(KnowledgeBaseSource)


def parse_source(data: Any) -> Union[LocalSource, RemoteSource]:
    """Validate a raw ``{"type": "local" | "remote", ...}`` mapping.

    Raises:
        ValidationError: If the type tag is unknown or a required field
            (``path`` for local, ``url`` for remote) is missing or empty.
    """
    try:
        return _SOURCE_ADAPTER.validate_python(data)
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid knowledge base configuration: {exc}") from exc


# ---------------------------------------------------------------------------
# Project specification
# ---------------------------------------------------------------------------

def relative_parts(path: str) -> tuple[str, ...]:
    """Split a relative directory into its segments.

    Backslashes count as separators and ``.`` segments are dropped.

    Raises:
        ValueError: If *path* is absolute, climbs out with ``..`` or names
            no directory at all.
    """
    pure = PurePosixPath(path.replace("\\", "/"))
    if pure.is_absolute():
        raise ValueError(f"directory must be relative: {path!r}")

    parts = tuple(part for part in pure.parts if part != ".")
    if ".." in parts:
        raise ValueError(f"directory must not contain '..': {path!r}")
    if not parts:
        raise ValueError(f"directory is empty: {path!r}")
    return parts


class ProjectStructure(BaseModel):
    """Relative directory for each logical role of the project."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    src: Optional[str] = Field(default=None, description="Source directory")
    test: Optional[str] = Field(default=None, description="Test directory")
    docs: Optional[str] = Field(default=None, description="Documentation directory")

    @field_validator("src", "test", "docs")
    @classmethod
    def _must_stay_inside_project(cls, value: Optional[str]) -> Optional[str]:
        if value:
            relative_parts(value)
        return value

    def path_for(self, role: str) -> Optional[str]:
        """Return the configured path for *role*, or ``None`` when unset or blank."""
        return getattr(self, role, None) or None


class ProjectSpec(BaseModel):
    """The project a document is analysed for.

    ``kind`` travels as ``type`` on the wire.  Both it and ``framework`` are
    required; a request without them is rejected at the boundary.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: ProjectKind = Field(..., alias="type", description="Project kind")
    framework: str = Field(..., min_length=1, description="Framework, e.g. React, Vue, Express")
    structure: ProjectStructure = Field(
        default_factory=ProjectStructure, description="Directory layout overrides"
    )
    conventions: list[str] = Field(
        default_factory=list, description="Project rules such as naming or code style"
    )

    @field_validator("framework")
    @classmethod
    def _framework_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("framework must not be blank")
        return value.strip()

    def to_wire(self) -> dict[str, Any]:
        """Serialise using wire names (``type`` instead of ``kind``)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Resolved configuration
# ---------------------------------------------------------------------------

class Template(BaseModel):
    """A named code template shipped with a configuration."""
    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Relative path of the template file")
    content: str = Field(default="", description="Template text")


_ANALYSIS_KEYS = ("analysis", "structure", "code")


class ResolvedConfiguration(BaseModel):
    """Naming, layout, conventions and templates used to plan generated output.

    Two document shapes are accepted: the flat one (``naming``,
    ``structure``, ``conventions``, ``templates`` at the top level) and the
    preset shape that nests the first three under ``standards``.  A document
    that is already a finished analysis (``analysis``, ``structure`` and
    ``code`` keys) keeps its nested ``structure`` in ``artifact_structure``.

    Any JSON object validates.  Unknown keys are preserved as extra fields,
    and a known key whose value does not fit its typed field (say a numeric
    ``naming`` entry or a plain-string ``conventions``) is left at the
    field's default and kept verbatim in :attr:`unfit_values`, so
    :meth:`to_document` still returns it.
    """
    model_config = ConfigDict(frozen=True, extra="allow")

    naming: dict[str, str] = Field(default_factory=dict, description="Entity kind -> casing")
    structure: dict[str, str] = Field(default_factory=dict, description="Logical role -> path")
    conventions: tuple[str, ...] = Field(default=(), description="Ordered convention strings")
    templates: dict[str, Template] = Field(default_factory=dict, description="Named templates")

    analysis: Optional[dict[str, Any]] = Field(default=None)
    artifact_structure: Optional[dict[str, Any]] = Field(default=None)
    code: Optional[dict[str, Any]] = Field(default=None)

    _unfit: dict[str, Any] = PrivateAttr(default_factory=dict)

    @model_validator(mode="wrap")
    @classmethod
    def _normalise_shape(cls, data: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        if not isinstance(data, dict):
            return handler(data)
        data = dict(data)

        if all(key in data for key in _ANALYSIS_KEYS) and "artifact_structure" not in data:
            data["artifact_structure"] = data.pop("structure")

        standards = data.pop("standards", None)
        if isinstance(standards, dict):
            for key in ("naming", "structure", "conventions"):
                if key in standards and key not in data:
                    data[key] = standards[key]
        elif standards is not None:
            data["standards"] = standards

        unfit: dict[str, Any] = {}
        for key, adapter in _TYPED_FIELDS.items():
            if key not in data:
                continue
            try:
                adapter.validate_python(data[key])
            except PydanticValidationError:
                unfit[key] = data.pop(key)

        model = handler(data)
        model._unfit = unfit
        return model

    @property
    def unfit_values(self) -> dict[str, Any]:
        """Document values that did not match their typed field, by key."""
        return dict(self._unfit)

    @property
    def is_analysis(self) -> bool:
        """``True`` when this configuration is a finished remote analysis."""
        return (
            self.analysis is not None
            and self.artifact_structure is not None
            and self.code is not None
        )

    def to_document(self) -> dict[str, Any]:
        """Serialise back to a plain JSON-compatible mapping."""
        document = self.model_dump(mode="json", exclude_none=True)
        document.update(self._unfit)
        return document


_TYPED_FIELDS: dict[str, TypeAdapter[Any]] = {
    "naming": TypeAdapter(dict[str, str]),
    "structure": TypeAdapter(dict[str, str]),
    "conventions": TypeAdapter(tuple[str, ...]),
    "templates": TypeAdapter(dict[str, Template]),
    "analysis": TypeAdapter(Optional[dict[str, Any]]),
    "artifact_structure": TypeAdapter(Optional[dict[str, Any]]),
    "code": TypeAdapter(Optional[dict[str, Any]]),
}
