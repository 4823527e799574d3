"""docforge pipeline orchestrator.

Runs one analysis request end to end:

1. FETCH    -- load the document (inline text, docx token/URL, or wiki URL).
2. RESOLVE  -- pick the knowledge-base configuration for the project.
3. PLAN     -- build the artifact tree and its report.
4. WRITE    -- materialize the tree, only when an output path was requested.

Steps run strictly in sequence; any error aborts the request.

Usage::

    docforge analyze --url https://x.feishu.cn/docx/AbC --kb-remote https://kb/react.json \\
        --type frontend --framework React --conversation "使用 Redux" --output ./out
    python -m docforge.pipeline doc --url https://x.feishu.cn/docx/AbC
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.logging import RichHandler

from docforge.config import Config
from docforge.errors import DocForgeError, FilesystemError, ValidationError
from docforge.feishu_client import FeishuClient, extract_doc_token
from docforge.knowledge import KnowledgeBaseResolver, KnowledgeBaseSource, ProjectSpec
from docforge.scaffolder import (
    REPORT_TEMPLATE,
    AnalysisReport,
    DirectoryNode,
    TemplateRenderer,
    build_scaffold,
    materialize,
)
from docforge.utils import (
    console,
    format_elapsed,
    print_artifact_tree,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    tree_to_text,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Request / result models
# ---------------------------------------------------------------------------


class AnalyzeRequest(BaseModel):
    """Everything one analysis run needs.

    Field aliases match the wire names callers send (``docToken``,
    ``knowledgeBase``, ``projectSpec``, ``outputPath``, ...).
    """
    model_config = ConfigDict(populate_by_name=True)

    doc_token: Optional[str] = Field(default=None, alias="docToken")
    doc_url: Optional[str] = Field(default=None, alias="docUrl")
    wiki_url: Optional[str] = Field(default=None, alias="wikiUrl")
    document: Optional[str] = Field(default=None, description="Inline document text")
    knowledge_base: KnowledgeBaseSource = Field(..., alias="knowledgeBase")
    project_spec: ProjectSpec = Field(..., alias="projectSpec")
    conversation: str = Field(default="", description="Conversation that may adjust presets")
    output_path: Optional[Path] = Field(default=None, alias="outputPath")

    @classmethod
    def parse(cls, data: dict[str, Any]) -> "AnalyzeRequest":
        """Validate raw input, raising docforge's ``ValidationError``."""
        try:
            return cls.model_validate(data)
        except PydanticValidationError as exc:
            raise ValidationError(f"Invalid input: {exc}") from exc


class AnalysisResult(BaseModel):
    """Outcome of one analysis run."""

    conventions: list[str] = Field(default_factory=list, description="Resolved conventions")
    structure: dict[str, Any] = Field(default_factory=dict, description="Planned artifact tree")
    report: AnalysisReport = Field(..., description="Inputs behind the plan")
    output_path: Optional[str] = Field(
        default=None, description="Where the tree was written; unset when nothing was written"
    )

    @property
    def written(self) -> bool:
        """``True`` when the tree was materialized."""
        return self.output_path is not None

    @property
    def tree(self) -> DirectoryNode:
        """The planned artifact tree."""
        return DirectoryNode.from_mapping(self.structure)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class Pipeline:
    """docforge pipeline orchestrator.

    Attributes:
        config: Credentials and HTTP settings.
        resolver: Knowledge-base resolver.
        feishu: Document-service client.
    """

    def __init__(
        self,
        config: Config,
        resolver: Optional[KnowledgeBaseResolver] = None,
        feishu: Optional[FeishuClient] = None,
    ) -> None:
        self.config = config
        self.resolver = resolver or KnowledgeBaseResolver(timeout=config.http.timeout)
        self.feishu = feishu or FeishuClient(config.feishu)
        self.renderer = TemplateRenderer()

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    async def fetch_document(self, token: Optional[str] = None, url: Optional[str] = None) -> str:
        """Fetch a docx document by token, or by URL when no token is given."""
        if not token:
            if not url:
                raise ValidationError("Either a document token or a document URL is required")
            token = extract_doc_token(url)
        return await self.feishu.get_document(token)

    async def fetch_wiki(self, url: str) -> str:
        """Fetch the document bound to a wiki page."""
        if not url:
            raise ValidationError("A wiki URL is required")
        return await self.feishu.get_wiki_document(url)

    async def load_document(self, request: AnalyzeRequest) -> str:
        """Return the request's document text.

        Precedence: inline document, document token, document URL, wiki URL.
        """
        if request.document is not None:
            return request.document
        if request.doc_token or request.doc_url:
            return await self.fetch_document(request.doc_token, request.doc_url)
        if request.wiki_url:
            return await self.fetch_wiki(request.wiki_url)
        raise ValidationError("A document, document token, document URL or wiki URL is required")

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    async def analyze(self, request: Union[AnalyzeRequest, dict[str, Any]]) -> AnalysisResult:
        """Run one request through fetch, resolve, plan and (optionally) write.

        Raises:
            DocForgeError: Any failure; nothing after the failing step runs.
        """
        if not isinstance(request, AnalyzeRequest):
            request = AnalyzeRequest.parse(request)

        document = await self.load_document(request)
        logger.debug("Loaded document (%d chars)", len(document))
        configuration = await self.resolver.resolve(
            request.knowledge_base, request.project_spec, request.conversation
        )
        plan = build_scaffold(document, configuration, request.project_spec)
        logger.info("Planned %d directories and %d files", *plan.tree.count())

        output_path: Optional[str] = None
        if request.output_path is not None:
            await materialize(plan.tree, request.output_path)
            output_path = str(request.output_path)

        return AnalysisResult(
            conventions=plan.report.conventions,
            structure=plan.tree.to_mapping(),
            report=plan.report,
            output_path=output_path,
        )

    async def write_report(self, result: AnalysisResult, path: Union[str, Path]) -> Path:
        """Render the Markdown report for *result* to *path*."""
        context = {
            "report": result.report,
            "output_path": result.output_path,
            "tree_text": tree_to_text(result.tree),
        }
        try:
            return await self.renderer.render_to_file(REPORT_TEMPLATE, path, context)
        except OSError as exc:
            raise FilesystemError(f"Cannot write report {path}: {exc}", path=path) from exc


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def configure_logging(verbose: bool = False) -> None:
    """Route log records through Rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the ``docforge`` argument parser."""
    parser = argparse.ArgumentParser(
        prog="docforge",
        description="docforge -- plan project scaffolds from Feishu documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  docforge doc --url https://x.feishu.cn/docx/AbC\n"
            "  docforge wiki --url https://x.feishu.cn/wiki/XyZ\n"
            "  docforge analyze --document-file req.md --kb-remote https://kb/react.json \\\n"
            "      --type frontend --framework React -o ./out\n"
        ),
    )
    parser.add_argument("--config", type=Path, help="JSON configuration file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    doc = sub.add_parser("doc", help="Print the content of a Feishu document")
    doc_ref = doc.add_mutually_exclusive_group(required=True)
    doc_ref.add_argument("--token", help="Document token")
    doc_ref.add_argument("--url", help="Full document URL")

    wiki = sub.add_parser("wiki", help="Print the document bound to a Feishu wiki page")
    wiki.add_argument("--url", required=True, help="Full wiki URL")

    analyze = sub.add_parser("analyze", help="Plan (and optionally write) a project scaffold")
    source = analyze.add_mutually_exclusive_group(required=True)
    source.add_argument("--token", help="Document token")
    source.add_argument("--url", help="Full document URL")
    source.add_argument("--wiki-url", help="Full wiki URL")
    source.add_argument("--document-file", type=Path, help="Read the document from a local file")

    kb = analyze.add_mutually_exclusive_group(required=True)
    kb.add_argument("--kb-local", help="Local knowledge-base JSON file")
    kb.add_argument("--kb-remote", help="Remote knowledge-base URL")
    analyze.add_argument("--analysis-endpoint", help="Remote knowledge-base analysis endpoint")

    analyze.add_argument(
        "--type", required=True, choices=["frontend", "backend", "fullstack"], help="Project type"
    )
    analyze.add_argument("--framework", required=True, help="Framework, e.g. React, Vue, Express")
    analyze.add_argument("--src", help="Source directory (default: src)")
    analyze.add_argument("--test", help="Test directory (default: test)")
    analyze.add_argument("--docs", help="Documentation directory (default: docs)")
    analyze.add_argument(
        "--convention", action="append", default=[], help="Project convention (repeatable)"
    )
    analyze.add_argument("--conversation", default="", help="Conversation text for preset overrides")
    analyze.add_argument("--output", "-o", type=Path, help="Write the scaffold under this directory")
    analyze.add_argument("--report", type=Path, help="Write a Markdown report to this file")
    analyze.add_argument("--json", action="store_true", help="Print the result as JSON")
    return parser


def _request_from_args(args: argparse.Namespace) -> AnalyzeRequest:
    """Translate parsed ``analyze`` arguments into an ``AnalyzeRequest``."""
    data: dict[str, Any] = {
        "docToken": args.token,
        "docUrl": args.url,
        "wikiUrl": args.wiki_url,
        "conversation": args.conversation,
        "outputPath": args.output,
        "projectSpec": {
            "type": args.type,
            "framework": args.framework,
            "structure": {"src": args.src, "test": args.test, "docs": args.docs},
            "conventions": args.convention,
        },
    }
    if args.document_file is not None:
        try:
            data["document"] = args.document_file.read_text(encoding="utf-8")
        except OSError as exc:
            raise ValidationError(f"Cannot read document file {args.document_file}: {exc}") from exc

    if args.kb_local:
        data["knowledgeBase"] = {"type": "local", "path": args.kb_local}
    else:
        data["knowledgeBase"] = {
            "type": "remote",
            "url": args.kb_remote,
            "analysisEndpoint": args.analysis_endpoint,
        }
    return AnalyzeRequest.parse(data)


async def _run(args: argparse.Namespace, pipeline: Pipeline) -> None:
    if args.command == "doc":
        content = await pipeline.fetch_document(args.token, args.url)
        console.print(content, markup=False, highlight=False, soft_wrap=True)
        return

    if args.command == "wiki":
        content = await pipeline.fetch_wiki(args.url)
        console.print(content, markup=False, highlight=False, soft_wrap=True)
        return

    started = time.monotonic()
    request = _request_from_args(args)
    result = await pipeline.analyze(request)

    if args.report is not None:
        await pipeline.write_report(result, args.report)

    if args.json:
        console.print_json(result.model_dump_json())
        return

    tree = result.tree
    directories, files = tree.count()
    print_artifact_tree(tree, label=result.output_path or ".")
    print_summary_table(
        {
            "Project type": result.report.project_type.value,
            "Framework": result.report.framework,
            "Conventions": len(result.conventions),
            "Directories": directories,
            "Files": files,
            "Output": result.output_path or "(not written)",
            "Report": str(args.report) if args.report else "(none)",
            "Elapsed": format_elapsed(time.monotonic() - started),
        },
        title="Analysis Results",
    )
    for convention in result.conventions:
        console.print(f"  - {convention}", markup=False, highlight=False)

    if result.written:
        print_success(f"Scaffold written to {result.output_path}")
    else:
        print_warning("No --output given; the scaffold was not written to disk")


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point for ``docforge`` and ``python -m docforge.pipeline``."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        base = Config.load(args.config) if args.config else None
        config = Config.from_env(base)
    except (OSError, ValueError) as exc:
        print_error(f"Error: cannot load configuration: {exc}")
        sys.exit(1)

    pipeline = Pipeline(config)
    try:
        asyncio.run(_run(args, pipeline))
    except DocForgeError as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
