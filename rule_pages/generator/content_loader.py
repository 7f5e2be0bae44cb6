"""High-level orchestration for turning rule files into linked documents.

This module coordinates discovering rule files under the configured source
directory, parsing their metadata, rendering each body with
:class:`~rule_pages.generator.renderer.HtmlContentRenderer`, and finally
resolving references between rules once every document is known. It exposes
:class:`ContentLoader`, which consumes a :class:`~rule_pages.config.RulesConfig`
and returns a :class:`~rule_pages.models.ProcessingResult`.

Example
-------
>>> from pathlib import Path
>>> from rule_pages.config import RulesConfig
>>> from rule_pages.generator import ContentLoader
>>> loader = ContentLoader(RulesConfig(), Path("."))  # doctest: +SKIP
>>> result = loader.run()  # doctest: +SKIP
>>> [doc.permalink for doc in result.documents]  # doctest: +SKIP
['/rules/main', '/rules/modes/plan']
"""

from __future__ import annotations

import datetime as dt
import logging
import re
import typing as typ
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from bs4 import BeautifulSoup

from rule_pages.config import join_permalink
from rule_pages.generator.link_resolver import ReferenceResolver, compute_stats
from rule_pages.generator.renderer import HtmlContentRenderer, Renderer
from rule_pages.metadata_parser import parse_with_normalization
from rule_pages.models import DocumentIndex, ProcessingResult, RuleDocument, TocItem

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from rule_pages.config import RulesConfig

logger = logging.getLogger(__name__)

FIRST_HEADING_PATTERN = re.compile(r"^#\s+(.+)$", re.MULTILINE)
HEADING_TAG_PATTERN = re.compile(r"^h[1-6]$")
WORD_START_PATTERN = re.compile(r"\b\w")

Enumerator: typ.TypeAlias = "cabc.Callable[[Path, str], cabc.Iterable[Path]]"


def discover_rule_files(source_dir: Path, suffix: str) -> list[Path]:
    """Return every file under ``source_dir`` ending in ``suffix``, sorted."""
    return sorted(
        path for path in source_dir.rglob(f"*{suffix}") if path.is_file()
    )


class ContentLoader:
    """Load rule files, render them, and resolve references between them."""

    def __init__(
        self,
        config: RulesConfig,
        project_root: Path,
        *,
        renderer: Renderer | None = None,
        enumerator: Enumerator | None = None,
    ) -> None:
        """Initialize the loader with configuration and collaborators.

        Parameters
        ----------
        config : RulesConfig
            Source location, link syntax, and permalink settings.
        project_root : Path
            Directory that ``config.source_dir`` is relative to.
        renderer : Renderer, optional
            Markdown renderer; defaults to :class:`HtmlContentRenderer`.
        enumerator : callable, optional
            ``(source_dir, suffix) -> paths`` used to discover rule files;
            defaults to :func:`discover_rule_files`.
        """
        self.config = config
        self.project_root = project_root
        self.source_dir = (project_root / config.source_dir).resolve()
        self.renderer = renderer or HtmlContentRenderer()
        self.enumerator = enumerator or discover_rule_files
        self.resolver = ReferenceResolver(config)

    def run(self) -> ProcessingResult:
        """Process every rule file and return the aggregated result.

        Returns
        -------
        ProcessingResult
            Surviving documents with rewritten bodies, every cross-reference,
            broken-link warnings, and per-document errors. When the source
            directory is missing the result is empty and carries one warning;
            when an unexpected failure escapes a phase the result is empty and
            carries one fatal error.
        """
        try:
            if not self.source_dir.exists():
                message = f"Source directory not found: {self.source_dir}"
                logger.warning(message)
                return ProcessingResult.empty(warnings=[message])

            files = list(self.enumerator(self.source_dir, self.config.source_suffix))
            logger.info(
                "Found %d %s files in %s",
                len(files),
                self.config.source_suffix,
                self.source_dir,
            )

            documents, errors = self._transform_all(files)
            index = DocumentIndex.from_documents(documents)

            result = ProcessingResult(documents=documents, errors=errors)
            for document in documents:
                resolution = self.resolver.resolve_links(
                    document.content, index, document.id
                )
                document.content = resolution.content
                result.cross_references.extend(resolution.cross_references)
                result.warnings.extend(
                    self.resolver.generate_diagnostics(
                        resolution.cross_references, document.id, index
                    )
                )

            result.stats = compute_stats(result.cross_references)
            logger.info(
                "Cross-reference resolution: %d/%d resolved (%s%%)",
                result.stats.valid,
                result.stats.total,
                result.stats.success_rate,
            )
        except Exception as exc:  # noqa: BLE001 - phase-level failures are reported, not raised
            message = f"Error loading content from {self.source_dir}: {exc}"
            logger.exception("Error loading content from %s", self.source_dir)
            return ProcessingResult.empty(fatal_errors=[message])
        return result

    def _transform_all(
        self, files: cabc.Sequence[Path]
    ) -> tuple[list[RuleDocument], list[str]]:
        """Transform each file, collecting survivors and per-document errors."""
        if self.config.max_workers > 1 and len(files) > 1:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as pool:
                outcomes = list(pool.map(self._transform_safely, files))
        else:
            outcomes = [self._transform_safely(path) for path in files]

        documents: list[RuleDocument] = []
        errors: list[str] = []
        for document, error in outcomes:
            if document is not None:
                documents.append(document)
            if error is not None:
                errors.append(error)
        return documents, errors

    def _transform_safely(self, path: Path) -> tuple[RuleDocument | None, str | None]:
        """Run :meth:`process_file`, turning any failure into an error string."""
        try:
            return self.process_file(path), None
        except Exception as exc:  # noqa: BLE001 - one bad file must not stop the batch
            logger.error("Error processing file %s: %s", path, exc)
            return None, f"Error processing file {path}: {exc}"

    def process_file(self, path: Path) -> RuleDocument:
        """Parse, render, and describe a single rule file.

        Parameters
        ----------
        path : Path
            Absolute path of a file below the source directory.

        Returns
        -------
        RuleDocument
            Document whose body still contains the original references.
        """
        raw = path.read_text(encoding="utf-8")
        parsed = parse_with_normalization(raw)
        relative_path = path.resolve().relative_to(self.source_dir).as_posix()

        metadata = dict(parsed.metadata)
        if self.config.include_metadata:
            metadata["sourceFile"] = f"{self.config.source_dir}/{relative_path}"
            modified = dt.datetime.fromtimestamp(path.stat().st_mtime, tz=dt.UTC)
            metadata["lastModified"] = modified.isoformat().replace("+00:00", "Z")

        content = self._render(parsed.body, relative_path)
        return RuleDocument(
            id=self._strip_suffix(relative_path),
            file_path=relative_path,
            title=self.extract_title(parsed.metadata, parsed.body, relative_path),
            content=content,
            metadata=metadata,
            permalink=self.permalink_for(relative_path),
            toc=extract_toc(content),
        )

    def extract_title(
        self, metadata: cabc.Mapping[str, typ.Any], body: str, relative_path: str
    ) -> str:
        """Return the document title, falling back from metadata to the filename."""
        for key in ("title", "description"):
            value = metadata.get(key)
            if isinstance(value, str) and value:
                return value
        match = FIRST_HEADING_PATTERN.search(body)
        if match:
            return match.group(1).strip()
        stem = self._strip_suffix(relative_path.rsplit("/", 1)[-1])
        spaced = re.sub(r"[-_]", " ", stem)
        return WORD_START_PATTERN.sub(lambda m: m.group(0).upper(), spaced)

    def permalink_for(self, relative_path: str) -> str:
        """Return the permalink for a rule at ``relative_path``."""
        normalized = self._strip_suffix(relative_path).replace("\\", "/")
        return join_permalink(self.config.cross_reference_base, normalized)

    def _render(self, body: str, relative_path: str) -> str:
        """Render ``body``, falling back to a literal ``<pre>`` block on failure."""
        try:
            return self.renderer.markdown(body)
        except Exception:  # noqa: BLE001 - keep the document with its raw body
            logger.exception("Error rendering markdown for %s", relative_path)
            return f"<pre>{body}</pre>"

    def _strip_suffix(self, path: str) -> str:
        suffix = self.config.source_suffix
        stripped = path[: -len(suffix)] if path.endswith(suffix) else path
        return stripped.replace("\\", "/")


def extract_toc(html: str) -> list[TocItem]:
    """Return the headings in ``html`` that carry an ``id`` attribute."""
    if not html:
        return []
    soup = BeautifulSoup(html, "html.parser")
    toc: list[TocItem] = []
    for heading in soup.find_all(HEADING_TAG_PATTERN):
        anchor = heading.get("id")
        value = heading.get_text().strip()
        if anchor and value:
            toc.append(TocItem(value=value, id=str(anchor), level=int(heading.name[1])))
    return toc


__all__ = ["ContentLoader", "discover_rule_files", "extract_toc"]
