"""Shared dataclasses passed between the loader, resolver, and sidebar builder."""

from __future__ import annotations

import dataclasses as dc
import types
import typing as typ


@dc.dataclass(slots=True, frozen=True)
class TocItem:
    """Single table-of-contents entry extracted from rendered HTML.

    Attributes
    ----------
    value : str
        Text content of the heading.
    id : str
        Anchor id assigned to the heading by the renderer.
    level : int
        Heading level between 1 and 6.
    """

    value: str
    id: str
    level: int


@dc.dataclass(slots=True)
class RuleDocument:
    """Processed rule file ready to be published as a page.

    Attributes
    ----------
    id : str
        Relative path without the source extension, using ``/`` separators.
    file_path : str
        POSIX path of the source file relative to the source directory.
    title : str
        Title taken from metadata, the first heading, or the file name.
    content : str
        Rendered HTML body; rewritten once when references are resolved.
    metadata : dict[str, typing.Any]
        Normalised metadata, optionally enriched with source details.
    permalink : str
        URL path of the generated page.
    toc : list[TocItem]
        Headings carrying an anchor id, in document order.
    """

    id: str
    file_path: str
    title: str
    content: str
    metadata: dict[str, typ.Any]
    permalink: str
    toc: list[TocItem] = dc.field(default_factory=list)

    @property
    def path_segments(self) -> list[str]:
        """Return the non-empty segments of ``file_path`` ending with the filename."""
        return [part for part in self.file_path.split("/") if part]

    def to_dict(self, *, include_content: bool = True) -> dict[str, typ.Any]:
        """Return the document as a JSON-friendly mapping."""
        payload: dict[str, typ.Any] = {
            "id": self.id,
            "filePath": self.file_path,
            "title": self.title,
            "metadata": dict(self.metadata),
            "permalink": self.permalink,
            "toc": [dc.asdict(item) for item in self.toc],
        }
        if include_content:
            payload["content"] = self.content
        return payload


@dc.dataclass(slots=True, frozen=True)
class CrossReference:
    """One detected reference from a rule to another rule.

    Attributes
    ----------
    original : str
        Reference text exactly as written (e.g. ``./modes/plan.mdc``).
    resolved : str
        Permalink the reference was rewritten to (e.g. ``/rules/modes/plan``).
    is_valid : bool
        Whether the referenced rule exists in the document index.
    """

    original: str
    resolved: str
    is_valid: bool

    def to_dict(self) -> dict[str, typ.Any]:
        """Return the reference as a JSON-friendly mapping."""
        return {
            "original": self.original,
            "resolved": self.resolved,
            "isValid": self.is_valid,
        }


def normalize_index_key(path: str) -> str:
    """Return ``path`` with ``/`` separators and no leading ``./``."""
    normalized = path.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized


@dc.dataclass(slots=True, frozen=True)
class DocumentIndex:
    """Read-only registry of documents keyed by normalised relative path.

    Each document is reachable through its bare relative path and the same
    path prefixed with ``./``. Build it once with :meth:`from_documents` after
    every document has been transformed.
    """

    entries: typ.Mapping[str, RuleDocument]

    @classmethod
    def from_documents(cls, documents: typ.Iterable[RuleDocument]) -> DocumentIndex:
        """Build an index over ``documents``."""
        entries: dict[str, RuleDocument] = {}
        for document in documents:
            key = normalize_index_key(document.file_path)
            entries[key] = document
            entries[f"./{key}"] = document
        return cls(entries=types.MappingProxyType(entries))

    @property
    def paths(self) -> list[str]:
        """Return the canonical (unprefixed) keys in sorted order."""
        return sorted(key for key in self.entries if not key.startswith("./"))

    def contains(self, path: str) -> bool:
        """Return whether ``path`` (with or without ``./``) names a known document."""
        return self.get(path) is not None

    def get(self, path: str) -> RuleDocument | None:
        """Return the document stored for ``path`` or None."""
        if path in self.entries:
            return self.entries[path]
        return self.entries.get(normalize_index_key(path))

    def __len__(self) -> int:
        return len(self.paths)


@dc.dataclass(slots=True, frozen=True)
class ResolutionStats:
    """Summary of cross-reference validation across a run."""

    total: int
    valid: int
    broken: int
    success_rate: float

    def to_dict(self) -> dict[str, typ.Any]:
        """Return the statistics as a JSON-friendly mapping."""
        return {
            "total": self.total,
            "valid": self.valid,
            "broken": self.broken,
            "successRate": self.success_rate,
        }


@dc.dataclass(slots=True)
class ProcessingResult:
    """Outcome of a content-loading run.

    Attributes
    ----------
    documents : list[RuleDocument]
        Documents that survived the transform phase, with resolved links.
    cross_references : list[CrossReference]
        Every reference found, in per-document order.
    warnings : list[str]
        Non-fatal diagnostics such as broken references or a missing source.
    errors : list[str]
        Per-document failures; each failed document is omitted.
    fatal_errors : list[str]
        Failures outside the per-document boundary that aborted the run.
    stats : ResolutionStats
        Cross-reference resolution summary.
    """

    documents: list[RuleDocument] = dc.field(default_factory=list)
    cross_references: list[CrossReference] = dc.field(default_factory=list)
    warnings: list[str] = dc.field(default_factory=list)
    errors: list[str] = dc.field(default_factory=list)
    fatal_errors: list[str] = dc.field(default_factory=list)
    stats: ResolutionStats = dc.field(
        default_factory=lambda: ResolutionStats(
            total=0, valid=0, broken=0, success_rate=100.0
        )
    )

    @classmethod
    def empty(
        cls,
        *,
        warnings: list[str] | None = None,
        fatal_errors: list[str] | None = None,
    ) -> ProcessingResult:
        """Return a result with no documents, carrying only diagnostics."""
        return cls(warnings=list(warnings or []), fatal_errors=list(fatal_errors or []))

    @property
    def ok(self) -> bool:
        """Return True when no fatal errors were recorded."""
        return not self.fatal_errors


__all__ = [
    "CrossReference",
    "DocumentIndex",
    "ProcessingResult",
    "ResolutionStats",
    "RuleDocument",
    "TocItem",
    "normalize_index_key",
]
