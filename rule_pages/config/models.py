"""Typed dataclasses describing rule_pages configuration structures."""

from __future__ import annotations

import dataclasses as dc
import posixpath

from rule_pages._constants import (
    DEFAULT_MAIN_RULE,
    DEFAULT_SCHEME,
    DEFAULT_SOURCE_DIR,
    DEFAULT_SOURCE_SUFFIX,
    DEFAULT_TARGET_PATH,
)


class RulesConfigError(ValueError):
    """Raised when the rules configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class RulesConfig:
    """Options controlling discovery, linking, and rendering of rule documents.

    Attributes
    ----------
    source_dir : str
        Directory (relative to the project root) holding the rule files. The
        same value is the source-root segment recognised inside references.
    target_path : str
        Route segment under which generated pages are published.
    base_url : str
        Site base URL that prefixes ``target_path``.
    include_metadata : bool
        Attach ``sourceFile`` and ``lastModified`` to each document's metadata.
    main_rule : str
        Rule identifier the base route redirects to.
    source_suffix : str
        Extension carried by rule files and by references to them.
    scheme : str
        Scheme token for ``<scheme>:path`` references, without the colon.
    max_workers : int
        Worker threads used for the per-document transform; ``1`` keeps the
        pipeline sequential.
    """

    source_dir: str = DEFAULT_SOURCE_DIR
    target_path: str = DEFAULT_TARGET_PATH
    base_url: str = "/"
    include_metadata: bool = True
    main_rule: str = DEFAULT_MAIN_RULE
    source_suffix: str = DEFAULT_SOURCE_SUFFIX
    scheme: str = DEFAULT_SCHEME
    max_workers: int = 1

    @property
    def cross_reference_base(self) -> str:
        """Return the URL prefix shared by every rule permalink (``/rules``)."""
        joined = posixpath.join(self.base_url or "/", self.target_path.strip("/"))
        return posixpath.normpath(joined)

    @property
    def main_permalink(self) -> str:
        """Return the permalink of the main rule page."""
        return join_permalink(self.cross_reference_base, self.main_rule)

    @property
    def scheme_prefix(self) -> str:
        """Return the scheme token as it appears in references (``mdc:``)."""
        return f"{self.scheme}:"

    def to_dict(self) -> dict[str, object]:
        """Return the configuration as a JSON-friendly mapping."""
        payload = dc.asdict(self)
        payload["cross_reference_base"] = self.cross_reference_base
        return payload


def join_permalink(base: str, relative: str) -> str:
    """Join ``relative`` onto ``base`` and normalise the resulting URL path."""
    joined = f"{base.rstrip('/')}/{relative.lstrip('/')}"
    normalized = posixpath.normpath(joined)
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    return normalized


__all__ = ["RulesConfig", "RulesConfigError", "join_permalink"]
