"""Utilities for rendering rule documents and linking them together."""

from .content_loader import ContentLoader, discover_rule_files, extract_toc
from .link_resolver import LinkResolution, ReferenceResolver, compute_stats
from .renderer import HtmlContentRenderer, Renderer

__all__ = [
    "ContentLoader",
    "HtmlContentRenderer",
    "LinkResolution",
    "ReferenceResolver",
    "Renderer",
    "compute_stats",
    "discover_rule_files",
    "extract_toc",
]
