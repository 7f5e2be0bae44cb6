"""Assemble and write the JSON bundle consumed by a page-rendering host.

The bundle carries everything a site needs to publish the rules: the sidebar,
per-rule page data, the cross-reference report, and the redirect from the
rules landing route to the main rule.

>>> from pathlib import Path
>>> from rule_pages.bundle import write_bundle
>>> write_bundle(payload, Path("build/rules.json"))  # doctest: +SKIP
PosixPath('build/rules.json')
"""

from __future__ import annotations

import json
import typing as typ

from rule_pages.generator.renderer import HtmlContentRenderer
from rule_pages.sidebar import SidebarGenerator

if typ.TYPE_CHECKING:
    from pathlib import Path

    from rule_pages.config import RulesConfig
    from rule_pages.models import ProcessingResult


def build_bundle(
    result: ProcessingResult,
    config: RulesConfig,
    *,
    renderer: HtmlContentRenderer | None = None,
) -> dict[str, typ.Any]:
    """Return the JSON-ready bundle describing a processed rules directory.

    Parameters
    ----------
    result : ProcessingResult
        Output of :meth:`rule_pages.generator.ContentLoader.run`.
    config : RulesConfig
        Configuration used for the run; echoed into the bundle.
    renderer : HtmlContentRenderer, optional
        Renderer whose Pygments stylesheet is embedded; defaults to a new
        :class:`HtmlContentRenderer`.

    Returns
    -------
    dict[str, typing.Any]
        Mapping with ``sidebar``, ``rules`` (no bodies), ``pages`` (with
        bodies), ``crossReferences``, ``stats``, diagnostics, ``redirect``,
        ``config``, ``pygmentsCss`` and ``totalRules``.
    """
    css_source = renderer or HtmlContentRenderer()
    return {
        "sidebar": SidebarGenerator().generate_dicts(result.documents),
        "rules": [doc.to_dict(include_content=False) for doc in result.documents],
        "pages": [doc.to_dict() for doc in result.documents],
        "crossReferences": [ref.to_dict() for ref in result.cross_references],
        "stats": result.stats.to_dict(),
        "warnings": list(result.warnings),
        "errors": list(result.errors),
        "fatalErrors": list(result.fatal_errors),
        "redirect": {
            "from": config.cross_reference_base,
            "to": config.main_permalink,
        },
        "config": config.to_dict(),
        "pygmentsCss": css_source.stylesheet,
        "totalRules": len(result.documents),
    }


def write_bundle(payload: typ.Mapping[str, typ.Any], output_path: Path) -> Path:
    """Write ``payload`` as UTF-8 JSON to ``output_path`` and return the path."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
    )
    return output_path


__all__ = ["build_bundle", "write_bundle"]
