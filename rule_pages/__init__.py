"""Turn a directory of rule files into linked, navigable documentation pages.

This package parses the lenient metadata block at the top of each rule,
renders the Markdown body, rewrites references between rules into page
permalinks, and builds a sidebar mirroring the folder layout. The ``rules``
console script wraps the pipeline and writes a JSON bundle for a site host.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from rule_pages import main
>>> main()  # doctest: +SKIP
>>> from rule_pages import app
>>> app.name  # doctest: +SKIP
('rules',)
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
