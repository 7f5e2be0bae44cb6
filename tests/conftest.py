"""Shared fixtures for building throwaway rules directories."""

from __future__ import annotations

import typing as typ

import pytest

from rule_pages.models import RuleDocument

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path


@pytest.fixture
def rules_dir(tmp_path: Path) -> Path:
    """Return ``<tmp>/.cursor/rules`` created on disk."""
    path = tmp_path / ".cursor" / "rules"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def write_rule(rules_dir: Path) -> cabc.Callable[[str, str], Path]:
    """Return a helper writing ``text`` to ``relative`` under the rules directory."""

    def _write(relative: str, text: str) -> Path:
        path = rules_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


def make_document(
    file_path: str,
    *,
    title: str | None = None,
    metadata: dict[str, typ.Any] | None = None,
    base: str = "/rules",
) -> RuleDocument:
    """Build a RuleDocument for ``file_path`` without touching the filesystem."""
    doc_id = file_path.removesuffix(".mdc")
    return RuleDocument(
        id=doc_id,
        file_path=file_path,
        title=title or doc_id.rsplit("/", 1)[-1].title(),
        content="",
        metadata=metadata or {},
        permalink=f"{base}/{doc_id}",
    )
