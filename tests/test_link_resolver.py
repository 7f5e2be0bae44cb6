"""Unit tests for cross-reference resolution between rule documents.

The resolver is exercised directly on small HTML fragments with a default
:class:`~rule_pages.config.RulesConfig`, so permalinks live under ``/rules``,
the source root is ``.cursor/rules`` and the scheme token is ``mdc:``.

Usage
-----
Run ``pytest tests/test_link_resolver.py -v``.
"""

from __future__ import annotations

import pytest
from conftest import make_document

from rule_pages.config import RulesConfig
from rule_pages.generator import HtmlContentRenderer
from rule_pages.generator.link_resolver import ReferenceResolver, compute_stats
from rule_pages.models import CrossReference, DocumentIndex


def _index(*paths: str) -> DocumentIndex:
    return DocumentIndex.from_documents(make_document(path) for path in paths)


@pytest.fixture
def resolver() -> ReferenceResolver:
    """Return a resolver using the default configuration."""
    return ReferenceResolver(RulesConfig())


def test_anchor_destination_is_rewritten_and_label_kept(
    resolver: ReferenceResolver,
) -> None:
    """Only the href of a matching anchor changes."""
    result = resolver.resolve_links(
        'See <a href="./main.mdc">main</a>', _index("main.mdc")
    )
    assert '<a href="/rules/main">main</a>' in result.content
    assert result.cross_references == [
        CrossReference(original="./main.mdc", resolved="/rules/main", is_valid=True)
    ]


def test_anchor_fragment_and_query_are_kept(resolver: ReferenceResolver) -> None:
    """Section links resolve the rule path and keep what follows it."""
    html = HtmlContentRenderer().markdown(
        "See [intro](./main.mdc#intro), [plan](mdc:plan.mdc?v=2)"
        " and [missing](./gone.mdc#x)"
    )
    result = resolver.resolve_links(html, _index("main.mdc", "plan.mdc"))
    assert 'href="/rules/main#intro"' in result.content
    assert 'href="/rules/plan?v=2"' in result.content
    assert 'href="/rules/gone#x"' in result.content
    assert result.cross_references == [
        CrossReference(original="./main.mdc", resolved="/rules/main", is_valid=True),
        CrossReference(original="mdc:plan.mdc", resolved="/rules/plan", is_valid=True),
        CrossReference(original="./gone.mdc", resolved="/rules/gone", is_valid=False),
    ]


def test_broken_fragment_link_is_reported(resolver: ReferenceResolver) -> None:
    """A missing rule behind a section link still produces a warning."""
    index = _index("main.mdc")
    result = resolver.resolve_links('<a href="./gone.mdc#x">gone</a>', index)
    (warning,) = resolver.generate_diagnostics(result.cross_references, "main", index)
    assert warning.startswith("Broken cross-reference in main: ./gone.mdc")


def test_anchor_with_longer_extension_is_left_alone(
    resolver: ReferenceResolver,
) -> None:
    """Only an extension followed by the end, ``#`` or ``?`` counts."""
    html = '<p><a href="./main.mdc.bak">backup</a> ./main.mdc</p>'
    result = resolver.resolve_links(html, _index("main.mdc"))
    assert 'href="./main.mdc.bak"' in result.content
    assert [ref.original for ref in result.cross_references] == ["./main.mdc"]


def test_bare_reference_to_missing_rule(resolver: ReferenceResolver) -> None:
    """A bare reference is replaced and flagged invalid when unknown."""
    result = resolver.resolve_links(
        "<p>Read ./missing.mdc first.</p>", DocumentIndex.from_documents([])
    )
    assert result.content == "<p>Read /rules/missing first.</p>"
    assert result.cross_references == [
        CrossReference(
            original="./missing.mdc", resolved="/rules/missing", is_valid=False
        )
    ]


@pytest.mark.parametrize(
    "reference",
    [
        "./modes/plan.mdc",
        ".cursor/rules/modes/plan.mdc",
        "./.cursor/rules/modes/plan.mdc",
        "mdc:modes/plan.mdc",
        "mdc:.cursor/rules/modes/plan.mdc",
        "mdc:./.cursor/rules/modes/plan.mdc",
    ],
)
def test_every_reference_form_resolves(
    resolver: ReferenceResolver, reference: str
) -> None:
    """All three syntaxes strip down to the same relative path."""
    result = resolver.resolve_links(f"<p>{reference}</p>", _index("modes/plan.mdc"))
    assert [ref.resolved for ref in result.cross_references] == ["/rules/modes/plan"]
    assert result.cross_references[0].is_valid, f"{reference} should be valid"
    assert result.cross_references[0].original == reference


def test_anchor_label_is_not_matched_again(resolver: ReferenceResolver) -> None:
    """A reference used as both destination and label counts once."""
    result = resolver.resolve_links(
        '<p><a href="./a.mdc">./a.mdc</a></p>', _index("a.mdc")
    )
    assert result.content == '<p><a href="/rules/a">./a.mdc</a></p>'
    assert len(result.cross_references) == 1


def test_duplicates_produce_separate_records(resolver: ReferenceResolver) -> None:
    """The same literal reference twice yields two cross-references."""
    result = resolver.resolve_links(
        "<p>./a.mdc and again ./a.mdc</p>", _index("a.mdc")
    )
    assert result.content == "<p>/rules/a and again /rules/a</p>"
    assert len(result.cross_references) == 2


def test_references_are_recorded_in_document_order(
    resolver: ReferenceResolver,
) -> None:
    """Anchors and bare references are reported in the order they appear."""
    html = (
        "<p>mdc:first.mdc then "
        '<a href="./second.mdc" class="x">second</a> then ./third.mdc</p>'
    )
    result = resolver.resolve_links(html, _index("first.mdc", "third.mdc"))
    assert [ref.original for ref in result.cross_references] == [
        "mdc:first.mdc",
        "./second.mdc",
        "./third.mdc",
    ]
    assert [ref.is_valid for ref in result.cross_references] == [True, False, True]
    assert 'class="x"' in result.content


def test_same_reference_in_different_places_is_rewritten_in_place(
    resolver: ReferenceResolver,
) -> None:
    """Rewriting a bare reference never touches an identical anchor elsewhere."""
    html = '<p>./a.mdc</p><p><a href="https://example.com/./a.mdc">ext</a></p>'
    result = resolver.resolve_links(html, _index("a.mdc"))
    assert "<p>/rules/a</p>" in result.content
    assert 'href="https://example.com/./a.mdc"' in result.content
    assert len(result.cross_references) == 1


def test_content_without_references_is_unchanged(
    resolver: ReferenceResolver,
) -> None:
    """Bodies with no references are returned byte for byte."""
    html = '<p>Plain <a href="https://example.com">link</a><br />text</p>'
    result = resolver.resolve_links(html, _index("a.mdc"))
    assert result.content == html
    assert result.cross_references == []


def test_reference_stops_before_closing_bracket(resolver: ReferenceResolver) -> None:
    """Bare references end before ``)`` and ``]``."""
    result = resolver.resolve_links("<p>(see ./a.mdc)</p>", _index("a.mdc"))
    assert result.content == "<p>(see /rules/a)</p>"


def test_custom_configuration_changes_syntax() -> None:
    """Extension, source root, scheme, and base all come from configuration."""
    config = RulesConfig(
        source_dir="docs/rules",
        target_path="guides",
        base_url="/site/",
        source_suffix=".md",
        scheme="rule",
    )
    resolver = ReferenceResolver(config)
    index = DocumentIndex.from_documents([make_document("intro.md")])
    result = resolver.resolve_links(
        "<p>rule:docs/rules/intro.md and ./intro.mdc</p>", index
    )
    assert result.content == "<p>/site/guides/intro and ./intro.mdc</p>"
    assert result.cross_references[0].is_valid


def test_diagnostic_lists_five_known_paths_and_overflow(
    resolver: ReferenceResolver,
) -> None:
    """With eight known rules the warning lists five and counts the rest."""
    index = _index(*(f"rule-{letter}.mdc" for letter in "abcdefgh"))
    broken = CrossReference("./missing.mdc", "/rules/missing", is_valid=False)
    warnings = resolver.generate_diagnostics([broken], "main", index)
    assert len(warnings) == 1
    message = warnings[0]
    assert "main" in message
    assert "./missing.mdc" in message
    assert "Suggestions" not in message
    available = message.split("Available files: ", 1)[1]
    listed, overflow = available.split(" (and ", 1)
    assert listed.split(", ") == [
        "./rule-a.mdc",
        "./rule-b.mdc",
        "./rule-c.mdc",
        "./rule-d.mdc",
        "./rule-e.mdc",
    ]
    assert overflow == "3 more)"


def test_diagnostics_skip_valid_references(resolver: ReferenceResolver) -> None:
    """Valid references produce no warnings."""
    valid = CrossReference("./a.mdc", "/rules/a", is_valid=True)
    assert resolver.generate_diagnostics([valid], "src", _index("a.mdc")) == []


def test_diagnostic_suggests_similar_basenames(resolver: ReferenceResolver) -> None:
    """Equal or overlapping basenames are offered as suggestions."""
    index = _index("modes/plan.mdc", "other.mdc", "planning.mdc")
    broken = CrossReference("./Plan.mdc", "/rules/Plan", is_valid=False)
    (message,) = resolver.generate_diagnostics([broken], "main", index)
    assert "\n  Suggestions: ./modes/plan.mdc, ./planning.mdc\n" in message
    assert message.endswith(
        "Available files: ./modes/plan.mdc, ./other.mdc, ./planning.mdc"
    )


def test_suggestions_are_limited_to_three(resolver: ReferenceResolver) -> None:
    """At most three suggestions are listed, in index order."""
    index = _index("api-a.mdc", "api-b.mdc", "api-c.mdc", "api-d.mdc")
    assert resolver.find_similar("mdc:api.mdc", [f"./{p}" for p in index.paths]) == [
        "./api-a.mdc",
        "./api-b.mdc",
        "./api-c.mdc",
    ]


def test_stats_for_no_references() -> None:
    """An empty run counts as fully successful."""
    stats = compute_stats([])
    assert (stats.total, stats.valid, stats.broken) == (0, 0, 0)
    assert stats.success_rate == 100


def test_stats_for_all_valid_references() -> None:
    """All valid references give a 100% success rate."""
    refs = [CrossReference("./a.mdc", "/rules/a", is_valid=True)] * 4
    assert compute_stats(refs).success_rate == 100


def test_stats_round_to_two_decimals() -> None:
    """Two valid and one broken reference give 66.67%."""
    refs = [
        CrossReference("./a.mdc", "/rules/a", is_valid=True),
        CrossReference("./b.mdc", "/rules/b", is_valid=True),
        CrossReference("./c.mdc", "/rules/c", is_valid=False),
    ]
    stats = compute_stats(refs)
    assert stats.success_rate == 66.67
    assert (stats.total, stats.valid, stats.broken) == (3, 2, 1)
