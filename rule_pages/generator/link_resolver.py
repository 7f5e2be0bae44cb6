"""Resolve references between rule documents and report broken ones.

Rule bodies point at each other in three ways, all ending in the source
extension: ``./modes/plan.mdc``, ``.cursor/rules/modes/plan.mdc`` (optionally
``./``-prefixed) and ``mdc:modes/plan.mdc``. Each form may be the ``href`` of an
anchor or appear as plain text. :class:`ReferenceResolver` rewrites them to
page permalinks on a parsed tree of the rendered HTML, so every rewrite touches
exactly the node it was found in, and validates the target against a
:class:`~rule_pages.models.DocumentIndex`.
"""

from __future__ import annotations

import dataclasses as dc
import logging
import posixpath
import re
import typing as typ

from bs4 import BeautifulSoup, NavigableString, Tag

from rule_pages._constants import MAX_LISTED_FILES, MAX_SUGGESTIONS
from rule_pages.config import RulesConfig, join_permalink
from rule_pages.models import CrossReference, DocumentIndex, ResolutionStats

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class LinkResolution:
    """Rewritten body and the references found in it, in document order."""

    content: str
    cross_references: list[CrossReference]


class ReferenceResolver:
    """Rewrite rule references in rendered HTML to documentation permalinks."""

    def __init__(self, config: RulesConfig) -> None:
        """Compile the reference patterns for ``config``.

        Parameters
        ----------
        config : RulesConfig
            Supplies the source extension, source-root segment, scheme token,
            and the permalink base used for resolved targets.
        """
        self.config = config
        self.base = config.cross_reference_base
        suffix = re.escape(config.source_suffix)
        root = re.escape(f"{config.source_dir}/")
        scheme = re.escape(config.scheme_prefix)
        # An anchor target may carry a fragment or query after the extension.
        self.href_pattern = re.compile(
            rf"(?:\./|{root}|{scheme})[^\s\"'#?]+{suffix}(?=[#?]|\Z)"
        )
        # The extension must not run on into a longer word (``.md`` vs ``.mdc``).
        self.bare_pattern = re.compile(
            rf"(?:\./|{root}|{scheme})[^\s)\]]+{suffix}(?!\w)"
        )

    def resolve_links(
        self, content: str, index: DocumentIndex, source_id: str | None = None
    ) -> LinkResolution:
        """Rewrite every reference in ``content`` and validate it against ``index``.

        Parameters
        ----------
        content : str
            Rendered HTML body of a rule.
        index : DocumentIndex
            Registry of every rule that survived the transform phase.
        source_id : str, optional
            Identifier of the document being processed, used for logging.

        Returns
        -------
        LinkResolution
            Body with anchor destinations and bare references replaced by
            permalinks, plus one :class:`CrossReference` per match (duplicates
            included).

        Notes
        -----
        Anchors whose ``href`` is a reference get only that attribute replaced,
        keeping any ``#fragment`` or ``?query`` after the extension; their label
        text is left alone and is not scanned again. Text outside such anchors
        is scanned once, left to right, and each match is replaced where it was
        found.
        """
        if not self.bare_pattern.search(content):
            return LinkResolution(content=content, cross_references=[])

        soup = BeautifulSoup(content, "html.parser")
        references: list[CrossReference] = []
        rewritten_anchors: set[int] = set()

        for node in list(soup.descendants):
            if isinstance(node, Tag):
                if node.name == "a":
                    self._rewrite_anchor(node, index, references, rewritten_anchors)
                continue
            if type(node) is not NavigableString:
                continue
            if any(id(parent) in rewritten_anchors for parent in node.parents):
                continue
            self._rewrite_text(node, index, references)

        if not references:
            return LinkResolution(content=content, cross_references=[])
        if source_id:
            logger.debug("resolved %d reference(s) in %s", len(references), source_id)
        return LinkResolution(content=str(soup), cross_references=references)

    def _rewrite_anchor(
        self,
        anchor: Tag,
        index: DocumentIndex,
        references: list[CrossReference],
        rewritten_anchors: set[int],
    ) -> None:
        """Point a matching anchor at its resolved permalink."""
        href = anchor.get("href")
        if not isinstance(href, str):
            return
        match = self.href_pattern.match(href)
        if match is None:
            return
        reference = self.resolve_reference(match.group(0), index)
        references.append(reference)
        anchor["href"] = reference.resolved + href[match.end() :]
        rewritten_anchors.add(id(anchor))

    def _rewrite_text(
        self,
        node: NavigableString,
        index: DocumentIndex,
        references: list[CrossReference],
    ) -> None:
        """Replace bare references inside a single text node."""
        text = str(node)

        def _replace(match: re.Match[str]) -> str:
            reference = self.resolve_reference(match.group(0), index)
            references.append(reference)
            return reference.resolved

        rewritten, count = self.bare_pattern.subn(_replace, text)
        if count:
            node.replace_with(NavigableString(rewritten))

    def relative_target(self, original: str) -> str:
        """Return the path of ``original`` relative to the source directory."""
        root = f"{self.config.source_dir}/"
        scheme = self.config.scheme_prefix
        target = original
        if target.startswith(scheme):
            target = target[len(scheme) :]
            if target.startswith(root):
                target = target[len(root) :]
            elif target.startswith(f"./{root}"):
                target = target[len(root) + 2 :]
        elif root in target:
            target = target[target.index(root) + len(root) :]
        elif target.startswith("./"):
            target = target[2:]
        return target

    def resolve_reference(self, original: str, index: DocumentIndex) -> CrossReference:
        """Resolve one reference to a permalink and check that its target exists."""
        target = self.relative_target(original)
        suffix = self.config.source_suffix
        without_ext = target[: -len(suffix)] if target.endswith(suffix) else target
        resolved = join_permalink(self.base, without_ext.replace("\\", "/"))
        return CrossReference(
            original=original, resolved=resolved, is_valid=index.contains(target)
        )

    def generate_diagnostics(
        self,
        cross_references: cabc.Iterable[CrossReference],
        source_id: str,
        index: DocumentIndex,
    ) -> list[str]:
        """Return one warning per broken reference found in ``source_id``.

        Each warning names the source and the reference as written, lists up to
        three similarly named rules when any exist, and always lists the first
        five known rules with a count of the ones left out.
        """
        suffix = self.config.source_suffix
        available = [f"./{path}" for path in index.paths if path.endswith(suffix)]
        warnings: list[str] = []
        for reference in cross_references:
            if reference.is_valid:
                continue
            message = f"Broken cross-reference in {source_id}: {reference.original}"
            suggestions = self.find_similar(reference.original, available)
            if suggestions:
                message += f"\n  Suggestions: {', '.join(suggestions)}"
            message += (
                f"\n  Available files: {', '.join(available[:MAX_LISTED_FILES])}"
            )
            if len(available) > MAX_LISTED_FILES:
                message += f" (and {len(available) - MAX_LISTED_FILES} more)"
            warnings.append(message)
        return warnings

    def find_similar(self, original: str, available: cabc.Sequence[str]) -> list[str]:
        """Return up to three known paths whose basename resembles ``original``'s."""
        target = self._basename(self.relative_target(original))
        suggestions: list[str] = []
        for candidate in available:
            name = self._basename(candidate)
            if name == target or name in target or target in name:
                suggestions.append(candidate)
            if len(suggestions) == MAX_SUGGESTIONS:
                break
        return suggestions

    def _basename(self, path: str) -> str:
        name = posixpath.basename(path.replace("\\", "/"))
        suffix = self.config.source_suffix
        if name.endswith(suffix):
            name = name[: -len(suffix)]
        return name.lower()


def compute_stats(references: cabc.Iterable[CrossReference]) -> ResolutionStats:
    """Summarise how many references resolved to existing rules.

    The success rate is a percentage rounded to two decimals and is ``100``
    when there are no references at all.
    """
    collected = list(references)
    total = len(collected)
    valid = sum(1 for reference in collected if reference.is_valid)
    success_rate = (valid / total) * 100 if total else 100.0
    return ResolutionStats(
        total=total,
        valid=valid,
        broken=total - valid,
        success_rate=round(success_rate, 2),
    )


__all__ = ["LinkResolution", "ReferenceResolver", "compute_stats"]
