"""Build the navigation sidebar from the folder layout of the rule files.

The sidebar mirrors the source directory: files become links placed under the
category of the folder that holds them, and every folder becomes a collapsed
category. Siblings are ordered by an explicit ``sidebar_position`` (or
``sidebarPosition``) first, then alphabetically by label.

Example
-------
>>> from rule_pages.models import RuleDocument
>>> from rule_pages.sidebar import SidebarGenerator
>>> doc = RuleDocument(
...     id="modes/plan",
...     file_path="modes/plan.mdc",
...     title="Plan",
...     content="",
...     metadata={},
...     permalink="/rules/modes/plan",
... )
>>> [item.label for item in SidebarGenerator().generate([doc])]
['Modes']
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

from rule_pages._constants import SIDEBAR_POSITION_KEYS

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from rule_pages.models import RuleDocument

LEADING_INTEGER_PATTERN = re.compile(r"^\s*([-+]?\d+)")
LABEL_SEPARATOR_PATTERN = re.compile(r"[-_]")


@dc.dataclass(slots=True)
class SidebarLink:
    """Sidebar entry pointing at a single rule page."""

    label: str
    href: str
    position: int | float | None = None

    def to_dict(self) -> dict[str, typ.Any]:
        """Return the link in the shape expected by navigation renderers."""
        payload: dict[str, typ.Any] = {
            "type": "link",
            "label": self.label,
            "href": self.href,
        }
        if self.position is not None:
            payload["position"] = self.position
        return payload


@dc.dataclass(slots=True)
class SidebarCategory:
    """Collapsible sidebar group representing one folder."""

    label: str
    items: list[SidebarItem]
    collapsed: bool = True
    collapsible: bool = True
    position: int | float | None = None

    def to_dict(self) -> dict[str, typ.Any]:
        """Return the category and its children as nested mappings."""
        return {
            "type": "category",
            "label": self.label,
            "items": [item.to_dict() for item in self.items],
            "collapsed": self.collapsed,
            "collapsible": self.collapsible,
        }


SidebarItem: typ.TypeAlias = SidebarLink | SidebarCategory


@dc.dataclass(slots=True)
class _DirectoryNode:
    name: str
    path: str
    children: dict[str, _DirectoryNode] = dc.field(default_factory=dict)
    items: list[RuleDocument] = dc.field(default_factory=list)


class SidebarGenerator:
    """Convert a flat list of rule documents into ordered sidebar items."""

    def generate(self, documents: cabc.Iterable[RuleDocument]) -> list[SidebarItem]:
        """Return the sidebar for ``documents``, mirroring their folder layout."""
        return self._convert(self._build_tree(documents))

    def generate_dicts(
        self, documents: cabc.Iterable[RuleDocument]
    ) -> list[dict[str, typ.Any]]:
        """Return :meth:`generate` output as plain mappings."""
        return [item.to_dict() for item in self.generate(documents)]

    def _build_tree(self, documents: cabc.Iterable[RuleDocument]) -> _DirectoryNode:
        root = _DirectoryNode(name="", path="")
        for document in documents:
            node = root
            segments = document.path_segments
            for depth, name in enumerate(segments[:-1]):
                if name not in node.children:
                    node.children[name] = _DirectoryNode(
                        name=name, path="/".join(segments[: depth + 1])
                    )
                node = node.children[name]
            node.items.append(document)
        return root

    def _convert(self, node: _DirectoryNode) -> list[SidebarItem]:
        items: list[SidebarItem] = [
            SidebarLink(
                label=document.title,
                href=document.permalink,
                position=extract_sidebar_position(document.metadata),
            )
            for document in node.items
        ]
        items.extend(
            SidebarCategory(
                label=format_directory_label(child.name),
                items=self._convert(child),
            )
            for child in node.children.values()
        )
        return sort_sidebar_items(items)


def extract_sidebar_position(
    metadata: cabc.Mapping[str, typ.Any],
) -> int | float | None:
    """Return the explicit sidebar position stored in ``metadata``, if any.

    Numbers are used as-is; strings contribute their leading integer
    (``"4"`` and ``"4th"`` both give ``4``). Anything else yields ``None``.
    """
    for key in SIDEBAR_POSITION_KEYS:
        value = metadata.get(key)
        if value is None:
            continue
        match value:
            case bool():
                return None
            case int() | float():
                return value
            case str():
                found = LEADING_INTEGER_PATTERN.match(value)
                return int(found.group(1)) if found else None
            case _:
                return None
    return None


def format_directory_label(name: str) -> str:
    """Turn a folder name such as ``code-style`` into ``Code Style``."""
    return " ".join(word.capitalize() for word in LABEL_SEPARATOR_PATTERN.split(name))


def _sort_key(item: SidebarItem) -> tuple[int, float, str, str]:
    if item.position is not None:
        return (0, float(item.position), "", "")
    return (1, 0.0, item.label.casefold(), item.label)


def sort_sidebar_items(items: list[SidebarItem]) -> list[SidebarItem]:
    """Order siblings: positioned items ascending, then the rest by label."""
    return sorted(items, key=_sort_key)


__all__ = [
    "SidebarCategory",
    "SidebarGenerator",
    "SidebarItem",
    "SidebarLink",
    "extract_sidebar_position",
    "format_directory_label",
    "sort_sidebar_items",
]
