r"""Parse the lenient metadata block that opens a rule document.

Rule files often start with a ``---`` delimited header that looks like YAML but
frequently is not valid YAML (unquoted globs, stray colons, bare ``*``). This
module therefore reads the header line by line as flat ``key: value`` pairs and
coerces each value with a small set of heuristics instead of delegating to a
YAML loader.

Example
-------
>>> from rule_pages.metadata_parser import parse_block
>>> parsed = parse_block("---\ntitle: Test\ncount: 3\n---\nBody")
>>> parsed.metadata
{'title': 'Test', 'count': 3}
>>> parsed.body
'Body'
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

from rule_pages._constants import METADATA_DELIMITER

INTEGER_PATTERN = re.compile(r"^-?[0-9]+$")
FLOAT_PATTERN = re.compile(r"^-?[0-9]*\.?[0-9]+$")
WHITESPACE_PATTERN = re.compile(r"\s")

MetadataValue: typ.TypeAlias = str | bool | int | float | list[str] | None


@dc.dataclass(slots=True)
class ParsedRule:
    """Metadata block and body split out of a raw rule document.

    Attributes
    ----------
    metadata : dict[str, MetadataValue]
        Coerced ``key: value`` pairs in the order they appeared.
    body : str
        Trimmed text following the metadata block (or the whole trimmed text
        when no complete block is present).
    """

    metadata: dict[str, typ.Any]
    body: str


def _is_delimiter(line: str) -> bool:
    return line.strip() == METADATA_DELIMITER


def parse_value(value: str) -> MetadataValue:
    """Coerce a raw metadata value using the first matching heuristic.

    Quoted strings are unwrapped verbatim, then booleans, nulls, integers and
    floats are recognised. A value containing a comma and no whitespace becomes
    a list of strings; anything else is returned unchanged.
    """
    if not value:
        return ""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        return value[1:-1]
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if lowered == "null" or value == "~":
        return None
    if INTEGER_PATTERN.match(value):
        return int(value)
    if FLOAT_PATTERN.match(value):
        return float(value)
    if "," in value and not WHITESPACE_PATTERN.search(value):
        return [item.strip() for item in value.split(",")]
    return value


def _parse_metadata_lines(lines: typ.Iterable[str]) -> dict[str, typ.Any]:
    """Return coerced metadata for ``key: value`` lines, skipping anything else."""
    metadata: dict[str, typ.Any] = {}
    for raw_line in lines:
        line = raw_line.strip()
        if not line:
            continue
        key, sep, value = line.partition(":")
        key = key.strip()
        # No colon or an empty key yields nothing.
        if not sep or not key:
            continue
        metadata[key] = parse_value(value.strip())
    return metadata


def parse_block(raw_text: str) -> ParsedRule:
    """Split ``raw_text`` into its metadata block and body.

    Parameters
    ----------
    raw_text : str
        Full contents of a rule file.

    Returns
    -------
    ParsedRule
        Empty metadata and the trimmed text when the text does not open with a
        delimiter line or the block is never closed; otherwise the coerced
        metadata and the trimmed remainder after the closing delimiter.
    """
    trimmed = raw_text.strip()
    lines = trimmed.split("\n")
    if not lines or not _is_delimiter(lines[0]):
        return ParsedRule(metadata={}, body=trimmed)

    closing = next(
        (idx for idx in range(1, len(lines)) if _is_delimiter(lines[idx])), None
    )
    if closing is None:
        return ParsedRule(metadata={}, body=trimmed)

    metadata = _parse_metadata_lines(lines[1:closing])
    body = "\n".join(lines[closing + 1 :]).strip()
    return ParsedRule(metadata=metadata, body=body)


def normalize_metadata(metadata: typ.Mapping[str, typ.Any]) -> dict[str, typ.Any]:
    """Return a copy of ``metadata`` with rule-specific fields normalised.

    A missing ``globs`` defaults to an empty list and a string one is wrapped;
    a missing ``alwaysApply`` defaults to ``False`` and a string one is read as
    a boolean. Keys whose value is ``None`` are dropped while empty strings are
    kept. Applying the function to its own output returns an equal mapping.
    """
    cleaned = dict(metadata)

    globs = cleaned.get("globs")
    if "globs" not in cleaned:
        cleaned["globs"] = []
    elif isinstance(globs, str):
        cleaned["globs"] = [globs] if globs.strip() else []

    always_apply = cleaned.get("alwaysApply")
    if "alwaysApply" not in cleaned:
        cleaned["alwaysApply"] = False
    elif isinstance(always_apply, str):
        cleaned["alwaysApply"] = always_apply.lower() == "true"

    return {key: value for key, value in cleaned.items() if value is not None}


def parse_with_normalization(raw_text: str) -> ParsedRule:
    """Parse ``raw_text`` and normalise the resulting metadata."""
    parsed = parse_block(raw_text)
    return ParsedRule(metadata=normalize_metadata(parsed.metadata), body=parsed.body)


__all__ = [
    "MetadataValue",
    "ParsedRule",
    "normalize_metadata",
    "parse_block",
    "parse_value",
    "parse_with_normalization",
]
