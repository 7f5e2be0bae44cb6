"""Utility helpers shared by the rules configuration loader."""

from __future__ import annotations

from .models import RulesConfigError


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _coerce_bool(value: object, *, field: str) -> bool:
    """Interpret YAML booleans and common string spellings as a bool."""
    match value:
        case bool():
            return value
        case str() as text if text.strip().lower() in {"true", "yes", "on", "1"}:
            return True
        case str() as text if text.strip().lower() in {"false", "no", "off", "0"}:
            return False
        case _:
            msg = f"'{field}' must be a boolean, got {value!r}."
            raise RulesConfigError(msg)


def _coerce_workers(value: object) -> int:
    """Return a positive worker count or raise RulesConfigError."""
    if isinstance(value, bool):
        msg = f"'max_workers' must be a positive integer, got {value!r}."
        raise RulesConfigError(msg)
    try:
        workers = int(str(value).strip())
    except ValueError:
        workers = 0
    if workers < 1:
        msg = f"'max_workers' must be a positive integer, got {value!r}."
        raise RulesConfigError(msg)
    return workers


def _normalize_suffix(value: str) -> str:
    """Return ``value`` with exactly one leading dot."""
    return "." + value.lstrip(".")


def _normalize_source_dir(value: str) -> str:
    """Return a POSIX source directory without ``./`` or trailing slashes."""
    normalized = value.replace("\\", "/").strip()
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized.rstrip("/")


__all__ = [
    "_coerce_bool",
    "_coerce_workers",
    "_normalize_source_dir",
    "_normalize_suffix",
    "_optional_str",
]
