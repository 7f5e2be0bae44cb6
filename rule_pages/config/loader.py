"""Load rules configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .helpers import (
    _coerce_bool,
    _coerce_workers,
    _normalize_source_dir,
    _normalize_suffix,
    _optional_str,
)
from .models import RulesConfig, RulesConfigError


def load_rules_config(path: Path) -> RulesConfig:
    """Load the YAML configuration describing where rules live and how to link them.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``rules.yaml``). Options may sit under a top-level ``rules`` mapping or
        directly at the top level.

    Returns
    -------
    RulesConfig
        Parsed configuration with defaults applied for every missing option.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure (or the ``rules`` section) is not a
        mapping.
    RulesConfigError
        If required options are empty or invalid.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from rule_pages.config import load_rules_config
    >>> config = load_rules_config(Path("rules.yaml"))  # doctest: +SKIP
    >>> config.cross_reference_base  # doctest: +SKIP
    '/rules'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    section = loaded.get("rules", loaded)
    if section is None:
        section = {}
    if not isinstance(section, dict):
        msg = "The 'rules' section must be a mapping."
        raise TypeError(msg)
    return build_rules_config(section)


def build_rules_config(payload: typ.Mapping[str, typ.Any]) -> RulesConfig:
    """Build a RulesConfig from a mapping, applying defaults and validation."""
    defaults = RulesConfig()

    source_dir = _optional_str(payload.get("source_dir", defaults.source_dir))
    if not source_dir:
        msg = "'source_dir' is required for rule documents."
        raise RulesConfigError(msg)
    target_path = _optional_str(payload.get("target_path", defaults.target_path))
    if not target_path or not target_path.strip("/"):
        msg = "'target_path' is required for rule documents."
        raise RulesConfigError(msg)

    base_url = _optional_str(payload.get("base_url")) or defaults.base_url
    main_rule = _optional_str(payload.get("main_rule")) or defaults.main_rule
    suffix = _optional_str(payload.get("source_suffix")) or defaults.source_suffix
    scheme = _optional_str(payload.get("scheme")) or defaults.scheme
    include_metadata = _coerce_bool(
        payload.get("include_metadata", defaults.include_metadata),
        field="include_metadata",
    )
    max_workers = _coerce_workers(payload.get("max_workers", defaults.max_workers))

    return RulesConfig(
        source_dir=_normalize_source_dir(source_dir),
        target_path=target_path.strip("/"),
        base_url=base_url,
        include_metadata=include_metadata,
        main_rule=main_rule,
        source_suffix=_normalize_suffix(suffix),
        scheme=scheme.rstrip(":"),
        max_workers=max_workers,
    )


__all__ = ["build_rules_config", "load_rules_config"]
