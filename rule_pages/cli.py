"""Cyclopts CLI entrypoint for building rule documentation bundles.

The ``rules`` console script loads ``rules.yaml``, processes every rule file
under the configured source directory, and either writes the JSON bundle a
site generator consumes (``rules build``) or reports broken references and
failed files (``rules check``).

Examples
--------
Build the bundle for the current project:

>>> from rule_pages.cli import main
>>> main()  # doctest: +SKIP

Check references in another checkout:

>>> from rule_pages.cli import app
>>> app.run(["check", "--project-root", "../other"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .bundle import build_bundle, write_bundle
from .config import RulesConfig, load_rules_config
from .generator import ContentLoader

if typ.TYPE_CHECKING:
    from .models import ProcessingResult

DEFAULT_CONFIG = Path("rules.yaml")
DEFAULT_OUTPUT = Path("build/rules.json")

app = App(name="rules", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _resolve_config(config: Path, project_root: Path) -> RulesConfig:
    """Load ``config`` relative to ``project_root``; use defaults when absent."""
    config_path = config if config.is_absolute() else project_root / config
    if not config_path.exists():
        return RulesConfig()
    return load_rules_config(config_path)


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.INFO, format="%(levelname)s %(name)s: %(message)s"
        )


def _run(config: Path, project_root: Path) -> tuple[RulesConfig, ProcessingResult]:
    rules_config = _resolve_config(config, project_root)
    return rules_config, ContentLoader(rules_config, project_root).run()


@app.command(help="Process rule files and write the JSON bundle.")
def build(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to rules config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    project_root: typ.Annotated[
        Path, Parameter(help="Project root holding the rules directory")
    ] = Path(),
    output: typ.Annotated[
        Path, Parameter(help="Where to write the bundle", env_var="INPUT_OUTPUT")
    ] = DEFAULT_OUTPUT,
    verbose: bool = False,
) -> None:
    """Write the rules bundle for ``project_root``.

    Parameters
    ----------
    config : Path, optional
        Path to ``rules.yaml``; relative paths are resolved against
        ``project_root``. Defaults are used when the file does not exist.
    project_root : Path, optional
        Directory containing the rules source directory. Defaults to the
        current directory.
    output : Path, optional
        Destination of the JSON bundle.
    verbose : bool, optional
        Emit progress logging to stderr.

    Returns
    -------
    None
        Writes the bundle and prints its path along with any diagnostics.
    """
    _configure_logging(verbose)
    rules_config, result = _run(config, project_root)
    for warning in result.warnings:
        print(f"warning: {warning}", file=sys.stderr)
    for error in [*result.errors, *result.fatal_errors]:
        print(f"error: {error}", file=sys.stderr)
    written = write_bundle(build_bundle(result, rules_config), output)
    print(f"wrote {_format_path(written)}")


@app.command(help="Report broken cross-references and files that failed to load.")
def check(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to rules config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    project_root: typ.Annotated[
        Path, Parameter(help="Project root holding the rules directory")
    ] = Path(),
    verbose: bool = False,
) -> None:
    """Print diagnostics and exit with status 1 when problems exist.

    Raises
    ------
    SystemExit
        With code ``1`` when a reference is broken or a file failed to load.
    """
    _configure_logging(verbose)
    _rules_config, result = _run(config, project_root)
    for message in [*result.warnings, *result.errors, *result.fatal_errors]:
        print(message)
    stats = result.stats
    print(
        f"{len(result.documents)} rules, {stats.valid}/{stats.total} references "
        f"resolved ({stats.success_rate}%)"
    )
    if stats.broken or result.errors or result.fatal_errors:
        raise SystemExit(1)


def main() -> None:
    """Invoke the Cyclopts application that powers the `rules` console command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
