"""Status command implementation for modcatalog.

Loads the module catalog, describes the host environment, and reports for
every visible module which version is the latest and which install,
update or uninstall actions apply.

The command wires together:

1. **CatalogStore**: loads the catalog from a URL or a local file.
2. **EnvironmentProvider**: turns CLI options, a query string or config
   defaults into an :class:`EnvironmentSnapshot`.
3. **Catalog filters**: channel, installability and search filters.
4. **decide_all**: the release-decision engine.

Typical usage::

    # What would the browser offer with nothing installed?
    $ modcatalog status

    # Installed modules, pre-releases enabled, machine-readable
    $ modcatalog status --installed jaspAnova=0.95.0 --pre-release -f json

    # Same environment as a browser query string
    $ modcatalog status --env 'v=0.95.5&i={"jaspAnova":"0.95.0"}&p=true'
"""

from __future__ import annotations

import sys
import json
import click
import asyncio
from pathlib import Path
from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence, Tuple

from modcatalog.config import ModCatalogConfig
from modcatalog.constants import KNOWN_ARCHITECTURES
from modcatalog.context import pass_context, ModCatalogContext
from modcatalog.exceptions import ModCatalogError
from modcatalog.models import EnvironmentSnapshot, ReleaseDecision
from modcatalog.core import CatalogStore, EnvironmentProvider, decide_all
from modcatalog.utils import (
    HTTPClient,
    colorize_label,
    get_logger,
    get_raw_console,
    get_update_type,
    print_error,
    print_success,
    print_table,
    print_warning,
    safe_write_file,
)

logger = get_logger("commands.status")


@click.command()
@click.argument("names", nargs=-1)
@click.option(
    "--catalog",
    help="Catalog URL or path (default: from configuration).",
)
@click.option(
    "--env",
    "env_query",
    metavar="QUERY",
    help="Environment as a query string (v, a, i, u, p parameters).",
)
@click.option("--runtime-version", help="Installed host runtime version.")
@click.option(
    "--arch",
    type=click.Choice(KNOWN_ARCHITECTURES),
    help="Host architecture.",
)
@click.option(
    "--installed",
    multiple=True,
    metavar="NAME=VERSION",
    help="Installed module and version (repeatable).",
)
@click.option(
    "--uninstallable",
    multiple=True,
    metavar="NAME",
    help="Module the host allows to uninstall (repeatable).",
)
@click.option(
    "--pre-release/--no-pre-release",
    default=None,
    help="Consider pre-releases.",
)
@click.option(
    "--channel",
    "channels",
    multiple=True,
    help="Channel to show (repeatable; default: configured channels).",
)
@click.option("--search", help="Only show modules matching this text.")
@click.option(
    "--all",
    "show_all",
    is_flag=True,
    help="Include modules with no release for this runtime or architecture.",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "simple", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also write a JSON report to this file.",
)
@pass_context
def status(
    ctx: ModCatalogContext,
    names: Tuple[str, ...],
    catalog: Optional[str],
    env_query: Optional[str],
    runtime_version: Optional[str],
    arch: Optional[str],
    installed: Tuple[str, ...],
    uninstallable: Tuple[str, ...],
    pre_release: Optional[bool],
    channels: Tuple[str, ...],
    search: Optional[str],
    show_all: bool,
    format: str,
    output: Optional[Path],
) -> None:
    """Show install, update and uninstall actions for catalog modules.

    NAMES restricts the report to the given modules.

    Exits with 1 when an installed module can be updated, else 0.
    """
    try:
        snapshot = build_snapshot(
            ctx.config,
            env_query=env_query,
            runtime_version=runtime_version,
            arch=arch,
            installed=installed,
            uninstallable=uninstallable,
            pre_release=pre_release,
        )
        has_updates = asyncio.run(
            _status_async(
                ctx,
                snapshot,
                source=catalog or ctx.config.catalog,
                names=names,
                channels=list(channels) or list(ctx.config.channels),
                search=search,
                show_all=show_all,
                format=format.lower(),
                output=output,
            )
        )
        sys.exit(1 if has_updates else 0)

    except ModCatalogError as e:
        print_error(f"{e}")
        sys.exit(1)


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------


def build_snapshot(
    config: ModCatalogConfig,
    *,
    env_query: Optional[str] = None,
    runtime_version: Optional[str] = None,
    arch: Optional[str] = None,
    installed: Sequence[str] = (),
    uninstallable: Sequence[str] = (),
    pre_release: Optional[bool] = None,
) -> EnvironmentSnapshot:
    """Combine config defaults, an optional query string and CLI overrides.

    Raises:
        click.BadParameter: An ``--installed`` value is not ``NAME=VERSION``.
        ConfigError: The query string holds invalid JSON.
    """
    if env_query:
        snapshot = EnvironmentSnapshot.from_query_string(env_query)
    else:
        snapshot = EnvironmentSnapshot(
            installed_runtime_version=config.runtime_version,
            architecture=config.architecture,
            allow_pre_release=config.allow_pre_release,
        )

    overrides: Dict[str, Any] = {}
    if runtime_version:
        overrides["installed_runtime_version"] = runtime_version
    if arch:
        overrides["architecture"] = arch
    if pre_release is not None:
        overrides["allow_pre_release"] = pre_release
    if installed:
        modules = dict(snapshot.installed_modules)
        modules.update(_parse_installed(installed))
        overrides["installed_modules"] = modules
    if uninstallable:
        overrides["uninstallable_modules"] = snapshot.uninstallable_modules | set(
            uninstallable
        )

    return replace(snapshot, **overrides) if overrides else snapshot


def _parse_installed(values: Sequence[str]) -> Dict[str, str]:
    modules: Dict[str, str] = {}
    for value in values:
        name, sep, version = value.partition("=")
        if not sep or not name.strip() or not version.strip():
            raise click.BadParameter(
                f"expected NAME=VERSION, got {value!r}",
                param_hint="--installed",
            )
        modules[name.strip()] = version.strip()
    return modules


# ---------------------------------------------------------------------------
# Async orchestration
# ---------------------------------------------------------------------------


async def _status_async(
    ctx: ModCatalogContext,
    fallback: EnvironmentSnapshot,
    *,
    source: str,
    names: Sequence[str],
    channels: List[str],
    search: Optional[str],
    show_all: bool,
    format: str,
    output: Optional[Path],
) -> bool:
    """Load the catalog, evaluate every visible module and render the result.

    Returns:
        ``True`` if any installed module has an update.
    """
    show_progress = format == "table" or ctx.verbose > 0

    provider = EnvironmentProvider(fallback=fallback)
    snapshot = await provider.fetch_environment()
    logger.info(
        "Environment: runtime %s on %s",
        snapshot.installed_runtime_version,
        snapshot.architecture,
    )

    async with HTTPClient() as http:
        store = CatalogStore(http)
        catalog = await store.load(source)

    visible = catalog.filter_channels(channels)
    if not show_all:
        visible = visible.filter_installable(snapshot)
    visible = visible.search(search)

    modules = list(visible)
    if names:
        wanted = set(names)
        modules = [m for m in modules if m.name in wanted]
        missing = wanted - {m.name for m in modules}
        for name in sorted(missing):
            print_warning(f"Module '{name}' is not available in the selected view")

    decisions = decide_all(modules, snapshot)

    if output is not None:
        report = _build_report(source, snapshot, decisions)
        safe_write_file(output, json.dumps(report, indent=2) + "\n")
        logger.info("Wrote report to %s", output)

    if format == "json":
        print(json.dumps(_build_report(source, snapshot, decisions), indent=2))
    elif not decisions:
        if show_progress:
            print_warning("No modules to display")
        return False
    elif format == "table":
        _display_table(decisions)
    else:
        _display_simple(decisions)

    updates = sum(1 for d in decisions if d.has_update)
    if show_progress:
        if updates:
            print_warning(f"\n{updates} module(s) have updates available")
        else:
            print_success("\nAll installed modules are up to date!")

    return updates > 0


def _build_report(
    source: str,
    snapshot: EnvironmentSnapshot,
    decisions: Sequence[ReleaseDecision],
) -> Dict[str, Any]:
    return {
        "catalog": source,
        "environment": snapshot.to_json(),
        "modules": [decision.to_json() for decision in decisions],
    }


# ---------------------------------------------------------------------------
# Display renderers
# ---------------------------------------------------------------------------


def _display_table(decisions: Sequence[ReleaseDecision]) -> None:
    """Render decisions as a Rich table, one row per module."""
    rows = [_create_table_row(decision) for decision in decisions]

    column_styles: Dict[str, Dict[str, Any]] = {
        "Module": {"style": "bold cyan", "no_wrap": True},
        "Installed": {"justify": "center", "style": "dim"},
        "Stable": {"justify": "center"},
        "Pre-release": {"justify": "center"},
        "Latest": {"justify": "center"},
        "Action": {"justify": "center", "no_wrap": True},
        "Secondary": {"justify": "center", "no_wrap": True},
        "Update Type": {"justify": "center"},
    }

    print_table(rows, title="Module Status", column_styles=column_styles)


def _create_table_row(decision: ReleaseDecision) -> Dict[str, str]:
    dash = "[dim]-[/dim]"
    update_type = (
        get_update_type(decision.installed_version, decision.target_version)
        if decision.target_version
        else None
    )
    return {
        "Module": decision.module_name,
        "Installed": decision.installed_version or dash,
        "Stable": decision.latest_stable_release_version or dash,
        "Pre-release": decision.latest_pre_release_version or dash,
        "Latest": colorize_label(decision.latest_version_is.value),
        "Action": colorize_label(
            decision.primary_action.value if decision.primary_action else None
        ),
        "Secondary": colorize_label(
            decision.secondary_action.value if decision.secondary_action else None
        ),
        "Update Type": colorize_label(update_type),
    }


def _display_simple(decisions: Sequence[ReleaseDecision]) -> None:
    """Render one plain line per module.

    Example::

        [update-stable] jaspAnova            0.95.0     -> 0.95.5
        [installed] jaspBain                 0.95.5
    """
    console = get_raw_console()

    for decision in decisions:
        action = decision.primary_action or decision.secondary_action
        label = (action or decision.latest_version_is).value
        installed = decision.installed_version or "-"
        target = decision.target_version
        line = f"[{label}] {decision.module_name:20} {installed:10}"
        if target:
            line += f" -> {target}"
        console.print(line, markup=False, highlight=False)
