"""Channels command implementation for modcatalog.

Lists the release channels found in the catalog, with the number of
modules in each, followed by catalog-wide release statistics.
"""

from __future__ import annotations

import sys
import json
import click
import asyncio
from typing import Any, Dict, List, Optional

from modcatalog.context import pass_context, ModCatalogContext
from modcatalog.exceptions import ModCatalogError
from modcatalog.core import Catalog, CatalogStore
from modcatalog.utils import (
    HTTPClient,
    get_logger,
    get_raw_console,
    print_error,
    print_table,
    print_warning,
)

logger = get_logger("commands.channels")


@click.command()
@click.option(
    "--catalog",
    help="Catalog URL or path (default: from configuration).",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@pass_context
def channels(ctx: ModCatalogContext, catalog: Optional[str], format: str) -> None:
    """List catalog channels and release statistics."""
    source = catalog or ctx.config.catalog
    try:
        loaded = asyncio.run(_load(source))
    except ModCatalogError as e:
        print_error(f"{e}")
        sys.exit(1)

    summary = channel_summary(loaded)
    stats = loaded.statistics()
    logger.info(
        "%d modules, %d releases, %d pre-releases, %.2f assets per release",
        stats.modules,
        stats.releases,
        stats.pre_releases,
        stats.average_assets_per_release,
    )

    if format.lower() == "json":
        report = {
            "catalog": source,
            "channels": summary,
            "statistics": stats.to_json(),
        }
        print(json.dumps(report, indent=2))
        return

    if not summary:
        print_warning("Catalog has no channels")
    else:
        print_table(
            summary,
            headers=["channel", "modules"],
            title="Channels",
            column_styles={"modules": {"justify": "right"}},
        )

    console = get_raw_console()
    console.print(f"\n[bold]Modules:[/bold] {stats.modules}")
    console.print(f"[bold]Releases:[/bold] {stats.releases}")
    console.print(f"[bold]Pre-releases:[/bold] {stats.pre_releases}")
    console.print(
        f"[bold]Assets per release:[/bold] {stats.average_assets_per_release:.2f}"
    )


async def _load(source: str) -> Catalog:
    async with HTTPClient() as http:
        return await CatalogStore(http).load(source)


def channel_summary(catalog: Catalog) -> List[Dict[str, Any]]:
    """Return ``{"channel", "modules"}`` rows in channel display order."""
    return [
        {"channel": name, "modules": len(catalog.filter_channels([name]))}
        for name in catalog.channels()
    ]
