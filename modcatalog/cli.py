"""
Command-line interface for modcatalog.

Defines the ``modcatalog`` command group, its global options, and the
mapping from exceptions to process exit codes.
"""

from __future__ import annotations

import sys
import logging
from pathlib import Path
from typing import Optional

import click

from modcatalog.config import load_config
from modcatalog.__version__ import __version__
from modcatalog.context import ModCatalogContext
from modcatalog.exceptions import ConfigError, ModCatalogError
from modcatalog.utils.logger import get_logger, level_for_verbosity, setup_logging
from modcatalog.utils.console import print_error, print_warning, reconfigure_console
from modcatalog.commands.status import status
from modcatalog.commands.channels import channels

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar="MODCATALOG_CONFIG",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v for info, -vv for debug).",
)
@click.option(
    "--color/--no-color",
    default=None,
    help="Force colored output on or off (default: detect terminal).",
    envvar="MODCATALOG_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="modcatalog",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: Optional[bool],
) -> None:
    """modcatalog: browse a module catalog and decide what to install.

    \b
    Commands:
      modcatalog status     Show install/update actions per module
      modcatalog channels   List catalog channels and statistics

    \b
    Examples:
      modcatalog status --installed jaspAnova=0.95.0
      modcatalog status --env 'v=0.95.5&a=Linux_arm64&p=true'
      modcatalog -v channels

    Use ``modcatalog COMMAND --help`` for command options.
    """
    level = level_for_verbosity(verbose)
    setup_logging(level=level, verbose=verbose >= 2)
    logger.debug("Logging initialized at %s level", logging.getLevelName(level))

    reconfigure_console(color=color)

    try:
        loaded = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    mc_ctx = ctx.ensure_object(ModCatalogContext)
    mc_ctx.config_path = loaded.source_path
    mc_ctx.verbose = verbose
    mc_ctx.color = color if color is not None else True
    mc_ctx.config = loaded

    logger.debug("modcatalog v%s", __version__)
    logger.debug("Config path: %s", mc_ctx.config_path)
    logger.debug("Configuration: %s", loaded.to_log_dict())


cli.add_command(status)
cli.add_command(channels)


def main() -> int:
    """Run the CLI and return a process exit code.

    Returns:
        Exit code:
            0   Success
            1   Application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)

    ``status`` exits with 1 on its own when updates are available.
    """
    try:
        cli(standalone_mode=False)
        return 0

    except click.exceptions.Abort:
        print_warning("\nOperation cancelled by user")
        return 130

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except ModCatalogError as exc:
        print_error(str(exc))
        logger.debug("Error details: %s", exc.details or "<none>", exc_info=True)
        return 1

    except KeyboardInterrupt:
        print_warning("\nOperation cancelled by user")
        return 130

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
