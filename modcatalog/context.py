"""
Shared Click context object for modcatalog commands.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from modcatalog.config import ModCatalogConfig


class ModCatalogContext:
    """Per-invocation state shared by the CLI group and its commands.

    Attributes:
        config_path: Configuration file in use, if any.
        verbose: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG).
        color: Whether colored terminal output is enabled.
        config: Loaded configuration; defaults until the group callback runs.
    """

    __slots__ = ("config_path", "verbose", "color", "config")

    def __init__(self) -> None:
        self.config_path: Optional[Path] = None
        self.verbose: int = 0
        self.color: bool = True
        self.config: ModCatalogConfig = ModCatalogConfig()


#: Click decorator injecting :class:`ModCatalogContext` into commands.
pass_context = click.make_pass_decorator(ModCatalogContext, ensure=True)
