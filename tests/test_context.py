"""Unit tests for modcatalog.context module."""

from __future__ import annotations

from pathlib import Path

import click
import pytest

from modcatalog.config import ModCatalogConfig
from modcatalog.context import ModCatalogContext, pass_context


@pytest.mark.unit
class TestModCatalogContext:
    """Tests for ModCatalogContext class."""

    def test_default_initialization(self) -> None:
        """Test the context starts with default configuration."""
        ctx = ModCatalogContext()

        assert ctx.config_path is None
        assert ctx.verbose == 0
        assert ctx.color is True
        assert isinstance(ctx.config, ModCatalogConfig)
        assert ctx.config.channels == ["Official"]

    def test_instances_are_independent(self) -> None:
        """Test contexts do not share state, including config lists."""
        ctx1 = ModCatalogContext()
        ctx2 = ModCatalogContext()

        ctx1.verbose = 2
        ctx1.config.channels.append("Beta")

        assert ctx2.verbose == 0
        assert ctx2.config.channels == ["Official"]

    def test_attributes_can_be_set(self) -> None:
        """Test every slot is writable."""
        ctx = ModCatalogContext()
        config = ModCatalogConfig(catalog="https://example.org/index.json")

        ctx.config_path = Path("/etc/modcatalog.toml")
        ctx.color = False
        ctx.config = config

        assert ctx.config_path == Path("/etc/modcatalog.toml")
        assert ctx.color is False
        assert ctx.config is config

    def test_slots_prevent_arbitrary_attributes(self) -> None:
        """Test __slots__ rejects unknown attributes."""
        ctx = ModCatalogContext()

        with pytest.raises(AttributeError):
            ctx.catalog = "index.json"  # type: ignore[attr-defined]


@pytest.mark.unit
class TestPassContextDecorator:
    """Tests for pass_context decorator."""

    def test_injects_existing_context(self) -> None:
        """Test an existing context object is passed through."""

        @click.command()
        @pass_context
        def command(ctx: ModCatalogContext) -> ModCatalogContext:
            return ctx

        click_ctx = click.Context(click.Command("test"))
        existing = ModCatalogContext()
        click_ctx.obj = existing

        assert click_ctx.invoke(command) is existing

    def test_creates_context_when_missing(self) -> None:
        """Test a default context is created on demand."""

        @click.command()
        @pass_context
        def command(ctx: ModCatalogContext) -> ModCatalogContext:
            return ctx

        click_ctx = click.Context(click.Command("test"))

        result = click_ctx.invoke(command)

        assert isinstance(result, ModCatalogContext)
        assert result.verbose == 0
