from __future__ import annotations

from pathlib import Path

import click
import pytest

from nginit.config import NgInitConfig
from nginit.context import NgInitContext, pass_context


@pytest.mark.unit
class TestNgInitContext:
    """Tests for NgInitContext class."""

    def test_default_initialization(self) -> None:
        """Test NgInitContext initializes with correct default values."""
        ctx = NgInitContext()

        assert ctx.config_path is None
        assert ctx.verbose == 0
        assert ctx.color is True
        assert ctx.config == NgInitConfig()

    def test_instances_are_independent(self) -> None:
        """Test multiple NgInitContext instances are independent."""
        ctx1 = NgInitContext()
        ctx2 = NgInitContext()

        ctx1.verbose = 2
        ctx1.config.scan_limit = 3

        assert ctx2.verbose == 0
        assert ctx2.config.scan_limit == 20
        assert ctx1.config is not ctx2.config

    def test_all_attributes_can_be_set(self) -> None:
        """Test all context attributes can be set and retrieved."""
        ctx = NgInitContext()
        config = NgInitConfig(scan_limit=5)

        ctx.config_path = Path("/path/to/nginit.toml")
        ctx.verbose = 2
        ctx.color = False
        ctx.config = config

        assert ctx.config_path == Path("/path/to/nginit.toml")
        assert ctx.verbose == 2
        assert ctx.color is False
        assert ctx.config is config

    def test_slots_prevents_arbitrary_attributes(self) -> None:
        """Test __slots__ prevents setting undefined attributes."""
        ctx = NgInitContext()

        with pytest.raises(AttributeError):
            ctx.arbitrary_attribute = "value"  # type: ignore


@pytest.mark.unit
class TestPassContextDecorator:
    """Tests for pass_context decorator."""

    def test_pass_context_injects_existing_context(self) -> None:
        """Test pass_context decorator injects existing NgInitContext."""

        @click.command()
        @pass_context
        def test_command(ctx: NgInitContext) -> NgInitContext:
            return ctx

        click_ctx = click.Context(click.Command("test"))
        nginit_ctx = NgInitContext()
        click_ctx.obj = nginit_ctx

        result = click_ctx.invoke(test_command)

        assert result is nginit_ctx

    def test_pass_context_creates_context_when_missing(self) -> None:
        """Test pass_context creates NgInitContext when none exists."""

        @click.command()
        @pass_context
        def test_command(ctx: NgInitContext) -> NgInitContext:
            return ctx

        click_ctx = click.Context(click.Command("test"))

        result = click_ctx.invoke(test_command)

        assert isinstance(result, NgInitContext)
        assert result.verbose == 0
