"""Shared CLI helpers: console, logging setup, settings and error reporting"""

import asyncio
import logging
import sys
from typing import Awaitable, TypeVar

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from core.config import Settings
from core.errors import ExternalProcessFailure, PartialBatchFailure, StudioAssemblyError

console = Console()
err_console = Console(stderr=True)

T = TypeVar("T")


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_time=False, show_path=False)],
        force=True,
    )


def load_settings(**overrides) -> Settings:
    """Settings from the environment, with CLI options taking precedence"""
    values = {k: v for k, v in overrides.items() if v is not None}
    try:
        return Settings(**values)
    except ValidationError as e:
        raise click.BadParameter(str(e))


def run(coro: Awaitable[T]) -> T:
    """
    Run a coroutine, turning core errors into a red message and exit code 1.
    """
    try:
        return asyncio.run(coro)
    except PartialBatchFailure as e:
        console.print(f"[red]Error:[/red] {e}")
        for failure in e.failures:
            console.print(f"  [red]x[/red] chunk {failure.index}: {failure.last_error}")
        sys.exit(1)
    except ExternalProcessFailure as e:
        console.print(f"[red]Error:[/red] {e.tool} exited with code {e.returncode}")
        if e.diagnostics:
            console.print(e.diagnostics, style="dim", markup=False, highlight=False)
        sys.exit(1)
    except StudioAssemblyError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


def make_service(settings: Settings, mock: bool = False):
    """Build clients and the service, reporting configuration problems as CLI errors"""
    from core.service import MediaAssemblyService, build_clients

    try:
        return MediaAssemblyService(settings, build_clients(settings, mock=mock))
    except ValueError as e:
        raise click.ClickException(str(e))
