"""
CLI commands for secure API key management.

Usage:
    studio-assembly secrets list          # Show configured keys
    studio-assembly secrets set KEY       # Store a key securely
    studio-assembly secrets delete KEY    # Remove a key
    studio-assembly secrets import .env   # Import from .env file
"""

import click
from rich.table import Table

from core.secrets import (
    KNOWN_KEYS,
    delete_api_key,
    import_from_env_file,
    list_api_keys,
    set_api_key,
)
from .common import console


def _normalize(key_name: str) -> str:
    key_name = key_name.upper()
    if key_name not in KNOWN_KEYS and not key_name.endswith("_KEY"):
        key_name = f"{key_name}_API_KEY"
    return key_name


@click.group(name="secrets")
def secrets_cli():
    """Manage API keys securely using OS keychain."""
    pass


@secrets_cli.command(name="list")
def list_keys():
    """List all API keys and their status."""
    status = list_api_keys()

    table = Table(title="API Key Status")
    table.add_column("Key", style="cyan")
    table.add_column("Description", style="dim")
    table.add_column("Status", style="bold")

    for key_name, description in KNOWN_KEYS.items():
        key_status = status.get(key_name, "not_set")
        if key_status == "keychain":
            status_display = "[green]Keychain[/green]"
        elif key_status == "env":
            status_display = "[yellow]Env var[/yellow]"
        else:
            status_display = "[red]Not set[/red]"
        table.add_row(key_name, description, status_display)

    console.print(table)


@secrets_cli.command(name="set")
@click.argument("key_name")
@click.option("--value", "-v", help="API key value (will prompt if not provided)")
def set_key(key_name: str, value: str = None):
    """Store an API key in the secure keychain."""
    key_name = _normalize(key_name)

    if key_name not in KNOWN_KEYS:
        console.print(f"[yellow]Warning:[/yellow] {key_name} is not a recognized key name.")
        if not click.confirm("Store anyway?"):
            return

    if not value:
        value = click.prompt(f"Enter value for {key_name}", hide_input=True)

    if set_api_key(key_name, value):
        console.print(f"[green]Success:[/green] Stored {key_name} in secure keychain")
    else:
        console.print(f"[red]Error:[/red] Failed to store {key_name}")
        raise SystemExit(1)


@secrets_cli.command(name="delete")
@click.argument("key_name")
@click.option("--force", "-f", is_flag=True, help="Don't ask for confirmation")
def delete_key(key_name: str, force: bool = False):
    """Delete an API key from the keychain."""
    key_name = _normalize(key_name)

    if not force and not click.confirm(f"Delete {key_name} from keychain?"):
        return

    if delete_api_key(key_name):
        console.print(f"[green]Success:[/green] Deleted {key_name} from keychain")
    else:
        console.print(f"[yellow]Warning:[/yellow] {key_name} not found in keychain")


@secrets_cli.command(name="import")
@click.argument("env_file", type=click.Path(exists=True, dir_okay=False))
def import_keys(env_file: str):
    """Import API keys from a .env file into the secure keychain."""
    console.print(f"Importing keys from {env_file}...")
    results = import_from_env_file(env_file)

    if not results:
        console.print("[yellow]No API keys found in file[/yellow]")
        return

    for key_name, success in results.items():
        mark = "[green]+[/green]" if success else "[red]x[/red]"
        console.print(f"  {mark} {key_name}")

    success_count = sum(1 for v in results.values() if v)
    console.print(f"\nImported: {success_count} keys")
