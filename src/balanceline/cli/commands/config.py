"""Config management commands for balanceline."""

from __future__ import annotations

import msgspec
import msgspec.toml
import typer
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from balanceline.cli.app import ExitCode
from balanceline.cli.atyper import ATyper
from balanceline.config.paths import balances_dir
from balanceline.config.paths import cache_dir
from balanceline.config.paths import claude_dir
from balanceline.config.paths import config_dir
from balanceline.config.paths import config_file
from balanceline.config.settings import Config
from balanceline.config.settings import get_config
from balanceline.config.settings import read_config_file
from balanceline.config.settings import save_config

# Create config group
config_app = ATyper(help="Manage configuration settings.")


def mask_secret(value: str | None) -> str | None:
    """Hide all but the last four characters of a secret."""
    if not value:
        return value
    if len(value) <= 8:
        return "****"
    return f"****{value[-4:]}"


def _redacted(config: Config) -> Config:
    account = msgspec.structs.replace(
        config.account, access_token=mask_secret(config.account.access_token)
    )
    return msgspec.structs.replace(config, account=account)


@config_app.callback(invoke_without_command=True)
def config_callback(
    ctx: typer.Context,
) -> None:
    """Config management commands.

    If no subcommand is provided, shows current configuration.
    """
    if ctx.invoked_subcommand is None:
        config_show_command(ctx)


@config_app.command("show")
def config_show_command(
    ctx: typer.Context,
) -> None:
    """Display current settings."""
    console = Console()

    config = _redacted(get_config())
    config_path = config_file()
    json_mode = ctx.meta.get("json", False)
    verbose = ctx.meta.get("verbose", False)

    if json_mode:
        from balanceline.display.json import output_json_pretty

        config_dict = msgspec.to_builtins(config)
        config_dict["path"] = str(config_path)
        output_json_pretty(config_dict)
        return

    toml_data = msgspec.toml.encode(config)
    body = toml_data.decode() or "# defaults\n"
    console.print(Panel(Syntax(body, "toml"), title=f"Config: {config_path}"))

    if verbose:
        if config_path.exists():
            console.print(f"[dim]File size: {config_path.stat().st_size} bytes[/dim]")
        else:
            console.print(
                "[dim]Using default configuration (file not created yet)[/dim]"
            )


@config_app.command("path")
def config_path_command(
    ctx: typer.Context,
    cache: bool = typer.Option(False, "--cache", "-c", help="Show cache directory"),
) -> None:
    """Show directory paths used by balanceline."""
    console = Console()
    json_mode = ctx.meta.get("json", False)

    if json_mode:
        from balanceline.display.json import output_json_pretty

        if cache:
            output_json_pretty({"cache_dir": str(cache_dir())})
        else:
            output_json_pretty(
                {
                    "config_dir": str(config_dir()),
                    "config_file": str(config_file()),
                    "cache_dir": str(cache_dir()),
                    "balances_dir": str(balances_dir()),
                    "claude_dir": str(claude_dir()),
                }
            )
        return

    if cache:
        console.print(str(cache_dir()))
        return

    console.print(f"[bold]Config directory:[/bold] {config_dir()}")
    console.print(f"[bold]Config file:[/bold]      {config_file()}")
    console.print(f"[bold]Cache directory:[/bold]  {cache_dir()}")
    console.print(f"[bold]Balances:[/bold]         {balances_dir()}")
    console.print(f"[bold]Claude settings:[/bold]  {claude_dir()}")


@config_app.command("set-account")
def config_set_account_command(
    ctx: typer.Context,
    access_token: str = typer.Option(
        None, "--access-token", "-t", help="System access token from the relay"
    ),
    user_id: int = typer.Option(
        None, "--user-id", "-u", help="Numeric relay user id"
    ),
    exchange_rate: float = typer.Option(
        None, "--exchange-rate", help="Currency units per USD"
    ),
    quota_per_unit: float = typer.Option(
        None, "--quota-per-unit", help="Raw quota units per USD"
    ),
) -> None:
    """Store the relay account used by the quota query."""
    console = Console()
    json_mode = ctx.meta.get("json", False)

    if quota_per_unit is not None and quota_per_unit <= 0:
        console.print("[red]--quota-per-unit must be positive.[/red]")
        raise typer.Exit(ExitCode.CONFIG_ERROR)
    if exchange_rate is not None and exchange_rate <= 0:
        console.print("[red]--exchange-rate must be positive.[/red]")
        raise typer.Exit(ExitCode.CONFIG_ERROR)

    # Env and keyring overrides stay out of the saved file
    path = config_file()
    config = read_config_file(path)
    stored_in_keyring = False

    updates: dict = {}
    if user_id is not None:
        updates["user_id"] = user_id
    if exchange_rate is not None:
        updates["exchange_rate"] = exchange_rate
    if quota_per_unit is not None:
        updates["quota_per_unit"] = quota_per_unit

    if access_token is not None:
        if config.credentials.use_keyring:
            from balanceline.config.keyring import store_access_token

            stored_in_keyring = store_access_token(access_token)
            if not stored_in_keyring:
                console.print(
                    "[yellow]Keyring unavailable; storing token in config file.[/yellow]"
                )
        updates["access_token"] = None if stored_in_keyring else access_token

    account = msgspec.structs.replace(config.account, **updates)
    save_config(msgspec.structs.replace(config, account=account), path)

    result = {
        "success": True,
        "user_id": account.user_id,
        "complete": account.user_id is not None
        and (bool(account.access_token) or stored_in_keyring),
        "keyring": stored_in_keyring,
        "path": str(path),
    }

    if json_mode:
        from balanceline.display.json import output_json_pretty

        output_json_pretty(result)
        return

    console.print(f"[green]✓[/green] Account saved to {path}")
    if stored_in_keyring:
        console.print("[dim]Access token stored in system keyring[/dim]")
    if not result["complete"]:
        console.print(
            "[yellow]Both --access-token and --user-id are needed "
            "for the account quota query.[/yellow]"
        )
