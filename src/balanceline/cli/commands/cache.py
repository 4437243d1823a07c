"""Cache management commands for balanceline."""

from __future__ import annotations

from datetime import datetime
from datetime import timezone

import typer
from rich.console import Console
from rich.table import Table

from balanceline.cli.app import ExitCode
from balanceline.cli.atyper import ATyper
from balanceline.config.cache import CacheStore
from balanceline.config.credentials import discover_credentials
from balanceline.config.settings import get_config
from balanceline.models import format_age
from balanceline.models import format_display

# Create cache group
cache_app = ATyper(help="Manage cached balances.")


def _current_key() -> str | None:
    identity = discover_credentials().identity()
    return identity.cache_key() if identity else None


@cache_app.callback(invoke_without_command=True)
def cache_callback(
    ctx: typer.Context,
) -> None:
    """Cache management commands.

    If no subcommand is provided, shows cached balances.
    """
    if ctx.invoked_subcommand is None:
        cache_show_command(ctx)


@cache_app.command("show")
def cache_show_command(
    ctx: typer.Context,
) -> None:
    """Show cached balances per account."""
    console = Console()
    store = CacheStore()
    config = get_config()
    symbol = config.display.currency_symbol
    json_mode = ctx.meta.get("json", False)

    current = _current_key()
    now = datetime.now(timezone.utc)

    rows = []
    for entry in store.list_entries():
        captured = entry.captured_at
        if captured.tzinfo is None:
            captured = captured.replace(tzinfo=timezone.utc)
        rows.append(
            {
                "key": entry.key[:12],
                "current": entry.key == current,
                "display": format_display(entry.balance, symbol),
                "balance": entry.balance.balance,
                "used": entry.balance.used,
                "total": entry.balance.total,
                "is_unlimited": entry.balance.is_unlimited,
                "captured_at": captured.isoformat(),
                "age_seconds": int((now - captured).total_seconds()),
            }
        )

    if json_mode:
        from balanceline.display.json import output_json_pretty

        output_json_pretty({"directory": str(store.directory), "entries": rows})
        return

    if not rows:
        console.print("[dim]No cached balances.[/dim]")
        console.print(f"\nCache directory: {store.directory}")
        return

    table = Table(title="Cached Balances", show_header=True, header_style="bold")
    table.add_column("Account", style="cyan")
    table.add_column("Balance", style="green")
    table.add_column("Used", style="dim")
    table.add_column("Age", style="dim")

    for row in rows:
        account = row["key"] + (" [bold](current)[/bold]" if row["current"] else "")
        used = "-" if row["is_unlimited"] else f"{symbol}{row['used']:.2f}"
        table.add_row(account, row["display"], used, format_age(row["age_seconds"]))

    console.print(table)
    console.print(f"\nCache directory: {store.directory}")


@cache_app.command("clear")
def cache_clear_command(
    ctx: typer.Context,
    all_accounts: bool = typer.Option(
        False,
        "--all",
        "-a",
        help="Clear cached balances for every account",
    ),
) -> None:
    """Clear the cached balance for the current account."""
    console = Console()
    store = CacheStore()
    json_mode = ctx.meta.get("json", False)

    result: dict = {"success": True}

    if all_accounts:
        result["cleared"] = store.clear()
        result["message"] = f"Cleared {result['cleared']} cached balance(s)"
    else:
        key = _current_key()
        if key is None:
            result["success"] = False
            result["error"] = "No API key or base URL configured"
            if json_mode:
                from balanceline.display.json import output_json_pretty

                output_json_pretty(result)
            else:
                console.print("[red]No API key or base URL configured.[/red]")
                console.print("Use [cyan]--all[/cyan] to clear every account.")
            raise typer.Exit(ExitCode.CONFIG_ERROR)

        result["cleared"] = store.clear(key)
        result["message"] = (
            "Cleared cached balance for the current account"
            if result["cleared"]
            else "No cached balance for the current account"
        )

    if json_mode:
        from balanceline.display.json import output_json_pretty

        output_json_pretty(result)
        return

    console.print(f"[green]✓[/green] {result['message']}")
