"""Terminal client for Pogo Accounts.

Usage:
    python -m pogo_accounts list                      # Show all accounts
    python -m pogo_accounts show <id>                 # Show one account
    python -m pogo_accounts add -u ash -e a@x.io -t valor
    python -m pogo_accounts edit <id> --level 30      # Change some fields
    python -m pogo_accounts delete <id>               # Delete after confirming
    python -m pogo_accounts serve                     # Run the API server
"""

from __future__ import annotations

import html
from typing import Any, Dict, Iterable, NoReturn, Optional

import httpx
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from .client import (
    ACCOUNT_ID_LENGTH,
    DEFAULT_BASE_URL,
    ApiError,
    InvalidAccountId,
    PogoAccountsClient,
)

app = typer.Typer(
    name="pogo-accounts",
    help="Manage Pokemon GO account records",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

COLUMNS = ("username", "email", "team", "country", "birthday", "level")

_api_url = DEFAULT_BASE_URL


@app.callback()
def main(
    api_url: str = typer.Option(DEFAULT_BASE_URL, "--api-url", envvar="POGO_API_URL", help="API base URL"),
) -> None:
    global _api_url
    _api_url = api_url


def _client() -> PogoAccountsClient:
    return PogoAccountsClient(_api_url)


def _fail(message: str) -> NoReturn:
    err_console.print(f"[red]{escape(message)}[/red]")
    raise typer.Exit(1)


def unescape_text(value: str) -> str:
    """Undo both escaping layers applied by the server."""
    return html.unescape(html.unescape(value))


def render_accounts(accounts: Iterable[Dict[str, Any]], title: str = "Accounts List") -> Table:
    """Build a table; cells are plain Text so stored values never become markup."""

    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("ID", style="dim")
    for column in COLUMNS:
        table.add_column(column.capitalize())
    for account in accounts:
        cells = [Text(str(account.get("id", "")))]
        cells.extend(Text(str(account.get(column, "") or "")) for column in COLUMNS)
        table.add_row(*cells)
    return table


def _fields(**values: Optional[Any]) -> Dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


@app.command("health")
def cmd_health() -> None:
    """Check that the API is reachable."""
    try:
        with _client() as client:
            status = client.health()
    except (ApiError, httpx.HTTPError) as exc:
        _fail(f"API unreachable: {exc}")
    console.print(
        f"[green]{escape(str(status.get('status')))}[/green] {escape(str(status.get('timestamp', '')))}"
    )


@app.command("list")
def cmd_list() -> None:
    """Show all accounts."""
    try:
        with _client() as client:
            accounts = client.list_accounts()
    except (ApiError, httpx.HTTPError) as exc:
        _fail(f"Failed to fetch accounts: {exc}")

    if not accounts:
        console.print("[yellow]No accounts found.[/yellow]")
        return
    console.print(render_accounts(accounts))


@app.command("show")
def cmd_show(account_id: str = typer.Argument(help="Account id")) -> None:
    """Show one account."""
    try:
        with _client() as client:
            account = client.get_account(account_id)
    except (ApiError, httpx.HTTPError) as exc:
        _fail(f"Failed to fetch account: {exc}")
    console.print(render_accounts([account], title="Account"))


@app.command("add")
def cmd_add(
    username: str = typer.Option(..., "--username", "-u"),
    email: str = typer.Option(..., "--email", "-e"),
    team: str = typer.Option(..., "--team", "-t", help="instinct, mystic or valor"),
    country: Optional[str] = typer.Option(None, "--country"),
    birthday: Optional[str] = typer.Option(None, "--birthday", help="YYYY-MM-DD"),
    level: Optional[int] = typer.Option(None, "--level"),
) -> None:
    """Create a new account."""
    payload = _fields(
        username=username, email=email, team=team,
        country=country, birthday=birthday, level=level,
    )
    try:
        with _client() as client:
            account_id = client.create_account(payload)
    except (ApiError, httpx.HTTPError) as exc:
        _fail(f"Failed to create account: {exc}")
    console.print(f"[green]Account created[/green] {escape(account_id)}")


@app.command("edit")
def cmd_edit(
    account_id: str = typer.Argument(help="Account id"),
    username: Optional[str] = typer.Option(None, "--username", "-u"),
    email: Optional[str] = typer.Option(None, "--email", "-e"),
    team: Optional[str] = typer.Option(None, "--team", "-t"),
    country: Optional[str] = typer.Option(None, "--country"),
    birthday: Optional[str] = typer.Option(None, "--birthday"),
    level: Optional[int] = typer.Option(None, "--level"),
) -> None:
    """Change fields of an existing account."""
    try:
        with _client() as client:
            current = client.get_account(account_id)
            payload = {
                key: unescape_text(value) if isinstance(value, str) else value
                for key, value in current.items()
                if key in COLUMNS
            }
            payload.update(
                _fields(
                    username=username, email=email, team=team,
                    country=country, birthday=birthday, level=level,
                )
            )
            message = client.update_account(account_id, payload)
    except (ApiError, httpx.HTTPError) as exc:
        _fail(f"Failed to update account: {exc}")

    if message is None:
        console.print("[yellow]No changes made to account.[/yellow]")
    else:
        console.print(f"[green]{escape(message)}[/green]")


@app.command("delete")
def cmd_delete(
    account_id: str = typer.Argument(help="Account id"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete an account."""
    if len(account_id) != ACCOUNT_ID_LENGTH:
        _fail("Invalid account ID format")
    if not yes and not typer.confirm("Are you sure you want to delete this account?"):
        raise typer.Exit(0)
    try:
        with _client() as client:
            deleted = client.delete_account(account_id)
    except (ApiError, InvalidAccountId, httpx.HTTPError) as exc:
        _fail(f"Failed to delete account: {exc}")
    console.print(f"[green]Account deleted[/green] {escape(deleted)}")


@app.command("serve")
def cmd_serve() -> None:
    """Run the API server."""
    try:
        from .app import run
    except RuntimeError as exc:
        _fail(str(exc))
    run()


if __name__ == "__main__":
    app()
