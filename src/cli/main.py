"""Command-line interface (Typer + Rich).

Commands:
- `login` / `logout` / `whoami`: mock session lifecycle.
- `people`: one page of enriched characters, with search and filters.
- `show`: detail view of one character (homeworld joined).
- `filters`: the values accepted by the filter options.
- `browse`: interactive browser (search, filters, pagination, detail, retry).
- `doctor`: environment diagnostics.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.json_exporter import export_characters_json
from adapters.swapi_client import SwapiClient
from cli import doctor
from cli.ui_components import (
    build_character_panel,
    build_characters_table,
    build_error_panel,
    build_filter_options_table,
    build_pagination_text,
    print_banner,
)
from core.config import AppSettings
from core.domain.errors import AuthError, FetchError
from core.domain.models import BrowseStatus
from core.services.auth import AuthService, TokenRefresher, get_token_expiry
from core.services.browser import CatalogBrowser, load_filter_options
from core.services.catalog_pipeline import SpeciesCache, enrich_people
from core.services.character_detail import load_character_detail

app = typer.Typer(no_args_is_help=True, help="Browse the Star Wars catalog from the terminal.")
app.add_typer(doctor.app, name="doctor")

_console = Console()

_BROWSE_HELP = (
    "n next  p previous  g N go to page  s TEXT search (s alone clears)\n"
    "h URL homeworld  f URL film  sp URL|human species (- clears)  r reset\n"
    "o N open detail  t retry  l list filter values  q quit"
)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=False)],
        force=True,
    )


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override the configured log level."),
) -> None:
    settings = AppSettings()
    _configure_logging(log_level or settings.log_level)


def _require_session(settings: AppSettings) -> AuthService:
    auth = AuthService(settings)
    if not auth.is_authenticated:
        _console.print("[yellow]Not logged in.[/yellow] Run `login` first.")
        raise typer.Exit(code=1)
    auth.refresh_if_needed()
    return auth


def _exit_with_fetch_error(exc: FetchError) -> NoReturn:
    _console.print(build_error_panel(str(exc), retry_hint="Run the same command again to retry."))
    raise typer.Exit(code=1)


@app.command()
def login(
    username: str = typer.Option(..., "--username", "-u", prompt=True),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True),
) -> None:
    """Sign in with the demo credentials."""

    auth = AuthService(AppSettings())
    try:
        session = auth.login(username.strip(), password)
    except AuthError as exc:
        _console.print(build_error_panel(str(exc)))
        raise typer.Exit(code=1)
    _console.print(f"[green]Logged in as[/green] {session.username}")


@app.command()
def logout() -> None:
    """Forget the stored session."""

    AuthService(AppSettings()).logout()
    _console.print("Logged out.")


@app.command()
def whoami() -> None:
    """Show the active session."""

    auth = AuthService(AppSettings())
    session = auth.session
    if session is None:
        _console.print("[yellow]Anonymous[/yellow]")
        raise typer.Exit(code=1)
    expires = datetime.fromtimestamp(get_token_expiry(session.token) / 1000)
    _console.print(f"{session.username} (token valid until {expires.isoformat(timespec='seconds')})")


def _render_browser(browser: CatalogBrowser, *, numbered: bool = False) -> None:
    status = browser.status
    if status is BrowseStatus.LOADING:
        _console.print("[dim]Loading...[/dim]")
        return
    if status is BrowseStatus.ERROR:
        _console.print(build_error_panel(browser.error, retry_hint="Press t to retry."))
        return

    _console.print(f"[dim]{browser.summary()}[/dim]")
    if status is BrowseStatus.EMPTY:
        _console.print("No characters found")
        if browser.has_active_filters:
            _console.print("[dim]Reset the filters to see everyone.[/dim]")
        return

    _console.print(build_characters_table(browser.visible_characters, numbered=numbered))
    if browser.show_pagination:
        _console.print(
            build_pagination_text(
                browser.current_page,
                browser.total_pages,
                has_next=browser.has_next,
                has_previous=browser.has_previous,
            )
        )


async def _people(
    settings: AppSettings,
    *,
    page: int,
    search: str,
    homeworld: str,
    film: str,
    species: str,
    export: Path | None,
) -> None:
    async with SwapiClient(settings) as client:
        browser = CatalogBrowser(client, settings)
        browser.search_term = search.strip()
        browser.current_page = page
        browser.set_filters(homeworld=homeworld, film=film, species=species)
        await browser.load()

    if browser.status is BrowseStatus.ERROR:
        _console.print(build_error_panel(browser.error, retry_hint="Run the same command again to retry."))
        raise typer.Exit(code=1)
    _render_browser(browser)
    if export is not None:
        path = export_characters_json(characters=browser.visible_characters, output_path=export)
        _console.print(f"[green]Exported to[/green] {path}")


@app.command()
def people(
    page: int = typer.Option(1, "--page", min=1, help="Page number (1-based)."),
    search: str = typer.Option("", "--search", "-s", help="Search by name (server-side)."),
    homeworld: str = typer.Option("", "--homeworld", help="Homeworld URL."),
    film: str = typer.Option("", "--film", help="Film URL."),
    species: str = typer.Option("", "--species", help="Species URL, or 'human'."),
    export: Optional[Path] = typer.Option(None, "--export", help="Write the shown page to a JSON file."),
) -> None:
    """List one page of characters."""

    settings = AppSettings()
    _require_session(settings)
    asyncio.run(
        _people(
            settings,
            page=page,
            search=search,
            homeworld=homeworld,
            film=film,
            species=species,
            export=export,
        )
    )


async def _show(settings: AppSettings, person_id: int) -> None:
    async with SwapiClient(settings) as client:
        try:
            person = await client.get_person(person_id)
        except FetchError as exc:
            _exit_with_fetch_error(exc)
        (character,) = await enrich_people([person], client, SpeciesCache())
        detail = await load_character_detail(character, client)
    _console.print(build_character_panel(detail))


@app.command()
def show(person_id: int = typer.Argument(..., min=1, help="Character id (from its URL).")) -> None:
    """Show the detail view of one character."""

    settings = AppSettings()
    _require_session(settings)
    asyncio.run(_show(settings, person_id))


async def _filters(settings: AppSettings) -> None:
    async with SwapiClient(settings) as client:
        options = await load_filter_options(client)
    _console.print(build_filter_options_table(options))


@app.command()
def filters() -> None:
    """List the values accepted by --homeworld, --film and --species."""

    settings = AppSettings()
    _require_session(settings)
    asyncio.run(_filters(settings))


def _filter_value(arg: str) -> str:
    return "" if arg in ("", "-") else arg


async def _handle_browse_command(browser: CatalogBrowser, client: SwapiClient, line: str) -> bool:
    """Apply one interactive command. Returns False to quit."""

    command, _, arg = line.strip().partition(" ")
    arg = arg.strip()

    if command in ("q", "quit", "exit"):
        return False
    if command in ("n", "p", "g") and browser.filters.is_active:
        _console.print("[dim]Clear filters to paginate.[/dim]")
        return True
    if command == "n":
        await browser.next_page()
    elif command == "p":
        await browser.previous_page()
    elif command == "g" and arg.isdigit():
        target = int(arg)
        if 1 <= target <= max(browser.total_pages, 1):
            await browser.go_to_page(target)
    elif command == "s":
        await browser.set_search(arg)
        await browser.wait_for_search()
    elif command == "h":
        browser.set_filters(homeworld=_filter_value(arg))
    elif command == "f":
        browser.set_filters(film=_filter_value(arg))
    elif command == "sp":
        browser.set_filters(species=_filter_value(arg))
    elif command == "r":
        await browser.reset()
    elif command == "t":
        await browser.retry()
    elif command == "l":
        _console.print(build_filter_options_table(await load_filter_options(client)))
        return True
    elif command == "o" and arg.isdigit():
        visible = browser.visible_characters
        index = int(arg) - 1
        if 0 <= index < len(visible):
            detail = await load_character_detail(visible[index], client)
            _console.print(build_character_panel(detail))
            return True
    else:
        _console.print(f"[dim]{_BROWSE_HELP}[/dim]")
        return True

    _render_browser(browser, numbered=True)
    return True


async def _browse(settings: AppSettings, auth: AuthService) -> None:
    refresher = TokenRefresher(auth, interval_seconds=settings.token_refresh_interval_seconds)
    refresher.start()
    try:
        async with SwapiClient(settings) as client:
            browser = CatalogBrowser(client, settings)
            try:
                await browser.load(1)
                _render_browser(browser, numbered=True)
                _console.print(f"[dim]{_BROWSE_HELP}[/dim]")
                while True:
                    line = await asyncio.to_thread(_console.input, "[bold yellow]> [/bold yellow]")
                    if not await _handle_browse_command(browser, client, line):
                        break
            finally:
                browser.close()
    finally:
        await refresher.stop()


@app.command()
def browse() -> None:
    """Interactive browser."""

    settings = AppSettings()
    auth = _require_session(settings)
    session = auth.session
    print_banner(_console, session.username if session else None)
    try:
        asyncio.run(_browse(settings, auth))
    except (KeyboardInterrupt, EOFError):
        _console.print()


def run() -> None:
    # UnicodeEncodeError on Windows terminals (cp1252 vs utf-8).
    if sys.platform == "win32":
        sys.stdout.reconfigure(encoding="utf-8")
        sys.stderr.reconfigure(encoding="utf-8")
    app()


if __name__ == "__main__":
    run()
