"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.swapi_client import SwapiClient
from core.config import AppSettings, get_user_env_file
from core.domain.errors import FetchError
from core.services.auth import AuthService

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_api(settings: AppSettings) -> tuple[bool, str]:
    try:
        async with SwapiClient(settings) as client:
            page = await client.get_people(1)
        return True, f"{page.total_count} characters"
    except FetchError as exc:
        status = f" (HTTP {exc.status_code})" if exc.status_code else ""
        return False, f"{exc}{status}"


def _check_session(settings: AppSettings) -> tuple[str, str]:
    auth = AuthService(settings)
    if auth.session is None:
        return "ANONYMOUS", f"No valid session in {settings.session_path}"
    return "OK", f"Logged in as {auth.session.username}"


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="swapi-browser Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("API base URL", "OK", settings.api_base_url)
    table.add_row("User config", "OK" if get_user_env_file().exists() else "OPTIONAL", str(get_user_env_file()))

    session_status, session_detail = _check_session(settings)
    table.add_row("Session", session_status, session_detail)

    # Connectivity (best-effort)
    ok_api, detail_api = asyncio.run(_check_api(settings))
    table.add_row("Catalog API", "OK" if ok_api else "FAIL", detail_api)

    _console.print(table)

    if not ok_api:
        _console.print(
            "\n[yellow]Note:[/yellow] Set SWAPI_BROWSER_API_BASE_URL to point at a reachable mirror."
        )
