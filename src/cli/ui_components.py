"""Componentes UI de la CLI (Rich).

Por qué separar componentes:
- Mantiene la lógica de comandos aparte de los detalles visuales.
- Permite que los comandos puntuales y el navegador interactivo compartan tablas/paneles.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import Character
from core.services.browser import FilterOptions, pagination_window
from core.services.character_detail import CharacterDetail
from core.services.formatting import capitalize

# Species color tags -> terminal colors.
_TAG_STYLES: dict[str, str] = {
    "blue": "blue",
    "gray": "grey70",
    "slate": "grey50",
    "amber": "dark_orange",
    "orange": "orange1",
    "yellow": "yellow",
    "lime": "green_yellow",
    "green": "green",
    "emerald": "spring_green3",
    "teal": "dark_cyan",
    "cyan": "cyan",
    "sky": "deep_sky_blue1",
    "indigo": "slate_blue1",
    "violet": "medium_purple",
    "purple": "purple",
    "fuchsia": "magenta",
    "pink": "hot_pink",
    "rose": "indian_red1",
    "red": "red",
}


def species_style(color_tag: str) -> str:
    """Map a `bg-<hue>-<shade>` tag to a Rich style."""

    parts = color_tag.split("-")
    hue = parts[1] if len(parts) >= 3 else ""
    return _TAG_STYLES.get(hue, "slate_blue1")


def print_banner(console: Console, username: str | None = None) -> None:
    title = Text("Star Wars Characters", style="bold yellow")
    subtitle = Text(f"Welcome, {username}" if username else "Catalog browser", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="yellow", padding=(1, 4)))


def build_characters_table(characters: list[Character], *, numbered: bool = False) -> Table:
    table = Table(title="Characters")
    if numbered:
        table.add_column("#", style="dim", no_wrap=True)
    table.add_column("Name", style="bold white")
    table.add_column("Species", no_wrap=True)
    table.add_column("Birth Year", style="cyan")
    table.add_column("Gender", style="white")
    table.add_column("Films", justify="right")
    table.add_column("Image", style="magenta")
    for index, c in enumerate(characters, start=1):
        row = [
            c.name,
            Text(c.species_name, style=species_style(c.species_color)),
            c.birth_year,
            capitalize(c.gender),
            str(len(c.films)),
            c.image_url,
        ]
        if numbered:
            row.insert(0, str(index))
        table.add_row(*row)
    return table


def build_pagination_text(current_page: int, total_pages: int, *, has_next: bool, has_previous: bool) -> Text:
    text = Text()
    text.append("< Previous ", style="white" if has_previous else "dim")
    for item in pagination_window(current_page, total_pages):
        if item is None:
            text.append(" ... ", style="dim")
        elif item == current_page:
            text.append(f" [{item}] ", style="bold black on yellow")
        else:
            text.append(f" {item} ")
    text.append(" Next >", style="white" if has_next else "dim")
    return text


def _info_table(rows: list[tuple[str, str]]) -> Table:
    table = Table.grid(padding=(0, 2))
    table.add_column(style="dim")
    table.add_column(style="bold white")
    for label, value in rows:
        table.add_row(label, value)
    return table


def build_character_panel(detail: CharacterDetail) -> Panel:
    """Detail overlay: basic info, film count and the joined homeworld."""

    c = detail.character
    films = Text.assemble((str(detail.film_count), "bold"), " ", (detail.film_label, "dim"))

    if detail.homeworld_error:
        homeworld: Table | Text = Text(detail.homeworld_error, style="red")
    elif detail.homeworld is not None:
        homeworld = _info_table([("Name", detail.homeworld.name), *detail.homeworld_info()])
    else:
        homeworld = Text("-", style="dim")

    body = Group(
        Text(c.image_url, style="magenta"),
        Text("\nBasic Information", style="bold yellow"),
        _info_table(detail.basic_info()),
        Text("\nFilm Appearances", style="bold yellow"),
        films,
        Text("\nHomeworld", style="bold yellow"),
        homeworld,
    )
    return Panel(
        body,
        title=Text(c.name, style="bold yellow"),
        subtitle=Text(c.species_name, style=species_style(c.species_color)),
        border_style="yellow",
    )


def build_error_panel(message: str, *, retry_hint: str | None = None) -> Panel:
    body = Text(message, style="red")
    if retry_hint:
        body.append(f"\n\n{retry_hint}", style="dim")
    return Panel(body, title=Text("Error", style="bold red"), border_style="red")


def build_filter_options_table(options: FilterOptions) -> Table:
    table = Table(title="Filters")
    table.add_column("Filter", style="cyan", no_wrap=True)
    table.add_column("Label", style="white")
    table.add_column("Value (URL)", style="magenta")
    for planet in options.planets:
        table.add_row("homeworld", planet.name, planet.url)
    for film in options.films:
        table.add_row("film", f"Episode {film.episode_id}: {film.title}", film.url)
    for species in options.species:
        table.add_row("species", species.name, species.url)
    return table
