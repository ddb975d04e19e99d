"""Detail view data: a character joined with its homeworld."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from core.domain.errors import FetchError
from core.domain.models import Character, Planet
from core.interfaces.catalog import CatalogSource
from core.services.formatting import (
    capitalize,
    format_date,
    format_diameter,
    format_height,
    format_mass,
    format_population,
)

logger = logging.getLogger(__name__)

HOMEWORLD_ERROR = "Failed to load homeworld data"


@dataclass
class CharacterDetail:
    character: Character
    homeworld: Planet | None = None
    homeworld_error: str | None = None

    @property
    def film_count(self) -> int:
        return len(self.character.films)

    @property
    def film_label(self) -> str:
        return "film" if self.film_count == 1 else "films"

    def basic_info(self) -> list[tuple[str, str]]:
        c = self.character
        return [
            ("Height", format_height(c.height)),
            ("Mass", format_mass(c.mass)),
            ("Birth Year", c.birth_year),
            ("Gender", capitalize(c.gender)),
            ("Hair Color", c.hair_color),
            ("Eye Color", c.eye_color),
            ("Skin Color", c.skin_color),
            ("Date Added", format_date(c.created)),
        ]

    def homeworld_info(self) -> list[tuple[str, str]]:
        if self.homeworld is None:
            return []
        p = self.homeworld
        return [
            ("Terrain", p.terrain),
            ("Climate", p.climate),
            ("Population", format_population(p.population)),
            ("Diameter", format_diameter(p.diameter)),
        ]


async def load_character_detail(character: Character, source: CatalogSource) -> CharacterDetail:
    """Join the homeworld. A failed lookup is reported on the detail, not raised."""

    detail = CharacterDetail(character=character)
    try:
        detail.homeworld = await source.get_planet(character.homeworld)
    except FetchError as exc:
        logger.error("Homeworld lookup failed for %s: %s", character.url, exc)
        detail.homeworld_error = HOMEWORLD_ERROR
    return detail
