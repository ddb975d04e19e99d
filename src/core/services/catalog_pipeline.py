"""Aggregation pipeline for the browse screen.

Given a page of people this module:
- resolves each person's first species to a display name (one lookup per
  person, memoized by URL for the whole session),
- derives the display attributes (portrait URL, species color tag),
- filters the enriched page client-side.

Everything here is side-effect free except the species cache.
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass, field
from typing import Iterable

from core.domain.models import Character, FilterSelection, Page, Person, Species
from core.interfaces.catalog import CatalogSource

logger = logging.getLogger(__name__)

DEFAULT_SPECIES = "Human"
HUMAN_FILTER_VALUE = "human"
DEFAULT_SPECIES_COLOR = "bg-indigo-600"

SPECIES_COLORS: dict[str, str] = {
    "Human": "bg-blue-500",
    "Droid": "bg-gray-500",
    "Wookiee": "bg-amber-700",
    "Rodian": "bg-green-600",
    "Hutt": "bg-yellow-600",
    "Yoda's species": "bg-emerald-500",
    "Trandoshan": "bg-lime-600",
    "Mon Calamari": "bg-cyan-500",
    "Ewok": "bg-orange-600",
    "Sullustan": "bg-rose-500",
    "Neimodian": "bg-teal-600",
    "Gungan": "bg-purple-500",
    "Toydarian": "bg-indigo-500",
    "Dug": "bg-pink-500",
    "Twi'lek": "bg-violet-500",
    "Aleena": "bg-fuchsia-500",
    "Vulptereen": "bg-red-600",
    "Xexto": "bg-sky-500",
    "Toong": "bg-amber-500",
    "Cerean": "bg-slate-500",
    "Nautolan": "bg-emerald-600",
    "Zabrak": "bg-red-700",
    "Tholothian": "bg-blue-600",
    "Iktotchi": "bg-orange-700",
    "Quermian": "bg-lime-500",
    "Kel Dor": "bg-rose-600",
    "Chagrian": "bg-cyan-600",
    "Geonosian": "bg-amber-600",
    "Mirialan": "bg-green-700",
    "Clawdite": "bg-purple-600",
    "Besalisk": "bg-blue-700",
    "Kaminoan": "bg-gray-400",
    "Skakoan": "bg-yellow-700",
    "Muun": "bg-slate-600",
    "Togruta": "bg-orange-500",
    "Kaleesh": "bg-red-800",
    "Pau'an": "bg-gray-600",
}

_TRAILING_ID = re.compile(r"/(\d+)/$")


def get_id_from_url(url: str) -> int:
    """Numeric id at the end of a canonical URL (`.../people/4/` -> 4), else 0."""

    match = _TRAILING_ID.search(url)
    return int(match.group(1)) if match else 0


def get_random_image_url(seed: int) -> str:
    return f"https://picsum.photos/seed/{seed}/400/300"


def get_species_color(species_name: str) -> str:
    return SPECIES_COLORS.get(species_name, DEFAULT_SPECIES_COLOR)


@dataclass
class SpeciesCache:
    """Session-scoped memo of species lookups, keyed by canonical URL.

    Resolved entries are never evicted or invalidated (the catalog is static).
    In-flight lookups are shared, so concurrent requests for one URL hit the
    network once. Failed lookups are dropped so a later page can try again.
    """

    _entries: dict[str, asyncio.Future[Species]] = field(default_factory=dict, repr=False)
    network_lookups: int = 0

    def __contains__(self, url: object) -> bool:
        future = self._entries.get(url)  # type: ignore[arg-type]
        if future is None or not future.done() or future.cancelled():
            return False
        return future.exception() is None

    def __len__(self) -> int:
        return sum(1 for url in self._entries if url in self)

    async def resolve(self, url: str, source: CatalogSource) -> Species:
        future = self._entries.get(url)
        if future is None:
            self.network_lookups += 1
            future = asyncio.ensure_future(source.get_species(url))
            self._entries[url] = future
            future.add_done_callback(lambda f, u=url: self._forget_failure(u, f))
        return await asyncio.shield(future)

    def _forget_failure(self, url: str, future: asyncio.Future[Species]) -> None:
        if future.cancelled() or future.exception() is not None:
            if self._entries.get(url) is future:
                del self._entries[url]


async def resolve_species_name(
    species_urls: list[str],
    source: CatalogSource,
    cache: SpeciesCache,
) -> str:
    """Name of the first species, or Human when absent or on any failure."""

    if not species_urls:
        return DEFAULT_SPECIES
    try:
        species = await cache.resolve(species_urls[0], source)
    except Exception as exc:
        logger.debug("Species lookup failed for %s: %s", species_urls[0], exc)
        return DEFAULT_SPECIES
    return species.name


def to_character(person: Person, species_name: str) -> Character:
    return Character(
        **person.model_dump(),
        species_name=species_name,
        image_url=get_random_image_url(get_id_from_url(person.url)),
        species_color=get_species_color(species_name),
    )


async def enrich_people(
    people: Iterable[Person],
    source: CatalogSource,
    cache: SpeciesCache,
) -> list[Character]:
    """Enrich every person concurrently. Output order matches input order."""

    people = list(people)
    names = await asyncio.gather(
        *(resolve_species_name(person.species, source, cache) for person in people)
    )
    return [to_character(person, name) for person, name in zip(people, names)]


async def fetch_characters(
    source: CatalogSource,
    cache: SpeciesCache,
    *,
    page: int = 1,
    search: str = "",
) -> Page[Character]:
    """Fetch one listing (search when `search` is set, else `page`) and enrich it.

    Raises `FetchError` when the listing itself fails.
    """

    if search:
        response = await source.search_people(search)
    else:
        response = await source.get_people(page)
    characters = await enrich_people(response.results, source, cache)
    return Page[Character](
        results=characters,
        total_count=response.total_count,
        has_next=response.has_next,
        has_previous=response.has_previous,
    )


def matches_filters(character: Person, selection: FilterSelection) -> bool:
    if selection.homeworld and character.homeworld != selection.homeworld:
        return False
    if selection.film and selection.film not in character.films:
        return False
    if selection.species:
        if character.species:
            return selection.species in character.species
        return selection.species == HUMAN_FILTER_VALUE
    return True


def apply_filters(
    characters: Iterable[Character],
    selection: FilterSelection,
) -> list[Character]:
    """Subset of the loaded page matching every non-empty filter (AND)."""

    return [c for c in characters if matches_filters(c, selection)]
