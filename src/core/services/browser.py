"""Browse-screen state and its transitions.

This module owns the state the UI layer renders: current page, search term,
filter selection, the loaded (enriched) page and the render branch
(`BrowseStatus`). UI layers call the async actions and read the properties;
printing and prompting stay out of here.

Known race: loads are not cancelled or sequenced. If a slow load finishes
after a newer one (for example a debounced search overtaking a page change),
the slow result still applies last.
"""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from core.config import AppSettings
from core.domain.errors import FetchError
from core.domain.models import BrowseStatus, Character, FilterSelection, Film, Planet, Species
from core.interfaces.catalog import CatalogSource, FilterDomainSource
from core.services.catalog_pipeline import SpeciesCache, apply_filters, fetch_characters

logger = logging.getLogger(__name__)


class Debouncer:
    """Delay-and-cancel: only the last call within `delay_seconds` runs."""

    def __init__(self, delay_seconds: float) -> None:
        self._delay = delay_seconds
        self._task: asyncio.Task[None] | None = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def call(self, action: Callable[[], Awaitable[None]]) -> None:
        self.cancel()
        self._task = asyncio.create_task(self._run(action))

    async def _run(self, action: Callable[[], Awaitable[None]]) -> None:
        await asyncio.sleep(self._delay)
        await action()

    def cancel(self) -> None:
        task = self._task
        if task is not None and not task.done():
            task.cancel()
        self._task = None

    async def wait(self) -> None:
        """Wait for the pending call, if any, to finish."""

        task = self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise


@dataclass
class FilterOptions:
    """Dropdown domains: every planet, species and film."""

    planets: list[Planet] = field(default_factory=list)
    species: list[Species] = field(default_factory=list)
    films: list[Film] = field(default_factory=list)


async def load_filter_options(source: FilterDomainSource) -> FilterOptions:
    """Fetch the three domains concurrently. On failure the dropdowns stay empty."""

    try:
        planets, species, films = await asyncio.gather(
            source.get_all_planets(),
            source.get_all_species(),
            source.get_all_films(),
        )
    except FetchError as exc:
        logger.warning("Failed to fetch filter data: %s", exc)
        return FilterOptions()
    return FilterOptions(planets=planets, species=species, films=films)


def pagination_window(current_page: int, total_pages: int) -> list[int | None]:
    """Page buttons around `current_page` (+-2), plus first/last; None is an ellipsis."""

    start = max(1, current_page - 2)
    end = min(total_pages, current_page + 2)
    items: list[int | None] = []
    if start > 1:
        items.append(1)
        if start > 2:
            items.append(None)
    items.extend(range(start, end + 1))
    if end < total_pages:
        if end < total_pages - 1:
            items.append(None)
        items.append(total_pages)
    return items


@dataclass
class BrowseHooks:
    """Optional callbacks for UI layers."""

    changed: Callable[[], None] | None = None


class CatalogBrowser:
    """State machine behind the paginated, searchable, filterable grid."""

    def __init__(
        self,
        source: CatalogSource,
        settings: AppSettings | None = None,
        *,
        cache: SpeciesCache | None = None,
        hooks: BrowseHooks | None = None,
    ) -> None:
        self._source = source
        self._settings = settings or AppSettings()
        self.cache = cache if cache is not None else SpeciesCache()
        self._hooks = hooks or BrowseHooks()
        self._debouncer = Debouncer(self._settings.search_debounce_seconds)

        self.current_page = 1
        self.search_term = ""
        self.filters = FilterSelection()
        self.characters: list[Character] = []
        self.total_count = 0
        self.has_next = False
        self.has_previous = False
        self.loading = False
        self.error = ""

    # Derived state

    @property
    def visible_characters(self) -> list[Character]:
        return apply_filters(self.characters, self.filters)

    @property
    def status(self) -> BrowseStatus:
        if self.loading:
            return BrowseStatus.LOADING
        if self.error:
            return BrowseStatus.ERROR
        if not self.visible_characters:
            return BrowseStatus.EMPTY
        return BrowseStatus.LOADED

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self._settings.page_size)

    @property
    def show_pagination(self) -> bool:
        return not self.filters.is_active and self.total_pages > 1

    @property
    def has_active_filters(self) -> bool:
        return bool(self.search_term) or self.filters.is_active

    @property
    def search_pending(self) -> bool:
        return self._debouncer.pending

    def summary(self) -> str:
        return f"Showing {len(self.visible_characters)} of {self.total_count} characters"

    def find(self, url: str) -> Character | None:
        for character in self.characters:
            if character.url == url:
                return character
        return None

    # Actions

    def _notify(self) -> None:
        if self._hooks.changed:
            self._hooks.changed()

    async def load(self, page: int | None = None) -> None:
        """Fetch and enrich one listing. Errors land in `self.error`."""

        page = self.current_page if page is None else page
        self.loading = True
        self.error = ""
        try:
            result = await fetch_characters(
                self._source, self.cache, page=page, search=self.search_term
            )
        except FetchError as exc:
            self.error = str(exc) or "Failed to fetch characters"
        else:
            self.characters = result.results
            self.total_count = result.total_count
            self.has_next = result.has_next
            self.has_previous = result.has_previous
        finally:
            self.loading = False
        self._notify()

    async def retry(self) -> None:
        await self.load(self.current_page)

    async def go_to_page(self, page: int) -> None:
        self.current_page = page
        await self.load(page)

    async def next_page(self) -> None:
        if self.has_next:
            await self.go_to_page(self.current_page + 1)

    async def previous_page(self) -> None:
        if self.has_previous:
            await self.go_to_page(self.current_page - 1)

    async def _search_now(self) -> None:
        self.current_page = 1
        await self.load(1)

    async def set_search(self, term: str) -> None:
        """Debounce non-empty searches; clearing the term reloads page 1 at once."""

        if term == self.search_term:
            return
        self.search_term = term
        if term:
            self._debouncer.call(self._search_now)
            return
        self._debouncer.cancel()
        await self._search_now()

    async def wait_for_search(self) -> None:
        await self._debouncer.wait()

    def set_filters(
        self,
        *,
        homeworld: str | None = None,
        film: str | None = None,
        species: str | None = None,
    ) -> None:
        update = {
            key: value
            for key, value in (("homeworld", homeworld), ("film", film), ("species", species))
            if value is not None
        }
        self.filters = self.filters.model_copy(update=update)
        self._notify()

    async def reset(self) -> None:
        self.filters = FilterSelection()
        await self.set_search("")
        self._notify()

    def close(self) -> None:
        self._debouncer.cancel()
