"""Catalog client: the Star Wars REST API.

Endpoints used:
- `/people/?page=N` and `/people/?search=q` (paginated listings)
- `/people/<id>/` (single resource)
- any canonical URL (planet, species, film lookups)
- `/planets/`, `/species/`, `/films/` (filter domains)
"""

from __future__ import annotations

from types import TracebackType
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel

from adapters.http_client import build_async_client, fetch_json
from core.config import AppSettings
from core.domain.errors import FetchError
from core.domain.models import Film, Page, Person, Planet, Species

T = TypeVar("T", bound=BaseModel)


class SwapiClient:
    """Async client for the catalog. Implements `core.interfaces.CatalogSource`.

    Use as an async context manager, or pass an existing `httpx.AsyncClient`
    (which the caller then owns and closes).
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._base_url = self._settings.api_base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or build_async_client(self._settings)

    async def __aenter__(self) -> "SwapiClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _get(self, url: str, params: dict[str, Any] | None = None) -> Any:
        return await fetch_json(self._client, url, params=params)

    async def _get_model(self, url: str, model: type[T]) -> T:
        payload = await self._get(url)
        return _validate(model, payload, url)

    async def _get_page(
        self, url: str, model: type[T], params: dict[str, Any] | None = None
    ) -> Page[T]:
        payload = await self._get(url, params)
        if not isinstance(payload, dict):
            raise FetchError("API request failed: unexpected payload")
        try:
            return Page[model].from_api(payload, model)  # type: ignore[valid-type]
        except ValueError as exc:
            raise FetchError(f"API request failed: invalid data from {url}") from exc

    # Listings

    async def get_people(self, page: int = 1) -> Page[Person]:
        return await self._get_page(f"{self._base_url}/people/", Person, {"page": page})

    async def search_people(self, query: str) -> Page[Person]:
        return await self._get_page(f"{self._base_url}/people/", Person, {"search": query})

    # Single resources

    async def get_person(self, person_id: int) -> Person:
        return await self._get_model(f"{self._base_url}/people/{person_id}/", Person)

    async def get_planet(self, url: str) -> Planet:
        return await self._get_model(url, Planet)

    async def get_species(self, url: str) -> Species:
        return await self._get_model(url, Species)

    async def get_film(self, url: str) -> Film:
        return await self._get_model(url, Film)

    # Filter domains

    async def _get_all(self, resource: str, model: type[T]) -> list[T]:
        items: list[T] = []
        page = 1
        has_more = True
        while has_more:
            response = await self._get_page(
                f"{self._base_url}/{resource}/", model, {"page": page}
            )
            items.extend(response.results)
            has_more = response.has_next
            page += 1
        return items

    async def get_all_planets(self) -> list[Planet]:
        return await self._get_all("planets", Planet)

    async def get_all_species(self) -> list[Species]:
        return await self._get_all("species", Species)

    async def get_all_films(self) -> list[Film]:
        response = await self._get_page(f"{self._base_url}/films/", Film)
        return sorted(response.results, key=lambda film: film.episode_id)


def _validate(model: type[T], payload: Any, url: str) -> T:
    try:
        return model.model_validate(payload)
    except ValueError as exc:
        raise FetchError(f"API request failed: invalid data from {url}") from exc
