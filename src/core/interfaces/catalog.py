"""Contratos de la fuente del catálogo.

Por qué Protocol:
- Contrato estructural (duck typing) sin herencia rígida.
- El pipeline depende solo de estos métodos, así que el cliente HTTP real y un
  doble de test son intercambiables.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import Film, Page, Person, Planet, Species


@runtime_checkable
class CatalogSource(Protocol):
    """Minimal contract the browse pipeline needs.

    Design rules:
    - Every method is async because it performs I/O.
    - Failures raise `core.domain.errors.FetchError`.
    """

    async def get_people(self, page: int = 1) -> Page[Person]:
        ...

    async def search_people(self, query: str) -> Page[Person]:
        ...

    async def get_species(self, url: str) -> Species:
        ...

    async def get_planet(self, url: str) -> Planet:
        ...


@runtime_checkable
class FilterDomainSource(Protocol):
    """Full lists backing the three filter dropdowns."""

    async def get_all_planets(self) -> list[Planet]:
        ...

    async def get_all_species(self) -> list[Species]:
        ...

    async def get_all_films(self) -> list[Film]:
        ...
