"""Modelos de dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación estricta y campos autodocumentados sin acoplar el core a
  librerías de I/O.
- Los registros del catálogo traen más claves de las que usamos; `extra="ignore"`
  mantiene los modelos estables cuando el catálogo añade campos.

Nota:
- Las relaciones se expresan como URLs canónicas, igual que en el catálogo.
  La URL es la identidad de cada entidad.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class _CatalogRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    url: str = Field(
        ...,
        min_length=1,
        description="Canonical URL of the resource (primary key).",
    )


class Person(_CatalogRecord):
    """A character as returned by `/people/`."""

    name: str = Field(..., min_length=1)
    height: str = "unknown"
    mass: str = "unknown"
    hair_color: str = "unknown"
    skin_color: str = "unknown"
    eye_color: str = "unknown"
    birth_year: str = "unknown"
    gender: str = "unknown"
    homeworld: str = Field(
        default="",
        description="URL of the home planet.",
    )
    films: list[str] = Field(
        default_factory=list,
        description="URLs of the films the character appears in.",
    )
    species: list[str] = Field(
        default_factory=list,
        description="Species URLs (empty means Human).",
    )
    created: str = ""
    edited: str = ""


class Planet(_CatalogRecord):
    name: str = Field(..., min_length=1)
    rotation_period: str = "unknown"
    orbital_period: str = "unknown"
    diameter: str = "unknown"
    climate: str = "unknown"
    gravity: str = "unknown"
    terrain: str = "unknown"
    surface_water: str = "unknown"
    population: str = "unknown"


class Species(_CatalogRecord):
    name: str = Field(..., min_length=1)
    classification: str = "unknown"
    designation: str = "unknown"
    language: str = "unknown"
    homeworld: str | None = None


class Film(_CatalogRecord):
    title: str = Field(..., min_length=1)
    episode_id: int = Field(..., ge=0)
    director: str = ""
    producer: str = ""
    release_date: str = ""


class Character(Person):
    """A person enriched with display-only derived fields."""

    species_name: str = Field(
        default="Human",
        description="Resolved name of the first species (Human when absent).",
    )
    image_url: str = Field(..., description="Placeholder portrait URL.")
    species_color: str = Field(..., description="Color tag derived from the species name.")


T = TypeVar("T", bound=BaseModel)


class Page(BaseModel, Generic[T]):
    """One page of a paginated listing."""

    results: list[T] = Field(default_factory=list)
    total_count: int = Field(default=0, ge=0)
    has_next: bool = False
    has_previous: bool = False

    @classmethod
    def from_api(cls, payload: dict[str, Any], item_model: type[T]) -> "Page[T]":
        """Build a page from an upstream `{count, next, previous, results}` body."""

        raw_results = payload.get("results") or []
        return cls(
            results=[item_model.model_validate(item) for item in raw_results],
            total_count=int(payload.get("count") or 0),
            has_next=payload.get("next") is not None,
            has_previous=payload.get("previous") is not None,
        )


class Session(BaseModel):
    """The single active login. Timestamps are epoch milliseconds."""

    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(..., min_length=1)
    token: str = Field(..., min_length=1)
    issued_at: int = Field(..., ge=0, alias="issuedAt")
    expires_at: int = Field(..., ge=0, alias="expiresAt")


class FilterSelection(BaseModel):
    """Up to three categorical filters. Empty string means "any"."""

    homeworld: str = ""
    film: str = ""
    species: str = ""

    @property
    def is_active(self) -> bool:
        return bool(self.homeworld or self.film or self.species)


class BrowseStatus(str, Enum):
    """Render branch of the browse screen."""

    LOADING = "loading"
    ERROR = "error"
    EMPTY = "empty"
    LOADED = "loaded"
