"""Tests for the detail view (homeworld join)."""

from core.services.catalog_pipeline import SpeciesCache, enrich_people
from core.services.character_detail import HOMEWORLD_ERROR, load_character_detail
from fakes import TATOOINE


async def _luke(client):
    person = await client.get_person(1)
    (character,) = await enrich_people([person], client, SpeciesCache())
    return character


async def test_detail_joins_homeworld(make_client):
    client = make_client()
    detail = await load_character_detail(await _luke(client), client)

    assert detail.homeworld is not None
    assert detail.homeworld.name == "Tatooine"
    assert detail.homeworld_error is None
    assert dict(detail.homeworld_info()) == {
        "Terrain": "desert",
        "Climate": "arid",
        "Population": "200,000",
        "Diameter": "10465 km",
    }


async def test_basic_info_and_films(make_client):
    client = make_client()
    detail = await load_character_detail(await _luke(client), client)
    info = dict(detail.basic_info())
    assert info["Height"] == "1.72 m"
    assert info["Mass"] == "77 kg"
    assert info["Gender"] == "Male"
    assert info["Date Added"] == "09-12-2014"
    assert detail.film_count == 2
    assert detail.film_label == "films"


async def test_homeworld_failure_is_reported_not_raised(make_client, catalog):
    client = make_client()
    character = await _luke(client)
    catalog.failures[TATOOINE] = 500

    detail = await load_character_detail(character, client)
    assert detail.homeworld is None
    assert detail.homeworld_error == HOMEWORLD_ERROR
    assert detail.homeworld_info() == []
