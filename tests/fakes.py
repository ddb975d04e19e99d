from __future__ import annotations

from collections import Counter
from typing import Any

import httpx

BASE = "https://swapi.test/api"

TATOOINE = f"{BASE}/planets/1/"
KASHYYYK = f"{BASE}/planets/14/"
NABOO = f"{BASE}/planets/8/"
DROID = f"{BASE}/species/2/"
WOOKIEE = f"{BASE}/species/3/"
ANH = f"{BASE}/films/1/"
ESB = f"{BASE}/films/2/"


def person(pid: int, name: str, *, homeworld: str, films: list[str], species: list[str]) -> dict[str, Any]:
    return {
        "name": name,
        "height": "172",
        "mass": "77",
        "hair_color": "blond",
        "skin_color": "fair",
        "eye_color": "blue",
        "birth_year": "19BBY",
        "gender": "male",
        "homeworld": homeworld,
        "films": films,
        "species": species,
        "vehicles": [],
        "created": "2014-12-09T13:50:51.644000Z",
        "edited": "2014-12-20T21:17:56.891000Z",
        "url": f"{BASE}/people/{pid}/",
    }


LUKE = person(1, "Luke Skywalker", homeworld=TATOOINE, films=[ANH, ESB], species=[])
C3PO = person(2, "C-3PO", homeworld=TATOOINE, films=[ANH, ESB], species=[DROID])
R2D2 = person(3, "R2-D2", homeworld=NABOO, films=[ANH], species=[DROID])
VADER = person(4, "Darth Vader", homeworld=TATOOINE, films=[ANH, ESB], species=[])
CHEWIE = person(13, "Chewbacca", homeworld=KASHYYYK, films=[ESB], species=[WOOKIEE])

PAGE_1 = [LUKE, C3PO, R2D2, VADER, CHEWIE]

PLANETS = {
    TATOOINE: {"name": "Tatooine", "terrain": "desert", "climate": "arid", "population": "200000", "diameter": "10465", "url": TATOOINE},
    KASHYYYK: {"name": "Kashyyyk", "terrain": "jungle", "climate": "tropical", "population": "45000000", "diameter": "12765", "url": KASHYYYK},
    NABOO: {"name": "Naboo", "terrain": "grassy hills", "climate": "temperate", "population": "4500000000", "diameter": "12120", "url": NABOO},
}
SPECIES = {
    DROID: {"name": "Droid", "classification": "artificial", "homeworld": None, "url": DROID},
    WOOKIEE: {"name": "Wookiee", "classification": "mammal", "homeworld": KASHYYYK, "url": WOOKIEE},
}
FILMS = {
    ESB: {"title": "The Empire Strikes Back", "episode_id": 5, "url": ESB},
    ANH: {"title": "A New Hope", "episode_id": 4, "url": ANH},
}


def listing(results: list[dict[str, Any]], *, count: int, next_url: str | None = None, previous: str | None = None) -> dict[str, Any]:
    return {"count": count, "next": next_url, "previous": previous, "results": results}


def _path_url(request: httpx.Request) -> str:
    return f"{request.url.scheme}://{request.url.host}{request.url.path}"


class FakeCatalog:
    """In-memory catalog served through `httpx.MockTransport`."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.failures: dict[str, int] = {}
        self.fail_all_with: int | None = None

    def hits(self, url: str) -> int:
        return Counter(_path_url(r) for r in self.requests)[url]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_all_with is not None:
            return httpx.Response(self.fail_all_with)

        path_url = _path_url(request)
        if path_url in self.failures:
            return httpx.Response(self.failures[path_url])

        params = request.url.params
        if path_url == f"{BASE}/people/":
            search = params.get("search")
            if search is not None:
                hits = [p for p in PAGE_1 if search.lower() in p["name"].lower()]
                return httpx.Response(200, json=listing(hits, count=len(hits)))
            page = int(params.get("page", "1"))
            if page == 1:
                return httpx.Response(200, json=listing(PAGE_1, count=82, next_url=f"{BASE}/people/?page=2"))
            if page == 2:
                return httpx.Response(
                    200,
                    json=listing([], count=82, next_url=f"{BASE}/people/?page=3", previous=f"{BASE}/people/?page=1"),
                )
            return httpx.Response(404, json={"detail": "Not found"})
        if path_url.startswith(f"{BASE}/people/"):
            for p in PAGE_1:
                if p["url"] == path_url:
                    return httpx.Response(200, json=p)
            return httpx.Response(404, json={"detail": "Not found"})
        if path_url == f"{BASE}/planets/":
            page = int(params.get("page", "1"))
            items = list(PLANETS.values())
            if page == 1:
                return httpx.Response(200, json=listing(items[:2], count=3, next_url=f"{BASE}/planets/?page=2"))
            return httpx.Response(200, json=listing(items[2:], count=3, previous=f"{BASE}/planets/?page=1"))
        if path_url == f"{BASE}/species/":
            page = int(params.get("page", "1"))
            items = list(SPECIES.values())
            if page == 1:
                return httpx.Response(200, json=listing(items[:1], count=2, next_url=f"{BASE}/species/?page=2"))
            return httpx.Response(200, json=listing(items[1:], count=2, previous=f"{BASE}/species/?page=1"))
        if path_url == f"{BASE}/films/":
            return httpx.Response(200, json=listing(list(FILMS.values()), count=2))
        for table in (PLANETS, SPECIES, FILMS):
            if path_url in table:
                return httpx.Response(200, json=table[path_url])
        return httpx.Response(404, json={"detail": "Not found"})


