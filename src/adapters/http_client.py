"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y el mapeo de errores de cada llamada al catálogo.
- Facilita testing: quien llama acepta un cliente, así los tests inyectan uno
  respaldado por `httpx.MockTransport`.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from core.config import AppSettings
from core.domain.errors import FetchError

logger = logging.getLogger(__name__)


def build_async_client(
    settings: AppSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    Por qué un builder:
    - Centraliza timeouts/headers para que cada consulta se comporte igual.
    - `transport` permite a los tests sustituir la red por un mock.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    params: dict[str, Any] | None = None,
) -> Any:
    """GET `url` and decode JSON, mapping every failure to `FetchError`.

    - Non-2xx status: `FetchError` carrying the status code.
    - Transport failure or undecodable body: `FetchError` without status.
    """

    try:
        response = await client.get(url, params=params)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.debug("Network error fetching %s: %s", url, exc)
        raise FetchError("Network error: Unable to fetch data") from exc

    if not response.is_success:
        reason = response.reason_phrase or f"HTTP {response.status_code}"
        raise FetchError(f"API request failed: {reason}", response.status_code)

    try:
        return response.json()
    except ValueError as exc:
        logger.debug("Invalid JSON from %s: %s", url, exc)
        raise FetchError("Network error: Unable to fetch data") from exc
