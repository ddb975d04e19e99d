"""Exportación JSON de una página enriquecida.

Por qué JSON:
- Interoperabilidad con otras herramientas y pipelines (jq, notebooks).
- Conserva la vista enriquecida (nombre de especie, campos derivados) sin volver a pedirla.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from core.domain.models import Character


def export_characters_json(*, characters: Iterable[Character], output_path: Path) -> Path:
    """Export characters to UTF-8 JSON with a stable layout."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = [character.model_dump(mode="json") for character in characters]
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
