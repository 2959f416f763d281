from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import requests

TRANSLATION_CONTRIBUTION = "translation"


def select_translators(document: dict[str, Any]) -> list[dict[str, Any]]:
    """Return contributor records whose ``contributions`` include translation work."""

    contributors = document["contributors"]
    return [entry for entry in contributors if TRANSLATION_CONTRIBUTION in entry["contributions"]]


def fetch_translators(url: str, *, timeout: float = 30.0) -> list[dict[str, Any]]:
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return select_translators(response.json())


def write_translators(path: Path, translators: list[dict[str, Any]]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(json.dumps(translators, indent=4, ensure_ascii=False).encode("utf-8"))
