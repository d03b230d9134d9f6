"""
CATALOG MODULE
==============

The fixed set of Character and Creator records the lookup endpoints serve.

LIFECYCLE:
  - load_catalog(path): read the JSON seed file once at startup and build a Catalog.
  - The Catalog is handed to LookupService and never written afterwards; it only
    exposes tuples, so there is nothing to lock between concurrent requests.

Tests build their own Catalog directly instead of reading the seed file.
"""

import json
import logging
from pathlib import Path
from typing import Iterable, Tuple, Union

from hyrule_api.models import Character, Creator


logger = logging.getLogger("HYRULE")


def _check_unique_ids(kind: str, records: Iterable) -> None:
    seen = set()
    for record in records:
        if record.id in seen:
            raise ValueError(f"Duplicate {kind} id in catalog: {record.id}")
        seen.add(record.id)


class Catalog:
    """Read-only character and creator records, in the order they were declared."""

    def __init__(self, characters: Iterable[Character], creators: Iterable[Creator]):
        self._characters: Tuple[Character, ...] = tuple(characters)
        self._creators: Tuple[Creator, ...] = tuple(creators)
        _check_unique_ids("character", self._characters)
        _check_unique_ids("creator", self._creators)

    @property
    def characters(self) -> Tuple[Character, ...]:
        return self._characters

    @property
    def creators(self) -> Tuple[Creator, ...]:
        return self._creators

    def __repr__(self) -> str:
        return f"Catalog(characters={len(self._characters)}, creators={len(self._creators)})"


def load_catalog(path: Union[str, Path]) -> Catalog:
    """
    Read {"characters": [...], "creators": [...]} from path and validate each record.
    A missing file, bad JSON or an invalid record raises; the server should not start
    with a broken catalog.
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    characters = [Character.model_validate(item) for item in data.get("characters", [])]
    creators = [Creator.model_validate(item) for item in data.get("creators", [])]
    catalog = Catalog(characters, creators)
    logger.info(
        "Loaded catalog from %s (%d characters, %d creators)",
        path.name,
        len(catalog.characters),
        len(catalog.creators),
    )
    return catalog
