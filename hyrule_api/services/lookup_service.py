"""
LOOKUP SERVICE MODULE
=====================

Answers the catalog endpoints: GET /characters, GET /characters/search and
GET /creators. Pure reads over the Catalog it was built with.
"""

from typing import List

from hyrule_api.models import Character, Creator
from hyrule_api.services.catalog import Catalog


class LookupService:
    """List and search the records of one Catalog."""

    def __init__(self, catalog: Catalog):
        self.catalog = catalog

    def list_characters(self) -> List[Character]:
        return list(self.catalog.characters)

    def list_creators(self) -> List[Creator]:
        return list(self.catalog.creators)

    def search_characters(self, query: str = "") -> List[Character]:
        """
        Characters whose name contains query, ignoring case, in catalog order.
        An empty query matches every character.
        """
        needle = (query or "").lower()
        return [c for c in self.catalog.characters if needle in c.name.lower()]
