"""
Règles de résolution d'un jeton vers un code catalogue.
Liste ordonnée explicite: la première règle qui répond gagne.
"""
from typing import List, Optional

from checkout_router.catalog import Catalog, CatalogEntry


class ExactCodeRule:
    """Le jeton, en majuscules, est un code du catalogue (ex: 'intfmt' -> INTFMT)."""

    name = "exact"

    def __init__(self, catalog: Catalog):
        self._catalog = catalog

    def match(self, token: str, normalized: str) -> Optional[str]:
        code = token.upper()
        return code if code in self._catalog else None

    def __repr__(self) -> str:
        return "ExactCodeRule()"


class PrefixRule:
    """
    Le jeton normalisé commence par le nom affiché normalisé d'une entrée.
    Tolère le texte ajouté par le formulaire (ex: 'Cover Design — $149').
    """

    name = "prefix"

    def __init__(self, entry: CatalogEntry):
        self.code = entry.code
        self.prefix = entry.match_prefix

    def match(self, token: str, normalized: str) -> Optional[str]:
        return self.code if normalized.startswith(self.prefix) else None

    def __repr__(self) -> str:
        return f"PrefixRule({self.prefix!r} -> {self.code})"


def build_rules(catalog: Catalog) -> List:
    """Règle exacte d'abord, puis une règle de préfixe par entrée dans l'ordre du catalogue."""
    return [ExactCodeRule(catalog)] + [PrefixRule(entry) for entry in catalog]


def expected_prefixes(catalog: Catalog) -> List[str]:
    return [entry.match_prefix for entry in catalog]
