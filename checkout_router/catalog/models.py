"""
Catalogue des services: code canonique -> (price id Stripe | None, nom affiché).
Valeur immuable, construite une fois au démarrage puis injectée.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from checkout_router.errors import CatalogError
from checkout_router.utils.text import normalize_service_text


@dataclass(frozen=True)
class CatalogEntry:
    code: str
    price_ref: Optional[str]
    display_name: str

    @property
    def is_free(self) -> bool:
        return not self.price_ref

    @property
    def match_prefix(self) -> str:
        return normalize_service_text(self.display_name)


class Catalog:
    """
    Collection ordonnée et immuable d'entrées.
    - L'ordre de déclaration est l'ordre d'évaluation des règles floues.
    - Refuse à la construction: code/nom vide, code dupliqué, préfixes ambigus
      (deux noms normalisés égaux, ou l'un préfixe de l'autre).
    """

    def __init__(self, entries: Iterable[CatalogEntry]):
        ordered: List[CatalogEntry] = list(entries)
        by_code: Dict[str, CatalogEntry] = {}
        for entry in ordered:
            if not entry.code or entry.code != entry.code.strip():
                raise CatalogError(f"Invalid catalog code: {entry.code!r}")
            if entry.code != entry.code.upper():
                raise CatalogError(f"Catalog code must be upper-case: {entry.code!r}")
            if not entry.match_prefix:
                raise CatalogError(f"Empty display name for catalog code {entry.code}")
            if entry.code in by_code:
                raise CatalogError(f"Duplicate catalog code: {entry.code}")
            by_code[entry.code] = entry
        _check_ambiguous_prefixes(ordered)
        self._entries: Tuple[CatalogEntry, ...] = tuple(ordered)
        self._by_code = by_code

    def get(self, code: str) -> Optional[CatalogEntry]:
        return self._by_code.get(code)

    @property
    def codes(self) -> Tuple[str, ...]:
        return tuple(e.code for e in self._entries)

    @property
    def entries(self) -> Tuple[CatalogEntry, ...]:
        return self._entries

    def __contains__(self, code: object) -> bool:
        return code in self._by_code

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Catalog({', '.join(self.codes)})"


def _check_ambiguous_prefixes(entries: List[CatalogEntry]) -> None:
    for i, first in enumerate(entries):
        for second in entries[i + 1:]:
            a, b = first.match_prefix, second.match_prefix
            if a.startswith(b) or b.startswith(a):
                raise CatalogError(
                    f"Ambiguous display names: {first.code} ({a!r}) and {second.code} ({b!r})"
                )
