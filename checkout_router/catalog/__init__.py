"""
Module 'catalog': point d'entrée public.
Réunit le modèle immuable du catalogue et son chargement au démarrage.
"""

from .models import Catalog, CatalogEntry
from .loader import DEFAULT_ENTRIES, load_catalog, read_catalog_file, apply_price_overrides

__all__ = [
    "Catalog",
    "CatalogEntry",
    "DEFAULT_ENTRIES",
    "load_catalog",
    "read_catalog_file",
    "apply_price_overrides",
]
