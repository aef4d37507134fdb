"""
Chargement du catalogue au démarrage.
- Fichier JSON optionnel (CATALOG_PATH): [{"code", "price_ref", "display_name"}, ...]
- Sinon catalogue intégré (prix Stripe de production)
- Surcharges par variable d'environnement PRICE_<CODE> (valeur vide => service gratuit)
"""
import json
import logging
import os
from pathlib import Path
from typing import List, Mapping, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError as PydanticValidationError, field_validator

from checkout_router.errors import CatalogError
from .models import Catalog, CatalogEntry

logger = logging.getLogger(__name__)

# module checkout_router.catalog.loader
DEFAULT_ENTRIES = (
    CatalogEntry(code="INTFMT", price_ref="price_1Sku587uZCk6xNoP3Kmujdxi", display_name="Interior Formatting"),
    CatalogEntry(code="COVER", price_ref="price_1Sku677uZCk6xNoP7kwzbTKE", display_name="Cover Design"),
    CatalogEntry(code="KDPPREP", price_ref="price_1Sku787uZCk6xNoP7PbsdNnw", display_name="KDP Upload Preparation"),
)

PRICE_ENV_PREFIX = "PRICE_"


class CatalogFileEntry(BaseModel):
    code: str = Field(min_length=1)
    price_ref: Optional[str] = None
    display_name: str = Field(min_length=1)

    @field_validator("code")
    @classmethod
    def _upper_code(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("price_ref")
    @classmethod
    def _empty_is_free(cls, v: Optional[str]) -> Optional[str]:
        v = (v or "").strip()
        return v or None


_FILE_ADAPTER = TypeAdapter(List[CatalogFileEntry])


def read_catalog_file(path: Union[str, Path]) -> List[CatalogEntry]:
    """
    Lit et valide un fichier catalogue JSON.
    - Soulève CatalogError si le fichier est illisible ou ne respecte pas le schéma.
    """
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        rows = _FILE_ADAPTER.validate_python(raw)
    except (OSError, ValueError, PydanticValidationError) as e:
        raise CatalogError(f"Invalid catalog file {path}: {e}") from e
    return [CatalogEntry(code=r.code, price_ref=r.price_ref, display_name=r.display_name) for r in rows]


def apply_price_overrides(entries: List[CatalogEntry], environ: Mapping[str, str]) -> List[CatalogEntry]:
    """Remplace price_ref par PRICE_<CODE> si la variable est définie (vide => gratuit)."""
    result: List[CatalogEntry] = []
    for entry in entries:
        key = f"{PRICE_ENV_PREFIX}{entry.code}"
        if key in environ:
            price_ref = (environ.get(key) or "").strip().strip("'").strip('"') or None
            entry = CatalogEntry(code=entry.code, price_ref=price_ref, display_name=entry.display_name)
        result.append(entry)
    return result


def load_catalog(path: Optional[Union[str, Path]] = None, environ: Optional[Mapping[str, str]] = None) -> Catalog:
    """
    Construit le catalogue du processus.
    - path: fichier JSON (sinon catalogue intégré)
    - environ: source des surcharges PRICE_<CODE> (os.environ par défaut)
    - Soulève CatalogError si le catalogue est invalide ou ambigu (échec au démarrage).
    """
    entries = read_catalog_file(path) if path else list(DEFAULT_ENTRIES)
    entries = apply_price_overrides(entries, os.environ if environ is None else environ)
    catalog = Catalog(entries)
    logger.info(
        "catalog.load source=%s services=%s free=%s",
        str(path) if path else "builtin",
        ",".join(catalog.codes),
        ",".join(e.code for e in catalog if e.is_free) or "-",
    )
    return catalog
