# checkout_router.config
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=False)

"""
Configuration centrale du routeur de checkout.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env) sans écraser l'environnement
- Normalise et expose les secrets Stripe et les URLs de redirection (succès/annulation)
- Expose les bornes de validation (taille du paramètre services, nombre de services, sid)
- Expose la configuration du rate limiting et du catalogue
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _int_env(name: str, default: int) -> int:
    """Lit un entier depuis l'environnement; retombe sur `default` si absent ou invalide."""
    raw = _clean_env(os.getenv(name) or "")
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default

def _join_url(base: str, path: str) -> str:
    return base.rstrip("/") + "/" + path.lstrip("/")

# Identité du service (exposée par /health)
SERVICE_NAME = os.getenv("SERVICE_NAME", "pronto-checkout-router")
APP_VERSION = os.getenv("APP_VERSION", "1.2.0")

BASE_URL = _clean_env(os.getenv("BASE_URL") or "http://localhost:8000")

# Stripe: clé secrète et version d'API figée
STRIPE_SECRET_KEY = _clean_env(os.getenv("STRIPE_SECRET_KEY") or "")
STRIPE_API_VERSION = _clean_env(os.getenv("STRIPE_API_VERSION") or "2024-06-20")

# Pages de succès/annulation (le sid y est ajouté en query string)
SUCCESS_URL = _clean_env(os.getenv("SUCCESS_URL") or "") or _join_url(BASE_URL, "/thank-you")
CANCEL_URL = _clean_env(os.getenv("CANCEL_URL") or "") or _join_url(BASE_URL, "/cancelled")

# Bornes de validation des requêtes de checkout
MAX_SERVICES_LENGTH = _int_env("MAX_SERVICES_LENGTH", 500)
MAX_SKUS = _int_env("MAX_SKUS", 20)
MAX_SUBMISSION_ID_LENGTH = _int_env("MAX_SUBMISSION_ID_LENGTH", 200)

# Catalogue: fichier JSON optionnel, sinon catalogue intégré
CATALOG_PATH = _clean_env(os.getenv("CATALOG_PATH") or "")

# Rate limiting: 100 requêtes / 15 minutes / IP par défaut
RATE_LIMIT_TIMES = _int_env("RATE_LIMIT_TIMES", 100)
RATE_LIMIT_SECONDS = _int_env("RATE_LIMIT_SECONDS", 15 * 60)
RATE_LIMIT_REDIS_URL = _clean_env(os.getenv("RATE_LIMIT_REDIS_URL") or "redis://127.0.0.1:6379/0")

# Proxys de confiance pour X-Forwarded-For (Render, Nginx, etc.)
FORWARDED_ALLOW_IPS = [h.strip() for h in os.getenv("FORWARDED_ALLOW_IPS", "127.0.0.1").split(",") if h.strip()]
