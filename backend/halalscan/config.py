"""
Paths and centralized configuration.
All resolution relative to the backend directory.
"""
import os
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# Repo root: backend/halalscan/config.py -> parent=halalscan, parent.parent=backend, parent.parent.parent=repo
_BACKEND_DIR = Path(__file__).resolve().parent.parent
_REPO_ROOT = _BACKEND_DIR.parent

SUPPORTED_LANGUAGES = ("en", "ru", "ar")

# --- Data paths ---
def get_taxonomy_path() -> Path:
    return _REPO_ROOT / "data" / "taxonomy.json"

def get_products_path() -> Path:
    return _REPO_ROOT / "data" / "products.json"

# --- Product catalog (lazy read from env) ---
def get_catalog_url() -> str:
    """Remote static catalog location. Empty -> bundled data/products.json."""
    return os.environ.get("CATALOG_URL", "").strip()

def get_catalog_fetch_timeout() -> int:
    return int(os.environ.get("CATALOG_FETCH_TIMEOUT", "10"))

def get_catalog_fetch_retries() -> int:
    return max(1, int(os.environ.get("CATALOG_FETCH_RETRIES", "1")))

# --- Advisor / Gemini ---
def get_gemini_api_url() -> str:
    return os.environ.get(
        "GEMINI_API_URL",
        "https://generativelanguage.googleapis.com/v1beta/models",
    ).rstrip("/")

def get_gemini_model() -> str:
    return os.environ.get("GEMINI_MODEL", "gemini-2.0-flash")

def get_gemini_api_key() -> str:
    """Server-side fallback credential; requests may carry their own."""
    return os.environ.get("GEMINI_API_KEY", "").strip()

def get_default_language() -> str:
    lang = os.environ.get("DEFAULT_LANGUAGE", "ru").strip().lower()
    return lang if lang in SUPPORTED_LANGUAGES else "ru"

# Advisor timeout (seconds)
ADVISOR_TIMEOUT = int(os.environ.get("ADVISOR_TIMEOUT", "30"))

# Largest accepted product photo (bytes)
MAX_IMAGE_BYTES = int(os.environ.get("MAX_IMAGE_BYTES", str(10 * 1024 * 1024)))

# --- Startup logging ---
def log_config() -> None:
    logger.info(
        "CONFIG: taxonomy=%s products=%s catalog_url=%s catalog_timeout=%ds catalog_retries=%d "
        "gemini_model=%s gemini_key=%s advisor_timeout=%ds max_image_bytes=%d default_language=%s",
        get_taxonomy_path().exists(), get_products_path().exists(),
        get_catalog_url() or "-", get_catalog_fetch_timeout(), get_catalog_fetch_retries(),
        get_gemini_model(), bool(get_gemini_api_key()),
        ADVISOR_TIMEOUT, MAX_IMAGE_BYTES, get_default_language(),
    )
