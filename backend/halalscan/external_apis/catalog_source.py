"""
Static product catalog sources. Both return the raw list of product records or
raise CatalogUnavailable; the catalog decides how to degrade.
"""
import json
import logging
from pathlib import Path
from typing import Callable

from halalscan.errors import CatalogUnavailable
from halalscan.external_apis.http_retry import get_json_with_retries

logger = logging.getLogger(__name__)

CatalogSource = Callable[[], list]


def _records_from_payload(data) -> list:
    """Accept a bare list or {"products": [...]}."""
    if isinstance(data, dict):
        data = data.get("products")
    if not isinstance(data, list):
        raise CatalogUnavailable("catalog payload is not a list of products")
    return data


def fetch_catalog_records(url: str, timeout: int = 10, max_retries: int = 1) -> list:
    """GET the catalog from a static HTTP location."""
    data, err = get_json_with_retries(url, timeout=timeout, max_retries=max_retries)
    if err is not None:
        logger.warning("CATALOG fetch failed url=%s error=%s", url[:80], err)
        raise CatalogUnavailable(err)
    return _records_from_payload(data)


def read_catalog_file(path: Path) -> list:
    """Read the catalog bundled with the service."""
    if not path.exists():
        raise CatalogUnavailable(f"catalog file not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise CatalogUnavailable(f"{type(e).__name__}: {e}") from e
    return _records_from_payload(data)


def default_catalog_source() -> CatalogSource:
    """HTTP when CATALOG_URL is set, otherwise the bundled data/products.json."""
    from halalscan.config import (
        get_catalog_url,
        get_catalog_fetch_timeout,
        get_catalog_fetch_retries,
        get_products_path,
    )
    url = get_catalog_url()
    if url:
        timeout = get_catalog_fetch_timeout()
        retries = get_catalog_fetch_retries()
        return lambda: fetch_catalog_records(url, timeout=timeout, max_retries=retries)
    path = get_products_path()
    return lambda: read_catalog_file(path)
