#!/usr/bin/env python3
"""
Check that the product catalog loads and the Gemini advisor answers.
Run from backend: python scripts/check_external_apis.py
Exit 0 if the catalog loads (advisor is optional); 1 otherwise.
"""
import sys
from pathlib import Path
from typing import Tuple

# Add backend to path when run as script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dotenv import load_dotenv
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

# Short timeout for health check
HEALTH_TIMEOUT = 8


def check_catalog() -> Tuple[bool, str]:
    """Return (success, message)."""
    from halalscan.catalog.product_catalog import ProductCatalog
    catalog = ProductCatalog()
    count = len(catalog)
    if catalog.load_error:
        return False, catalog.load_error
    return True, f"ok ({count} products)"


def check_advisor(api_key: str) -> Tuple[bool, str]:
    """Return (success, message)."""
    if not (api_key or "").strip():
        return False, "no API key (set GEMINI_API_KEY)"
    from halalscan.errors import AdvisorError
    from halalscan.external_apis.gemini import GeminiAdvisor
    advisor = GeminiAdvisor(timeout=HEALTH_TIMEOUT)
    try:
        advisor.assess("Reply with the single word: ok", None, "en", api_key)
    except AdvisorError as e:
        return False, f"{e.kind}: {e}"
    return True, f"ok (model={advisor.model})"


def main() -> int:
    from halalscan.config import get_gemini_api_key
    print("Checking external sources...")
    catalog_ok, catalog_msg = check_catalog()
    print(f"  Catalog: {'OK' if catalog_ok else 'FAIL'} - {catalog_msg}")
    advisor_ok, advisor_msg = check_advisor(get_gemini_api_key())
    print(f"  Advisor: {'OK' if advisor_ok else 'FAIL'} - {advisor_msg}")
    if catalog_ok:
        print("Catalog is available.")
        return 0
    print("Catalog failed to load.")
    return 1


if __name__ == "__main__":
    sys.exit(main())
