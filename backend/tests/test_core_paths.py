"""
Unit tests for path resolution and config getters.
Run from repo root: python -m pytest backend/tests/test_core_paths.py -v
"""
import pytest
from unittest.mock import patch


def test_backend_dir_layout():
    """Backend dir holds the halalscan package; repo root is its parent."""
    from halalscan import config
    assert config._BACKEND_DIR.is_dir()
    assert (config._BACKEND_DIR / "halalscan").is_dir()
    assert config._REPO_ROOT == config._BACKEND_DIR.parent


def test_taxonomy_path_resolution():
    from halalscan.config import get_taxonomy_path, _REPO_ROOT
    path = get_taxonomy_path()
    assert path == _REPO_ROOT / "data" / "taxonomy.json"
    assert path.suffix == ".json"


def test_products_path_resolution():
    from halalscan.config import get_products_path, _REPO_ROOT
    path = get_products_path()
    assert path == _REPO_ROOT / "data" / "products.json"


def test_bundled_data_present():
    from halalscan.config import get_taxonomy_path, get_products_path, _REPO_ROOT
    if not (_REPO_ROOT / "data").exists():
        pytest.skip("data/ directory not found")
    assert get_taxonomy_path().exists()
    assert get_products_path().exists()


def test_default_language_falls_back_on_unknown():
    from halalscan.config import get_default_language
    with patch.dict("os.environ", {"DEFAULT_LANGUAGE": "fr"}):
        assert get_default_language() == "ru"
    with patch.dict("os.environ", {"DEFAULT_LANGUAGE": "EN"}):
        assert get_default_language() == "en"


def test_catalog_retries_at_least_one():
    from halalscan.config import get_catalog_fetch_retries
    with patch.dict("os.environ", {"CATALOG_FETCH_RETRIES": "0"}):
        assert get_catalog_fetch_retries() == 1


def test_gemini_api_key_stripped():
    from halalscan.config import get_gemini_api_key
    with patch.dict("os.environ", {"GEMINI_API_KEY": "  abc  "}):
        assert get_gemini_api_key() == "abc"
