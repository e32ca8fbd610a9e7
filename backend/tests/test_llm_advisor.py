"""
Prompt construction, language handling and localized notes.
Run from repo root: python -m pytest backend/tests/test_llm_advisor.py -v
"""
from unittest.mock import patch

from halalscan.llm_advisor import build_scan_prompt, resolve_language
from halalscan.models.product import Product
from halalscan.models.verdict import ClassificationResult
from halalscan.response_composer import compose_note


def _product():
    return Product.from_dict({
        "barcode": "4607001770016",
        "name": "Sugar biscuits",
        "manufacturer": "Khlebprom",
        "ingredients": ["Wheat flour", "E471", "Salt"],
        "halalStatus": "doubtful",
    })


def test_prompt_is_deterministic():
    findings = ClassificationResult(ambiguous=["E471 (E471)"])
    a = build_scan_prompt("en", barcode="4607001770016", product=_product(), findings=findings)
    b = build_scan_prompt("en", barcode="4607001770016", product=_product(), findings=findings)
    assert a == b


def test_prompt_contains_known_facts():
    findings = ClassificationResult(forbidden=["Lard"], ambiguous=["E471 (E471)"])
    prompt = build_scan_prompt("ru", barcode="4607001770016", product=_product(), findings=findings)
    assert "Barcode: 4607001770016" in prompt
    assert "Known product: Sugar biscuits, Manufacturer: Khlebprom, Ingredients: Wheat flour, E471, Salt" in prompt
    assert "HARAM ingredients: Lard" in prompt
    assert "DOUBTFUL ingredients: E471 (E471)" in prompt
    assert "Write the analysis in Russian." in prompt
    assert "Boycott Status" in prompt


def test_prompt_without_facts():
    prompt = build_scan_prompt("en")
    assert "Barcode:" not in prompt
    assert "Known product" not in prompt
    assert "Local database flagged" not in prompt
    assert "Write the analysis in English." in prompt


def test_prompt_empty_findings_adds_no_flags():
    prompt = build_scan_prompt("en", product=_product(), findings=ClassificationResult())
    assert "Local database flagged" not in prompt


def test_resolve_language():
    assert resolve_language("EN") == "en"
    assert resolve_language("ar") == "ar"
    with patch.dict("os.environ", {"DEFAULT_LANGUAGE": "en"}):
        assert resolve_language("fr") == "en"
        assert resolve_language(None) == "en"


def test_compose_note_languages():
    assert compose_note("advisor_failed", "en") == "AI analysis failed. Showing database results."
    assert compose_note("no_results", "ru") != compose_note("no_results", "en")
    assert compose_note("no_results", "ar")
