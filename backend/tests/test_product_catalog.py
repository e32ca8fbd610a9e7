"""
Unit tests for the lazily-loaded product catalog.
Run from repo root: python -m pytest backend/tests/test_product_catalog.py -v
"""
import threading
import time

import pytest

from halalscan.catalog.product_catalog import ProductCatalog
from halalscan.errors import CatalogUnavailable
from halalscan.models.product import ComplianceStatus, Product
from halalscan.taxonomy import IngredientTaxonomy

RECORDS = [
    {
        "barcode": "4600494000010",
        "name": "Chewing marmalade",
        "manufacturer": "Konfil",
        "ingredients": ["Sugar", "Gelatin", "E120", "Water"],
        "halalStatus": "haram",
        "haramIngredients": ["Gelatin", "E120 (E120)"],
        "boycott": False,
    },
    {
        "barcode": "4600000000999",
        "name": "Example Cola",
        "manufacturer": "Example Beverages Co.",
        "ingredients": ["Water", "Sugar"],
        "halalStatus": "halal",
        "haramIngredients": [],
        "boycottStatus": True,
        "boycottReason": "listed",
    },
]


class CountingSource:
    def __init__(self, records=None, error=None, delay=0.0):
        self.records = records if records is not None else RECORDS
        self.error = error
        self.delay = delay
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self):
        with self._lock:
            self.calls += 1
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.records


def test_lookup_hit_and_miss():
    catalog = ProductCatalog(source=CountingSource())
    product = catalog.lookup("4600494000010")
    assert product is not None
    assert product.name == "Chewing marmalade"
    assert product.halal_status == ComplianceStatus.HARAM
    assert catalog.lookup("0000000000000") is None
    assert catalog.lookup("") is None
    assert catalog.lookup(None) is None


def test_lookup_strips_barcode():
    catalog = ProductCatalog(source=CountingSource())
    assert catalog.lookup("  4600494000010 ") is not None


def test_boycott_status_alias():
    catalog = ProductCatalog(source=CountingSource())
    cola = catalog.lookup("4600000000999")
    assert cola.boycott is True
    assert cola.boycott_reason == "listed"


def test_loads_once():
    source = CountingSource()
    catalog = ProductCatalog(source=source)
    assert not catalog.loaded
    catalog.lookup("4600494000010")
    catalog.lookup("4600000000999")
    assert len(catalog) == 2
    assert {p.barcode for p in catalog.products()} == {"4600494000010", "4600000000999"}
    assert source.calls == 1
    assert catalog.loaded


def test_concurrent_first_calls_fetch_once():
    source = CountingSource(delay=0.05)
    catalog = ProductCatalog(source=source)
    results = []

    def worker():
        results.append(catalog.lookup("4600494000010"))

    threads = [threading.Thread(target=worker) for _ in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert source.calls == 1
    assert len(results) == 16
    assert all(r is not None and r.barcode == "4600494000010" for r in results)


def test_unavailable_source_degrades_to_empty_without_refetch():
    source = CountingSource(error=CatalogUnavailable("HTTP 503"))
    catalog = ProductCatalog(source=source)
    assert catalog.lookup("4600494000010") is None
    assert catalog.lookup("4600494000010") is None
    assert len(catalog) == 0
    assert source.calls == 1
    assert "503" in catalog.load_error


def test_malformed_records_skipped():
    records = [{"name": "no barcode"}, {"barcode": "", "name": "empty"}, "junk",
               {"barcode": "1", "name": "bad status", "halalStatus": "maybe"},
               {"barcode": "9", "name": "numeric status", "halalStatus": 1},
               {"barcode": "10", "name": "boolean status", "halalStatus": True}] + RECORDS
    catalog = ProductCatalog(source=CountingSource(records=records))
    assert len(catalog) == 2


def test_duplicate_barcode_first_wins():
    dup = dict(RECORDS[0], name="Second copy")
    catalog = ProductCatalog(source=CountingSource(records=RECORDS + [dup]))
    assert catalog.lookup("4600494000010").name == "Chewing marmalade"


def test_missing_status_derived_with_taxonomy():
    taxonomy = IngredientTaxonomy.from_dict({
        "exact_terms": ["pork"],
        "forbidden_codes": [],
        "ambiguous_codes": ["e471"],
        "forbidden_fragments": [],
    })
    records = [
        {"barcode": "1", "name": "Sausage", "ingredients": ["Pork", "Salt"]},
        {"barcode": "2", "name": "Biscuit", "ingredients": ["Flour", "E471"]},
        {"barcode": "3", "name": "Water", "ingredients": ["Water"]},
        {"barcode": "4", "name": "Unknown"},
    ]
    catalog = ProductCatalog(source=CountingSource(records=records), taxonomy=taxonomy)
    assert catalog.lookup("1").halal_status == ComplianceStatus.HARAM
    assert catalog.lookup("1").haram_ingredients == ("Pork",)
    assert catalog.lookup("2").halal_status == ComplianceStatus.DOUBTFUL
    assert catalog.lookup("3").halal_status == ComplianceStatus.HALAL
    assert catalog.lookup("4").halal_status == ComplianceStatus.DOUBTFUL


def test_products_are_immutable():
    catalog = ProductCatalog(source=CountingSource())
    product = catalog.lookup("4600494000010")
    with pytest.raises(AttributeError):
        product.name = "changed"
    assert isinstance(product.ingredients, tuple)


def test_product_to_dict_shape():
    product = Product.from_dict(RECORDS[1])
    d = product.to_dict()
    assert d["barcode"] == "4600000000999"
    assert d["boycott"] is True
    assert d["boycottReason"] == "listed"
    assert d["halalStatus"] == "halal"
    assert d["ingredients"] == ["Water", "Sugar"]


def test_bundled_catalog_file():
    from halalscan.config import get_products_path
    from halalscan.external_apis.catalog_source import read_catalog_file
    if not get_products_path().exists():
        pytest.skip("products.json not found")
    path = get_products_path()
    catalog = ProductCatalog(source=lambda: read_catalog_file(path))
    assert catalog.lookup("4600494000010") is not None
    assert catalog.load_error is None
