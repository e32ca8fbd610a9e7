"""
Lazily-loaded, read-only product catalog keyed by barcode.

The first load_once() call fetches from the source; concurrent first callers block
on the same lock and observe the finished mapping. A failed fetch leaves an empty
catalog for the lifetime of the object (no re-fetch).
"""
import logging
import threading
from types import MappingProxyType
from typing import Mapping, Optional

from halalscan.errors import CatalogUnavailable
from halalscan.evaluation.classifier import classify_ingredients, status_from_findings
from halalscan.external_apis.catalog_source import CatalogSource, default_catalog_source
from halalscan.models.product import Product
from halalscan.taxonomy import IngredientTaxonomy

logger = logging.getLogger(__name__)

_EMPTY: Mapping[str, Product] = MappingProxyType({})


class ProductCatalog:
    def __init__(
        self,
        source: Optional[CatalogSource] = None,
        taxonomy: Optional[IngredientTaxonomy] = None,
    ):
        self._source = source or default_catalog_source()
        self._taxonomy = taxonomy
        self._lock = threading.Lock()
        self._by_barcode: Optional[Mapping[str, Product]] = None
        self.load_error: Optional[str] = None

    @property
    def loaded(self) -> bool:
        return self._by_barcode is not None

    def load_once(self) -> Mapping[str, Product]:
        products = self._by_barcode
        if products is not None:
            return products
        with self._lock:
            if self._by_barcode is None:
                # published only after fully built
                self._by_barcode = self._load()
            return self._by_barcode

    def _load(self) -> Mapping[str, Product]:
        try:
            records = self._source()
        except CatalogUnavailable as e:
            self.load_error = str(e)
            logger.warning("CATALOG unavailable; continuing with empty catalog error=%s", e)
            return _EMPTY

        by_barcode: dict[str, Product] = {}
        skipped = 0
        for item in records:
            try:
                product = self._parse(item)
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                skipped += 1
                logger.warning("CATALOG skipping malformed record error=%s record=%s", e, str(item)[:80])
                continue
            if product.barcode in by_barcode:
                logger.info("CATALOG duplicate barcode=%s (keeping first)", product.barcode)
                continue
            by_barcode[product.barcode] = product
        logger.info("CATALOG loaded count=%d skipped=%d", len(by_barcode), skipped)
        return MappingProxyType(by_barcode)

    def _parse(self, item: dict) -> Product:
        product = Product.from_dict(item)
        if self._taxonomy is None or not product.ingredients:
            return product
        if item.get("halalStatus") and item.get("haramIngredients") is not None:
            return product
        findings = classify_ingredients(product.ingredients, self._taxonomy)
        return Product.from_dict({
            **item,
            "halalStatus": item.get("halalStatus") or status_from_findings(findings).value,
            "haramIngredients": item.get("haramIngredients") or findings.forbidden,
        })

    def lookup(self, barcode: Optional[str]) -> Optional[Product]:
        key = (barcode or "").strip()
        if not key:
            return None
        return self.load_once().get(key)

    def products(self) -> list[Product]:
        return list(self.load_once().values())

    def __len__(self) -> int:
        return len(self.load_once())
