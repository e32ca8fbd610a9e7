"""
Scan resolution policy. One pass per request:
catalog lookup -> classify known ingredients -> optional advisor -> assemble.

Partial results beat failure: advisor and catalog problems are absorbed here;
only InvalidRequest reaches the caller, and always before any network call.
"""
import logging
from typing import Optional

from halalscan.catalog.product_catalog import ProductCatalog
from halalscan.config import MAX_IMAGE_BYTES
from halalscan.errors import AdvisorError, InvalidRequest
from halalscan.evaluation.classifier import classify_ingredients
from halalscan.llm_advisor import AdvisorImage, ComplianceAdvisor, build_scan_prompt, resolve_language
from halalscan.models.product import Product
from halalscan.models.verdict import ClassificationResult, ScanOrigin, ScanOutcome
from halalscan.response_composer import compose_note
from halalscan.taxonomy import IngredientTaxonomy

logger = logging.getLogger(__name__)


class ScanResolver:
    def __init__(
        self,
        catalog: ProductCatalog,
        taxonomy: IngredientTaxonomy,
        advisor: Optional[ComplianceAdvisor] = None,
        fallback_credential: Optional[str] = None,
        max_image_bytes: int = MAX_IMAGE_BYTES,
    ):
        self._catalog = catalog
        self._taxonomy = taxonomy
        self._advisor = advisor
        self._fallback_credential = (fallback_credential or "").strip() or None
        self.max_image_bytes = max_image_bytes

    def _credential(self, credential: Optional[str]) -> Optional[str]:
        return (credential or "").strip() or self._fallback_credential

    def _classify(self, product: Optional[Product]) -> Optional[ClassificationResult]:
        if product is None or not product.has_ingredients:
            return None
        return classify_ingredients(product.ingredients, self._taxonomy)

    def scan_by_barcode(
        self,
        barcode: str,
        credential: Optional[str] = None,
        language: Optional[str] = None,
        enrich: bool = False,
        model: Optional[str] = None,
    ) -> ScanOutcome:
        """
        Catalog first. The advisor runs only with a credential, and only when the
        barcode is unknown or enrichment was asked for.
        """
        code = (barcode or "").strip()
        if not code:
            raise InvalidRequest("barcode is required")
        product = self._catalog.lookup(code)
        findings = self._classify(product)
        cred = self._credential(credential)
        consult = bool(cred) and (product is None or enrich)
        logger.info(
            "SCAN barcode=%s catalog_hit=%s enrich=%s consult_advisor=%s",
            code, product is not None, enrich, consult,
        )
        return self._assemble(
            product, findings, language,
            credential=cred if consult else None,
            barcode=code, model=model,
        )

    def scan_by_text(
        self,
        text: str,
        credential: Optional[str] = None,
        language: Optional[str] = None,
        model: Optional[str] = None,
    ) -> ScanOutcome:
        """Free text is a product name/description, or a barcode typed by hand."""
        query = (text or "").strip()
        if not query:
            raise InvalidRequest("text is required")
        cred = self._credential(credential)
        if not cred:
            raise InvalidRequest("an advisor credential is required for text scans")
        product = self._catalog.lookup(query)
        findings = self._classify(product)
        logger.info("SCAN text chars=%d catalog_hit=%s", len(query), product is not None)
        return self._assemble(
            product, findings, language,
            credential=cred,
            barcode=product.barcode if product else None,
            free_text=query, model=model,
        )

    def scan_by_image(
        self,
        image_bytes: bytes,
        mime_type: str,
        credential: Optional[str] = None,
        language: Optional[str] = None,
        model: Optional[str] = None,
        barcode: Optional[str] = None,
    ) -> ScanOutcome:
        if not image_bytes:
            raise InvalidRequest("image is empty")
        if len(image_bytes) > self.max_image_bytes:
            raise InvalidRequest(f"image exceeds {self.max_image_bytes} bytes")
        mime = (mime_type or "").strip().lower()
        if not mime.startswith("image/"):
            raise InvalidRequest(f"unsupported mime type: {mime_type!r}")
        cred = self._credential(credential)
        if not cred:
            raise InvalidRequest("an advisor credential is required for image scans")
        product = self._catalog.lookup(barcode) if barcode else None
        findings = self._classify(product)
        logger.info(
            "SCAN image bytes=%d mime=%s barcode_hint=%s catalog_hit=%s",
            len(image_bytes), mime, bool(barcode), product is not None,
        )
        return self._assemble(
            product, findings, language,
            credential=cred,
            barcode=(barcode or "").strip() or None,
            image=AdvisorImage(image_bytes, mime), model=model,
        )

    def _assemble(
        self,
        product: Optional[Product],
        findings: Optional[ClassificationResult],
        language: Optional[str],
        credential: Optional[str] = None,
        barcode: Optional[str] = None,
        free_text: Optional[str] = None,
        image: Optional[AdvisorImage] = None,
        model: Optional[str] = None,
    ) -> ScanOutcome:
        lang = resolve_language(language)
        if not credential or self._advisor is None:
            note = None if product is not None else compose_note("no_results", lang)
            return self._done(ScanOutcome(product, ScanOrigin.CATALOG, None, findings, note))

        prompt = build_scan_prompt(
            lang,
            barcode=barcode,
            product=product,
            findings=findings,
            free_text=free_text,
            has_image=image is not None,
        )
        try:
            narrative = self._advisor.assess(prompt, image, lang, credential, model=model)
        except AdvisorError as e:
            logger.warning(
                "ADVISOR failed kind=%s status=%s catalog_hit=%s; returning local evidence",
                e.kind, e.status_code, product is not None,
            )
            key = "advisor_failed" if product is not None else "no_results_advisor_failed"
            return self._done(ScanOutcome(product, ScanOrigin.CATALOG, None, findings, compose_note(key, lang)))

        origin = ScanOrigin.CATALOG_ADVISOR if product is not None else ScanOrigin.ADVISOR
        return self._done(ScanOutcome(product, origin, narrative, findings))

    def _done(self, outcome: ScanOutcome) -> ScanOutcome:
        logger.info(
            "SCAN resolved origin=%s product=%s narrative=%s forbidden=%d ambiguous=%d",
            outcome.origin.value,
            outcome.product.barcode if outcome.product else None,
            outcome.narrative is not None,
            len(outcome.local_findings.forbidden) if outcome.local_findings else 0,
            len(outcome.local_findings.ambiguous) if outcome.local_findings else 0,
        )
        return outcome
