"""
Advisor contract and prompt construction.

The advisor NEVER decides the local verdict. It receives the deterministic
classifier findings as context and returns free-form prose that is attached
to the scan outcome untouched.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from halalscan.config import SUPPORTED_LANGUAGES, get_default_language
from halalscan.models.product import Product
from halalscan.models.verdict import ClassificationResult

logger = logging.getLogger(__name__)

LANGUAGE_NAMES = {
    "en": "English",
    "ru": "Russian",
    "ar": "Arabic",
}


@dataclass(frozen=True)
class AdvisorImage:
    data: bytes
    mime_type: str = "image/jpeg"


class ComplianceAdvisor(Protocol):
    def assess(
        self,
        prompt: str,
        image: Optional[AdvisorImage],
        language: str,
        credential: str,
        model: Optional[str] = None,
    ) -> str:
        """Return narrative text or raise AdvisorError."""
        ...


def resolve_language(language: Optional[str]) -> str:
    """Known tag as-is; anything else falls back to the configured default."""
    tag = (language or "").strip().lower()
    if tag in SUPPORTED_LANGUAGES:
        return tag
    fallback = get_default_language()
    if tag:
        logger.warning("ADVISOR unsupported language=%s falling back to %s", tag, fallback)
    return fallback


_ANALYSIS_TEMPLATE = """Write the analysis in {language}. Cover:

1. **Halal Status**: Is the product halal, haram, or doubtful? Explain the reasoning.
   - Name each questionable ingredient and whether it is of animal or plant origin.
   - For E-numbers, say what the additive is and whether it is usually animal-derived.

2. **Boycott Status**: Is the manufacturer or its parent company on a consumer boycott list?
   - If so, describe the connection.
   - If not, say so plainly.

3. **Final Verdict**: A clear recommendation.

If an ingredient cannot be determined, call it "doubtful" and explain why instead of guessing."""


def build_scan_prompt(
    language: str,
    barcode: Optional[str] = None,
    product: Optional[Product] = None,
    findings: Optional[ClassificationResult] = None,
    free_text: Optional[str] = None,
    has_image: bool = False,
) -> str:
    """Deterministic: same inputs always produce the same prompt."""
    lines = ["You are an expert Islamic food analyst. Analyze this product for Muslim consumers.", ""]
    if barcode:
        lines.append(f"Barcode: {barcode}")
    if product is not None:
        lines.append(
            f"Known product: {product.name}, Manufacturer: {product.manufacturer or 'unknown'}, "
            f"Ingredients: {', '.join(product.ingredients) or 'not listed'}"
        )
        if product.boycott:
            lines.append(f"Catalog boycott flag: yes ({product.boycott_reason or 'no reason recorded'})")
    if findings is not None:
        if findings.forbidden:
            lines.append(f"Local database flagged these HARAM ingredients: {', '.join(findings.forbidden)}")
        if findings.ambiguous:
            lines.append(f"Local database flagged these DOUBTFUL ingredients: {', '.join(findings.ambiguous)}")
    if free_text:
        lines.append(f"User description: {free_text}")
    if has_image:
        lines.append("A photo of the product or its label is attached; read the name and ingredients from it.")
    lines.append("")
    lines.append(_ANALYSIS_TEMPLATE.format(language=LANGUAGE_NAMES[resolve_language(language)]))
    return "\n".join(lines)
