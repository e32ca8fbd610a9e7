"""
Deterministic halal classifier. Partitions an ingredient list into forbidden and
ambiguous findings using the taxonomy; clean ingredients are dropped.
"""
from typing import Iterable, Optional
import logging

from halalscan.taxonomy import IngredientTaxonomy
from halalscan.models.product import ComplianceStatus
from halalscan.models.verdict import ClassificationResult, IngredientVerdict, Verdict

logger = logging.getLogger(__name__)


def _label(ingredient: str, result: IngredientVerdict) -> str:
    """Coded matches are annotated with the literal codes, e.g. 'E120 (E120)'."""
    label = ingredient.strip()
    if result.is_coded and result.evidence:
        return f"{label} ({', '.join(result.evidence)})"
    return label


def classify_ingredients(
    ingredients: Iterable[Optional[str]],
    taxonomy: IngredientTaxonomy,
) -> ClassificationResult:
    """
    Classify every ingredient independently. Output lists keep input order and
    never share an ingredient. No error conditions: malformed entries are CLEAN.
    """
    result = ClassificationResult()
    for raw in ingredients:
        text = raw if isinstance(raw, str) else ""
        verdict = taxonomy.classify(text)
        if verdict.verdict == Verdict.FORBIDDEN:
            result.forbidden.append(_label(text, verdict))
        elif verdict.verdict == Verdict.AMBIGUOUS:
            result.ambiguous.append(_label(text, verdict))
    if not result.is_empty:
        logger.info(
            "CLASSIFIER findings forbidden=%d ambiguous=%d items=%s",
            len(result.forbidden), len(result.ambiguous),
            (result.forbidden + result.ambiguous)[:10],
        )
    return result


def status_from_findings(findings: ClassificationResult) -> ComplianceStatus:
    """haram if anything forbidden, doubtful if anything ambiguous, otherwise halal."""
    if findings.forbidden:
        return ComplianceStatus.HARAM
    if findings.ambiguous:
        return ComplianceStatus.DOUBTFUL
    return ComplianceStatus.HALAL
