"""
Structured classification findings and the per-request scan outcome.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from halalscan.models.product import Product


class Verdict(str, Enum):
    FORBIDDEN = "forbidden"
    AMBIGUOUS = "ambiguous"
    CLEAN = "clean"


class ScanOrigin(str, Enum):
    CATALOG = "catalog"
    ADVISOR = "advisor"
    CATALOG_ADVISOR = "catalog+advisor"


@dataclass(frozen=True)
class IngredientVerdict:
    """Verdict for one ingredient string plus the literal codes/terms that triggered it."""
    verdict: Verdict
    evidence: tuple[str, ...] = ()
    stage: Optional[str] = None  # exact_term, coded_additive, substring_fragment
    suppressed: bool = False  # code-shaped token present but unrecognized

    @property
    def is_coded(self) -> bool:
        return self.stage == "coded_additive"


@dataclass
class ClassificationResult:
    forbidden: list[str] = field(default_factory=list)
    ambiguous: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.forbidden and not self.ambiguous

    def to_dict(self) -> dict[str, Any]:
        return {
            "forbidden": list(self.forbidden),
            "ambiguous": list(self.ambiguous),
        }


@dataclass
class ScanOutcome:
    """
    Externally visible result of one scan. Local findings and the advisor narrative
    are independent signals and are never reconciled into one verdict.
    """
    product: Optional[Product]
    origin: ScanOrigin
    narrative: Optional[str] = None
    local_findings: Optional[ClassificationResult] = None
    note: Optional[str] = None

    @property
    def has_results(self) -> bool:
        return self.product is not None or self.narrative is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "product": self.product.to_dict() if self.product else None,
            "origin": self.origin.value,
            "narrative": self.narrative,
            "localFindings": self.local_findings.to_dict() if self.local_findings else None,
            "note": self.note,
        }
