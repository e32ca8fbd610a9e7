from .taxonomy_schema import (
    ExactTerm,
    CodedAdditiveRule,
    SubstringFragment,
    StageOutcome,
    StageResult,
    normalize_ingredient,
)
from .taxonomy_registry import IngredientTaxonomy

__all__ = [
    "ExactTerm",
    "CodedAdditiveRule",
    "SubstringFragment",
    "StageOutcome",
    "StageResult",
    "normalize_ingredient",
    "IngredientTaxonomy",
]
