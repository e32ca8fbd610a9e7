"""
Loads the halal ingredient taxonomy from data/taxonomy.json and classifies single
ingredient strings. Read-only after construction; safe for concurrent readers.
"""
from pathlib import Path
from typing import Optional
import json
import logging

from .taxonomy_schema import (
    DEFAULT_CODE_PATTERN,
    CodedAdditiveRule,
    CodedAdditiveStage,
    ExactTerm,
    ExactTermStage,
    StageOutcome,
    SubstringFragment,
    SubstringStage,
    normalize_ingredient,
)
from halalscan.config import get_taxonomy_path
from halalscan.models.verdict import IngredientVerdict, Verdict

logger = logging.getLogger(__name__)

_DEFAULT_TAXONOMY_PATH = get_taxonomy_path()


class IngredientTaxonomy:
    """
    Ordered stages: exact term -> coded additive -> substring fragment.
    First MATCHED wins; SUPPRESSED ends evaluation as CLEAN.
    """

    def __init__(self, taxonomy_path: Optional[Path] = None, data: Optional[dict] = None):
        self._path = taxonomy_path or _DEFAULT_TAXONOMY_PATH
        self._version = "0"
        if data is None:
            data = self._read()
        self._build(data)

    @classmethod
    def from_dict(cls, data: dict) -> "IngredientTaxonomy":
        return cls(data=data)

    def _read(self) -> dict:
        if not self._path.exists():
            logger.warning("Taxonomy file not found at %s; taxonomy empty.", self._path)
            return {}
        with open(self._path, encoding="utf-8") as f:
            return json.load(f)

    def _build(self, data: dict) -> None:
        self._version = str(data.get("taxonomy_version", "0"))
        exact = [ExactTerm(normalize_ingredient(t)) for t in data.get("exact_terms", []) if normalize_ingredient(t)]
        codes = [
            CodedAdditiveRule(normalize_ingredient(c), Verdict.FORBIDDEN)
            for c in data.get("forbidden_codes", [])
        ]
        # a code listed in both tables is treated as forbidden
        forbidden_set = {r.code for r in codes}
        codes += [
            CodedAdditiveRule(normalize_ingredient(c), Verdict.AMBIGUOUS)
            for c in data.get("ambiguous_codes", [])
            if normalize_ingredient(c) not in forbidden_set
        ]
        fragments = [
            SubstringFragment(normalize_ingredient(f))
            for f in data.get("forbidden_fragments", [])
            if normalize_ingredient(f)
        ]
        self._exact = ExactTermStage(exact)
        self._coded = CodedAdditiveStage(codes, data.get("code_pattern") or DEFAULT_CODE_PATTERN)
        self._substring = SubstringStage(fragments)
        self._stages = (self._exact, self._coded, self._substring)
        logger.info(
            "Loaded taxonomy version=%s exact=%d codes=%d fragments=%d",
            self._version, len(self._exact), len(self._coded), len(self._substring),
        )

    def classify(self, ingredient: Optional[str]) -> IngredientVerdict:
        """Classify one free-text ingredient label. Empty input is CLEAN."""
        text = ingredient or ""
        if not text.strip():
            return IngredientVerdict(Verdict.CLEAN)
        for stage in self._stages:
            result = stage.evaluate(text)
            if result.outcome == StageOutcome.MATCHED:
                return IngredientVerdict(result.verdict, result.evidence, stage.name)
            if result.outcome == StageOutcome.SUPPRESSED:
                logger.debug(
                    "TAXONOMY suppressed ingredient=%s unrecognized_codes=%s",
                    text[:60], result.evidence,
                )
                return IngredientVerdict(Verdict.CLEAN, result.evidence, stage.name, suppressed=True)
        return IngredientVerdict(Verdict.CLEAN)

    def extract_codes(self, ingredient: str) -> list[str]:
        return self._coded.extract_codes(ingredient)

    def forbidden_codes(self) -> list[str]:
        return self._coded.codes(Verdict.FORBIDDEN)

    def ambiguous_codes(self) -> list[str]:
        return self._coded.codes(Verdict.AMBIGUOUS)

    def get_version(self) -> str:
        return self._version
