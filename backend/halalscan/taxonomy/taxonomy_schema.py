"""
Rule types for the halal ingredient taxonomy. All rules are data-driven.

Each rule answers match(ingredient) -> Verdict or None. Rules are grouped into
ordered stages; a stage reports Matched, Suppressed or NoMatch so that the
"code-shaped token stops further checks" behaviour is explicit.
"""
from dataclasses import dataclass, field
from enum import Enum
import re
from typing import Optional

from halalscan.models.verdict import Verdict

DEFAULT_CODE_PATTERN = r"e\d{3}[a-z]?"


def normalize_ingredient(text: Optional[str]) -> str:
    """Lowercase and trim. Casing and surrounding whitespace are insignificant."""
    return (text or "").strip().lower()


@dataclass(frozen=True)
class ExactTerm:
    """Full-string equality against the normalized ingredient."""
    term: str
    verdict: Verdict = Verdict.FORBIDDEN

    def match(self, ingredient: str) -> Optional[Verdict]:
        return self.verdict if normalize_ingredient(ingredient) == self.term else None


@dataclass(frozen=True)
class CodedAdditiveRule:
    """Additive code (E-number) mapped to forbidden or ambiguous."""
    code: str
    verdict: Verdict

    def match(self, ingredient: str) -> Optional[Verdict]:
        return self.verdict if normalize_ingredient(ingredient) == self.code else None


@dataclass(frozen=True)
class SubstringFragment:
    """Case-insensitive containment."""
    fragment: str
    verdict: Verdict = Verdict.FORBIDDEN

    def match(self, ingredient: str) -> Optional[Verdict]:
        return self.verdict if self.fragment in normalize_ingredient(ingredient) else None


class StageOutcome(str, Enum):
    MATCHED = "matched"
    SUPPRESSED = "suppressed"
    NO_MATCH = "no_match"


@dataclass(frozen=True)
class StageResult:
    outcome: StageOutcome
    verdict: Verdict = Verdict.CLEAN
    evidence: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def no_match(cls) -> "StageResult":
        return cls(StageOutcome.NO_MATCH)

    @classmethod
    def suppressed(cls, evidence: tuple[str, ...] = ()) -> "StageResult":
        return cls(StageOutcome.SUPPRESSED, Verdict.CLEAN, evidence)

    @classmethod
    def matched(cls, verdict: Verdict, evidence: tuple[str, ...] = ()) -> "StageResult":
        return cls(StageOutcome.MATCHED, verdict, evidence)


class ExactTermStage:
    name = "exact_term"

    def __init__(self, terms: list[ExactTerm]):
        self._by_term = {t.term: t for t in terms}

    def evaluate(self, ingredient: str) -> StageResult:
        rule = self._by_term.get(normalize_ingredient(ingredient))
        if rule is None:
            return StageResult.no_match()
        return StageResult.matched(rule.verdict, (rule.term,))

    def __len__(self) -> int:
        return len(self._by_term)


class CodedAdditiveStage:
    """
    Extracts every code-shaped token. If any is present the stage never returns
    NO_MATCH: recognized codes give MATCHED, unrecognized ones give SUPPRESSED,
    and later stages are skipped either way.
    When tokens land in both buckets, FORBIDDEN wins.
    """
    name = "coded_additive"

    def __init__(self, rules: list[CodedAdditiveRule], pattern: str = DEFAULT_CODE_PATTERN):
        self._by_code = {r.code: r for r in rules}
        self._pattern = re.compile(pattern, re.IGNORECASE)

    def extract_codes(self, ingredient: str) -> list[str]:
        """Literal code tokens as written in the ingredient."""
        return self._pattern.findall((ingredient or "").strip())

    def evaluate(self, ingredient: str) -> StageResult:
        tokens = self.extract_codes(ingredient)
        if not tokens:
            return StageResult.no_match()
        forbidden: list[str] = []
        ambiguous: list[str] = []
        for token in tokens:
            rule = self._by_code.get(token.lower())
            if rule is None:
                continue
            if rule.verdict == Verdict.FORBIDDEN:
                forbidden.append(token)
            elif rule.verdict == Verdict.AMBIGUOUS:
                ambiguous.append(token)
        if forbidden:
            return StageResult.matched(Verdict.FORBIDDEN, tuple(dict.fromkeys(forbidden)))
        if ambiguous:
            return StageResult.matched(Verdict.AMBIGUOUS, tuple(dict.fromkeys(ambiguous)))
        return StageResult.suppressed(tuple(tokens))

    def codes(self, verdict: Verdict) -> list[str]:
        return [c for c, r in self._by_code.items() if r.verdict == verdict]

    def __len__(self) -> int:
        return len(self._by_code)


class SubstringStage:
    name = "substring_fragment"

    def __init__(self, fragments: list[SubstringFragment]):
        self._fragments = list(fragments)

    def evaluate(self, ingredient: str) -> StageResult:
        for frag in self._fragments:
            verdict = frag.match(ingredient)
            if verdict is not None:
                return StageResult.matched(verdict, (frag.fragment,))
        return StageResult.no_match()

    def __len__(self) -> int:
        return len(self._fragments)
