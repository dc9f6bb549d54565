from dataclasses import dataclass

from rapidfuzz import fuzz, process

from finance_categorizer.logger import get_logger
from finance_categorizer.models import CategorizationRule

logger = get_logger(__name__)


@dataclass(frozen=True)
class FuzzyOptions:
    # Highest accepted distance score (0 = identical, 1 = nothing in common).
    threshold: float = 0.6
    # Characters over which a misplaced match decays to a full mismatch.
    # Only used when ignore_location is False.
    distance: int = 100
    min_match_char_length: int = 2
    ignore_location: bool = True


@dataclass(frozen=True)
class FuzzyHit:
    rule: CategorizationRule
    score: float # distance score, 0 is a perfect match


class FuzzyIndex:
    """
    Approximate search over the keyword of each learned rule.

    The index is a derived view of the rule store. ``rebuild`` builds the new
    entries aside and swaps them in with a single assignment, so a search
    never sees a half-built index.
    """

    def __init__(self, options: FuzzyOptions | None = None):
        self.options = options or FuzzyOptions()
        self._snapshot: tuple[tuple[CategorizationRule, ...], tuple[str, ...]] | None = None

    @property
    def built(self) -> bool:
        return self._snapshot is not None

    def __len__(self) -> int:
        return len(self._snapshot[0]) if self._snapshot else 0

    def rebuild(self, rules: list[CategorizationRule]) -> None:
        min_len = self.options.min_match_char_length
        searchable = tuple(rule for rule in rules if len(rule.keyword) >= min_len)
        keywords = tuple(rule.keyword.lower() for rule in searchable)
        self._snapshot = (searchable, keywords)
        logger.debug("[INDEX] Rebuilt fuzzy index with %d of %d rules.", len(searchable), len(rules))

    def search(self, description: str, limit: int | None = None) -> list[FuzzyHit]:
        rules, keywords = self._snapshot or ((), ())
        query = description.strip().lower()
        if not rules or len(query) < self.options.min_match_char_length:
            return []

        matches = process.extract(query, keywords, scorer=fuzz.partial_ratio, limit=None)

        scored: list[tuple[float, int]] = []
        for keyword, similarity, index in matches:
            score = 1.0 - similarity / 100.0
            if not self.options.ignore_location:
                score = self._apply_location_penalty(query, keyword, score)
            if score <= self.options.threshold:
                scored.append((score, index))

        # Equal scores keep rule insertion order.
        scored.sort()
        if limit is not None:
            scored = scored[:limit]
        return [FuzzyHit(rule=rules[index], score=score) for score, index in scored]

    def _apply_location_penalty(self, query: str, keyword: str, score: float) -> float:
        alignment = fuzz.partial_ratio_alignment(query, keyword)
        if alignment is None or alignment.dest_start == 0:
            return score
        if self.options.distance <= 0:
            return 1.0
        return min(1.0, score + alignment.dest_start / self.options.distance)
