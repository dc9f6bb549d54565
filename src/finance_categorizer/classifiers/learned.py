from finance_categorizer.classifiers.fuzzy_index import FuzzyHit, FuzzyIndex
from finance_categorizer.domain.locales import DEFAULT_LOCALE
from finance_categorizer.domain.tokens import tokenize
from finance_categorizer.logger import get_logger
from finance_categorizer.models import CategorizationResult
from finance_categorizer.services.rule_store import RuleStore

from .base import Classifier

logger = get_logger(__name__)

SIMILARITY_FLOOR = 0.3
MIN_FUZZY_CONFIDENCE = 0.4


def hit_confidence(hit: FuzzyHit) -> float:
    return max(SIMILARITY_FLOOR, 1.0 - hit.score) * hit.rule.confidence


class LearnedRuleClassifier(Classifier):
    """
    Matches descriptions against rules learned from user corrections.

    The fuzzy index is kept in step with the rule store: it is rebuilt
    whenever the store mutates, and lazily on the first query after the
    store has been loaded.
    """

    def __init__(
        self,
        rule_store: RuleStore,
        index: FuzzyIndex | None = None,
        min_confidence: float = MIN_FUZZY_CONFIDENCE,
        retained_letters: str = DEFAULT_LOCALE.retained_letters,
    ):
        self.rule_store = rule_store
        self.index = index or FuzzyIndex()
        self.min_confidence = min_confidence
        self.retained_letters = retained_letters
        self.rule_store.subscribe(self.index.rebuild)

    def ensure_ready(self) -> None:
        if not self.index.built:
            self.index.rebuild(self.rule_store.rules())

    def search(self, description: str, limit: int | None = None) -> list[FuzzyHit]:
        self.ensure_ready()
        return self.index.search(description, limit=limit)

    def classify(self, description: str) -> CategorizationResult | None:
        hits = self.search(description, limit=1)
        if not hits:
            return None

        best = hits[0]
        confidence = hit_confidence(best)
        if confidence <= self.min_confidence:
            logger.debug(
                "[CATEGORIZE] Best learned rule '%s' too weak (%.2f <= %.2f).",
                best.rule.keyword,
                confidence,
                self.min_confidence,
            )
            return None

        return CategorizationResult(
            category_id=best.rule.category_id,
            confidence=confidence,
            matched_keywords=[best.rule.keyword],
            method="fuzzy",
        )

    def learn(self, description: str, category_id: str) -> None:
        words = tokenize(description, self.retained_letters)
        for word in words:
            self.rule_store.add_or_update(word, category_id)
        self.rule_store.add_or_update(description.lower(), category_id)
        logger.info(
            "[LEARN] '%s' -> '%s' (%d keyword rules + full description)",
            description[:50],
            category_id,
            len(words),
        )
