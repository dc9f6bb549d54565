from collections.abc import Iterable

from finance_categorizer.classifiers.base import Classifier
from finance_categorizer.classifiers.fuzzy_index import FuzzyIndex, FuzzyOptions
from finance_categorizer.classifiers.keyword import KeywordClassifier
from finance_categorizer.classifiers.learned import MIN_FUZZY_CONFIDENCE, LearnedRuleClassifier
from finance_categorizer.domain.locales import DEFAULT_LOCALE, LocaleProfile
from finance_categorizer.domain.stats import summarize_rules
from finance_categorizer.domain.taxonomy import KeywordTaxonomy
from finance_categorizer.integration.storage import JsonFileStore
from finance_categorizer.logger import get_logger
from finance_categorizer.models import (
    CategorizationResult,
    CategorizationRule,
    CategorizationStats,
    CategorizedTransaction,
    Transaction,
)
from finance_categorizer.services.batch import classify_all
from finance_categorizer.services.rule_store import RuleStore

logger = get_logger(__name__)

FALLBACK_CONFIDENCE = 0.1
MIN_DESCRIPTION_LENGTH = 2


class Categorizer:
    """
    Assigns a category to free-text transaction descriptions.

    Classifiers are consulted in priority order: the static keyword taxonomy
    first, then rules learned from user corrections. Anything that neither
    recognizes lands in the locale's default bucket.
    """

    def __init__(self,
                 rule_store: RuleStore | None = None,
                 taxonomy: KeywordTaxonomy | None = None,
                 locale: LocaleProfile = DEFAULT_LOCALE,
                 fuzzy_options: FuzzyOptions | None = None,
                 min_fuzzy_confidence: float = MIN_FUZZY_CONFIDENCE,
                 data_dir: str = "."):

        self.locale = locale
        self.default_category = locale.default_category
        self.rule_store = rule_store or RuleStore(JsonFileStore(data_dir))

        # 1. Keyword taxonomy (exact matches always win)
        self.keywords = KeywordClassifier(taxonomy or KeywordTaxonomy(locale.taxonomy))

        # 2. Learned rules through the fuzzy index
        self.learned = LearnedRuleClassifier(
            self.rule_store,
            index=FuzzyIndex(fuzzy_options),
            min_confidence=min_fuzzy_confidence,
            retained_letters=locale.retained_letters,
        )

        self.classifiers: list[Classifier] = [self.keywords, self.learned]

    @property
    def taxonomy(self) -> KeywordTaxonomy:
        return self.keywords.taxonomy

    def fallback_result(self) -> CategorizationResult:
        return CategorizationResult(
            category_id=self.default_category,
            confidence=FALLBACK_CONFIDENCE,
            matched_keywords=[],
            method="exact",
        )

    def classify(self, description: str) -> CategorizationResult:
        if not description or len(description.strip()) < MIN_DESCRIPTION_LENGTH:
            return self.fallback_result()

        for classifier in self.classifiers:
            classifier_name = classifier.__class__.__name__
            try:
                result = classifier.classify(description)
            except Exception:
                logger.exception("[CATEGORIZE] %s failed for '%s'", classifier_name, description[:50])
                continue

            if result:
                logger.debug(
                    "[CATEGORIZE] %s: '%s' -> '%s' (confidence: %.2f)",
                    classifier_name,
                    description[:50],
                    result.category_id,
                    result.confidence,
                )
                return result

        logger.debug("[CATEGORIZE] No classifier matched for: '%s'", description[:50])
        return self.fallback_result()

    def learn(self, description: str, category_id: str) -> None:
        """
        Record a user correction. Every word of the description, plus the
        description as a whole, becomes (or reinforces) a learned rule.
        """
        if not category_id or not category_id.strip():
            raise ValueError("category_id must be a non-empty string")
        if not description or len(description.strip()) < MIN_DESCRIPTION_LENGTH:
            logger.warning("[LEARN] Ignoring correction with empty description -> '%s'.", category_id)
            return

        for classifier in self.classifiers:
            classifier.learn(description, category_id)

    def suggest_categories(self, description: str, limit: int = 3) -> list[str]:
        suggestions = [self.classify(description).category_id]

        try:
            hits = self.learned.search(description, limit=limit)
        except Exception:
            logger.exception("[CATEGORIZE] Suggestion search failed for '%s'", description[:50])
            hits = []

        for hit in hits:
            if hit.rule.category_id not in suggestions:
                suggestions.append(hit.rule.category_id)

        return suggestions[:limit]

    def classify_all(self, transactions: Iterable[Transaction]) -> list[CategorizedTransaction]:
        return classify_all(self, transactions)

    def rules(self) -> list[CategorizationRule]:
        return self.rule_store.rules()

    def stats(self) -> CategorizationStats:
        return summarize_rules(self.rule_store.rules())

    def clear_rules(self) -> None:
        """
        Forget every learned rule.
        """
        self.rule_store.clear()
