from finance_categorizer.domain.taxonomy import EXACT_MATCH_CONFIDENCE, KeywordTaxonomy
from finance_categorizer.models import CategorizationResult

from .base import Classifier


class KeywordClassifier(Classifier):
    def __init__(self, taxonomy: KeywordTaxonomy | None = None):
        self.taxonomy = taxonomy or KeywordTaxonomy()

    def classify(self, description: str) -> CategorizationResult | None:
        match = self.taxonomy.find_by_keyword(description)
        if match is None:
            return None
        return CategorizationResult(
            category_id=match.category_id,
            confidence=EXACT_MATCH_CONFIDENCE,
            matched_keywords=[match.keyword],
            method="exact",
        )
