from abc import ABC, abstractmethod

from finance_categorizer.models import CategorizationResult


class Classifier(ABC):
    @abstractmethod
    def classify(self, description: str) -> CategorizationResult | None:
        """Attempt to categorize a transaction description."""
        pass

    def learn(self, description: str, category_id: str) -> None:
        """Learn from a user correction. Static classifiers ignore it."""
        return None
