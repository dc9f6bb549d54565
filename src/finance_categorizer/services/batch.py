from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from finance_categorizer.logger import get_logger
from finance_categorizer.models import CategorizedTransaction, Transaction

if TYPE_CHECKING:
    from finance_categorizer.manager import Categorizer

logger = get_logger(__name__)


def iter_classified(
    categorizer: Categorizer,
    transactions: Iterable[Transaction],
) -> Iterator[CategorizedTransaction]:
    """
    Lazily classify each transaction. A failure on one element is logged and
    that element gets the fallback result; the rest are still processed.
    """
    for position, transaction in enumerate(transactions):
        try:
            result = categorizer.classify(transaction.description)
        except Exception:
            logger.exception(
                "[BATCH] Could not classify transaction %s at position %d; using fallback.",
                getattr(transaction, "id", "unknown"),
                position,
            )
            result = categorizer.fallback_result()
        yield CategorizedTransaction.merge(transaction, result)


def classify_all(
    categorizer: Categorizer,
    transactions: Iterable[Transaction],
) -> list[CategorizedTransaction]:
    categorized = list(iter_classified(categorizer, transactions))
    fallback_count = sum(1 for t in categorized if t.category_id == categorizer.default_category)
    logger.info(
        "[BATCH] Categorized %d transactions (%d in default bucket '%s').",
        len(categorized),
        fallback_count,
        categorizer.default_category,
    )
    return categorized
