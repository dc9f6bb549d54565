from dataclasses import dataclass
from typing import Iterable, Mapping

from finance_categorizer.domain.locales import DEFAULT_LOCALE

EXACT_MATCH_CONFIDENCE = 0.9


@dataclass(frozen=True)
class KeywordMatch:
    category_id: str
    keyword: str


class KeywordTaxonomy:
    """
    Static category -> keywords lookup used for exact matching.

    Lookup is first-match-wins: categories are scanned in insertion order and
    keywords in list order, so the ordering of the mapping decides ties.
    """

    def __init__(self, keywords: Mapping[str, Iterable[str]] | None = None):
        source = DEFAULT_LOCALE.taxonomy if keywords is None else keywords
        entries: list[tuple[str, tuple[str, ...]]] = []
        for category_id, category_keywords in source.items():
            if not category_id:
                raise ValueError("Category identifiers must be non-empty")
            entries.append((category_id, tuple(kw.lower() for kw in category_keywords)))
        self._entries = tuple(entries)

    def find_by_keyword(self, description: str) -> KeywordMatch | None:
        normalized = description.lower()
        for category_id, keywords in self._entries:
            for keyword in keywords:
                if keyword in normalized:
                    return KeywordMatch(category_id=category_id, keyword=keyword)
        return None

    def categories(self) -> list[str]:
        return [category_id for category_id, _ in self._entries]

    def as_dict(self) -> dict[str, list[str]]:
        return {category_id: list(keywords) for category_id, keywords in self._entries}

    def __len__(self) -> int:
        return len(self._entries)
