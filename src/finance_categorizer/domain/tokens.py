import re
from functools import lru_cache

from finance_categorizer.domain.locales import DEFAULT_LOCALE

MIN_TOKEN_LENGTH = 3


@lru_cache(maxsize=8)
def _strip_pattern(retained_letters: str) -> re.Pattern[str]:
    # Word characters are ASCII only; accented letters come from the locale.
    return re.compile(rf"[^A-Za-z0-9_\s{retained_letters}]")


def tokenize(description: str, retained_letters: str = DEFAULT_LOCALE.retained_letters) -> list[str]:
    """
    Split a description into candidate rule keywords.

    The text is lower-cased, characters outside the word class (plus the
    locale's accented letters) are dropped, and words shorter than
    MIN_TOKEN_LENGTH are discarded. Duplicates are kept in order of
    appearance.
    """
    cleaned = _strip_pattern(retained_letters).sub("", description.lower())
    return [word for word in cleaned.split() if len(word) >= MIN_TOKEN_LENGTH]
