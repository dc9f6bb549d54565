from collections import Counter

from finance_categorizer.models import CategorizationRule, CategorizationStats, KeywordUsage

TOP_KEYWORDS = 10


def summarize_rules(rules: list[CategorizationRule], top: int = TOP_KEYWORDS) -> CategorizationStats:
    if not rules:
        return CategorizationStats()

    by_category = Counter(rule.category_id for rule in rules)
    average = sum(rule.confidence for rule in rules) / len(rules)
    # sorted() is stable, so equally used keywords keep store order.
    most_used = sorted(rules, key=lambda rule: rule.usage_count, reverse=True)[:top]

    return CategorizationStats(
        total_rules=len(rules),
        rules_by_category=dict(by_category),
        average_confidence=average,
        most_used_keywords=[
            KeywordUsage(keyword=rule.keyword, usage_count=rule.usage_count)
            for rule in most_used
        ],
    )
