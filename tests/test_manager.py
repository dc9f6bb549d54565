from datetime import datetime, timezone

import pytest

from finance_categorizer.classifiers.fuzzy_index import FuzzyHit
from finance_categorizer.classifiers.learned import hit_confidence
from finance_categorizer.domain.taxonomy import KeywordTaxonomy
from finance_categorizer.integration.storage import InMemoryStore, StorageError
from finance_categorizer.manager import Categorizer
from finance_categorizer.models import CategorizationResult, CategorizationRule
from finance_categorizer.services.rule_store import RuleStore

SMALL_TAXONOMY = {
    "alimentacao": ["padaria", "mercado"],
    "transporte": ["uber", "posto"],
}

FALLBACK = CategorizationResult(category_id="outros", confidence=0.1, matched_keywords=[], method="exact")


class FailingStore:
    def get(self, key: str) -> str | None:
        raise StorageError("storage offline")

    def set(self, key: str, value: str) -> None:
        raise StorageError("storage offline")


class RawErrorStore:
    def get(self, key: str) -> str | None:
        raise OSError("device not ready")

    def set(self, key: str, value: str) -> None:
        raise OSError("device not ready")


def make_categorizer(storage=None) -> Categorizer:
    return Categorizer(
        rule_store=RuleStore(storage if storage is not None else InMemoryStore()),
        taxonomy=KeywordTaxonomy(SMALL_TAXONOMY),
    )


def rule_for(categorizer: Categorizer, keyword: str, category_id: str) -> CategorizationRule:
    return next(
        r for r in categorizer.rules() if r.keyword == keyword and r.category_id == category_id
    )


def make_rule(keyword: str, category_id: str, confidence: float) -> CategorizationRule:
    return CategorizationRule(
        keyword=keyword,
        category_id=category_id,
        confidence=confidence,
        usage_count=1,
        last_used=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def categorizer() -> Categorizer:
    return make_categorizer()

@pytest.mark.parametrize("description", ["", "a", "  ", " b "])
def test_short_descriptions_fall_back(categorizer: Categorizer, description: str) -> None:
    assert categorizer.classify(description) == FALLBACK

def test_unknown_description_falls_back(categorizer: Categorizer) -> None:
    categorizer.learn("Zeca Muambeiro", "compras")
    assert categorizer.classify("xyw") == FALLBACK

def test_exact_match_uses_taxonomy() -> None:
    categorizer = Categorizer(rule_store=RuleStore(InMemoryStore()))

    res = categorizer.classify("SUPERMERCADO Carrefour")

    assert res.category_id == "alimentacao"
    assert res.confidence == 0.9
    assert res.matched_keywords == ["supermercado"]
    assert res.method == "exact"

def test_exact_match_beats_learned_rules(categorizer: Categorizer) -> None:
    for _ in range(5):
        categorizer.learn("padaria", "lazer")

    res = categorizer.classify("Padaria Central")

    assert res.category_id == "alimentacao"
    assert res.confidence == 0.9
    assert res.method == "exact"

def test_first_listed_category_wins() -> None:
    categorizer = Categorizer(
        rule_store=RuleStore(InMemoryStore()),
        taxonomy=KeywordTaxonomy({"lazer": ["viagem"], "transporte": ["uber"]}),
    )
    assert categorizer.classify("uber viagem").category_id == "lazer"

    reordered = Categorizer(
        rule_store=RuleStore(InMemoryStore()),
        taxonomy=KeywordTaxonomy({"transporte": ["uber"], "lazer": ["viagem"]}),
    )
    assert reordered.classify("uber viagem").category_id == "transporte"

def test_learned_rule_matches_through_fuzzy_index(categorizer: Categorizer) -> None:
    categorizer.learn("Zeca Muambeiro", "compras")

    res = categorizer.classify("zeca muambeiro")

    assert res.category_id == "compras"
    assert res.method == "fuzzy"
    assert res.matched_keywords == ["zeca"]
    assert res.confidence == pytest.approx(0.7)

def test_learned_keyword_generalizes_to_new_descriptions(categorizer: Categorizer) -> None:
    categorizer.learn("Zeca Muambeiro", "compras")

    res = categorizer.classify("Muambeiros Importados")

    assert res.category_id == "compras"
    assert res.method == "fuzzy"
    assert res.matched_keywords == ["muambeiro"]

def test_learn_creates_rule_per_word_and_phrase(categorizer: Categorizer) -> None:
    categorizer.learn("Uber *Viagem SP", "transporte")

    assert [r.keyword for r in categorizer.rules()] == ["uber", "viagem", "uber *viagem sp"]

def test_learn_repetition_reinforces_rules(categorizer: Categorizer) -> None:
    categorizer.learn("uber viagem", "transporte")
    categorizer.learn("uber viagem", "transporte")

    rule = rule_for(categorizer, "viagem", "transporte")
    assert rule.usage_count == 2
    assert rule.confidence == pytest.approx(0.8)

    categorizer.learn("uber viagem", "transporte")
    rule = rule_for(categorizer, "viagem", "transporte")
    assert rule.usage_count == 3
    assert rule.confidence == pytest.approx(0.9)

def test_confidence_never_decreases(categorizer: Categorizer) -> None:
    previous = 0.0
    for _ in range(6):
        categorizer.learn("zeca muambeiro", "compras")
        current = rule_for(categorizer, "zeca", "compras").confidence
        assert current >= previous
        previous = current
    assert previous == 1.0

def test_learn_rejects_empty_category(categorizer: Categorizer) -> None:
    with pytest.raises(ValueError):
        categorizer.learn("zeca muambeiro", " ")

def test_learn_ignores_blank_description(categorizer: Categorizer) -> None:
    categorizer.learn("  ", "compras")
    assert categorizer.rules() == []

def test_fuzzy_confidence_cutoff_is_strict(
    categorizer: Categorizer, monkeypatch: pytest.MonkeyPatch
) -> None:
    rule = CategorizationRule(
        keyword="zeca",
        category_id="compras",
        confidence=0.8,
        usage_count=1,
        last_used=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )
    at_cutoff = FuzzyHit(rule=rule, score=0.5)
    assert hit_confidence(at_cutoff) == 0.4

    monkeypatch.setattr(categorizer.learned.index, "search", lambda description, limit=None: [at_cutoff])
    assert categorizer.classify("zeca") == FALLBACK

    just_above = FuzzyHit(rule=rule, score=0.49)
    monkeypatch.setattr(categorizer.learned.index, "search", lambda description, limit=None: [just_above])
    res = categorizer.classify("zeca")
    assert res.category_id == "compras"
    assert res.confidence == pytest.approx(0.408)

def test_fuzzy_confidence_cutoff_through_real_index(categorizer: Categorizer) -> None:
    # partial_ratio("qe", "zeca") is 50, a distance score of 0.5: 0.5 * 0.8 == 0.4
    categorizer.rule_store.save([make_rule("zeca", "compras", 0.8)])

    hits = categorizer.learned.search("qe")
    assert [(h.rule.keyword, h.score) for h in hits] == [("zeca", 0.5)]
    assert hit_confidence(hits[0]) == 0.4
    assert categorizer.classify("qe") == FALLBACK

    categorizer.rule_store.save([make_rule("zeca", "compras", 0.82)])
    res = categorizer.classify("qe")
    assert res.category_id == "compras"
    assert res.confidence == pytest.approx(0.41)

def test_similarity_floor() -> None:
    rule = CategorizationRule(
        keyword="zeca",
        category_id="compras",
        confidence=1.0,
        usage_count=3,
        last_used=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )
    assert hit_confidence(FuzzyHit(rule=rule, score=0.95)) == pytest.approx(0.3)

def test_learned_rules_survive_restart() -> None:
    storage = InMemoryStore()
    first = make_categorizer(storage)
    first.learn("Zeca Muambeiro", "compras")

    assert RuleStore(storage).load() == first.rules()

    second = make_categorizer(storage)
    assert not second.learned.index.built
    assert second.classify("zeca muambeiro").category_id == "compras"
    assert second.learned.index.built

def test_index_follows_corrections_without_manual_rebuild(categorizer: Categorizer) -> None:
    assert categorizer.classify("zeca muambeiro") == FALLBACK

    categorizer.learn("Zeca Muambeiro", "compras")

    assert categorizer.classify("zeca muambeiro").category_id == "compras"

def test_broken_storage_never_raises() -> None:
    categorizer = make_categorizer(FailingStore())

    assert categorizer.classify("zeca muambeiro") == FALLBACK
    categorizer.learn("Zeca Muambeiro", "compras")

    # The correction still applies for this process
    assert categorizer.classify("zeca muambeiro").category_id == "compras"
    kinds = {issue.kind for issue in categorizer.rule_store.issues}
    assert kinds == {"read_failed", "write_failed"}

def test_saved_rules_reach_an_already_built_index(categorizer: Categorizer) -> None:
    assert categorizer.classify("zeca muambeiro") == FALLBACK
    assert categorizer.learned.index.built

    categorizer.rule_store.save([make_rule("zeca", "compras", 0.9)])

    res = categorizer.classify("zeca muambeiro")
    assert res.category_id == "compras"
    assert res.method == "fuzzy"

def test_backend_os_errors_never_escape_learn() -> None:
    categorizer = make_categorizer(RawErrorStore())

    categorizer.learn("Zeca Muambeiro", "compras")

    assert categorizer.classify("zeca muambeiro").category_id == "compras"
    assert categorizer.rule_store.issues[0].kind == "read_failed"

def test_unexpected_fuzzy_error_falls_back(
    categorizer: Categorizer, monkeypatch: pytest.MonkeyPatch
) -> None:
    def explode(description, limit=None):
        raise RuntimeError("boom")

    monkeypatch.setattr(categorizer.learned.index, "search", explode)

    assert categorizer.classify("zeca muambeiro") == FALLBACK
    assert categorizer.classify("padaria").category_id == "alimentacao"

def test_suggest_categories(categorizer: Categorizer) -> None:
    categorizer.learn("zeca muambeiro", "compras")
    categorizer.learn("zeca tapioca", "alimentacao")

    assert categorizer.suggest_categories("zeca") == ["compras", "alimentacao"]
    assert categorizer.suggest_categories("zeca", limit=1) == ["compras"]

def test_suggest_categories_starts_with_exact_match(categorizer: Categorizer) -> None:
    categorizer.learn("zeca muambeiro", "compras")

    assert categorizer.suggest_categories("Padaria Zeca") == ["alimentacao", "compras"]

def test_suggest_categories_without_rules(categorizer: Categorizer) -> None:
    assert categorizer.suggest_categories("xyw") == ["outros"]

def test_stats(categorizer: Categorizer) -> None:
    categorizer.learn("uber viagem", "transporte")
    categorizer.learn("uber viagem", "transporte")
    categorizer.learn("Zeca Muambeiro", "compras")
    order_before = [r.keyword for r in categorizer.rules()]

    stats = categorizer.stats()

    assert stats.total_rules == 6
    assert stats.rules_by_category == {"transporte": 3, "compras": 3}
    assert stats.average_confidence == pytest.approx(0.75)
    assert [k.keyword for k in stats.most_used_keywords[:3]] == ["uber", "viagem", "uber viagem"]
    assert [r.keyword for r in categorizer.rules()] == order_before

def test_stats_without_rules(categorizer: Categorizer) -> None:
    stats = categorizer.stats()
    assert stats.total_rules == 0
    assert stats.average_confidence == 0.0

def test_clear_rules(categorizer: Categorizer) -> None:
    categorizer.learn("Zeca Muambeiro", "compras")

    categorizer.clear_rules()

    assert categorizer.rules() == []
    assert categorizer.classify("zeca muambeiro") == FALLBACK
