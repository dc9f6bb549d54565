import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

from pydantic import TypeAdapter, ValidationError

from finance_categorizer.integration.storage import CorruptDataError, KeyValueStore, StorageError
from finance_categorizer.logger import get_logger
from finance_categorizer.models import CategorizationRule, utcnow

logger = get_logger(__name__)

RULES_STORAGE_KEY = "finance_categorization_rules"
INITIAL_CONFIDENCE = 0.7
CONFIDENCE_STEP = 0.1

IssueKind = Literal["read_failed", "write_failed", "malformed"]

_rules_adapter = TypeAdapter(list[CategorizationRule])


class RuleDecodeError(ValueError):
    """Persisted rule data exists but is not a valid list of rules."""


@dataclass(frozen=True)
class StorageIssue:
    kind: IssueKind
    key: str
    message: str


def decode_rules(text: str) -> list[CategorizationRule]:
    try:
        return _rules_adapter.validate_json(text)
    except ValidationError as e:
        raise RuleDecodeError(f"{e.error_count()} validation error(s) in stored rules") from e


def encode_rules(rules: list[CategorizationRule]) -> str:
    return json.dumps(
        _rules_adapter.dump_python(rules, mode="json", by_alias=True),
        ensure_ascii=False,
    )


class RuleStore:
    """
    Owns the learned rules and persists them as one JSON array under a single
    key. Every mutation overwrites the whole array.

    Storage problems never escape this class: they are logged, appended to
    ``issues`` and forwarded to ``on_issue`` so callers can observe them,
    while classification carries on with whatever rules are in memory.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        key: str = RULES_STORAGE_KEY,
        on_issue: Callable[[StorageIssue], None] | None = None,
    ):
        self.storage = storage
        self.key = key
        self.on_issue = on_issue
        self.issues: list[StorageIssue] = []
        self._rules: list[CategorizationRule] | None = None
        self._listeners: list[Callable[[list[CategorizationRule]], None]] = []

    @property
    def loaded(self) -> bool:
        return self._rules is not None

    def subscribe(self, listener: Callable[[list[CategorizationRule]], None]) -> None:
        """Register a callback invoked with the full rule list after each mutation."""
        self._listeners.append(listener)

    def rules(self) -> list[CategorizationRule]:
        if self._rules is None:
            self.load()
        return list(self._rules or [])

    def load(self) -> list[CategorizationRule]:
        rules: list[CategorizationRule] = []
        try:
            raw = self.storage.get(self.key)
        except CorruptDataError as e:
            self._report("malformed", f"Discarding stored rules: {e}")
            raw = None
        except StorageError as e:
            return self._keep_cached_after_read_failure(str(e))
        except Exception as e:
            return self._keep_cached_after_read_failure(f"{type(e).__name__}: {e}")
        else:
            if not raw:
                logger.debug("[RULES] No learned rules stored under '%s'.", self.key)
            else:
                try:
                    rules = decode_rules(raw)
                    logger.debug("[RULES] Loaded %d learned rules.", len(rules))
                except RuleDecodeError as e:
                    self._report("malformed", f"Discarding stored rules: {e}")

        self._rules = rules
        self._notify()
        return list(rules)

    def save(self, rules: list[CategorizationRule]) -> bool:
        """
        Replace the rule set and persist it. The in-memory rules and the
        listeners are updated even when the write fails.
        """
        self._rules = list(rules)
        self._notify()
        try:
            self.storage.set(self.key, encode_rules(self._rules))
        except StorageError as e:
            self._report("write_failed", str(e))
            return False
        except Exception as e:
            self._report("write_failed", f"{type(e).__name__}: {e}")
            return False
        return True

    def add_or_update(self, keyword: str, category_id: str) -> CategorizationRule:
        normalized = keyword.lower()
        rules = self.rules()

        rule = next(
            (r for r in rules if r.keyword.lower() == normalized and r.category_id == category_id),
            None,
        )
        if rule is not None:
            rule.usage_count += 1
            rule.confidence = round(min(1.0, rule.confidence + CONFIDENCE_STEP), 4)
            rule.last_used = utcnow()
        else:
            rule = CategorizationRule(
                keyword=normalized,
                category_id=category_id,
                confidence=INITIAL_CONFIDENCE,
                usage_count=1,
                last_used=utcnow(),
            )
            rules.append(rule)

        self.save(rules)
        return rule

    def clear(self) -> None:
        self.save([])
        logger.info("[RULES] Learned rules cleared.")

    def _notify(self) -> None:
        snapshot = list(self._rules or [])
        for listener in self._listeners:
            listener(snapshot)

    def _report(self, kind: IssueKind, message: str) -> None:
        issue = StorageIssue(kind=kind, key=self.key, message=message)
        if kind == "malformed":
            logger.error("[RULES] Malformed rule data under '%s': %s", self.key, message)
        else:
            logger.warning("[RULES] Storage %s for '%s': %s", kind.replace("_", " "), self.key, message)
        self.issues.append(issue)
        if self.on_issue:
            self.on_issue(issue)

    def _keep_cached_after_read_failure(self, message: str) -> list[CategorizationRule]:
        self._report("read_failed", message)
        if self._rules is None:
            self._rules = []
        return list(self._rules)
