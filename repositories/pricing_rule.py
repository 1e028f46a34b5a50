import json
import logging
import threading
from pathlib import Path

from pydantic import ValidationError

from exceptions.pricing_rule import InvalidRuleSnapshotException, PricingRuleNotFoundException
from models.pricing_rule import PricingRule

logger = logging.getLogger(__name__)


class PricingRuleRepository:
    """
    In-memory rule store holding one rule snapshot per store.

    Snapshots come from the rule store's JSON export (camelCase keys, target
    ids/tags as JSON-encoded text). Callers fetch the rules once per
    calculation and hand that list to the engine, so a concurrent usage
    update never changes the rules a running calculation sees.
    """

    def __init__(self):
        self._rules_by_store: dict[int, list[PricingRule]] = {}
        self._lock = threading.Lock()

    def add_many(self, store_id: int, rules: list[PricingRule]) -> None:
        """Append rules to a store's snapshot."""
        with self._lock:
            self._rules_by_store.setdefault(store_id, []).extend(rules)

    def replace_snapshot(self, store_id: int, rules: list[PricingRule]) -> None:
        with self._lock:
            self._rules_by_store[store_id] = list(rules)

    def load_snapshot_json(self, store_id: int, raw_json: str) -> list[PricingRule]:
        """
        Replace a store's snapshot with rules decoded from JSON.

        The document must be a JSON list of rules. A single rule that fails
        validation is skipped with a warning so the rest of the store keeps
        working.

        Args:
            store_id: Store the snapshot belongs to
            raw_json: JSON list of rule objects

        Returns:
            The rules that were loaded

        Raises:
            InvalidRuleSnapshotException: If the document is not a JSON list
        """
        try:
            raw_rules = json.loads(raw_json)
        except json.JSONDecodeError as e:
            raise InvalidRuleSnapshotException(store_id, f"malformed JSON: {e.msg}")

        if not isinstance(raw_rules, list):
            raise InvalidRuleSnapshotException(store_id, "expected a JSON list of rules")

        rules = []
        for position, raw_rule in enumerate(raw_rules):
            try:
                rules.append(PricingRule.model_validate(raw_rule))
            except ValidationError as e:
                rule_id = raw_rule.get("id") if isinstance(raw_rule, dict) else None
                logger.warning(
                    f"Skipping invalid pricing rule at position {position} (id={rule_id}) "
                    f"for store {store_id}: {e.error_count()} validation error(s)"
                )

        self.replace_snapshot(store_id, rules)
        logger.info(f"Loaded {len(rules)} pricing rules for store {store_id}")
        return rules

    def load_snapshot_file(self, store_id: int, path: str | Path) -> list[PricingRule]:
        """Replace a store's snapshot with rules from a JSON file."""
        try:
            raw_json = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise InvalidRuleSnapshotException(store_id, f"cannot read {path}: {e}")
        return self.load_snapshot_json(store_id, raw_json)

    def fetch_active_rules(self, store_id: int) -> list[PricingRule]:
        """
        Get the active rules of a store.

        The engine re-checks is_active, date windows and usage limits anyway;
        this only trims the snapshot.

        Returns:
            New list of active rules, empty if the store has none
        """
        with self._lock:
            rules = self._rules_by_store.get(store_id, [])
            return [rule for rule in rules if rule.is_active]

    def get_by_id(self, rule_id: int) -> PricingRule:
        """
        Get a rule by id, across stores.

        Raises:
            PricingRuleNotFoundException: If no store has the rule
        """
        with self._lock:
            for rules in self._rules_by_store.values():
                for rule in rules:
                    if rule.id == rule_id:
                        return rule
        raise PricingRuleNotFoundException(rule_id)

    def increment_usage_count(self, rule_id: int) -> PricingRule:
        """
        Advance a rule's usage_count by one.

        Rules are immutable: the stored rule is replaced by an updated copy,
        snapshots already handed out keep the old count.

        Raises:
            PricingRuleNotFoundException: If no store has the rule
        """
        with self._lock:
            for rules in self._rules_by_store.values():
                for position, rule in enumerate(rules):
                    if rule.id == rule_id:
                        updated = rule.model_copy(update={"usage_count": rule.usage_count + 1})
                        rules[position] = updated
                        return updated
        raise PricingRuleNotFoundException(rule_id)
