"""
In-process rule registry for the Password Validator service.

Rules are kept per tenant. Every create and update goes through
``validate_rule`` so that the engine can rely on the registry invariants:
non-negative order, pattern rules are always Strong and carry a compilable
expression, programmatic rules name a delegation target.
"""

import re
import uuid
from dataclasses import replace
from typing import Callable, Dict, List, Optional

from shared.logging import get_logger
from shared.errors import RuleValidationError, RuleNotFoundError
from .models import Rule, RuleKind, RuleStrength, RuleCollection, TenantContext


def validate_rule(rule: Rule) -> None:
    """Raise RuleValidationError if the rule breaks a registry invariant."""
    if rule.order < 0:
        raise RuleValidationError(
            "Order number cannot be negative",
            details={"order": rule.order}
        )

    if rule.kind is RuleKind.PATTERN:
        if rule.strength is not RuleStrength.STRONG:
            raise RuleValidationError(
                "Validation type Soft is not supported for RegExp rules",
                details={"strength": rule.strength.value}
            )
        if not rule.pattern:
            raise RuleValidationError("Expression is required for RegExp rules")
        try:
            re.compile(rule.pattern)
        except re.error as e:
            raise RuleValidationError(
                "Expression is not a valid regular expression",
                details={"error": str(e)}
            )

    elif rule.kind is RuleKind.DELEGATED:
        if not rule.delegation_target or not rule.delegation_target.strip():
            raise RuleValidationError("Implementation reference is required for Programmatic rules")


class InMemoryRuleRegistry:
    """Per-tenant rule store."""

    def __init__(self, default_rules: Optional[Callable[[], List[Rule]]] = None):
        self.logger = get_logger("password_validator.rule_registry")
        self._default_rules = default_rules
        self._rules: Dict[str, Dict[str, Rule]] = {}

    def _tenant_rules(self, tenant_id: str) -> Dict[str, Rule]:
        if tenant_id not in self._rules:
            seeded = self._default_rules() if self._default_rules else []
            self._rules[tenant_id] = {rule.rule_id: rule for rule in seeded}
            if seeded:
                self.logger.info("Default rules loaded", tenant_id=tenant_id, count=len(seeded))
        return self._rules[tenant_id]

    def create_rule(self, tenant_id: str, rule: Rule) -> Rule:
        """Store a new rule under a freshly assigned id."""
        created = replace(rule, rule_id=str(uuid.uuid4()))
        validate_rule(created)
        self._tenant_rules(tenant_id)[created.rule_id] = created
        self.logger.info("Rule created", tenant_id=tenant_id, rule_id=created.rule_id, name=created.name)
        return created

    def update_rule(self, tenant_id: str, rule: Rule) -> Optional[Rule]:
        """Replace an existing rule. Returns None when the id is unknown."""
        rules = self._tenant_rules(tenant_id)
        if rule.rule_id not in rules:
            self.logger.debug("Rule not found for update", tenant_id=tenant_id, rule_id=rule.rule_id)
            return None

        validate_rule(rule)
        rules[rule.rule_id] = rule
        self.logger.info("Rule updated", tenant_id=tenant_id, rule_id=rule.rule_id, name=rule.name)
        return rule

    def get_rule(self, tenant_id: str, rule_id: str) -> Rule:
        rule = self._tenant_rules(tenant_id).get(rule_id)
        if rule is None:
            raise RuleNotFoundError(rule_id)
        return rule

    def list_rules(
        self,
        tenant_id: str,
        kind: Optional[RuleKind] = None,
        enabled: Optional[bool] = None,
        limit: int = 10,
        offset: int = 0
    ) -> RuleCollection:
        """List rules ordered by order number, filtered and paginated."""
        rules = [
            rule for rule in self._tenant_rules(tenant_id).values()
            if (kind is None or rule.kind is kind)
            and (enabled is None or rule.enabled == enabled)
        ]
        rules.sort(key=lambda r: r.order)

        return RuleCollection(
            rules=rules[offset:offset + limit],
            total_records=len(rules)
        )

    async def fetch_rules(self, tenant_context: TenantContext) -> List[Rule]:
        """Every rule of the tenant; consumed by the validation engine."""
        return list(self._tenant_rules(tenant_context.tenant_id).values())
