"""
Password validation engine entry point.
"""

import asyncio
import re
import time
from typing import List, Optional, Sequence

from shared.logging import get_logger
from shared.metrics import MetricsCollector
from shared.errors import (
    PasswordValidatorException, ExternalServiceError, InvalidInputError, RuleEvaluationError
)
from ..rules.models import Rule, RuleKind, RuleOutcome, TenantContext, Verdict
from ..users.client import IdentityResolver
from .regex_evaluator import RegexRuleEvaluator
from .dispatcher import ProgrammaticRuleDispatcher
from .aggregator import ResultAggregator


def select_enabled_rules(rules: Sequence[Rule]) -> List[Rule]:
    """Enabled rules in ascending order; equal orders keep registry order."""
    return sorted((rule for rule in rules if rule.enabled), key=lambda r: r.order)


class ValidationOrchestrator:
    """Validates a password against the tenant's rules.

    ``rule_source`` is any object exposing
    ``async fetch_rules(tenant_context) -> List[Rule]``.
    """

    def __init__(
        self,
        rule_source,
        identity_resolver: IdentityResolver,
        regex_evaluator: Optional[RegexRuleEvaluator] = None,
        dispatcher: Optional[ProgrammaticRuleDispatcher] = None,
        aggregator: Optional[ResultAggregator] = None,
        user_name_placeholder: str = "<USER_NAME>",
        metrics: Optional[MetricsCollector] = None
    ):
        self.rule_source = rule_source
        self.identity_resolver = identity_resolver
        self.regex_evaluator = regex_evaluator or RegexRuleEvaluator()
        self.dispatcher = dispatcher or ProgrammaticRuleDispatcher(metrics=metrics)
        self.aggregator = aggregator or ResultAggregator()
        self.user_name_placeholder = user_name_placeholder
        self.metrics = metrics
        self.logger = get_logger("password_validator.engine")

    async def validate_password(
        self,
        user_id: str,
        password: str,
        tenant_context: TenantContext
    ) -> Verdict:
        """Return the verdict for ``password`` or raise a PasswordValidatorException."""
        self._check_input(user_id, password, tenant_context)
        start_time = time.time()

        rules, username = await self._fetch_rules_and_username(user_id, tenant_context)
        selected = select_enabled_rules(rules)

        outcomes = await asyncio.gather(*(
            self.evaluate_rule(rule, user_id, password, username, tenant_context)
            for rule in selected
        ))
        verdict = self.aggregator.aggregate(outcomes)

        if self.metrics:
            self.metrics.record_validation(verdict.result.value)

        self.logger.info(
            "Password validated",
            user_id=user_id,
            tenant_id=tenant_context.tenant_id,
            result=verdict.result.value,
            rules_evaluated=len(selected),
            violations=len(verdict.violated_message_ids),
            duration_ms=round((time.time() - start_time) * 1000, 2)
        )
        return verdict

    async def evaluate_rule(
        self,
        rule: Rule,
        user_id: str,
        password: str,
        username: str,
        tenant_context: TenantContext
    ) -> RuleOutcome:
        """Evaluate one rule. Failures are folded into an unsatisfied outcome."""
        try:
            if rule.kind is RuleKind.PATTERN:
                pattern = self._substitute_user_name(rule.pattern, username)
                satisfied = self.regex_evaluator.evaluate(pattern, password)
            elif rule.kind is RuleKind.DELEGATED:
                satisfied = await self.dispatcher.evaluate(
                    rule.delegation_target, user_id, password, tenant_context
                )
            else:
                raise RuleEvaluationError(f"Unsupported rule kind: {rule.kind}")
        except RuleEvaluationError as e:
            self.logger.warning(
                "Rule evaluation failed",
                rule_id=rule.rule_id,
                name=rule.name,
                error=e.message
            )
            outcome = RuleOutcome(rule=rule, satisfied=False, diagnostic=e.message)
        except Exception as e:
            self.logger.error(
                "Unexpected rule evaluation error",
                rule_id=rule.rule_id,
                name=rule.name,
                error=str(e)
            )
            outcome = RuleOutcome(rule=rule, satisfied=False, diagnostic=str(e))
        else:
            outcome = RuleOutcome(rule=rule, satisfied=satisfied)

        if self.metrics:
            self.metrics.record_rule_evaluation(rule.kind.value, outcome.satisfied)

        self.logger.debug(
            "Rule evaluation result",
            rule_id=rule.rule_id,
            order=rule.order,
            satisfied=outcome.satisfied
        )
        return outcome

    async def _fetch_rules_and_username(self, user_id: str, tenant_context: TenantContext):
        rules_result, username_result = await asyncio.gather(
            self.rule_source.fetch_rules(tenant_context),
            self.identity_resolver.resolve(user_id, tenant_context),
            return_exceptions=True
        )

        for collaborator, result in (("rule registry", rules_result), ("users", username_result)):
            if isinstance(result, PasswordValidatorException):
                raise result
            if isinstance(result, BaseException):
                self.logger.error("Collaborator call failed", collaborator=collaborator, error=str(result))
                raise ExternalServiceError(collaborator, str(result)) from result

        return rules_result, username_result

    def _substitute_user_name(self, pattern: Optional[str], username: str) -> Optional[str]:
        if pattern is None or self.user_name_placeholder not in pattern:
            return pattern
        return pattern.replace(self.user_name_placeholder, re.escape(username))

    def _check_input(self, user_id: str, password: str, tenant_context: TenantContext) -> None:
        if not isinstance(user_id, str) or not user_id.strip():
            raise InvalidInputError("User id is required")
        if not isinstance(password, str) or not password:
            raise InvalidInputError("Password is required")
        if tenant_context is None or not tenant_context.tenant_id:
            raise InvalidInputError("Tenant is required")
