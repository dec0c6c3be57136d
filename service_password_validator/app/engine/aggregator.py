"""
Combines per-rule outcomes into a verdict.
"""

from typing import Sequence

from ..rules.models import RuleOutcome, RuleStrength, ValidationResult, Verdict


class ResultAggregator:
    """Folds rule outcomes into a Verdict.

    Only an unsatisfied Strong rule makes the password invalid. Message ids
    are reported in ascending rule order regardless of the order in which
    outcomes arrive; ties keep their arrival order and duplicates are kept.
    """

    def __init__(self, include_advisory_messages: bool = True):
        self.include_advisory_messages = include_advisory_messages

    def aggregate(self, outcomes: Sequence[RuleOutcome]) -> Verdict:
        ordered = sorted(outcomes, key=lambda outcome: outcome.rule.order)
        violated = [outcome for outcome in ordered if not outcome.satisfied]

        invalid = any(outcome.rule.strength is RuleStrength.STRONG for outcome in violated)

        messages = tuple(
            outcome.rule.message_id
            for outcome in violated
            if outcome.rule.strength is RuleStrength.STRONG or self.include_advisory_messages
        )

        return Verdict(
            result=ValidationResult.INVALID if invalid else ValidationResult.VALID,
            violated_message_ids=messages
        )
