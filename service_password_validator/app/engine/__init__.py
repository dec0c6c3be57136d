"""
Password validation engine.

The orchestrator fetches the tenant's rules and the user's name
concurrently, evaluates every enabled rule (pattern rules locally,
programmatic rules through their module) and hands the outcomes to the
aggregator, which orders violations by rule order.
"""

from .orchestrator import ValidationOrchestrator, select_enabled_rules
from .regex_evaluator import RegexRuleEvaluator
from .dispatcher import ProgrammaticRuleDispatcher
from .aggregator import ResultAggregator

__all__ = [
    "ValidationOrchestrator",
    "select_enabled_rules",
    "RegexRuleEvaluator",
    "ProgrammaticRuleDispatcher",
    "ResultAggregator",
]
