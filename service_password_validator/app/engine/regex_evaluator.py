"""
Pattern rule evaluation.
"""

import re
from functools import lru_cache
from typing import Optional, Pattern

from shared.errors import RuleEvaluationError


@lru_cache(maxsize=256)
def _compile(pattern: str) -> Pattern[str]:
    return re.compile(pattern)


class RegexRuleEvaluator:
    """Checks a password against a self-anchoring regular expression."""

    def evaluate(self, pattern: Optional[str], password: str) -> bool:
        """Return True iff the whole password matches the pattern.

        Raises RuleEvaluationError when the pattern is missing or does not
        compile.
        """
        if pattern is None:
            raise RuleEvaluationError("Pattern rule has no expression")

        try:
            compiled = _compile(pattern)
        except re.error as e:
            raise RuleEvaluationError(
                f"Malformed expression: {e}",
                details={"position": e.pos}
            )

        return compiled.fullmatch(password) is not None
