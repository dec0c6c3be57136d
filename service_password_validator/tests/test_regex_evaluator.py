"""
Unit tests for the pattern rule evaluator.
"""

import pytest

from service_password_validator.app.engine.regex_evaluator import RegexRuleEvaluator
from shared.errors import RuleEvaluationError


class TestRegexRuleEvaluator:
    """Test cases for RegexRuleEvaluator."""

    @pytest.fixture
    def evaluator(self):
        """Create RegexRuleEvaluator instance."""
        return RegexRuleEvaluator()

    def test_matches_whole_password(self, evaluator):
        """Test a password matching the pattern end to end."""
        assert evaluator.evaluate(r"^.{8,}$", "P@sw0rd1") is True

    def test_rejects_short_password(self, evaluator):
        """Test a password shorter than the pattern requires."""
        assert evaluator.evaluate(r"^.{8,}$", "P@sw0rd") is False

    def test_partial_match_is_not_enough(self, evaluator):
        """Test that a pattern matching only a prefix does not satisfy the rule."""
        assert evaluator.evaluate(r"[a-z]+", "abc123") is False
        assert evaluator.evaluate(r"[a-z]+", "abc") is True

    def test_case_sensitive(self, evaluator):
        """Test that matching is case sensitive."""
        assert evaluator.evaluate(r"(?=.*[A-Z]).+", "password") is False
        assert evaluator.evaluate(r"(?=.*[A-Z]).+", "Password") is True

    def test_lookahead_patterns(self, evaluator):
        """Test lookahead-only patterns used by the default rules."""
        assert evaluator.evaluate(r"(?=.*\d).+", "p@sWords") is False
        assert evaluator.evaluate(r"(?=.*\d).+", "p@sW0rds") is True

    def test_malformed_pattern_raises(self, evaluator):
        """Test that a malformed pattern is reported as a rule evaluation error."""
        with pytest.raises(RuleEvaluationError) as exc_info:
            evaluator.evaluate(r"(unclosed", "whatever")

        assert exc_info.value.code == "RULE_EVALUATION_ERROR"
        assert "Malformed expression" in exc_info.value.message

    def test_missing_pattern_raises(self, evaluator):
        """Test that a pattern rule without an expression is an evaluation error."""
        with pytest.raises(RuleEvaluationError):
            evaluator.evaluate(None, "whatever")
