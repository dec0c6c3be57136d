"""
Shared error handling for the Password Validator service.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel

from opentelemetry import trace


class ErrorResponse(BaseModel):
    """Standard error response format."""

    trace_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class PasswordValidatorException(Exception):
    """Base exception for the Password Validator service."""

    status_code = 400

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        trace_id = None
        current_span = trace.get_current_span()
        if current_span and current_span.is_recording():
            span_context = current_span.get_span_context()
            if span_context.trace_id != 0:
                trace_id = f"{span_context.trace_id:032x}"

        return ErrorResponse(
            trace_id=trace_id,
            code=self.code,
            message=self.message,
            details=self.details
        )


class InvalidInputError(PasswordValidatorException):
    """Request rejected before any collaborator was called."""

    status_code = 422

    def __init__(self, message: str = "Invalid input", details: Optional[Dict[str, Any]] = None):
        super().__init__("INVALID_INPUT", message, details)


class ExternalServiceError(PasswordValidatorException):
    """External service errors."""

    status_code = 502

    def __init__(self, service: str, message: str = "External service error", details: Optional[Dict[str, Any]] = None):
        super().__init__("EXTERNAL_SERVICE_ERROR", f"{service}: {message}", details)


class UserLookupError(PasswordValidatorException):
    """Identity lookup answered with a non-success status or could not be reached."""

    status_code = 502

    def __init__(self, user_id: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("USER_LOOKUP_ERROR", f"Error getting user by user id : {user_id}", details)
        self.user_id = user_id


class MalformedResponseError(PasswordValidatorException):
    """Collaborator response lacks required fields."""

    status_code = 502

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("MALFORMED_RESPONSE", message, details)


class UserNotFoundError(PasswordValidatorException):
    """No user matches the requested id."""

    status_code = 404

    def __init__(self, user_id: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("USER_NOT_FOUND", f"User not found by user id : {user_id}", details)
        self.user_id = user_id


class AmbiguousUserError(PasswordValidatorException):
    """More than one user matches the requested id."""

    status_code = 502

    def __init__(self, user_id: str, matches: int, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            "AMBIGUOUS_USER",
            f"Found {matches} users by user id : {user_id}",
            details
        )
        self.user_id = user_id
        self.matches = matches


class RuleEvaluationError(PasswordValidatorException):
    """A single rule could not be evaluated. Never escapes the engine."""

    status_code = 500

    def __init__(self, message: str = "Rule evaluation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("RULE_EVALUATION_ERROR", message, details)


class RuleValidationError(PasswordValidatorException):
    """Rule definition violates a registry invariant."""

    status_code = 422

    def __init__(self, message: str = "Rule validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("RULE_VALIDATION_ERROR", message, details)


class RuleNotFoundError(PasswordValidatorException):
    """Rule does not exist for the tenant."""

    status_code = 404

    def __init__(self, rule_id: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("RULE_NOT_FOUND", f"Rule {rule_id} not found", details)
        self.rule_id = rule_id
