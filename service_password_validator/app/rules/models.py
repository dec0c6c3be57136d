"""
Rule data models for the Password Validator service.
"""

from typing import Dict, Optional, List, Tuple
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field


class RuleKind(str, Enum):
    """How a rule is evaluated."""
    PATTERN = "RegExp"
    DELEGATED = "Programmatic"


class RuleStrength(str, Enum):
    """Whether a violated rule invalidates the password."""
    STRONG = "Strong"
    ADVISORY = "Soft"


class ValidationResult(str, Enum):
    """Overall verdict."""
    VALID = "valid"
    INVALID = "invalid"


@dataclass(frozen=True)
class Rule:
    """Password policy rule."""
    rule_id: str
    name: str
    kind: RuleKind
    message_id: str
    strength: RuleStrength = RuleStrength.STRONG
    enabled: bool = True
    order: int = 0
    pattern: Optional[str] = None
    delegation_target: Optional[str] = None
    description: Optional[str] = None
    module_name: Optional[str] = None


@dataclass(frozen=True)
class TenantContext:
    """Tenant scope of one request, propagated to every collaborator."""
    tenant_id: str
    token: Optional[str] = None
    okapi_url: Optional[str] = None

    def headers(self) -> Dict[str, str]:
        """Headers carried on outbound calls."""
        headers = {"x-okapi-tenant": self.tenant_id}
        if self.token:
            headers["x-okapi-token"] = self.token
        if self.okapi_url:
            headers["x-okapi-url"] = self.okapi_url
        return headers


@dataclass(frozen=True)
class RuleOutcome:
    """Result of evaluating one rule."""
    rule: Rule
    satisfied: bool
    diagnostic: Optional[str] = None


@dataclass(frozen=True)
class Verdict:
    """Overall validity and the message ids of violated rules, in rule order."""
    result: ValidationResult
    violated_message_ids: Tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return self.result is ValidationResult.VALID

    def to_dict(self) -> Dict[str, object]:
        return {
            "result": self.result.value,
            "messages": list(self.violated_message_ids)
        }


@dataclass
class RuleCollection:
    """A page of rules and the number of rules matching the query."""
    rules: List[Rule] = field(default_factory=list)
    total_records: int = 0


class PasswordValidationRequest(BaseModel):
    """Request model for password validation."""
    user_id: str = Field(..., description="User ID")
    password: str = Field(..., description="Candidate password")


class PasswordValidationResponse(BaseModel):
    """Response model for password validation."""
    result: ValidationResult = Field(..., description="Overall verdict")
    messages: List[str] = Field(default_factory=list, description="Message ids of violated rules")


class RuleCreateRequest(BaseModel):
    """Request model for creating a rule."""
    name: str = Field(..., description="Rule name")
    description: Optional[str] = Field(None, description="Rule description")
    kind: RuleKind = Field(..., description="Rule kind")
    strength: RuleStrength = Field(RuleStrength.STRONG, description="Validation strength")
    enabled: bool = Field(True, description="Whether rule is enabled")
    order: int = Field(0, description="Evaluation order")
    pattern: Optional[str] = Field(None, description="Regular expression for pattern rules")
    delegation_target: Optional[str] = Field(None, description="Module endpoint for programmatic rules")
    message_id: str = Field(..., description="Message id reported on failure")
    module_name: Optional[str] = Field(None, description="Owning module")


class RuleUpdateRequest(RuleCreateRequest):
    """Request model for replacing a rule."""


class RuleResponse(BaseModel):
    """Response model for rule operations."""
    rule_id: str
    name: str
    description: Optional[str]
    kind: RuleKind
    strength: RuleStrength
    enabled: bool
    order: int
    pattern: Optional[str]
    delegation_target: Optional[str]
    message_id: str
    module_name: Optional[str]

    @classmethod
    def from_rule(cls, rule: Rule) -> "RuleResponse":
        return cls(
            rule_id=rule.rule_id,
            name=rule.name,
            description=rule.description,
            kind=rule.kind,
            strength=rule.strength,
            enabled=rule.enabled,
            order=rule.order,
            pattern=rule.pattern,
            delegation_target=rule.delegation_target,
            message_id=rule.message_id,
            module_name=rule.module_name
        )


class RuleListResponse(BaseModel):
    """Response model for rule list."""
    rules: List[RuleResponse]
    total_records: int
