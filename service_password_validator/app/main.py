"""
Password Validator service.
"""

from typing import Optional

from fastapi import Body, Header, Query

from shared.base_service import BaseService
from shared.config import ServiceConfig
from shared.errors import InvalidInputError, RuleNotFoundError
from shared.logging import set_user_context

from .engine import (
    ValidationOrchestrator, RegexRuleEvaluator, ProgrammaticRuleDispatcher, ResultAggregator
)
from .rules.defaults import default_rules
from .rules.registry import InMemoryRuleRegistry
from .rules.models import (
    Rule, RuleKind, TenantContext,
    PasswordValidationRequest, PasswordValidationResponse,
    RuleCreateRequest, RuleUpdateRequest, RuleResponse, RuleListResponse
)
from .users.client import IdentityResolver


class PasswordValidatorService(BaseService):
    """Password validator service implementation."""

    def __init__(self, config: Optional[ServiceConfig] = None):
        super().__init__("password_validator", 8081, config=config)

        self.registry = InMemoryRuleRegistry(
            default_rules=default_rules if self.config.load_default_rules else None
        )
        self.orchestrator = ValidationOrchestrator(
            rule_source=self.registry,
            identity_resolver=IdentityResolver(timeout=self.config.identity_timeout_seconds),
            regex_evaluator=RegexRuleEvaluator(),
            dispatcher=ProgrammaticRuleDispatcher(
                timeout=self.config.module_timeout_seconds,
                metrics=self.metrics
            ),
            aggregator=ResultAggregator(
                include_advisory_messages=self.config.include_advisory_messages
            ),
            user_name_placeholder=self.config.user_name_placeholder,
            metrics=self.metrics
        )

        self._setup_validator_routes()

    def _tenant_context(
        self,
        tenant: Optional[str],
        token: Optional[str],
        okapi_url: Optional[str]
    ) -> TenantContext:
        if not tenant:
            raise InvalidInputError("Missing x-okapi-tenant header")
        set_user_context(tenant_id=tenant)
        return TenantContext(
            tenant_id=tenant,
            token=token,
            okapi_url=okapi_url or self.config.okapi_url
        )

    def _setup_validator_routes(self):
        """Set up validation and rule registry routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "password_validator",
                "message": "Password Validator Service",
                "version": "1.0.0",
                "capabilities": ["validation_engine", "rule_registry"]
            }

        @self.app.post("/password/validate", response_model=PasswordValidationResponse)
        async def validate_password(
            request: PasswordValidationRequest,
            x_okapi_tenant: Optional[str] = Header(None),
            x_okapi_token: Optional[str] = Header(None),
            x_okapi_url: Optional[str] = Header(None)
        ):
            """Validate a candidate password against the tenant's rules."""
            context = self._tenant_context(x_okapi_tenant, x_okapi_token, x_okapi_url)
            set_user_context(user_id=request.user_id)

            verdict = await self.orchestrator.validate_password(
                request.user_id, request.password, context
            )
            return PasswordValidationResponse(
                result=verdict.result,
                messages=list(verdict.violated_message_ids)
            )

        @self.app.get("/tenant/rules", response_model=RuleListResponse)
        async def get_rules(
            kind: Optional[RuleKind] = Query(None, description="Filter by rule kind"),
            enabled: Optional[bool] = Query(None, description="Filter by state"),
            limit: int = Query(10, ge=1, le=1000, description="Items per page"),
            offset: int = Query(0, ge=0, description="Items to skip"),
            x_okapi_tenant: Optional[str] = Header(None)
        ):
            """List tenant rules."""
            context = self._tenant_context(x_okapi_tenant, None, None)
            collection = self.registry.list_rules(
                context.tenant_id, kind=kind, enabled=enabled, limit=limit, offset=offset
            )
            return RuleListResponse(
                rules=[RuleResponse.from_rule(rule) for rule in collection.rules],
                total_records=collection.total_records
            )

        @self.app.post("/tenant/rules", response_model=RuleResponse, status_code=201)
        async def create_rule(
            request: RuleCreateRequest = Body(...),
            x_okapi_tenant: Optional[str] = Header(None)
        ):
            """Create a tenant rule."""
            context = self._tenant_context(x_okapi_tenant, None, None)
            rule = self.registry.create_rule(context.tenant_id, self._to_rule("", request))
            return RuleResponse.from_rule(rule)

        @self.app.get("/tenant/rules/{rule_id}", response_model=RuleResponse)
        async def get_rule(rule_id: str, x_okapi_tenant: Optional[str] = Header(None)):
            """Get a tenant rule by id."""
            context = self._tenant_context(x_okapi_tenant, None, None)
            return RuleResponse.from_rule(self.registry.get_rule(context.tenant_id, rule_id))

        @self.app.put("/tenant/rules/{rule_id}", response_model=RuleResponse)
        async def update_rule(
            rule_id: str,
            request: RuleUpdateRequest = Body(...),
            x_okapi_tenant: Optional[str] = Header(None)
        ):
            """Replace a tenant rule."""
            context = self._tenant_context(x_okapi_tenant, None, None)
            updated = self.registry.update_rule(context.tenant_id, self._to_rule(rule_id, request))
            if updated is None:
                raise RuleNotFoundError(rule_id)
            return RuleResponse.from_rule(updated)

    @staticmethod
    def _to_rule(rule_id: str, request: RuleCreateRequest) -> Rule:
        return Rule(
            rule_id=rule_id,
            name=request.name,
            description=request.description,
            kind=request.kind,
            strength=request.strength,
            enabled=request.enabled,
            order=request.order,
            pattern=request.pattern,
            delegation_target=request.delegation_target,
            message_id=request.message_id,
            module_name=request.module_name
        )


def create_app(config: Optional[ServiceConfig] = None):
    """Create password validator service application."""
    service = PasswordValidatorService(config=config)
    return service.app


if __name__ == "__main__":
    service = PasswordValidatorService()
    service.run()
