"""
Programmatic rule dispatch to external rule modules.
"""

import asyncio
from typing import Any, Optional

import httpx

from shared.logging import get_logger
from shared.metrics import MetricsCollector
from ..rules.models import TenantContext

VALID_RESULT = "valid"
INVALID_RESULT = "invalid"


class ProgrammaticRuleDispatcher:
    """Evaluates a delegated rule by calling the module that implements it.

    Every failure mode (transport error, timeout, non-200 status, unreadable
    body) resolves to ``False``: a rule that cannot be evaluated never passes.
    """

    def __init__(self, timeout: float = 10.0, metrics: Optional[MetricsCollector] = None):
        self.timeout = timeout
        self.metrics = metrics
        self.logger = get_logger("password_validator.dispatcher")

    async def evaluate(
        self,
        delegation_target: str,
        user_id: str,
        password: str,
        tenant_context: TenantContext
    ) -> bool:
        """Ask the module behind ``delegation_target`` whether the password is valid."""
        url = self._resolve_url(delegation_target, tenant_context)
        if url is None:
            self.logger.warning(
                "Cannot resolve rule module endpoint",
                delegation_target=delegation_target,
                tenant_id=tenant_context.tenant_id
            )
            return False

        payload = {"password": password, "userId": user_id}

        try:
            if self.metrics:
                with self.metrics.time_operation("module_dispatch_duration_seconds"):
                    response = await asyncio.wait_for(
                        self._post(url, payload, tenant_context), timeout=self.timeout
                    )
            else:
                response = await asyncio.wait_for(
                    self._post(url, payload, tenant_context), timeout=self.timeout
                )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            self.logger.warning("Rule module timeout", url=url, timeout=self.timeout)
            return False
        except httpx.HTTPError as e:
            self.logger.warning("Rule module request error", url=url, error=str(e))
            return False

        if response.status_code != 200:
            self.logger.warning(
                "Rule module error",
                url=url,
                status_code=response.status_code
            )
            return False

        try:
            body = response.json()
        except ValueError:
            self.logger.warning("Rule module returned non-JSON body", url=url)
            return False

        return self._interpret(body, url)

    async def _post(self, url: str, payload: dict, tenant_context: TenantContext) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(url, json=payload, headers=tenant_context.headers())

    def _resolve_url(self, delegation_target: str, tenant_context: TenantContext) -> Optional[str]:
        target = (delegation_target or "").strip()
        if not target:
            return None
        if target.startswith(("http://", "https://")):
            return target
        if not tenant_context.okapi_url:
            return None
        return f"{tenant_context.okapi_url.rstrip('/')}/{target.lstrip('/')}"

    def _interpret(self, body: Any, url: str) -> bool:
        if isinstance(body, dict):
            result = body.get("result")
            if isinstance(result, str) and result.lower() in (VALID_RESULT, INVALID_RESULT):
                return result.lower() == VALID_RESULT

            valid = body.get("valid")
            if isinstance(valid, bool):
                return valid

        self.logger.warning("Unrecognised rule module response", url=url)
        return False
