"""
Unit tests for the programmatic rule dispatcher.
"""

import asyncio
import json
import pytest
import httpx
from unittest.mock import AsyncMock, patch

from service_password_validator.app.engine.dispatcher import ProgrammaticRuleDispatcher
from service_password_validator.app.rules.models import TenantContext

MODULE_URL = "http://localhost:9130/password/check"


def module_response(status_code, body):
    content = body if isinstance(body, str) else json.dumps(body)
    return httpx.Response(
        status_code=status_code,
        content=content,
        request=httpx.Request("POST", MODULE_URL)
    )


class TestProgrammaticRuleDispatcher:
    """Test cases for ProgrammaticRuleDispatcher."""

    @pytest.fixture
    def dispatcher(self):
        """Create ProgrammaticRuleDispatcher instance."""
        return ProgrammaticRuleDispatcher(timeout=0.5)

    @pytest.fixture
    def tenant_context(self):
        """Create tenant context."""
        return TenantContext(tenant_id="tenant", token="token", okapi_url="http://localhost:9130")

    @pytest.mark.asyncio
    async def test_valid_result(self, dispatcher, tenant_context):
        """Test a module reporting the password as valid."""
        with patch('httpx.AsyncClient') as mock_client:
            post = AsyncMock(return_value=module_response(200, {"result": "valid"}))
            mock_client.return_value.__aenter__.return_value.post = post

            satisfied = await dispatcher.evaluate("/password/check", "user-1", "P@sw0rd1", tenant_context)

        assert satisfied is True
        args, kwargs = post.call_args
        assert args[0] == MODULE_URL
        assert kwargs["json"] == {"password": "P@sw0rd1", "userId": "user-1"}
        assert kwargs["headers"]["x-okapi-tenant"] == "tenant"
        assert kwargs["headers"]["x-okapi-token"] == "token"

    @pytest.mark.asyncio
    async def test_invalid_result(self, dispatcher, tenant_context):
        """Test a module reporting the password as invalid."""
        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(
                return_value=module_response(200, {"result": "invalid"})
            )

            satisfied = await dispatcher.evaluate("/password/check", "user-1", "secret", tenant_context)

        assert satisfied is False

    @pytest.mark.asyncio
    async def test_boolean_valid_field(self, dispatcher, tenant_context):
        """Test a module answering with a boolean flag."""
        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(
                return_value=module_response(200, {"valid": True})
            )

            satisfied = await dispatcher.evaluate("/password/check", "user-1", "secret", tenant_context)

        assert satisfied is True

    @pytest.mark.asyncio
    async def test_absolute_target_is_used_as_is(self, dispatcher, tenant_context):
        """Test that an absolute target bypasses the gateway URL."""
        with patch('httpx.AsyncClient') as mock_client:
            post = AsyncMock(return_value=module_response(200, {"result": "valid"}))
            mock_client.return_value.__aenter__.return_value.post = post

            await dispatcher.evaluate("https://rules.example.com/check", "user-1", "secret", tenant_context)

        assert post.call_args[0][0] == "https://rules.example.com/check"

    @pytest.mark.asyncio
    async def test_non_success_status_fails_closed(self, dispatcher, tenant_context):
        """Test that a module error counts as an unsatisfied rule."""
        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(
                return_value=module_response(500, {"result": "valid"})
            )

            satisfied = await dispatcher.evaluate("/password/check", "user-1", "secret", tenant_context)

        assert satisfied is False

    @pytest.mark.asyncio
    async def test_transport_error_fails_closed(self, dispatcher, tenant_context):
        """Test that a connection failure counts as an unsatisfied rule."""
        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(
                side_effect=httpx.ConnectError("Connection refused")
            )

            satisfied = await dispatcher.evaluate("/password/check", "user-1", "secret", tenant_context)

        assert satisfied is False

    @pytest.mark.asyncio
    async def test_timeout_fails_closed(self, tenant_context):
        """Test that a slow module is cut off and counts as unsatisfied."""
        dispatcher = ProgrammaticRuleDispatcher(timeout=0.05)

        async def slow_post(*args, **kwargs):
            await asyncio.sleep(1)
            return module_response(200, {"result": "valid"})

        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.post = slow_post

            satisfied = await dispatcher.evaluate("/password/check", "user-1", "secret", tenant_context)

        assert satisfied is False

    @pytest.mark.asyncio
    async def test_unreadable_body_fails_closed(self, dispatcher, tenant_context):
        """Test that a non-JSON body counts as unsatisfied."""
        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(
                return_value=module_response(200, "not json")
            )

            satisfied = await dispatcher.evaluate("/password/check", "user-1", "secret", tenant_context)

        assert satisfied is False

    @pytest.mark.asyncio
    async def test_unrecognised_body_fails_closed(self, dispatcher, tenant_context):
        """Test that an ambiguous answer counts as unsatisfied."""
        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(
                return_value=module_response(200, {"result": "maybe"})
            )

            satisfied = await dispatcher.evaluate("/password/check", "user-1", "secret", tenant_context)

        assert satisfied is False

    @pytest.mark.asyncio
    async def test_relative_target_without_gateway_fails_closed(self, dispatcher):
        """Test that an unresolvable target is never called and never passes."""
        context = TenantContext(tenant_id="tenant")

        with patch('httpx.AsyncClient') as mock_client:
            satisfied = await dispatcher.evaluate("/password/check", "user-1", "secret", context)

        assert satisfied is False
        mock_client.assert_not_called()
