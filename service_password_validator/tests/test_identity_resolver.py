"""
Unit tests for the identity lookup client.
"""

import json
import pytest
import httpx
from unittest.mock import AsyncMock, patch

from service_password_validator.app.users.client import IdentityResolver
from service_password_validator.app.rules.models import TenantContext
from shared.errors import (
    ExternalServiceError, UserLookupError, MalformedResponseError,
    UserNotFoundError, AmbiguousUserError
)

USER_ID = "db6ffb67-3160-43bf-8e2f-ecf9a420288b"
MISSING_FIELDS = "Error, missing field(s) 'totalRecords' and/or 'users' in user response object"


def users_response(status_code, body):
    return httpx.Response(
        status_code=status_code,
        content=json.dumps(body),
        request=httpx.Request("GET", "http://localhost:9130/users")
    )


class TestIdentityResolver:
    """Test cases for IdentityResolver."""

    @pytest.fixture
    def resolver(self):
        """Create IdentityResolver instance."""
        return IdentityResolver(timeout=1.0)

    @pytest.fixture
    def tenant_context(self):
        """Create tenant context."""
        return TenantContext(tenant_id="tenant", token="token", okapi_url="http://localhost:9130")

    @pytest.mark.asyncio
    async def test_resolve_success(self, resolver, tenant_context):
        """Test resolving a single user."""
        body = {
            "users": [{"username": "admin", "id": USER_ID, "active": True}],
            "totalRecords": 1
        }

        with patch('httpx.AsyncClient') as mock_client:
            get = AsyncMock(return_value=users_response(200, body))
            mock_client.return_value.__aenter__.return_value.get = get

            username = await resolver.resolve(USER_ID, tenant_context)

        assert username == "admin"
        args, kwargs = get.call_args
        assert args[0] == "http://localhost:9130/users"
        assert kwargs["params"] == {"query": f"id=={USER_ID}"}
        assert kwargs["headers"]["x-okapi-tenant"] == "tenant"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        {"user": [], "totalRecords": 1},
        {"users": [], "total": 1},
        {}
    ])
    async def test_missing_fields(self, resolver, tenant_context, body):
        """Test a response missing users and/or totalRecords."""
        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.get = AsyncMock(
                return_value=users_response(200, body)
            )

            with pytest.raises(MalformedResponseError) as exc_info:
                await resolver.resolve(USER_ID, tenant_context)

        assert exc_info.value.message == MISSING_FIELDS

    @pytest.mark.asyncio
    async def test_non_success_status(self, resolver, tenant_context):
        """Test a non-success status from the users service."""
        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.get = AsyncMock(
                return_value=users_response(400, {})
            )

            with pytest.raises(UserLookupError) as exc_info:
                await resolver.resolve(USER_ID, tenant_context)

        assert exc_info.value.message == f"Error getting user by user id : {USER_ID}"

    @pytest.mark.asyncio
    async def test_no_matching_user(self, resolver, tenant_context):
        """Test zero records."""
        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.get = AsyncMock(
                return_value=users_response(200, {"users": [], "totalRecords": 0})
            )

            with pytest.raises(UserNotFoundError):
                await resolver.resolve(USER_ID, tenant_context)

    @pytest.mark.asyncio
    async def test_multiple_matching_users(self, resolver, tenant_context):
        """Test an ambiguous answer."""
        body = {
            "users": [{"username": "a", "id": USER_ID}, {"username": "b", "id": USER_ID}],
            "totalRecords": 2
        }

        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.get = AsyncMock(
                return_value=users_response(200, body)
            )

            with pytest.raises(AmbiguousUserError) as exc_info:
                await resolver.resolve(USER_ID, tenant_context)

        assert exc_info.value.matches == 2

    @pytest.mark.asyncio
    async def test_user_without_username(self, resolver, tenant_context):
        """Test a user record lacking the username."""
        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.get = AsyncMock(
                return_value=users_response(200, {"users": [{"id": USER_ID}], "totalRecords": 1})
            )

            with pytest.raises(MalformedResponseError):
                await resolver.resolve(USER_ID, tenant_context)

    @pytest.mark.asyncio
    async def test_transport_error(self, resolver, tenant_context):
        """Test an unreachable users service."""
        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.get = AsyncMock(
                side_effect=httpx.ConnectError("Connection refused")
            )

            with pytest.raises(ExternalServiceError):
                await resolver.resolve(USER_ID, tenant_context)

    @pytest.mark.asyncio
    async def test_timeout(self, resolver, tenant_context):
        """Test a users service timeout."""
        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.get = AsyncMock(
                side_effect=httpx.TimeoutException("Request timeout")
            )

            with pytest.raises(ExternalServiceError) as exc_info:
                await resolver.resolve(USER_ID, tenant_context)

        assert "timeout" in exc_info.value.message
