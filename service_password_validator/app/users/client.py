"""
Identity lookup client for the Password Validator service.
"""

from typing import Any, Dict

import httpx

from shared.logging import get_logger
from shared.errors import (
    ExternalServiceError, UserLookupError, MalformedResponseError,
    UserNotFoundError, AmbiguousUserError
)
from ..rules.models import TenantContext

USERS_FIELD = "users"
TOTAL_RECORDS_FIELD = "totalRecords"
USERNAME_FIELD = "username"

MISSING_FIELDS_MESSAGE = (
    f"Error, missing field(s) '{TOTAL_RECORDS_FIELD}' and/or '{USERS_FIELD}' in user response object"
)


class IdentityResolver:
    """Resolves a user id to a username through the users endpoint."""

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout
        self.logger = get_logger("password_validator.users.client")

    async def resolve(self, user_id: str, tenant_context: TenantContext) -> str:
        """Return the username of the single user with ``user_id``."""
        if not tenant_context.okapi_url:
            raise ExternalServiceError("users", "No users endpoint configured")

        url = f"{tenant_context.okapi_url.rstrip('/')}/users"

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(
                    url,
                    params={"query": f"id=={user_id}"},
                    headers=tenant_context.headers()
                )
        except httpx.TimeoutException:
            self.logger.error("Users service timeout", user_id=user_id)
            raise ExternalServiceError("users", "Users service timeout", details={"user_id": user_id})
        except httpx.HTTPError as e:
            self.logger.error("Users service request error", user_id=user_id, error=str(e))
            raise ExternalServiceError("users", "Users service unavailable", details={"user_id": user_id})

        if response.status_code != 200:
            self.logger.error(
                "Users service error",
                user_id=user_id,
                status_code=response.status_code
            )
            raise UserLookupError(user_id, details={"status_code": response.status_code})

        try:
            body = response.json()
        except ValueError:
            raise MalformedResponseError(MISSING_FIELDS_MESSAGE, details={"user_id": user_id})

        return self._extract_username(user_id, body)

    def _extract_username(self, user_id: str, body: Any) -> str:
        if not isinstance(body, dict) or USERS_FIELD not in body or TOTAL_RECORDS_FIELD not in body:
            self.logger.error("Malformed users response", user_id=user_id)
            raise MalformedResponseError(
                MISSING_FIELDS_MESSAGE,
                details={"expected_fields": [TOTAL_RECORDS_FIELD, USERS_FIELD]}
            )

        users = body[USERS_FIELD] or []
        total_records = body[TOTAL_RECORDS_FIELD] or 0
        if not isinstance(users, list) or not isinstance(total_records, int):
            raise MalformedResponseError(
                MISSING_FIELDS_MESSAGE,
                details={"expected_fields": [TOTAL_RECORDS_FIELD, USERS_FIELD]}
            )

        if total_records == 0 or not users:
            raise UserNotFoundError(user_id)

        if total_records > 1 or len(users) > 1:
            raise AmbiguousUserError(user_id, max(total_records, len(users)))

        user: Dict[str, Any] = users[0]
        username = user.get(USERNAME_FIELD) if isinstance(user, dict) else None
        if not username:
            raise MalformedResponseError(
                f"Error, missing field '{USERNAME_FIELD}' in user record",
                details={"user_id": user_id}
            )

        return username
