"""
HTTP identity provider

Talks to a GoTrue-compatible auth API for sessions and reads the admin
role claim from the ``user_roles`` REST resource.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from chiya.application.interfaces.identity_provider import (
    ADMIN_ROLE,
    AuthSession,
    IdentityProvider,
    RoleClaim,
)
from chiya.infrastructure.utilities.constants import HttpSettings
from chiya.infrastructure.utilities.exceptions import (
    ExternalServiceError,
    ValidationError,
)


class HttpIdentityProvider(IdentityProvider):
    """Identity provider backed by a hosted auth service"""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        client: Optional[httpx.AsyncClient] = None,
    ):
        if not base_url:
            raise ValueError("Identity provider URL is required")
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._client = client
        self._logger = logging.getLogger(self.__class__.__name__)

    async def sign_in(self, email: str, password: str) -> AuthSession:
        response = await self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        if response.status_code in (400, 401):
            raise ValidationError("Invalid email or password.", "credentials")
        data = self._json(response, "sign_in")
        user = data.get("user") or {}
        return AuthSession(
            user_id=str(user.get("id", "")),
            email=user.get("email", email),
            access_token=data.get("access_token", ""),
        )

    async def sign_up(self, email: str, password: str, redirect_url: str) -> None:
        response = await self._request(
            "POST",
            "/auth/v1/signup",
            params={"redirect_to": redirect_url} if redirect_url else None,
            json={"email": email, "password": password},
        )
        if response.status_code in (400, 422):
            message = self._error_message(response) or "Could not create the account."
            raise ValidationError(message, "email")
        self._json(response, "sign_up")
        self._logger.info("📝 SIGNUP REQUESTED: %s", email)

    async def get_role_claim(self, session: AuthSession) -> Optional[RoleClaim]:
        response = await self._request(
            "GET",
            "/rest/v1/user_roles",
            params={
                "user_id": f"eq.{session.user_id}",
                "role": f"eq.{ADMIN_ROLE}",
                "select": "role,shop_id",
            },
            token=session.access_token,
        )
        rows = self._json(response, "get_role_claim")
        if not rows:
            return None
        row = rows[0]
        return RoleClaim(role=row.get("role", ""), shop_id=row.get("shop_id"))

    async def sign_out(self, session: AuthSession) -> None:
        response = await self._request(
            "POST", "/auth/v1/logout", token=session.access_token
        )
        if response.status_code >= 400 and response.status_code != 401:
            raise ExternalServiceError(
                f"Sign-out failed with HTTP {response.status_code}", "identity"
            )

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        token: Optional[str] = None,
    ) -> httpx.Response:
        headers = {"apikey": self._api_key}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        url = f"{self._base_url}{path}"
        try:
            if self._client is not None:
                return await self._client.request(
                    method, url, params=params, json=json, headers=headers
                )
            async with httpx.AsyncClient(
                timeout=HttpSettings.REQUEST_TIMEOUT_SECONDS
            ) as client:
                return await client.request(
                    method, url, params=params, json=json, headers=headers
                )
        except httpx.HTTPError as e:
            self._logger.error("💥 IDENTITY REQUEST FAILED: %s %s: %s", method, path, e)
            raise ExternalServiceError(f"Identity request failed: {e}", "identity") from e

    def _json(self, response: httpx.Response, operation: str) -> Any:
        try:
            response.raise_for_status()
            return response.json() if response.content else {}
        except (httpx.HTTPStatusError, ValueError) as e:
            raise ExternalServiceError(
                f"Identity {operation} failed: {e}", "identity"
            ) from e

    @staticmethod
    def _error_message(response: httpx.Response) -> Optional[str]:
        try:
            data = response.json()
        except ValueError:
            return None
        return data.get("msg") or data.get("error_description") or data.get("message")
