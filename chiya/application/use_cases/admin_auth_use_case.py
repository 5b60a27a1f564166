"""
Admin Auth Use Case

Login, signup and logout for shop admins. The identity provider's role
claim is trusted as-is; a login without an admin claim is signed out
again immediately.
"""

import logging

from chiya.application.dtos.shop_dtos import AdminPrincipal, LoginResponse
from chiya.application.interfaces.identity_provider import AuthSession, IdentityProvider
from chiya.infrastructure.utilities.exceptions import (
    AuthorizationError,
    ChiyaError,
    ValidationError,
)


class AdminAuthUseCase:
    """Use case for admin session management"""

    def __init__(self, identity_provider: IdentityProvider):
        self._identity_provider = identity_provider
        self._logger = logging.getLogger(self.__class__.__name__)

    async def login(self, email: str, password: str) -> LoginResponse:
        self._logger.info("🔐 ADMIN LOGIN: %s", email)
        session = None
        try:
            self._require_credentials(email, password)
            session = await self._identity_provider.sign_in(email.strip(), password)

            claim = await self._identity_provider.get_role_claim(session)
            if claim is None or not claim.is_admin:
                raise AuthorizationError(f"User {session.user_id} has no admin role")

            principal = AdminPrincipal(
                user_id=session.user_id,
                email=session.email,
                shop_id=claim.shop_id,
                access_token=session.access_token,
            )
            self._logger.info(
                "✅ ADMIN LOGGED IN: %s for shop %s", principal.email, principal.shop_id
            )
            return LoginResponse(success=True, principal=principal)

        except AuthorizationError as e:
            self._logger.warning("🚫 NO ADMIN ACCESS: %s", e)
            await self._force_sign_out(session)
            return LoginResponse(success=False, error_message=e.user_message)
        except ChiyaError as e:
            self._logger.error("💥 LOGIN ERROR: %s", e)
            await self._force_sign_out(session)
            return LoginResponse(success=False, error_message=e.user_message)

    async def signup(self, email: str, password: str, redirect_url: str) -> LoginResponse:
        """Register an account; the admin role is granted separately"""
        self._logger.info("📝 ADMIN SIGNUP: %s", email)
        try:
            self._require_credentials(email, password)
            await self._identity_provider.sign_up(email.strip(), password, redirect_url)
            return LoginResponse(success=True)
        except ChiyaError as e:
            self._logger.error("💥 SIGNUP ERROR: %s", e)
            return LoginResponse(success=False, error_message=e.user_message)

    async def logout(self, principal: AdminPrincipal) -> None:
        self._logger.info("👋 ADMIN LOGOUT: %s", principal.email)
        session = AuthSession(
            user_id=principal.user_id,
            email=principal.email,
            access_token=principal.access_token,
        )
        try:
            await self._identity_provider.sign_out(session)
        except ChiyaError as e:
            self._logger.warning("⚠️ Sign-out failed: %s", e)

    async def _force_sign_out(self, session: AuthSession | None) -> None:
        if session is None:
            return
        try:
            await self._identity_provider.sign_out(session)
        except ChiyaError as e:
            self._logger.warning("⚠️ Forced sign-out failed: %s", e)

    @staticmethod
    def _require_credentials(email: str, password: str) -> None:
        if not email or not email.strip():
            raise ValidationError("Please enter your email.", "email")
        if not password:
            raise ValidationError("Please enter your password.", "password")
