"""
Identity provider interface

The provider authenticates principals and supplies a role claim; the
application trusts that claim as-is.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class AuthSession:
    """An authenticated session returned by the provider"""

    user_id: str
    email: str
    access_token: str


@dataclass(frozen=True)
class RoleClaim:
    """Role granted to a user, scoped to the shop it administers"""

    role: str
    shop_id: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE and bool(self.shop_id)


class IdentityProvider(ABC):
    """Authentication and role lookup"""

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> AuthSession:
        """Authenticate with email and password"""

    @abstractmethod
    async def sign_up(self, email: str, password: str, redirect_url: str) -> None:
        """Register a new account (role assignment happens out of band)"""

    @abstractmethod
    async def get_role_claim(self, session: AuthSession) -> Optional[RoleClaim]:
        """Return the admin role claim for the session's user, if any"""

    @abstractmethod
    async def sign_out(self, session: AuthSession) -> None:
        """Invalidate the session"""
