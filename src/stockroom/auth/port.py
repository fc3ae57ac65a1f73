"""Authenticator port: resolves a bearer token to the acting principal.

Token issuance lives outside this service; adapters only verify.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class Role(Enum):
    OWNER = "owner"
    ADMIN = "admin"
    STAFF = "staff"


MANAGER_ROLES = frozenset({Role.OWNER.value, Role.ADMIN.value})


@dataclass(frozen=True)
class Principal:
    id: str
    role: str

    @property
    def can_manage(self) -> bool:
        return self.role in MANAGER_ROLES


class AuthenticatorPort(ABC):
    """Abstract interface for authenticator adapters."""

    @abstractmethod
    def authenticate(self, token: str) -> Principal | None:
        """Return the principal for `token`, or None when it is missing, invalid or expired."""
        ...
