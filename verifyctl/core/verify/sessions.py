"""Tenant session value threaded through every resource operation."""
from __future__ import annotations
from dataclasses import dataclass


@dataclass
class Session:
    """Authenticated context for one tenant.

    Attributes:
        tenant: Tenant hostname (e.g. "t.example.com")
        token: Bearer token
        is_user: True for interactive user logins, False for API clients
    """
    tenant: str
    token: str
    is_user: bool = False

    def merge(self, other: "Session") -> None:
        """Overwrite this session in place with another one's values."""
        self.tenant = other.tenant
        self.token = other.token
        self.is_user = other.is_user

    def to_dict(self) -> dict:
        return {"tenant": self.tenant, "token": self.token, "isUser": self.is_user}

    @classmethod
    def from_dict(cls, data: dict) -> "Session":
        return cls(
            tenant=str(data.get("tenant") or ""),
            token=str(data.get("token") or ""),
            is_user=bool(data.get("isUser", False)),
        )

    def __repr__(self) -> str:
        # Keep tokens out of logs and tracebacks.
        return f"Session(tenant={self.tenant!r}, is_user={self.is_user!r})"
