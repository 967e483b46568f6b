"""Session store persisted in the CLI config file.

The file is a single YAML document:

    apiVersion: "1.0"
    kind: Config
    tenant: t.example.com
    auth:
      - tenant: t.example.com
        token: ...
        isUser: false
"""
from __future__ import annotations
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from verifyctl.core.verify.exceptions import NoActiveSessionError
from verifyctl.core.verify.sessions import Session

API_VERSION = "1.0"
KIND = "Config"
FILE_MODE = 0o600


@dataclass
class CLIConfig:
    """Per-tenant sessions plus the current tenant pointer."""
    path: Optional[Path] = None
    api_version: str = API_VERSION
    kind: str = KIND
    current_tenant: str = ""
    auth: list[Session] = field(default_factory=list)

    def add_or_replace(self, session: Session) -> Session:
        """Replace the session for the same tenant in place, or append it.

        Returns:
            The stored session object
        """
        for existing in self.auth:
            if existing.tenant == session.tenant:
                existing.merge(session)
                return existing
        self.auth.append(session)
        return session

    def set_current_tenant(self, tenant: str) -> None:
        # Not validated here; current_session() reports a dangling pointer.
        self.current_tenant = tenant

    def current_session(self) -> Session:
        """Return the session for the current tenant.

        Raises:
            NoActiveSessionError: If no tenant is selected or it has no session
        """
        if self.current_tenant:
            for session in self.auth:
                if session.tenant == self.current_tenant:
                    return session
        raise NoActiveSessionError()

    def remove(self, tenant: str) -> bool:
        """Drop a tenant's session; clears the pointer if it was current."""
        before = len(self.auth)
        self.auth = [s for s in self.auth if s.tenant != tenant]
        if self.current_tenant == tenant:
            self.current_tenant = ""
        return len(self.auth) != before

    def to_dict(self) -> dict:
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "tenant": self.current_tenant,
            "auth": [s.to_dict() for s in self.auth],
        }

    @classmethod
    def load(cls, path: Path) -> "CLIConfig":
        """Load the store from ``path``; a missing file yields an empty store."""
        path = Path(path)
        config = cls(path=path)
        if not path.exists():
            # Created on the first persist().
            return config

        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Invalid config file {path}: expected a mapping")

        config.api_version = str(data.get("apiVersion") or API_VERSION)
        config.kind = str(data.get("kind") or KIND)
        config.current_tenant = str(data.get("tenant") or "")
        auth = data.get("auth") or []
        if not isinstance(auth, list):
            raise ValueError(f"Invalid config file {path}: 'auth' must be a list")
        for entry in auth:
            if isinstance(entry, dict):
                config.add_or_replace(Session.from_dict(entry))
        return config

    def persist(self) -> Path:
        """Write the whole store back, creating the directory when absent."""
        if self.path is None:
            raise ValueError("Config has no file path")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        content = yaml.safe_dump(self.to_dict(), sort_keys=False, default_flow_style=False)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
        # O_CREAT only applies the mode to new files.
        os.chmod(self.path, FILE_MODE)
        return self.path
