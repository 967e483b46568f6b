"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_CONFIG_DIR = "~/.verify"
CONFIG_FILE_NAME = "config"
LOG_FILE_NAME = "verifyctl.log"
DEFAULT_TIMEOUT = 30.0

logger = logging.getLogger(__name__)


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = Path("/run/secrets") / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                logger.debug("Loaded %s from /run/secrets", secret_name)
                return secret_value
        except OSError as e:
            logger.warning("Failed to read /run/secrets/%s: %s", secret_name, e)

    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            logger.debug("Loaded %s from environment", env_var)
            return secret_value

    return None


@dataclass
class CLISettings:
    """CLI configuration container."""
    config_dir: Path
    log_file: Path
    log_level: str = "INFO"
    request_timeout: float = DEFAULT_TIMEOUT

    @property
    def config_file(self) -> Path:
        """Session store location."""
        return self.config_dir / CONFIG_FILE_NAME

    def client_secret(self, explicit: Optional[str] = None) -> Optional[str]:
        """Resolve the API client secret used by ``login``.

        Priority:
        1. Value given on the command line
        2. Docker secrets: /run/secrets/verify_client_secret
        3. Environment variable: VERIFY_CLIENT_SECRET
        """
        if explicit:
            return explicit
        return _load_secret_from_file("verify_client_secret", "VERIFY_CLIENT_SECRET")


def _parse_timeout(raw: str) -> float:
    try:
        timeout = float(raw)
    except ValueError:
        raise ValueError(f"VERIFYCTL_TIMEOUT must be a number of seconds, got '{raw}'") from None
    if timeout <= 0:
        raise ValueError("VERIFYCTL_TIMEOUT must be greater than zero")
    return timeout


def load_settings() -> CLISettings:
    """Load CLI settings from the environment."""
    config_dir = Path(os.environ.get("VERIFYCTL_CONFIG_DIR") or DEFAULT_CONFIG_DIR).expanduser()
    log_file = Path(os.environ.get("VERIFYCTL_LOG_FILE") or config_dir / LOG_FILE_NAME).expanduser()

    log_level = os.environ.get("VERIFYCTL_LOG_LEVEL", "INFO").strip().upper() or "INFO"
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"VERIFYCTL_LOG_LEVEL '{log_level}' is not a logging level")

    request_timeout = _parse_timeout(os.environ.get("VERIFYCTL_TIMEOUT", str(DEFAULT_TIMEOUT)))

    return CLISettings(
        config_dir=config_dir,
        log_file=log_file,
        log_level=log_level,
        request_timeout=request_timeout,
    )
