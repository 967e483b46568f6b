"""Configuration module for the verifyctl CLI."""
from .settings import CLISettings, load_settings
from .cli_config import CLIConfig

__all__ = ["CLISettings", "load_settings", "CLIConfig"]
