"""verifyctl - command-line client for Verify tenants.

To use the resource access layer:
    from verifyctl.core.verify import VerifyClient, APIClientService

To use the session store:
    from verifyctl.config import CLIConfig, load_settings

The command-line entry point lives in scripts/cli.py.
"""

__version__ = "0.1.0"
