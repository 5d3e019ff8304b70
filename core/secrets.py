"""
Environment Secrets Access

Reads settings and credentials for the inquiry service from the process
environment, with optional .env file support:
- .env.local / .env loading at first use
- Masking of sensitive values for logs
"""

import os
import re
import logging
from typing import Optional, Dict
from pathlib import Path

from dotenv import load_dotenv


logger = logging.getLogger(__name__)


class SecretManager:
    """
    Single access point for environment-provided secrets.

    Usage:
        from core.secrets import get_secret, mask_secret

        api_key = get_secret("MAILCHIMP_API_KEY")
        logger.info("key loaded: %s", mask_secret(api_key))
    """

    _instance: Optional["SecretManager"] = None
    _initialized: bool = False

    # Names that hold credentials and must never be logged in clear
    SECRET_PATTERNS = [
        r".*password.*",
        r".*secret.*",
        r".*api_key.*",
        r".*token.*",
    ]

    def __new__(cls) -> "SecretManager":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if SecretManager._initialized:
            return

        self._env_file_path: Optional[Path] = None
        self._load_env_file()

        SecretManager._initialized = True

    def _load_env_file(self, env_path: Optional[str] = None) -> bool:
        """
        Load variables from a .env file without overriding the environment.

        Args:
            env_path: Explicit path. If None, .env.local then .env in the
                      project root are tried.

        Returns:
            True if a file was loaded
        """
        if env_path:
            search_paths = [Path(env_path)]
        else:
            project_root = Path(__file__).parent.parent
            search_paths = [
                project_root / ".env.local",
                project_root / ".env",
            ]

        for path in search_paths:
            if path.exists():
                load_dotenv(path, override=False)
                self._env_file_path = path
                logger.info(f"Loaded environment from {path}")
                return True

        return False

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """
        Get a value from the environment.

        Values are not cached; the configuration layer reads them once at
        startup and keeps its own immutable copy.
        """
        value = os.environ.get(name)
        if value is None:
            return default
        return value

    def is_secret_name(self, name: str) -> bool:
        name_lower = name.lower()
        return any(re.match(pattern, name_lower) for pattern in self.SECRET_PATTERNS)

    def mask(self, value: Optional[str], visible_chars: int = 4) -> str:
        """
        Mask a secret value for safe logging.

        Returns:
            Masked string like "****abcd", or "<not set>" for empty values
        """
        if not value:
            return "<not set>"

        if len(value) <= visible_chars:
            return "*" * len(value)

        return "*" * (len(value) - visible_chars) + value[-visible_chars:]

    def describe(self, names) -> Dict[str, str]:
        """Snapshot of the given variables with secrets masked."""
        snapshot = {}
        for name in names:
            value = self.get(name)
            if self.is_secret_name(name):
                snapshot[name] = self.mask(value)
            else:
                snapshot[name] = value if value is not None else "<not set>"
        return snapshot

    def reload(self, env_path: Optional[str] = None) -> bool:
        return self._load_env_file(env_path)


# Global singleton instance
secrets_manager = SecretManager()


def get_secret(name: str, default: Optional[str] = None) -> Optional[str]:
    """
    Get a value from the environment.

    Example:
        prefix = get_secret("MAILCHIMP_SERVER_PREFIX", default="")
    """
    return secrets_manager.get(name, default)


def mask_secret(value: Optional[str], visible_chars: int = 4) -> str:
    return secrets_manager.mask(value, visible_chars)
