"""
Workspace configuration for the REST client.

A ``Config`` holds the workspace host URL and a personal access token. It is
normally loaded once at startup with ``Config.from_env()`` and then shared,
read-only, by every session.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Union

from dotenv import dotenv_values

from databricks.rest.exc import ConfigurationError

logger = logging.getLogger(__name__)

HOST_ENV_VAR = "DATABRICKS_HOST"
TOKEN_ENV_VAR = "DATABRICKS_TOKEN"
DEFAULT_ENV_FILE = ".env"


def normalize_host_with_protocol(host: str) -> str:
    """
    Normalize a workspace host by ensuring it has a protocol and removing trailing slashes.

    Examples:
        normalize_host_with_protocol("adb-123.azuredatabricks.net") -> "https://adb-123.azuredatabricks.net"
        normalize_host_with_protocol("https://adb-123.azuredatabricks.net/") -> "https://adb-123.azuredatabricks.net"
    """
    host = host.strip().rstrip("/")

    if not host.startswith("https://") and not host.startswith("http://"):
        host = f"https://{host}"

    return host


@dataclass(frozen=True)
class Config:
    """Immutable Databricks workspace connection config."""

    host: str
    token: str = field(repr=False)

    def __post_init__(self):
        if not self.host or not str(self.host).strip():
            raise ConfigurationError(f"{HOST_ENV_VAR} must be set to a non-empty value")
        if not self.token or not str(self.token).strip():
            raise ConfigurationError(f"{TOKEN_ENV_VAR} must be set to a non-empty value")

    @property
    def base_url(self) -> str:
        """Host with a protocol prefix and no trailing slash."""
        return normalize_host_with_protocol(self.host)

    @classmethod
    def from_env(
        cls,
        env_file: Optional[Union[str, Path]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "Config":
        """
        Read host and token from the process environment.

        Values missing from the environment are looked up in a dotenv file:
        ``env_file`` when given (it must exist), otherwise ``.env`` in the
        current working directory if there is one.

        Args:
            env_file: Optional path to a dotenv override file
            environ: Mapping to read instead of ``os.environ``

        Raises:
            ConfigurationError: If either value is absent or empty
        """
        environ = os.environ if environ is None else environ

        file_values: Mapping[str, Optional[str]] = {}
        if env_file is not None:
            path = Path(env_file)
            if not path.is_file():
                raise ConfigurationError(
                    f"Environment file not found: {path}", context={"path": str(path)}
                )
            file_values = dotenv_values(path)
        elif Path(DEFAULT_ENV_FILE).is_file():
            logger.debug("Loading Databricks settings from %s", DEFAULT_ENV_FILE)
            file_values = dotenv_values(DEFAULT_ENV_FILE)

        def _lookup(name: str) -> Optional[str]:
            value = environ.get(name)
            if value:
                return value
            return file_values.get(name)

        host = _lookup(HOST_ENV_VAR)
        token = _lookup(TOKEN_ENV_VAR)

        if not host:
            raise ConfigurationError(f"{HOST_ENV_VAR} must be set in the environment")
        if not token:
            raise ConfigurationError(f"{TOKEN_ENV_VAR} must be set in the environment")

        return cls(host=host, token=token)
