"""
CLI Configuration

Handles configuration loading from the per-user config file.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from enom_client.client import ClientConfig


# Default config locations
DEFAULT_CONFIG_PATHS = [
    Path.home() / ".enomconfig",
    Path.home() / ".enom" / "config.yaml",
]


@dataclass
class CLIConfig:
    """Settings read from the config file. Command-line flags take precedence."""
    username: Optional[str] = None
    password: Optional[str] = None
    test: bool = False
    proxyaddr: Optional[str] = None
    proxyport: Optional[int] = None
    proxyuser: Optional[str] = None
    proxypass: Optional[str] = None
    path: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: dict, path: Optional[Path] = None) -> "CLIConfig":
        """
        Create config from dictionary.

        Args:
            data: Configuration dictionary
            path: File the data was read from

        Returns:
            CLIConfig instance
        """
        if not isinstance(data, dict):
            raise ValueError(f"Invalid configuration in {path}: expected a mapping")

        proxyport = data.get("proxyport")
        return cls(
            username=_as_str(data.get("username")),
            password=_as_str(data.get("password")),
            test=bool(data.get("test", False)),
            proxyaddr=_as_str(data.get("proxyaddr")),
            proxyport=int(proxyport) if proxyport is not None else None,
            proxyuser=_as_str(data.get("proxyuser")),
            proxypass=_as_str(data.get("proxypass")),
            path=path,
        )

    @classmethod
    def from_file(cls, path: Path) -> "CLIConfig":
        """
        Load config from YAML file.

        Args:
            path: Path to config file

        Returns:
            CLIConfig instance
        """
        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {}, path)

    @classmethod
    def find_and_load(cls) -> Optional["CLIConfig"]:
        """
        Find and load config from default locations.

        Returns:
            CLIConfig instance or None if not found
        """
        for path in DEFAULT_CONFIG_PATHS:
            if path.exists():
                return cls.from_file(path)
        return None

    def to_client_config(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        test: bool = False,
        proxyaddr: Optional[str] = None,
        proxyport: Optional[int] = None,
        proxyuser: Optional[str] = None,
        proxypass: Optional[str] = None,
    ) -> ClientConfig:
        """Merge command-line values over file values."""
        return ClientConfig(
            username=username or self.username or os.environ.get("ENOM_USERNAME"),
            password=password or self.password or os.environ.get("ENOM_PASSWORD"),
            test=test or self.test,
            proxy_addr=proxyaddr or self.proxyaddr,
            proxy_port=proxyport or self.proxyport,
            proxy_user=proxyuser or self.proxyuser,
            proxy_pass=proxypass or self.proxypass,
        )


def _as_str(value) -> Optional[str]:
    """YAML may decode numeric passwords as ints."""
    if value is None:
        return None
    return str(value)
