"""Configuration file loading for package-repository connections.

The file is YAML with one optional section per ecosystem::

    maven:
      repositories: ["https://repo1.maven.org/maven2"]
      dependencies: ["junit:junit:4.13.2"]
    npm:
      registry: "https://registry.npmjs.org/"
      dependencies: ["left-pad@1.3.0"]
    python:
      urls: ["https://pypi.org/pypi/"]
      dependencies: ["requests==2.31.0"]
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

from constants import Constants
from common.errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass
class MavenConnection:
    """Maven repositories and configured JVM dependencies."""
    repositories: List[str] = field(default_factory=lambda: [Constants.REGISTRY_URL_MAVEN])
    dependencies: List[str] = field(default_factory=list)
    jdk_source_url: Optional[str] = None


@dataclass
class NpmConnection:
    """npm registry and configured npm dependencies."""
    registry: str = Constants.REGISTRY_URL_NPM
    credentials: Optional[str] = None
    dependencies: List[str] = field(default_factory=list)


@dataclass
class PythonConnection:
    """PyPI JSON API endpoints and configured Python dependencies."""
    urls: List[str] = field(default_factory=lambda: [Constants.REGISTRY_URL_PYPI])
    dependencies: List[str] = field(default_factory=list)


@dataclass
class SyncConfig:
    """Top-level configuration."""
    maven: MavenConnection = field(default_factory=MavenConnection)
    npm: NpmConnection = field(default_factory=NpmConnection)
    python: PythonConnection = field(default_factory=PythonConnection)


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"config section {key!r} must be a mapping")
    return value


def _string_list(section: Dict[str, Any], key: str, where: str, default: Optional[List[str]] = None) -> List[str]:
    value = section.get(key)
    if value is None:
        return list(default or [])
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{where}.{key} must be a list of strings")
    return list(value)


def _optional_string(section: Dict[str, Any], key: str, where: str) -> Optional[str]:
    value = section.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"{where}.{key} must be a string")
    return value


def config_from_dict(data: Dict[str, Any]) -> SyncConfig:
    """Build a SyncConfig from an already-parsed mapping."""
    if not isinstance(data, dict):
        raise ConfigError("configuration must be a mapping")

    maven = _section(data, "maven")
    npm = _section(data, "npm")
    python = _section(data, "python")

    npm_credentials = os.environ.get(Constants.ENV_NPM_TOKEN) or _optional_string(npm, "credentials", "npm")

    return SyncConfig(
        maven=MavenConnection(
            repositories=_string_list(maven, "repositories", "maven", [Constants.REGISTRY_URL_MAVEN]),
            dependencies=_string_list(maven, "dependencies", "maven"),
            jdk_source_url=_optional_string(maven, "jdk_source_url", "maven"),
        ),
        npm=NpmConnection(
            registry=_optional_string(npm, "registry", "npm") or Constants.REGISTRY_URL_NPM,
            credentials=npm_credentials,
            dependencies=_string_list(npm, "dependencies", "npm"),
        ),
        python=PythonConnection(
            urls=_string_list(python, "urls", "python", [Constants.REGISTRY_URL_PYPI]),
            dependencies=_string_list(python, "dependencies", "python"),
        ),
    )


def load_config(config_path: Optional[str] = None) -> SyncConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML file; None yields the defaults.

    Returns:
        SyncConfig populated from the file.
    """
    if not config_path:
        return config_from_dict({})

    if not os.path.isfile(config_path):
        raise ConfigError(f"config file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"failed to read config file {config_path}: {exc}") from exc

    config = config_from_dict(data or {})
    logger.info("Loaded config from: %s", config_path)
    return config
