"""Repository configuration and CLI overrides for runtime tunables.

Repositories come from a YAML (or JSON) file of the form::

    repositories:
      - name: PSGallery
        uri: https://www.powershellgallery.com/api/v2
        api_version: v2
      - name: Internal
        uri: https://nuget.example.com/api/v2
        username: build
        password: secret
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Optional, Tuple

import yaml

from constants import ApiVersion, Constants
from registry.models import RepositoryInfo

logger = logging.getLogger(__name__)


def apply_overrides(args) -> None:
    """Apply CLI overrides to Constants; never raises to avoid breaking the CLI."""
    try:
        if getattr(args, "TIMEOUT", None) is not None:
            Constants.REQUEST_TIMEOUT = int(args.TIMEOUT)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid --timeout value: %r", getattr(args, "TIMEOUT", None))


def _load_config_file(config_path: str) -> Dict[str, Any]:
    """Load a YAML or JSON mapping from ``config_path``; {} when unusable."""
    if not os.path.isfile(config_path):
        logger.warning("Config file not found: %s", config_path)
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            if config_path.endswith(".json"):
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        logger.error("Failed to load config: %s", e)
        return {}

    return data if isinstance(data, dict) else {}


def env_credential() -> Optional[Tuple[str, str]]:
    """Credential from GALLERYQUERY_USERNAME / GALLERYQUERY_PASSWORD, if both set."""
    username = os.environ.get(Constants.ENV_USERNAME)
    password = os.environ.get(Constants.ENV_PASSWORD)
    if username and password:
        return username, password
    return None


def _repository_from_entry(entry: Dict[str, Any]) -> Optional[RepositoryInfo]:
    name = str(entry.get("name") or "").strip()
    uri = str(entry.get("uri") or "").strip()
    if not name or not uri:
        logger.warning("Skipping repository entry without name/uri: %r", entry)
        return None

    api_value = str(entry.get("api_version") or ApiVersion.V2.value).lower()
    if api_value not in Constants.SUPPORTED_API_VERSIONS:
        logger.warning("Skipping repository %s with unknown api_version %r", name, api_value)
        return None

    credential = None
    if entry.get("username") and entry.get("password"):
        credential = (str(entry["username"]), str(entry["password"]))

    return RepositoryInfo(name=name, uri=uri, api_version=ApiVersion(api_value), credential=credential)


def load_repositories(config_path: Optional[str]) -> List[RepositoryInfo]:
    """Return configured repositories; the default gallery when none are configured."""
    repositories: List[RepositoryInfo] = []
    if config_path:
        for entry in _load_config_file(config_path).get("repositories") or []:
            if isinstance(entry, dict):
                repo = _repository_from_entry(entry)
                if repo is not None:
                    repositories.append(repo)

    if not repositories:
        repositories.append(
            RepositoryInfo(
                name=Constants.DEFAULT_REPOSITORY_NAME,
                uri=Constants.DEFAULT_REPOSITORY_URI,
                api_version=ApiVersion.V2,
            )
        )
    return repositories


def select_repository(
    repositories: List[RepositoryInfo],
    name: Optional[str] = None,
    uri: Optional[str] = None,
) -> Optional[RepositoryInfo]:
    """Pick a repository by name (case-insensitive), or build one from ``uri``.

    Environment credentials apply when the chosen repository has none.
    """
    if uri:
        repo = RepositoryInfo(name=name or uri, uri=uri, api_version=ApiVersion.V2)
    elif name:
        matches = [r for r in repositories if r.name.lower() == name.lower()]
        if not matches:
            return None
        repo = matches[0]
    else:
        repo = repositories[0]

    if repo.credential is None:
        credential = env_credential()
        if credential:
            repo = RepositoryInfo(repo.name, repo.uri, repo.api_version, credential)
    return repo
