"""snapcraft.yaml lookups against the GitHub Contents API.

Snaps that do not build automatically on push still need their
snapcraft.yaml read before a build is requested, so that the cached
snapcraft data for the repository is repopulated right after the webhook
has invalidated it.
"""

import base64
import json
import logging
from typing import Any, Optional

import httpx
import yaml

from buildhook.core.config import Settings
from buildhook.core.exceptions import ExternalServiceError
from buildhook.github.urls import repository_url, snapcraft_yaml_cache_id

logger = logging.getLogger(__name__)

# Checked in order; the first one that exists wins.
SNAPCRAFT_YAML_PATHS = ["snap/snapcraft.yaml", "snapcraft.yaml", ".snapcraft.yaml"]


class SnapcraftYamlClient:
    """Fetches, parses and caches a repository's snapcraft.yaml."""

    def __init__(self, settings: Settings, cache):
        self._api_url = settings.github_api_url.rstrip("/")
        self._token = settings.github_auth_token
        self._timeout = settings.http_timeout
        self._ttl = settings.snapcraft_yaml_cache_ttl
        self._cache = cache

    async def refresh_snapcraft_yaml(self, owner: str, name: str) -> dict[str, Any]:
        """Read snapcraft.yaml for `owner/name` and store it in the cache.

        Raises:
            ExternalServiceError: No snapcraft.yaml in the repository, or
                the file is not a YAML mapping.
            httpx.HTTPStatusError: GitHub answered with an error status.
        """
        content = None
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            for path in SNAPCRAFT_YAML_PATHS:
                content = await self._get_file(client, owner, name, path)
                if content is not None:
                    break

        if content is None:
            raise ExternalServiceError(
                "github", f"Missing snapcraft.yaml in {owner}/{name}"
            )

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise ExternalServiceError(
                "github", f"Invalid snapcraft.yaml in {owner}/{name}: {exc}"
            ) from exc
        if not isinstance(data, dict):
            raise ExternalServiceError(
                "github", f"Invalid snapcraft.yaml in {owner}/{name}"
            )

        cache_id = snapcraft_yaml_cache_id(repository_url(owner, name))
        await self._cache.set(cache_id, json.dumps(data, default=str), ex=self._ttl)
        logger.debug("Cached snapcraft.yaml for %s/%s (name=%s)", owner, name, data.get("name"))
        return data

    async def _get_file(
        self, client: httpx.AsyncClient, owner: str, name: str, path: str
    ) -> Optional[str]:
        """GET /repos/{owner}/{name}/contents/{path}; None on 404."""
        response = await client.get(
            f"{self._api_url}/repos/{owner}/{name}/contents/{path}",
            headers=self._headers(),
        )
        if response.status_code == 404:
            return None
        response.raise_for_status()
        data = response.json()
        return base64.b64decode(data["content"].replace("\n", "")).decode(
            "utf-8", errors="replace"
        )

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers
