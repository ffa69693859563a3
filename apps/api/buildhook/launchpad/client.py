"""Launchpad API client for snap lookup and build requests.

Uses httpx for async HTTP calls against the Launchpad web service.
Requests are signed with OAuth 1.0 PLAINTEXT, which Launchpad accepts over
HTTPS, using the access token configured for the build service account.
"""

import logging
import time
import uuid
from typing import Optional

import httpx
from pydantic import BaseModel

from buildhook.core.config import Settings
from buildhook.core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


class Snap(BaseModel):
    """The subset of a Launchpad snap entry the build path needs."""

    self_link: str
    store_name: Optional[str] = None
    auto_build: bool = False
    git_repository_url: Optional[str] = None
    owner_link: Optional[str] = None


class LaunchpadClient:
    """Project registry and build queue, both backed by Launchpad."""

    def __init__(self, settings: Settings):
        self._api_url = settings.launchpad_api_url.rstrip("/")
        self._consumer_key = settings.launchpad_consumer_key
        self._access_token = settings.launchpad_access_token
        self._access_secret = settings.launchpad_access_secret
        self._username = settings.launchpad_username
        self._timeout = settings.http_timeout

    async def find_snap(self, repository_url: str) -> Snap:
        """Find the snap built from a GitHub repository.

        When a Launchpad username is configured, only snaps owned by that
        account count; otherwise the first match is used.

        Raises:
            ExternalServiceError: No snap matches the repository URL.
            httpx.HTTPStatusError: Launchpad answered with an error status.
        """
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.get(
                f"{self._api_url}/+snaps",
                headers=self._auth_headers(),
                params={"ws.op": "findByURL", "url": repository_url},
            )
            response.raise_for_status()
            entries = response.json().get("entries", [])

        for entry in entries:
            if self._username and not (entry.get("owner_link") or "").endswith(
                f"/~{self._username}"
            ):
                continue
            return Snap.model_validate(entry)

        raise ExternalServiceError(
            "launchpad", f"Cannot find snap for {repository_url}"
        )

    async def request_snap_builds(self, snap: Snap, owner: str) -> list[dict]:
        """Ask Launchpad to build `snap` for all its configured architectures.

        `owner` is the GitHub account the push came from; it is only used
        for attribution in the log.
        """
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.post(
                snap.self_link,
                headers=self._auth_headers(),
                data={"ws.op": "requestAutoBuilds"},
            )
            response.raise_for_status()
            builds = response.json() if response.content else []

        logger.debug(
            "Launchpad accepted build request for %s on behalf of %s",
            snap.self_link,
            owner,
        )
        return builds

    def _auth_headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._access_token:
            headers["Authorization"] = (
                'OAuth realm="https://api.launchpad.net/", '
                f'oauth_consumer_key="{self._consumer_key}", '
                f'oauth_token="{self._access_token}", '
                'oauth_signature_method="PLAINTEXT", '
                f'oauth_signature="&{self._access_secret}", '
                f'oauth_timestamp="{int(time.time())}", '
                f'oauth_nonce="{uuid.uuid4().hex}", '
                'oauth_version="1.0"'
            )
        return headers
