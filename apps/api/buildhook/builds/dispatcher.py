"""Build dispatch for authenticated push notifications.

The cached snapcraft data for a repository is dropped before anything else
happens, whatever the outcome of the build request. A new push may have
changed snapcraft.yaml, so the old cached data must not survive it.

Nothing here retries. A failed dispatch is logged once and reported to the
gate; GitHub redelivers the webhook if it wants another attempt.
"""

import logging
from typing import Any, Protocol

from buildhook.core.exceptions import DispatchError, NotRegisteredError
from buildhook.github.urls import repository_url, snapcraft_yaml_cache_id
from buildhook.launchpad.client import Snap

logger = logging.getLogger(__name__)


class Cache(Protocol):
    async def delete(self, *names: str) -> Any:
        ...


class ProjectRegistry(Protocol):
    async def find_snap(self, repository_url: str) -> Snap:
        ...


class ManifestSource(Protocol):
    async def refresh_snapcraft_yaml(self, owner: str, name: str) -> Any:
        ...


class BuildQueue(Protocol):
    async def request_snap_builds(self, snap: Snap, owner: str) -> Any:
        ...


class BuildDispatcher:
    """Invalidates cached snapcraft data and asks Launchpad for a build."""

    def __init__(
        self,
        cache: Cache,
        registry: ProjectRegistry,
        manifests: ManifestSource,
        build_queue: BuildQueue,
    ):
        self._cache = cache
        self._registry = registry
        self._manifests = manifests
        self._build_queue = build_queue

    async def dispatch(self, owner: str, name: str) -> None:
        """Request builds of `owner/name`.

        Raises:
            DispatchError: Anything went wrong; the original exception is
                chained as ``__cause__``.
        """
        url = repository_url(owner, name)
        cache_id = snapcraft_yaml_cache_id(url)

        # TODO: be smarter and only drop the cache when the push
        # touched snapcraft.yaml.
        try:
            await self._cache.delete(cache_id)
        except Exception as exc:
            logger.error("Failed to clear snapcraft data cache for %s: %s.", url, exc)
            raise DispatchError(url) from exc

        try:
            snap = await self._registry.find_snap(url)
            if not snap.store_name:
                raise NotRegisteredError()
            if not snap.auto_build:
                await self._manifests.refresh_snapcraft_yaml(owner, name)
            await self._build_queue.request_snap_builds(snap, owner)
        except Exception as exc:
            logger.error("Failed to request builds of %s: %s.", url, exc)
            raise DispatchError(url) from exc

        logger.info("Requested builds of %s.", url)
