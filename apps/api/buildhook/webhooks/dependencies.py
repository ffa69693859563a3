"""FastAPI dependencies that assemble the webhook gate for a request."""

from fastapi import Depends

from buildhook.builds.dispatcher import BuildDispatcher
from buildhook.core.cache import get_cache
from buildhook.core.config import Settings, get_settings
from buildhook.github.snapcraft import SnapcraftYamlClient
from buildhook.launchpad.client import LaunchpadClient
from buildhook.webhooks.gate import WebhookGate
from buildhook.webhooks.secrets import SecretDeriver


def get_dispatcher(
    settings: Settings = Depends(get_settings),
    cache=Depends(get_cache),
) -> BuildDispatcher:
    launchpad = LaunchpadClient(settings)
    return BuildDispatcher(
        cache=cache,
        registry=launchpad,
        manifests=SnapcraftYamlClient(settings, cache),
        build_queue=launchpad,
    )


def get_webhook_gate(
    settings: Settings = Depends(get_settings),
    dispatcher: BuildDispatcher = Depends(get_dispatcher),
) -> WebhookGate:
    return WebhookGate(SecretDeriver(settings), dispatcher)
