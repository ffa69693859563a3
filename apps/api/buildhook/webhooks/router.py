"""GitHub webhook endpoint.

Public (no auth dependency): authenticity comes from the X-Hub-Signature
header, checked against a secret derived for the repository named in the
path. Responses are bare status codes. Response bodies would not reach
anyone useful, and rejection details are not for third parties.
"""

import logging

from fastapi import APIRouter, Depends, Request, Response

from buildhook.webhooks.dependencies import get_webhook_gate
from buildhook.webhooks.gate import WebhookGate, WebhookRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/github", tags=["github"])


@router.post("/webhooks/{owner}/{name}")
async def notify(
    owner: str,
    name: str,
    request: Request,
    gate: WebhookGate = Depends(get_webhook_gate),
) -> Response:
    """Authenticate a GitHub delivery for `owner/name` and act on it.

    - 200: ping acknowledged, or builds requested
    - 400: unsigned, not a JSON object, or signature mismatch
    - 500: webhook secret not configured, or the build request failed
    """
    body = await request.body()
    result = await gate.handle(
        WebhookRequest(
            headers=request.headers,
            raw_body=body,
            owner=owner,
            name=name,
        )
    )
    logger.debug(
        "Webhook for %s/%s finished in state %s with %d",
        owner,
        name,
        result.state.value,
        result.status_code,
    )
    return Response(status_code=result.status_code)
