"""Authentication gate for GitHub push notifications.

A delivery walks through a fixed sequence of checks:

    RECEIVED -> HEADER_CHECKED -> BODY_CHECKED -> SECRET_DERIVED
             -> SIGNATURE_CHECKED -> EVENT_DISPATCHED

Any failed check ends in REJECTED with the status code of the exception
that stopped it. The cheap checks (header present, body looks like a JSON
object) run before any HMAC work. Status codes are the only thing GitHub
ever sees; the reasons go to the log.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional, Protocol

from buildhook.core.exceptions import (
    AuthenticationError,
    BuildhookError,
    ConfigurationError,
    MalformedRequestError,
)
from buildhook.webhooks.secrets import SecretDeriver
from buildhook.webhooks.signature import compute_signature, verify_signature

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "x-hub-signature"
EVENT_HEADER = "x-github-event"
PING_EVENT = "ping"


class GateState(str, enum.Enum):
    RECEIVED = "received"
    HEADER_CHECKED = "header_checked"
    BODY_CHECKED = "body_checked"
    SECRET_DERIVED = "secret_derived"
    SIGNATURE_CHECKED = "signature_checked"
    EVENT_DISPATCHED = "event_dispatched"
    REJECTED = "rejected"


@dataclass(frozen=True)
class WebhookRequest:
    """One inbound delivery: headers, the untouched body, and the route's repo.

    Header names are lower-cased on construction so lookups are
    case-insensitive. A repeated header keeps its first value, matching
    Starlette's `Headers.get`.
    """

    headers: Mapping[str, str]
    raw_body: bytes
    owner: str
    name: str

    def __post_init__(self) -> None:
        normalized: dict[str, str] = {}
        for key, value in self.headers.items():
            normalized.setdefault(key.lower(), value)
        object.__setattr__(self, "headers", normalized)

    def header(self, name: str) -> Optional[str]:
        return self.headers.get(name.lower())


@dataclass(frozen=True)
class GateResult:
    state: GateState
    status_code: int
    error: Optional[BuildhookError] = field(default=None, compare=False)

    @property
    def accepted(self) -> bool:
        return self.state is GateState.EVENT_DISPATCHED


class Dispatcher(Protocol):
    async def dispatch(self, owner: str, name: str) -> None:
        ...


class WebhookGate:
    """Decides whether a delivery is authentic and what to do with it."""

    def __init__(self, deriver: SecretDeriver, dispatcher: Dispatcher):
        self._deriver = deriver
        self._dispatcher = dispatcher

    async def handle(self, request: WebhookRequest) -> GateResult:
        """Run a delivery through the gate and return its terminal state.

        Never raises for expected failures; every BuildhookError becomes a
        REJECTED result carrying that error's status code.
        """
        try:
            signature = self._check_header(request)
            self._check_body(request)
            secret = self._derive_secret(request)
            self._check_signature(request, secret, signature)
        except BuildhookError as exc:
            return GateResult(GateState.REJECTED, exc.status_code, exc)

        if request.header(EVENT_HEADER) == PING_EVENT:
            return GateResult(GateState.EVENT_DISPATCHED, 200)

        try:
            await self._dispatcher.dispatch(request.owner, request.name)
        except BuildhookError as exc:
            return GateResult(GateState.REJECTED, exc.status_code, exc)

        return GateResult(GateState.EVENT_DISPATCHED, 200)

    # -----------------------------------------------------------------------
    # Individual checks, in the order they run
    # -----------------------------------------------------------------------

    def _check_header(self, request: WebhookRequest) -> str:
        signature = request.header(SIGNATURE_HEADER)
        if not signature:
            logger.info("Rejecting unsigned webhook")
            raise MalformedRequestError("Missing X-Hub-Signature header")
        return signature

    def _check_body(self, request: WebhookRequest) -> None:
        first_char = request.raw_body.strip()[:1]
        if first_char != b"{":
            logger.info("Unexpected token %r", first_char.decode("latin-1") or None)
            raise MalformedRequestError("Body is not a JSON object")
        logger.debug("Received webhook: %s", request.raw_body.decode("utf-8", "replace"))

    def _derive_secret(self, request: WebhookRequest) -> str:
        try:
            return self._deriver.derive(request.owner, request.name)
        except ConfigurationError as exc:
            logger.error(exc.message)
            raise

    def _check_signature(
        self, request: WebhookRequest, secret: str, signature: str
    ) -> None:
        if not verify_signature(secret, request.raw_body, signature):
            computed = compute_signature(secret, request.raw_body)
            logger.info(
                "Webhook signature mismatch: received %s != computed %s",
                signature,
                computed,
            )
            raise AuthenticationError()
