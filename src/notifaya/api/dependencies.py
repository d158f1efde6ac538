"""FastAPI dependency injection helpers.

Usage in a route::

    @router.get("/status")
    async def status(engine: Annotated[NotifayaEngine, Depends(get_engine)]) -> ...:
        ...
"""

from __future__ import annotations

import hmac
from typing import Annotated

from fastapi import Depends, Header, Request

from notifaya.engine.client import NotifayaEngine  # noqa: TC001
from notifaya.errors.definitions import ErrEngineUnavailable, ErrWebhookUnauthorized

# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


def get_engine(request: Request) -> NotifayaEngine:
    """Retrieve the engine from ``app.state``.

    The engine is stored on ``app.state.engine`` during lifespan startup.

    Raises:
        NotifayaError: 503 if the engine is not initialized.
    """
    engine: NotifayaEngine | None = getattr(request.app.state, "engine", None)
    if engine is None:
        raise ErrEngineUnavailable
    return engine


# ---------------------------------------------------------------------------
# Webhook auth
# ---------------------------------------------------------------------------


def verify_webhook_secret(
    engine: Annotated[NotifayaEngine, Depends(get_engine)],
    authorization: Annotated[str, Header()] = "",
) -> None:
    """Check the Chainhook ``Authorization`` header against the shared secret.

    No check is made when no secret is configured.

    Raises:
        NotifayaError: 401 if the header does not match.
    """
    secret = engine.config.webhook.secret
    if not secret:
        return
    if not hmac.compare_digest(authorization.encode(), secret.encode()):
        raise ErrWebhookUnauthorized
