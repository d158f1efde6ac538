"""HTTP routes.

Combines the registration, webhook and status routers.
"""

from fastapi import APIRouter

from notifaya.api.routes.registrations import router as registrations_router
from notifaya.api.routes.status import router as status_router
from notifaya.api.routes.webhooks import router as webhooks_router

api_router = APIRouter()

api_router.include_router(registrations_router)
api_router.include_router(webhooks_router)
api_router.include_router(status_router)

__all__ = ["api_router"]
