from fastapi import APIRouter

from api.v1.routes.events import router as events_router
from api.v1.routes.notifications import router as notifications_router

# Main v1 router (includes all endpoints)
router = APIRouter()
router.include_router(notifications_router)
router.include_router(events_router)
