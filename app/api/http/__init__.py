from app.api.http.health import router as health_router
from app.api.http.timesheets import router as timesheets_router

__all__ = [
    "health_router",
    "timesheets_router"
]
