from routes.health import router as health_router
from routes.reports import router as reports_router

__all__ = ["health_router", "reports_router"]
