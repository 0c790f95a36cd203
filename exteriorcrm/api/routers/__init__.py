"""API Routers."""

from .communications import router as communications_router
from .customers import router as customers_router
from .dashboard import router as dashboard_router
from .estimates import router as estimates_router
from .jobs import router as jobs_router
from .leads import router as leads_router
from .outlook import router as outlook_router
from .realtime import router as realtime_router
from .settings import router as settings_router
from .system import router as system_router
from .team_members import router as team_members_router
from .vendors import router as vendors_router
from .white_label import router as white_label_router

__all__ = [
    "communications_router",
    "customers_router",
    "dashboard_router",
    "estimates_router",
    "jobs_router",
    "leads_router",
    "outlook_router",
    "realtime_router",
    "settings_router",
    "system_router",
    "team_members_router",
    "vendors_router",
    "white_label_router",
]
