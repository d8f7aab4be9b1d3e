from app.routes.auth import router as auth_router
from app.routes.plumbers import router as plumbers_router
from app.routes.jobs import router as jobs_router
from app.routes.payrolls import router as payrolls_router
from app.routes.commission import router as commission_router
from app.routes.reports import router as reports_router

__all__ = [
    'auth_router',
    'plumbers_router',
    'jobs_router',
    'payrolls_router',
    'commission_router',
    'reports_router',
]
