import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

load_dotenv()

from app.routes import (
    auth_router,
    plumbers_router,
    jobs_router,
    payrolls_router,
    commission_router,
    reports_router,
)
from app.services.payroll_summary import PlumberNotFoundError
from app.storage import create_storage

# Setup logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Plumber Payroll",
    description="Commission and weekly payroll tracking for plumbing crews",
    version="1.0.0"
)

# Include routers
app.include_router(auth_router)
app.include_router(plumbers_router)
app.include_router(jobs_router)
app.include_router(payrolls_router)
app.include_router(commission_router)
app.include_router(reports_router)


@app.on_event("startup")
def on_startup():
    """Pick the storage backend. Tests may install their own beforehand."""
    if getattr(app.state, "storage", None) is None:
        app.state.storage = create_storage()


@app.exception_handler(PlumberNotFoundError)
async def plumber_not_found_handler(request: Request, exc: PlumberNotFoundError):
    """A payroll job points at a missing plumber; fail the request loudly."""
    logger.error("Payroll summary failed for %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Failed to fetch payroll summary"},
    )


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
