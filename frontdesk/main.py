import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError

from .config import settings
from .db import init_schema
from .errors import FrontDeskError
from .limiter import limiter
from .routers import bookings, cash

# --- Logging configuration ---
_level = logging.DEBUG if getattr(settings, "DEBUG", False) else logging.INFO
logging.basicConfig(
    level=_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
# Align uvicorn loggers with our level (useful under Docker Compose)
for _name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
    logging.getLogger(_name).setLevel(_level)
logger = logging.getLogger("frontdesk.startup")
logger.info("Starting %s (DEBUG=%s)", settings.APP_NAME, getattr(settings, "DEBUG", False))

app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    description=(
        f"{settings.APP_NAME}: room allocation, booking lifecycle and "
        "front-desk cash reconciliation."
    ),
    openapi_tags=[
        {"name": "bookings", "description": "Room allocation and booking lifecycle. Endpoints under /api/v1/bookings."},
        {"name": "cash", "description": "Cash at reception ledger and reports. Endpoints under /api/v1/cash."},
    ],
)

@app.on_event("startup")
def startup_event():
    """Runs startup tasks, like creating missing tables in development."""
    logger.info("Running startup tasks...")
    if settings.AUTO_CREATE_SCHEMA:
        init_schema()
        logger.info("Database schema ensured.")
    logger.info("Startup tasks complete.")


# --- Error handling: every failure is a single {"error": message} body ---
@app.exception_handler(FrontDeskError)
async def frontdesk_error_handler(request: Request, exc: FrontDeskError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected (%s): %s", request.method, request.url.path, exc.__class__.__name__, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        where = ".".join(str(part) for part in err.get("loc", ())[1:])
        problems.append(f"{where}: {err.get('msg')}" if where else str(err.get("msg")))
    return JSONResponse(status_code=400, content={"error": "; ".join(problems) or "Invalid request"})

@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Storage failure on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Storage failure"})


# Add the limiter to the app state
app.state.limiter = limiter
# Add the exception handler for rate limit exceeded errors
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.include_router(bookings.router)
app.include_router(cash.router)

@app.get("/healthz")
@limiter.exempt
def healthz():
    return {"status": "ok"}
