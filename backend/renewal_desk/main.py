import logging
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from renewal_desk.core.config import settings
from renewal_desk.core.database import init_database
from renewal_desk.api import dashboard as dashboard_api
from renewal_desk.api import customers as customers_api
from renewal_desk.api import messaging as messaging_api

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables on startup."""
    logger.info("Creating database tables...")
    init_database()
    logger.info("Database ready")
    yield


# Disable API docs in production
docs_url = "/docs" if settings.ENVIRONMENT != "production" else None
redoc_url = "/redoc" if settings.ENVIRONMENT != "production" else None

app = FastAPI(
    title=settings.APP_NAME,
    description="Policy expiry tracking and WhatsApp renewal reminders",
    version="1.0.0",
    lifespan=lifespan,
    docs_url=docs_url,
    redoc_url=redoc_url,
)


# Global exception handler - always return JSON (never plain text)
@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    logger.exception("Unhandled exception on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={"detail": f"Internal error: {str(exc)}"},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request, exc):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )


@app.middleware("http")
async def log_api_requests(request: Request, call_next):
    if request.url.path.startswith("/api"):
        logger.info(f"API Request: {request.method} {request.url.path}")
    return await call_next(request)


# CORS - local dashboard dev server + configured frontend
allowed_origins = [
    "http://localhost:3000",
    "http://localhost:5173",
]
frontend_url = settings.FRONTEND_URL
if frontend_url and frontend_url not in allowed_origins:
    allowed_origins.append(frontend_url)

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(dashboard_api.router)
app.include_router(customers_api.router)
app.include_router(messaging_api.router)


# Unknown /api paths get a JSON 404 instead of falling through to the dashboard
@app.api_route("/api/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"], include_in_schema=False)
def api_not_found(path: str, request: Request):
    return JSONResponse(
        status_code=404,
        content={"error": f"API route not found: {request.method} /{path}"},
    )


# Serve the built dashboard with SPA fallback to index.html
_static_dir = Path(settings.STATIC_DIR).resolve()
if _static_dir.is_dir():

    @app.get("/{full_path:path}", include_in_schema=False)
    def serve_dashboard(full_path: str):
        candidate = (_static_dir / full_path).resolve()
        if full_path and candidate.is_file() and _static_dir in candidate.parents:
            return FileResponse(str(candidate))
        return FileResponse(str(_static_dir / "index.html"))
