"""
TalentosPlus - Main Application

FastAPI backend with:
- PostgreSQL (SQLAlchemy ORM) for employees and their dimension tables
- JWT authentication (email + document number)
- Spreadsheet / JSON bulk import and spreadsheet export
- PDF CVs and an AI assistant for the dashboard
- Static frontend served from /frontend

Run: uvicorn talentos.main:app --reload
"""

import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.responses import FileResponse, JSONResponse

from talentos.api.routes import api_router
from talentos.core.config import get_settings
from talentos.core.errors import TalentosError
from talentos.core.logging import setup_logging
from talentos.db.database import init_db, ping_database
from talentos.schemas.schemas import ErrorResponse

settings = get_settings()
setup_logging(settings.log_level)

logger = logging.getLogger(__name__)

# Get the project root directory
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
FRONTEND_DIR = os.path.join(PROJECT_ROOT, "frontend", "public")

# Create FastAPI app
app = FastAPI(
    title="TalentosPlus",
    description="""
    Employee records for HR.

    ## Features
    - **Authentication**: JWT login with email + document number
    - **Employees**: CRUD, self-registration with welcome email, PDF CVs
    - **Bulk import/export**: XLSX and JSON import with per-row error report, XLSX export
    - **Catalog**: Departments, positions, education levels
    - **Dashboard**: Headline stats and an AI assistant
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TalentosError)
async def talentos_error_handler(request: Request, exc: TalentosError):
    """Domain errors carry their own HTTP status."""
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=ErrorResponse(detail=exc.message).model_dump())


# Include API routes
app.include_router(api_router, prefix="/api")

# Serve static files (for any additional assets)
if os.path.exists(FRONTEND_DIR):
    app.mount("/static", StaticFiles(directory=FRONTEND_DIR), name="static")


# Startup event
@app.on_event("startup")
def startup_event():
    """Create missing tables on startup."""
    try:
        init_db()
        logger.info("Database schema ready")
    except Exception:
        logger.exception("Database initialization failed")


# Serve frontend for root path
@app.get("/", tags=["Frontend"])
async def serve_frontend():
    """Serve the frontend."""
    index_path = os.path.join(FRONTEND_DIR, "index.html")
    if os.path.exists(index_path):
        return FileResponse(index_path)
    return {"status": "healthy", "app": "TalentosPlus", "message": "Frontend not found. API is running."}


@app.get("/health", tags=["Health"])
def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "database": "connected" if ping_database() else "disconnected",
    }
