from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .api import auth, jobs, board, extract, analytics, company_insights, health
from .models.db.database import engine, Base
from .models.db import user as user_model  # noqa: F401
from .models.db import job as job_model  # noqa: F401
from .utils.logging_config import setup_logging, get_logger
from .config.settings import get_settings

settings = get_settings()

setup_logging(
    level=settings.log_level,
    log_file=settings.log_file,
    sql_echo=settings.database_echo
)
logger = get_logger(__name__)

# Validate configuration on startup
missing_settings = settings.validate_required_settings()
if missing_settings:
    for setting in missing_settings:
        logger.error("Configuration error: %s", setting)
    if settings.is_production():
        raise RuntimeError("Invalid configuration for production environment")

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    docs_url="/docs" if settings.api_docs_enabled else None,
    redoc_url="/redoc" if settings.api_docs_enabled else None,
)

if settings.cors_enabled:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Routers
app.include_router(health.router, prefix="/api", tags=["Health Check"])
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(jobs.router, prefix="/api/jobs", tags=["Jobs"])
app.include_router(board.router, prefix="/api/board", tags=["Board"])
app.include_router(extract.router, prefix="/api", tags=["Job Posting Extraction"])
app.include_router(analytics.router, prefix="/api/analytics", tags=["Analytics"])
app.include_router(company_insights.router, prefix="/api/company-insights", tags=["Company Insights"])

@app.on_event("startup")
def on_startup():
    """Create database tables and log application startup."""
    logger.info("Starting %s (%s)...", settings.app_name, settings.environment)
    # Models are registered on Base by the imports at the top of this module
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables initialized successfully")

@app.get("/")
def read_root():
    return {"message": f"Welcome to the {settings.app_name} API"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("job_board_app.backend.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
