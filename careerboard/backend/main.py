from dotenv import load_dotenv

load_dotenv()

import os

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from .api import auth, application, health
from .exceptions import TrackerError
from .models.db.database import engine, Base
from .models.db import user as user_model
from .models.db import application as application_model
from .utils.api_helpers import request_validation_error_handler, tracker_error_handler
from .utils.logging_config import configure_logging
from .config.settings import get_settings

# Initialize settings
settings = get_settings()

# Setup logging configuration
logger = configure_logging(settings)

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

app.add_exception_handler(TrackerError, tracker_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_error_handler)

# Routers
app.include_router(health.router, tags=["Health Check"])
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(application.router, prefix="/applications", tags=["Application Tracker"])

# Uploaded resumes and job descriptions are served back by filename
app.mount(
    settings.upload_url_prefix,
    StaticFiles(directory=settings.upload_directory, check_dir=False),
    name="uploads",
)


@app.on_event("startup")
def on_startup():
    """Create tables and the upload directory."""
    logger.info("Starting %s v%s...", settings.app_name, settings.app_version)
    # Table definitions are registered with Base by the model imports above.
    Base.metadata.create_all(bind=engine)
    os.makedirs(settings.upload_directory, exist_ok=True)
    logger.info("Database tables initialized successfully")


@app.on_event("shutdown")
def on_shutdown():
    engine.dispose()
    logger.info("Database connections closed")


@app.get("/")
def read_root():
    return {"message": "CareerBoard API running"}
