"""CORS configuration for the web client + FastAPI integration."""
from fastapi.middleware.cors import CORSMiddleware
import os

from taskzm.utils.logger import get_logger

logger = get_logger(__name__)

ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")
FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:5173")

# Local dev servers of the web and mobile shells
ALLOWED_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "capacitor://localhost",
]

if FRONTEND_URL and FRONTEND_URL not in ALLOWED_ORIGINS:
    ALLOWED_ORIGINS.append(FRONTEND_URL)


def add_cors_middleware(app):
    """Add CORS middleware to the FastAPI application."""
    if ENVIRONMENT == "production":
        # Only the deployed frontend is trusted in production
        origins = [FRONTEND_URL] if FRONTEND_URL else []
    else:
        origins = ALLOWED_ORIGINS

    logger.info("Configuring CORS", environment=ENVIRONMENT, allowed_origins=origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
