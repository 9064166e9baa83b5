"""Main FastAPI application for the TaskZM backend."""
from fastapi import FastAPI

from taskzm import __version__
from taskzm.middleware.cors import add_cors_middleware
from taskzm.db.init import init_db
from taskzm.routers import series_router, tasks_router
from taskzm.utils.logger import get_logger
from taskzm.utils.metrics import metrics_collector

logger = get_logger(__name__)

app = FastAPI(
    title="TaskZM API",
    description="Task and calendar API with recurring task series",
    version=__version__,
)

add_cors_middleware(app)


@app.on_event("startup")
async def startup_event():
    """Initialize database tables on startup."""
    try:
        init_db()
    except Exception as e:
        logger.exception("Database initialization failed", error=str(e))
        raise
    logger.info("Application startup complete", version=__version__)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.get("/")
async def root():
    """Root endpoint - API welcome message."""
    return {
        "message": "Welcome to the TaskZM API",
        "title": "TaskZM API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/metrics")
async def metrics():
    """Counters for recurring series operations."""
    return metrics_collector.get_metrics()


app.include_router(tasks_router, prefix="/api")  # /api/{user_id}/tasks
app.include_router(series_router, prefix="/api")  # /api/{user_id}/series, /api/recurrence/*


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "taskzm.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
