"""
FastAPI application initialization
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from api.routes import health, reports
from api.middleware import RequestContextMiddleware
from core.config import settings
from core.exceptions import QueryError
from core.logging import setup_logging
from schemas.api import ErrorResponse
from ingestion.scheduler import IngestionScheduler
import logging

setup_logging()

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Chicago Business Intelligence API",
    description="Civic open-data ingestion and cross-dataset reports",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(RequestContextMiddleware)

# Include routers
app.include_router(health.router)
app.include_router(reports.router)


@app.exception_handler(QueryError)
async def query_error_handler(request: Request, exc: QueryError):
    request_id = getattr(request.state, "request_id", "-")
    logger.error(
        f"[{request_id}] {exc.message}",
        extra={"error_context": exc.to_dict()}
    )
    body = ErrorResponse(
        error=exc.message,
        detail=str(exc.original_exception) if exc.original_exception else None
    )
    return JSONResponse(status_code=500, content=body.model_dump(mode="json"))


@app.on_event("startup")
async def startup_event():
    """Application startup event"""
    logger.info(f"Starting Chicago Business Intelligence API for {settings.PROJECT_ID}")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Database: {settings.DATABASE_URL.split('@')[1] if '@' in settings.DATABASE_URL else 'configured'}")

    app.state.scheduler = IngestionScheduler()
    app.state.scheduler.start()


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown event"""
    logger.info("Shutting down Chicago Business Intelligence API")
    scheduler = getattr(app.state, "scheduler", None)
    if scheduler is not None:
        scheduler.stop()


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": f"CBI data collection microservices have started for {settings.PROJECT_ID}",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "trips_vs_covid": "/reports/trips-vs-covid",
            "high_ccvi_trips": "/reports/high-ccvi-trips",
            "unemployment_by_permit": "/reports/unemployment-by-permit",
            "low_income_construction": "/reports/low-income-construction"
        }
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host=settings.API_HOST, port=settings.API_PORT)
