"""
FastAPI application entry point
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from config.settings import settings
from caseflow.utils.logger import setup_logging, get_logger
from caseflow.api.middleware import LoggingMiddleware
from caseflow.api.rate_limit_middleware import RateLimitMiddleware
from caseflow.api.error_handler import register_error_handlers

# Logging
setup_logging()
logger = get_logger(__name__)

app = FastAPI(
    title="Case Lifecycle API",
    description="Case lifecycle and lawyer assignment service",
    version="0.1.0"
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(LoggingMiddleware)
app.add_middleware(RateLimitMiddleware)

register_error_handlers(app)


@app.on_event("startup")
async def startup_event():
    """Runs when the application starts"""
    logger.info("Application starting")

    from caseflow.db.connection import db_manager
    if db_manager.health_check():
        logger.info("Database connection OK")
    else:
        logger.warning("Database connection check failed")

    from caseflow.services.job_scheduler import job_scheduler
    job_scheduler.start()


@app.on_event("shutdown")
async def shutdown_event():
    """Runs when the application stops"""
    logger.info("Application stopping")

    from caseflow.services.job_scheduler import job_scheduler
    job_scheduler.shutdown()

    from caseflow.db.connection import db_manager
    db_manager.close()


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Case Lifecycle API",
        "version": "0.1.0",
        "docs": "/docs"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    from caseflow.db.connection import db_manager
    from caseflow.services.job_scheduler import job_scheduler

    db_healthy = db_manager.health_check()

    return {
        "status": "healthy" if db_healthy else "unhealthy",
        "database": "healthy" if db_healthy else "unhealthy",
        "scheduler": "running" if job_scheduler.running else "stopped"
    }


# Routers
from caseflow.api.routers import cases, assignments, court, adjournments, reconciliation
app.include_router(cases.router)
app.include_router(assignments.router)
app.include_router(court.router)
app.include_router(adjournments.router)
app.include_router(reconciliation.router)
