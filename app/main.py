"""
ERP Equipment Inventory FastAPI Application
Entry point for the equipment inventory and transaction ledger REST API
"""
import time

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.api.v1.api_router import api_router
from app.core.config import settings
from app.core.database import SessionLocal, check_db_connection, get_db, init_db
from app.core.exceptions import ERPException
from app.core.logging import get_logger, setup_logging
from app.schemas.common import HealthResponse

setup_logging()

logger = get_logger("main")
request_logger = get_logger("api")

# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="""
    ## Multi-branch ERP: Equipment Inventory API

    ### Key Features:
    - **Inventory**: Equipment per branch with received and available quantities
    - **Transactions**: IN, OUT, RETURN, HANDOVER, MAINTENANCE and REPAIR movements
    - **Ledger**: Append-only history of every movement
    - **Low Stock**: Dashboard of items at or below their threshold
    """,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every request with status and timing"""
    start_time = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start_time) * 1000

    request_logger.info(
        f"{request.method} {request.url.path} - {response.status_code} - {elapsed_ms:.1f}ms"
    )
    return response


# Health check endpoint
@app.get("/health", response_model=HealthResponse, tags=["System"])
def health_check(db: Session = Depends(get_db)):
    """
    Health check endpoint for monitoring and load balancers

    Returns system status and database connectivity
    """
    db_status = check_db_connection(db)

    return {
        "status": "healthy" if db_status else "degraded",
        "version": settings.APP_VERSION,
        "database": "connected" if db_status else "disconnected",
        "debug": settings.DEBUG,
    }


# Application startup event
@app.on_event("startup")
def startup_event():
    """
    Application startup tasks

    Verify the database and create missing tables
    """
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    db = SessionLocal()
    try:
        if not check_db_connection(db):
            raise RuntimeError("Database connection failed")
    finally:
        db.close()

    logger.info("Database connection established")
    init_db()
    logger.info("Application startup completed successfully")


# Application shutdown event
@app.on_event("shutdown")
def shutdown_event():
    logger.info("Shutting down application")


@app.exception_handler(ERPException)
async def erp_exception_handler(request: Request, exc: ERPException):
    """Domain errors carry their own HTTP status"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message or "Internal server error"},
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler for unhandled errors

    Args:
        request: FastAPI request object
        exc: Exception that occurred

    Returns:
        JSON error response
    """
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "detail": str(exc) if settings.DEBUG else "An unexpected error occurred",
        },
    )


# Include API routers
app.include_router(api_router, prefix=settings.API_V1_STR)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
