"""
vRPA Manager - FastAPI Application
Main entry point for the API server
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn
import structlog
from contextlib import asynccontextmanager

from vrpa.api.routes import auth, devices, team_members, ping_history, email_template, monitor, health
from vrpa.collectors.ping_collector import PingMonitor
from vrpa.core.config import settings
from vrpa.core.errors import ValidationFailure, VRPAError
from vrpa.core.logging import configure_logging
from vrpa.database.connection import SessionLocal, init_database
from vrpa.database.seed import seed_defaults

configure_logging()

logger = structlog.get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting vRPA Manager API")
    # Startup
    init_database()
    session = SessionLocal()
    try:
        seed_defaults(session)
    finally:
        session.close()

    app.state.monitor = PingMonitor()
    if settings.monitor_autostart:
        await app.state.monitor.start()
    yield
    # Shutdown
    await app.state.monitor.stop()
    logger.info("Shutting down vRPA Manager API")

# Create FastAPI application
app = FastAPI(
    title="vRPA Manager API",
    description="Checkout, scheduling and reachability tracking for vRPA devices",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure this properly for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, prefix="/api/v1", tags=["health"])
app.include_router(auth.router, prefix="/api/v1")
app.include_router(devices.router, prefix="/api/v1", tags=["devices"])
app.include_router(team_members.router, prefix="/api/v1", tags=["team-members"])
app.include_router(ping_history.router, prefix="/api/v1", tags=["ping-history"])
app.include_router(email_template.router, prefix="/api/v1", tags=["email-template"])
app.include_router(monitor.router, prefix="/api/v1", tags=["monitor"])

@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "vRPA Manager API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health"
    }

@app.exception_handler(VRPAError)
async def domain_exception_handler(request: Request, exc: VRPAError):
    """Translate domain errors into JSON responses"""
    content = {"detail": exc.message}
    if isinstance(exc, ValidationFailure):
        content["errors"] = exc.errors
    if exc.status_code >= 500:
        logger.error("Request failed", path=request.url.path, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content=content)

@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler"""
    logger.error("Unhandled exception", exc_info=exc, path=request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )

if __name__ == "__main__":
    uvicorn.run(
        "vrpa.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
