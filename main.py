from contextlib import asynccontextmanager
import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from phoneauth.core.config import settings
from phoneauth.core.database import create_tables
from phoneauth.core.exceptions import EXCEPTION_HANDLERS
from phoneauth.core.logging_config import setup_logging
from phoneauth.dependencies import sms_service
from phoneauth.routers import auth

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


def check_sms_config() -> bool:
    """Log each SMS configuration problem; send-otp would fail with 500 otherwise"""
    validation = sms_service.validate_sms_config()
    for issue in validation["issues"]:
        logger.warning(f"SMS configuration: {issue}")
    return validation["valid"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Ensure tables exist and report SMS misconfiguration before serving"""
    create_tables()
    check_sms_config()
    logger.info(f"{settings.APP_NAME} started ({settings.ENVIRONMENT})")
    yield
    logger.info(f"{settings.APP_NAME} shutting down")


# Create FastAPI instance
app = FastAPI(
    title=settings.APP_NAME,
    description=settings.DESCRIPTION,
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

for exception_type, handler in EXCEPTION_HANDLERS.items():
    app.add_exception_handler(exception_type, handler)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log method, path, status and duration of every request"""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({process_time:.3f}s)")
    return response

# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["authentication"])

@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.VERSION
    }

@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": settings.APP_NAME}

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
