"""Main FastAPI application"""
from fastapi import FastAPI
from app.config import get_settings
from app.middleware.cors import setup_cors
from app.middleware.error_handler import register_error_handlers
from app.utils.rate_limit import setup_rate_limiting
from contextlib import asynccontextmanager
import logging

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def log_configuration_status():
    """Report missing operator configuration at startup (the relay still starts)"""
    if not settings.turnstile_secret_key:
        logger.warning("TURNSTILE_SECRET_KEY is not set - contact submissions will be refused")
    if not settings.formspree_form_id:
        logger.warning("FORMSPREE_FORM_ID is not set - contact submissions will be refused")
    if not settings.turnstile_site_key:
        logger.warning("TURNSTILE_SITE_KEY is not set - the challenge widget will not render")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    log_configuration_status()
    logger.info("Contact relay started")
    yield
    # Shutdown
    logger.info("Contact relay stopped")


# Create FastAPI app with lifespan
app = FastAPI(
    title="Contact Relay API",
    description="Verified contact message relay",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Setup CORS
setup_cors(app)

# Add error handling
register_error_handlers(app)

# Per-address submission limit
setup_rate_limiting(app, settings)

# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "contact-relay",
        "verification": "configured" if settings.turnstile_secret_key else "missing",
        "delivery": "configured" if settings.formspree_form_id else "missing"
    }

@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Contact Relay API",
        "version": "1.0.0",
        "docs": "/docs"
    }

# Import and include routers
from app.routers import contact, widget

app.include_router(contact.router, prefix="/api/contact", tags=["Contact"])
app.include_router(widget.router, prefix="/api/widget", tags=["Widget"])

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
