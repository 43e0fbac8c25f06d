import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from styleai.config import settings
from styleai.core.exceptions import (
    StyleAIException,
    generic_exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
    styleai_exception_handler,
)
from styleai.database import init_db
from styleai.routers import products, profile, saved_outfits, suggestions, vision, wardrobe
from styleai.schemas.common import HealthResponse

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Create database tables
init_db()

app = FastAPI(
    title="StyleAI API",
    description="Outfit suggestions, clothing detection and product search",
    version="1.0.0"
)

# CORS configuration; credentials cannot be combined with a wildcard origin
origins = settings.cors_origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials="*" not in origins,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Total-Count"],
)

app.add_exception_handler(StyleAIException, styleai_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# Include routers
app.include_router(suggestions.router)
app.include_router(vision.router)
app.include_router(products.router)
app.include_router(profile.router)
app.include_router(wardrobe.router)
app.include_router(saved_outfits.router)

if not settings.ai_gateway_configured:
    logger.warning("AI_GATEWAY_API_KEY is not set; AI endpoints will answer 'misconfigured'")


@app.get("/health", response_model=HealthResponse)
@app.head("/health")
def health_check():
    """
    Health check endpoint. Supports both GET and HEAD for monitoring services.
    """
    return HealthResponse(
        status="ok",
        ai_gateway_configured=settings.ai_gateway_configured,
        product_search_strategy=settings.PRODUCT_SEARCH_STRATEGY,
    )


@app.get("/")
def root():
    return {"message": "StyleAI API", "docs": "/docs"}
