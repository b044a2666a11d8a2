from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from cart_service.core.config import settings
from cart_service.core.database import connect_to_mongo, close_mongo_connection, get_database
from cart_service.api.routes import cart
from cart_service.repositories.cart_repository import MongoCartRepository
from cart_service.repositories.promo_code_repository import MongoPromoCodeRepository

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Per-customer shopping cart with promo codes and checkout hand-off to the order service",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Startup and shutdown events
@app.on_event("startup")
async def startup_event():
    """Initialize services on startup."""
    logger.info("Starting up cart service...")
    await connect_to_mongo()
    db = get_database()
    await MongoCartRepository(db).ensure_indexes()
    await MongoPromoCodeRepository(db).ensure_indexes()
    logger.info(f"Cart service started (event publisher mode: {settings.EVENT_PUBLISHER_MODE})")


@app.on_event("shutdown")
async def shutdown_event():
    """Clean up services on shutdown."""
    logger.info("Shutting down cart service...")
    await close_mongo_connection()
    logger.info("Cart service shut down successfully")


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "cart-service",
        "event_publisher_mode": settings.EVENT_PUBLISHER_MODE,
        "version": "1.0.0"
    }


# Cart API
app.include_router(cart.router, prefix=f"{settings.API_V1_PREFIX}/carts", tags=["Cart"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
