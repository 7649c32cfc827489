"""
Marketplace Platform - Backend API
Multi-seller checkout and seller fulfillment
"""
import logging
import time
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Load environment variables
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

from marketplace.api import cart, orders, seller_orders  # noqa: E402
from marketplace.core.config import settings  # noqa: E402
from marketplace.core.database import check_database_connection  # noqa: E402
from marketplace.core.exceptions import OrderError  # noqa: E402

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION,
    debug=settings.API_DEBUG,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
    allow_headers=["*"],
)


@app.exception_handler(OrderError)
async def order_error_handler(request: Request, exc: OrderError):
    """Render typed order errors with their own status code and details"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Include API routers
app.include_router(orders.router, prefix="/api/v1/orders", tags=["Orders"])
app.include_router(seller_orders.router, prefix="/api/v1/seller-orders", tags=["Seller Orders"])
app.include_router(cart.router, prefix="/api/v1/cart", tags=["Cart"])


@app.get("/")
async def root():
    """Root endpoint - API status"""
    return {
        "message": "Marketplace API",
        "status": "online",
        "version": settings.API_VERSION,
    }


@app.get("/health")
def health():
    """Health check endpoint for monitoring - tests database connectivity"""
    start_time = time.time()

    db_status = "unknown"
    db_latency_ms = None
    db_error = None

    try:
        db_latency_ms = check_database_connection(max_retries=1, retry_delay=0.5)
        db_status = "connected"
    except Exception as e:
        db_status = "disconnected"
        db_error = str(e)

    total_latency_ms = round((time.time() - start_time) * 1000, 2)

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "service": "marketplace-api",
        "version": settings.API_VERSION,
        "database": {
            "status": db_status,
            "latency_ms": db_latency_ms,
            "error": db_error,
        },
        "total_latency_ms": total_latency_ms,
    }
