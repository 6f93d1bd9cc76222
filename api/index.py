"""
foodcart Checkout - Main FastAPI Application

Single entry point for the checkout screen API.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from foodcart.logging import get_logger
from foodcart.routers import checkout_router
from foodcart.routers.deps import shutdown_services

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    yield
    # Shutdown: flush carts of screens that were never left
    await shutdown_services()
    logger.info("Checkout sessions flushed")


app = FastAPI(
    title="foodcart Checkout",
    description="Cart and checkout pricing API for the food-delivery app",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS for the mobile client
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(checkout_router)


# ==================== HEALTH CHECK ====================

@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "service": "foodcart"}
