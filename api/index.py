"""
Storefront Cart - Main FastAPI Application

Single entry point for the cart API.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront import config
from storefront.cart import CartManager, create_storage
from storefront.logging import get_logger
from storefront.routers import cart_router

logger = get_logger(__name__)


# ==================== FASTAPI APP ====================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    # Startup: one cart manager per app, shared by all requests
    if getattr(app.state, "cart_manager", None) is None:
        app.state.cart_manager = CartManager(create_storage(config.CART_STORAGE_BACKEND))
        logger.info(f"Cart storage backend: {config.CART_STORAGE_BACKEND}")
    yield


app = FastAPI(
    title="Storefront Cart",
    description="Shopping cart API for the storefront",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(cart_router)


# ==================== HEALTH CHECK ====================

@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "service": "storefront-cart"}
