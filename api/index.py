"""
Storefront Cart API - Main FastAPI Application

Single entry point for the cart pages (listing, cart, checkout).
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.routers import router as api_router


# ==================== FASTAPI APP ====================

app = FastAPI(
    title="Storefront Cart",
    description="Cart state engine shared by the listing, cart, and checkout pages",
    version="1.0.0",
)

# Static pages are served from a different origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)

# ==================== HEALTH CHECK ====================

@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "service": "storefront-cart"}
