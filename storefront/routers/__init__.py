"""API routers.

Combines the cart router under the /api prefix.
"""

from fastapi import APIRouter

from .cart import router as cart_router

router = APIRouter(prefix="/api")
router.include_router(cart_router)

__all__ = ["router"]
