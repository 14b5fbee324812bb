"""
Cart Router

Command endpoints for the product listing, cart, and checkout pages.
Every response carries the full recomputed view, so the badge, the line
table, and the order summary always match storage.
"""
from fastapi import APIRouter, Depends, HTTPException

from storefront.cart import Cart, CartStore, get_cart_store
from storefront.errors import CorruptStateError, InvalidInputError, StorageUnavailableError
from storefront.logging import get_logger
from storefront.utils.validators import sanitize_quantity
from .models import AddToCartRequest, CartItemRequest, UpdateCartItemRequest

logger = get_logger(__name__)

router = APIRouter(prefix="/cart", tags=["cart"])


def _format_cart_response(store: CartStore, cart: Cart) -> dict:
    return store.synchronizer.recompute(cart).to_dict()


def _run(action):
    """Execute a store call and map engine errors to HTTP errors."""
    try:
        return action()
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except CorruptStateError as e:
        raise HTTPException(status_code=409, detail=f"Cart data is corrupted (slot '{e.key}')")
    except StorageUnavailableError as e:
        logger.error(f"Cart storage failure: {e}", exc_info=True)
        raise HTTPException(status_code=503, detail="Cart storage unavailable")


@router.get("")
def get_cart(store: CartStore = Depends(get_cart_store)):
    """Cart page: line table, subtotal, and totals."""
    cart = _run(store.snapshot)
    return _format_cart_response(store, cart)


@router.get("/count")
def get_cart_count(store: CartStore = Depends(get_cart_store)):
    """Header badge count."""
    cart = _run(store.snapshot)
    return {"count": store.synchronizer.recompute(cart).item_count}


@router.get("/checkout")
def get_checkout_summary(store: CartStore = Depends(get_cart_store)):
    """Checkout page order box."""
    cart = _run(store.snapshot)
    return store.synchronizer.recompute(cart).checkout.to_dict()


@router.post("/add")
def add_to_cart(request: AddToCartRequest, store: CartStore = Depends(get_cart_store)):
    """Listing page "add to bag"."""
    cart = _run(lambda: store.add_product(request.title, request.price, request.image, request.quantity))
    return _format_cart_response(store, cart)


@router.patch("/item")
def update_cart_item(request: UpdateCartItemRequest, store: CartStore = Depends(get_cart_store)):
    """Quantity typed into the cart table (0 removes the line)."""
    quantity = sanitize_quantity(request.quantity)
    cart = _run(lambda: store.set_quantity(request.id, quantity))
    return _format_cart_response(store, cart)


@router.post("/item/increase")
def increase_cart_item(request: CartItemRequest, store: CartStore = Depends(get_cart_store)):
    cart = _run(lambda: store.increment(request.id))
    return _format_cart_response(store, cart)


@router.post("/item/decrease")
def decrease_cart_item(request: CartItemRequest, store: CartStore = Depends(get_cart_store)):
    cart = _run(lambda: store.decrement(request.id))
    return _format_cart_response(store, cart)


@router.delete("/item")
def remove_cart_item(id: str, store: CartStore = Depends(get_cart_store)):
    """Remove button in the cart table."""
    cart = _run(lambda: store.remove_item(id))
    return _format_cart_response(store, cart)
