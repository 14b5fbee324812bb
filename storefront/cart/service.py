"""Cart store: identity, mutations, and persistence round-trips."""
import json
from typing import Optional

from storefront.errors import CorruptStateError
from storefront.logging import get_logger, sanitize_id_for_logging, sanitize_string_for_logging
from storefront.services.money import Number
from storefront.utils.validators import parse_price, validate_title
from .identity import derive_identity
from .models import Cart, CartLine
from .storage import CartStorage
from .views import ViewSynchronizer

logger = get_logger(__name__)


class CartStore:
    """
    Owns the cart held in a single storage slot.

    Every operation reads the slot, applies its change, and writes the whole
    cart back. Nothing is cached between calls, so two stores over the same
    slot see each other's writes (last write wins).

    Usage:
        store = CartStore(InMemoryStorage(), ViewSynchronizer())
        store.add_product("Red Mug", 9.99, "img/mug.jpg")
        store.set_quantity("red_mug_9.99", 3)
        store.remove_item("red_mug_9.99")
    """

    def __init__(self, storage: CartStorage, synchronizer: Optional[ViewSynchronizer] = None):
        self.storage = storage
        self.synchronizer = synchronizer or ViewSynchronizer()

    # ==================== PERSISTENCE ====================

    def load(self) -> Cart:
        """
        Read the cart from storage.

        Returns:
            Persisted cart, or an empty cart if the slot is absent

        Raises:
            CorruptStateError: Slot is present but does not hold a valid cart
        """
        raw = self.storage.read()
        if raw is None:
            return Cart()

        try:
            return Cart.from_list(json.loads(raw))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Corrupted cart data in slot '{self.storage.key}': {e}")
            raise CorruptStateError(self.storage.key, str(e)) from e

    def save(self, cart: Cart) -> None:
        """
        Serialize the cart and overwrite the slot.

        Raises:
            InvalidInputError: Cart holds a line that could not be loaded back
        """
        cart.validate()
        self.storage.write(json.dumps(cart.to_list()))

    def snapshot(self) -> Cart:
        """Current cart for rendering; no recompute is triggered."""
        return self.load()

    def refresh(self) -> Cart:
        """Load the cart and push a full recompute (page load)."""
        cart = self.load()
        self.synchronizer.refresh(cart)
        return cart

    # ==================== MUTATIONS ====================

    def add_item(self, candidate: CartLine) -> Cart:
        """
        Add a line, merging into an existing line with the same id.

        Repeated adds accumulate quantity; the stored price of an existing
        line is never changed.

        Raises:
            InvalidInputError: Candidate is not a storable line; the slot is
                left untouched
        """
        candidate.validate()
        cart = self.load()
        existing = cart.find(candidate.id)

        if existing:
            existing.quantity += candidate.quantity
            logger.debug(
                f"Merged {candidate.quantity} into line {sanitize_id_for_logging(candidate.id)} "
                f"(now {existing.quantity})"
            )
        else:
            cart.lines.append(CartLine(
                id=candidate.id,
                title=candidate.title,
                price=candidate.price,
                image=candidate.image,
                quantity=candidate.quantity,
            ))
            logger.debug(f"Added line {sanitize_id_for_logging(candidate.id)} x{candidate.quantity}")

        self.save(cart)
        self.synchronizer.refresh_count(cart)
        return cart

    def add_product(self, title: str, price: Number, image: str = "", quantity: int = 1) -> Cart:
        """
        Build a candidate from listing data (deriving its id) and add it.

        Raises:
            InvalidInputError: Title is blank or price is not a non-negative number
        """
        title = validate_title(title)
        price = parse_price(price)
        logger.info(f"Add to cart: {sanitize_string_for_logging(title)} @ {price}")
        candidate = CartLine(
            id=derive_identity(title, price),
            title=title,
            price=price,
            image=image,
            quantity=quantity,
        )
        return self.add_item(candidate)

    def set_quantity(self, line_id: str, new_quantity: int) -> Cart:
        """
        Set a line's quantity exactly; ``<= 0`` removes the line.

        An unknown id is a no-op: nothing is written and no view is
        recomputed.
        """
        cart = self.load()
        line = cart.find(line_id)
        if line is None:
            return cart
        return self._apply_quantity(cart, line, new_quantity)

    def increment(self, line_id: str) -> Cart:
        """Cart page "+" button."""
        return self._step(line_id, 1)

    def decrement(self, line_id: str) -> Cart:
        """Cart page "-" button; stepping below 1 removes the line."""
        return self._step(line_id, -1)

    def _step(self, line_id: str, delta: int) -> Cart:
        cart = self.load()
        line = cart.find(line_id)
        if line is None:
            return cart
        return self._apply_quantity(cart, line, line.quantity + delta)

    def _apply_quantity(self, cart: Cart, line: CartLine, new_quantity: int) -> Cart:
        if new_quantity <= 0:
            cart.lines = [item for item in cart.lines if item.id != line.id]
            logger.debug(f"Removed line {sanitize_id_for_logging(line.id)} (quantity {new_quantity})")
        else:
            line.quantity = new_quantity

        self.save(cart)
        self.synchronizer.refresh(cart)
        return cart

    def remove_item(self, line_id: str) -> Cart:
        """
        Drop the line with ``line_id``.

        An absent id leaves the lines unchanged; the slot is still rewritten
        and views recomputed, so a stale page re-renders from storage.
        """
        cart = self.load()
        cart.lines = [line for line in cart.lines if line.id != line_id]
        logger.debug(f"Removed line {sanitize_id_for_logging(line_id)}")
        self.save(cart)
        self.synchronizer.refresh(cart)
        return cart


# Singleton instance
_cart_store: Optional[CartStore] = None


def get_cart_store() -> CartStore:
    """Get CartStore singleton built from the environment configuration."""
    global _cart_store
    if _cart_store is None:
        from storefront import config
        from .storage import create_storage
        from .views import get_view_synchronizer

        _cart_store = CartStore(
            storage=create_storage(config.CART_STORAGE_BACKEND, config.CART_STORAGE_KEY),
            synchronizer=get_view_synchronizer(),
        )
    return _cart_store
