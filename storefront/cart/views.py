"""
View Synchronizer

Derives display aggregates (badge count, line table, order summary) from a
cart snapshot and pushes them to subscribed renderers after each mutation.

Money is accumulated unrounded and rounded once for display.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, List, Optional, Tuple

from storefront.logging import get_logger
from storefront.services.money import add, format_money, multiply, round_money, to_decimal, to_float
from .models import Cart, CartLine

logger = get_logger(__name__)


# ==================== PURE AGGREGATES ====================

def total_item_count(cart: Cart) -> int:
    """Sum of every line's quantity (0 for an empty cart)."""
    return sum(line.quantity for line in cart.lines)


def _raw_line_total(line: CartLine) -> Decimal:
    return multiply(line.price, line.quantity)


def _raw_subtotal(cart: Cart) -> Decimal:
    total = Decimal("0")
    for line in cart.lines:
        total = add(total, _raw_line_total(line))
    return total


def line_total(line: CartLine) -> Decimal:
    """``price * quantity`` rounded to cents for display."""
    return round_money(_raw_line_total(line))


def subtotal(cart: Cart) -> Decimal:
    """Sum of unrounded line totals, rounded once."""
    return round_money(_raw_subtotal(cart))


def order_total(cart: Cart, flat_shipping_fee) -> Decimal:
    """Subtotal plus the injected flat shipping fee."""
    return round_money(add(_raw_subtotal(cart), to_decimal(flat_shipping_fee)))


# ==================== DISPLAY SNAPSHOTS ====================

@dataclass(frozen=True)
class LineRow:
    """One row of the cart page table."""
    id: str
    title: str
    image: str
    quantity: int
    price: Decimal
    total: Decimal
    price_display: str
    total_display: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "image": self.image,
            "quantity": self.quantity,
            "price": to_float(self.price),
            "total": to_float(self.total),
            "price_display": self.price_display,
            "total_display": self.total_display,
        }


@dataclass(frozen=True)
class CheckoutSummary:
    """Order box shown on the checkout page."""
    rows: Tuple[Tuple[str, str], ...]  # ("Red Mug x 3", "$29.97")
    subtotal_display: str
    shipping_display: str  # "Flat rate: $15.00"
    total_display: str

    def to_dict(self) -> dict:
        return {
            "rows": [{"label": label, "total": total} for label, total in self.rows],
            "subtotal": self.subtotal_display,
            "shipping": self.shipping_display,
            "total": self.total_display,
        }


@dataclass(frozen=True)
class CartView:
    """Every aggregate a page needs, computed from one cart snapshot."""
    item_count: int
    lines: Tuple[LineRow, ...]
    subtotal: Decimal
    shipping_fee: Decimal
    total: Decimal
    checkout: CheckoutSummary

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def to_dict(self) -> dict:
        """JSON-ready form for HTTP front ends."""
        return {
            "item_count": self.item_count,
            "lines": [row.to_dict() for row in self.lines],
            "subtotal": to_float(self.subtotal),
            "shipping_fee": to_float(self.shipping_fee),
            "total": to_float(self.total),
            "checkout": self.checkout.to_dict(),
        }


Renderer = Callable[[CartView], None]
CountRenderer = Callable[[int], None]


class ViewSynchronizer:
    """
    Recomputes display aggregates and hands them to renderers.

    Renderers are plain callables. Full renderers receive a ``CartView``
    after set-quantity and remove; count renderers receive only the badge
    count and run after every mutation, including add.

    Usage:
        sync = ViewSynchronizer(flat_shipping_fee=Decimal("15.00"))
        sync.subscribe(render_cart_table)
        sync.subscribe_count(render_badge)
    """

    def __init__(self, flat_shipping_fee=Decimal("15.00"), currency_symbol: str = "$"):
        self.flat_shipping_fee = to_decimal(flat_shipping_fee)
        self.currency_symbol = currency_symbol
        self._renderers: List[Renderer] = []
        self._count_renderers: List[CountRenderer] = []

    def subscribe(self, renderer: Renderer) -> None:
        self._renderers.append(renderer)

    def subscribe_count(self, renderer: CountRenderer) -> None:
        self._count_renderers.append(renderer)

    def unsubscribe(self, renderer) -> None:
        if renderer in self._renderers:
            self._renderers.remove(renderer)
        if renderer in self._count_renderers:
            self._count_renderers.remove(renderer)

    def _money(self, value) -> str:
        return format_money(value, self.currency_symbol)

    def recompute(self, cart: Cart) -> CartView:
        """Build every aggregate from ``cart`` in a single pass."""
        rows = []
        summary_rows = []
        count = 0
        raw_subtotal = Decimal("0")

        for line in cart.lines:
            raw_total = _raw_line_total(line)
            count += line.quantity
            raw_subtotal = add(raw_subtotal, raw_total)

            total = round_money(raw_total)
            rows.append(LineRow(
                id=line.id,
                title=line.title,
                image=line.image,
                quantity=line.quantity,
                price=line.price,
                total=total,
                price_display=self._money(line.price),
                total_display=self._money(total),
            ))
            summary_rows.append((f"{line.title} x {line.quantity}", self._money(total)))

        sub = round_money(raw_subtotal)
        total = round_money(add(raw_subtotal, self.flat_shipping_fee))

        checkout = CheckoutSummary(
            rows=tuple(summary_rows),
            subtotal_display=self._money(sub),
            shipping_display=f"Flat rate: {self._money(self.flat_shipping_fee)}",
            total_display=self._money(total),
        )
        return CartView(
            item_count=count,
            lines=tuple(rows),
            subtotal=sub,
            shipping_fee=self.flat_shipping_fee,
            total=total,
            checkout=checkout,
        )

    def _notify_count(self, count: int) -> None:
        for renderer in self._count_renderers:
            renderer(count)

    def refresh_count(self, cart: Cart) -> int:
        """Recompute the badge count and notify count renderers."""
        count = total_item_count(cart)
        self._notify_count(count)
        return count

    def refresh(self, cart: Cart) -> CartView:
        """Recompute every aggregate and notify all renderers."""
        view = self.recompute(cart)
        logger.debug(f"Cart view recomputed: {view.item_count} items, subtotal {view.subtotal}")
        for renderer in self._renderers:
            renderer(view)
        self._notify_count(view.item_count)
        return view


# Singleton instance
_synchronizer: Optional[ViewSynchronizer] = None


def get_view_synchronizer() -> ViewSynchronizer:
    """Get ViewSynchronizer singleton configured from the environment."""
    global _synchronizer
    if _synchronizer is None:
        from storefront import config
        _synchronizer = ViewSynchronizer(
            flat_shipping_fee=config.get_flat_shipping_fee(),
            currency_symbol=config.CURRENCY_SYMBOL,
        )
    return _synchronizer
