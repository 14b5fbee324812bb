"""Cart models with Decimal-based pricing."""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from storefront.errors import (
    ERROR_INVALID_ID,
    ERROR_INVALID_PRICE,
    ERROR_INVALID_QUANTITY,
    ERROR_INVALID_TITLE,
    ERROR_PRICE_PRECISION,
    InvalidInputError,
)
from storefront.services.money import to_decimal, to_float


@dataclass
class CartLine:
    """One entry per distinct product identity."""
    id: str
    title: str
    price: Decimal
    image: str
    quantity: int
    
    def __post_init__(self):
        self.price = to_decimal(self.price)
    
    def validate(self) -> None:
        """
        Check the line can be stored and loaded back unchanged.
        
        The price is written as a JSON number, so it must survive a trip
        through float exactly.
        
        Raises:
            InvalidInputError: A field is missing, mistyped, or out of range
        """
        if not isinstance(self.id, str) or not self.id:
            raise InvalidInputError(ERROR_INVALID_ID)
        if not isinstance(self.title, str) or not self.title.strip():
            raise InvalidInputError(ERROR_INVALID_TITLE)
        if not isinstance(self.image, str):
            raise InvalidInputError(f"image must be a string, got {type(self.image).__name__}")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity < 1:
            raise InvalidInputError(f"{ERROR_INVALID_QUANTITY}, got {self.quantity!r}")
        if not self.price.is_finite() or self.price < 0:
            raise InvalidInputError(f"{ERROR_INVALID_PRICE}, got {self.price}")
        if to_decimal(to_float(self.price)) != self.price:
            raise InvalidInputError(f"{ERROR_PRICE_PRECISION}: {self.price}")
    
    def to_dict(self) -> dict:
        """Convert to the persisted line shape."""
        return {
            "id": self.id,
            "title": self.title,
            "price": to_float(self.price),
            "image": self.image,
            "quantity": self.quantity,
        }
    
    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        """
        Create from a persisted line.
        
        Raises:
            KeyError: A required field is missing
            ValueError: A field is mistyped or out of range
        """
        line = cls(
            id=data["id"],
            title=data["title"],
            price=to_decimal(data["price"], strict=True),
            image=data.get("image") or "",
            quantity=data["quantity"],
        )
        line.validate()
        return line


@dataclass
class Cart:
    """Ordered sequence of cart lines, insertion order preserved."""
    lines: List[CartLine] = field(default_factory=list)
    
    @property
    def is_empty(self) -> bool:
        return not self.lines
    
    def find(self, line_id: str) -> Optional[CartLine]:
        """Line with the given id, or None."""
        return next((line for line in self.lines if line.id == line_id), None)
    
    def validate(self) -> None:
        """
        Check every line and id uniqueness.
        
        Raises:
            InvalidInputError: A line is invalid or an id appears twice
        """
        seen = set()
        for line in self.lines:
            line.validate()
            if line.id in seen:
                raise InvalidInputError(f"duplicate line id '{line.id}'")
            seen.add(line.id)
    
    def to_list(self) -> list:
        """Convert to the persisted array shape."""
        return [line.to_dict() for line in self.lines]
    
    @classmethod
    def from_list(cls, data) -> "Cart":
        """
        Create from the persisted array.
        
        Raises:
            KeyError: A line is missing a required field
            TypeError: Data is not a list of objects
            ValueError: A line is invalid or an id appears twice
        """
        if not isinstance(data, list):
            raise TypeError(f"cart must be an array, got {type(data).__name__}")
        
        for entry in data:
            if not isinstance(entry, dict):
                raise TypeError(f"cart line must be an object, got {type(entry).__name__}")
        
        cart = cls(lines=[CartLine.from_dict(entry) for entry in data])
        cart.validate()
        return cart
