"""
Tests for Cart Store
"""

import json
from decimal import Decimal
from unittest.mock import Mock

import pytest

from storefront.cart import Cart, CartLine, CartStore, InMemoryStorage, derive_identity
from storefront.cart.identity import normalize_title
from storefront.errors import CorruptStateError, InvalidInputError


class TestIdentity:
    """Tests for product identity derivation."""
    
    def test_normalizes_title(self):
        """Test trimming, lowercasing, and whitespace collapsing."""
        assert normalize_title("  Red   Mug\t") == "red_mug"
    
    def test_appends_price(self):
        """Test the id joins title and price with an underscore."""
        assert derive_identity("Red Mug", Decimal("9.99")) == "red_mug_9.99"
    
    def test_case_and_whitespace_insensitive(self):
        """Test titles differing only in case/whitespace share an id."""
        assert derive_identity("red mug", 9.99) == derive_identity("  RED \n  Mug ", "9.99")
    
    def test_different_price_different_id(self):
        """Test that price is part of the identity."""
        assert derive_identity("Red Mug", "9.99") != derive_identity("Red Mug", "10.99")
    
    @pytest.mark.parametrize("price,expected", [
        (10, "widget_10"),
        (Decimal("10.00"), "widget_10"),
        ("10.50", "widget_10.5"),
        (100, "widget_100"),
        (0, "widget_0"),
    ])
    def test_price_uses_shortest_form(self, price, expected):
        """Test price formatting matches the listing's number form."""
        assert derive_identity("Widget", price) == expected


class TestCartModels:
    """Tests for CartLine / Cart serialization."""
    
    def test_line_price_normalized_to_decimal(self):
        """Test float prices are converted through str."""
        line = CartLine(id="a_1.1", title="A", price=1.1, image="", quantity=1)
        assert line.price == Decimal("1.1")
    
    def test_line_to_dict(self, red_mug):
        """Test the persisted line shape."""
        assert red_mug.to_dict() == {
            "id": "red_mug_9.99",
            "title": "Red Mug",
            "price": 9.99,
            "image": "img/red-mug.jpg",
            "quantity": 1,
        }
    
    def test_from_list_rejects_duplicate_ids(self, red_mug):
        """Test that a stored cart with a repeated id is invalid."""
        data = [red_mug.to_dict(), red_mug.to_dict()]
        with pytest.raises(ValueError):
            Cart.from_list(data)
    
    def test_find(self, red_mug, blue_plate):
        """Test lookup by id."""
        cart = Cart(lines=[red_mug, blue_plate])
        assert cart.find("blue_plate_24.5") is blue_plate
        assert cart.find("missing") is None


class TestPersistence:
    """Tests for load/save round-trips."""
    
    def test_absent_slot_is_empty_cart(self, store):
        """Test loading before anything was saved."""
        cart = store.load()
        assert cart.lines == []
        assert cart.is_empty
    
    def test_round_trip(self, store, red_mug, blue_plate):
        """Test load(save(cart)) == cart, order preserved."""
        cart = Cart(lines=[blue_plate, red_mug])
        store.save(cart)
        
        assert store.load() == cart
        assert [line.id for line in store.load().lines] == ["blue_plate_24.5", "red_mug_9.99"]
    
    @pytest.mark.parametrize("price", [Decimal("0.1"), Decimal("1234567.89"), Decimal("0.01"), Decimal("19.999")])
    def test_round_trip_price(self, store, price):
        """Test stored prices come back unchanged."""
        line = CartLine(id="cup", title="Cup", price=price, image="", quantity=1)
        store.save(Cart(lines=[line]))
        
        assert store.load().lines[0].price == price
    
    def test_save_rejects_unstorable_price(self, store, storage, red_mug):
        """Test a price that would not load back unchanged is never written."""
        store.save(Cart(lines=[red_mug]))
        before = storage.read()
        line = CartLine(id="cup", title="Cup", price=Decimal("0.12345678901234567890"), image="", quantity=1)
        
        with pytest.raises(InvalidInputError):
            store.save(Cart(lines=[red_mug, line]))
        assert storage.read() == before
    
    def test_save_rejects_duplicate_ids(self, store, storage, red_mug):
        """Test save refuses a cart that load would reject."""
        with pytest.raises(InvalidInputError):
            store.save(Cart(lines=[red_mug, red_mug]))
        assert storage.read() is None
    
    def test_saved_layout(self, store, red_mug, storage):
        """Test the slot holds a JSON array of line objects."""
        store.save(Cart(lines=[red_mug]))
        
        data = json.loads(storage.read())
        assert isinstance(data, list)
        assert data[0]["id"] == "red_mug_9.99"
        assert data[0]["price"] == 9.99
        assert data[0]["quantity"] == 1
    
    def test_save_overwrites(self, store, red_mug, blue_plate):
        """Test a save fully replaces prior content."""
        store.save(Cart(lines=[red_mug, blue_plate]))
        store.save(Cart(lines=[blue_plate]))
        
        assert [line.id for line in store.load().lines] == ["blue_plate_24.5"]
    
    def test_field_order_insensitive(self):
        """Test that persisted field order does not matter."""
        raw = '[{"quantity": 2, "image": "x.jpg", "price": 5, "title": "Cup", "id": "cup_5"}]'
        store = CartStore(InMemoryStorage(initial=raw))
        
        line = store.load().lines[0]
        assert line.id == "cup_5"
        assert line.quantity == 2
        assert line.price == Decimal("5")
    
    @pytest.mark.parametrize("raw", [
        "not json",
        '{"id": "cup_5"}',
        '["cup_5"]',
        '[{"id": "cup_5", "title": "Cup", "image": ""}]',
        '[{"id": "cup_5", "title": "Cup", "price": "abc", "image": "", "quantity": 1}]',
        '[{"id": "cup_5", "title": "Cup", "price": 5, "image": "", "quantity": 0}]',
        '[{"id": "cup_5", "title": "Cup", "price": -5, "image": "", "quantity": 1}]',
        '[{"id": "cup_5", "title": "Cup", "price": 5, "image": "", "quantity": "2"}]',
        '[{"id": "cup_5", "title": "  ", "price": 5, "image": "", "quantity": 1}]',
        '[{"id": "", "title": "Cup", "price": 5, "image": "", "quantity": 1}]',
    ])
    def test_corrupt_slot_raises(self, raw):
        """Test present-but-invalid data is reported, not emptied."""
        storage = InMemoryStorage(initial=raw)
        store = CartStore(storage)
        
        with pytest.raises(CorruptStateError) as exc_info:
            store.load()
        
        assert exc_info.value.key == "cartItems"
        # The slot is left untouched for inspection
        assert storage.read() == raw
    
    def test_corrupt_slot_blocks_mutation(self):
        """Test mutations propagate the corruption instead of overwriting."""
        storage = InMemoryStorage(initial="{broken")
        store = CartStore(storage)
        
        with pytest.raises(CorruptStateError):
            store.add_product("Red Mug", "9.99")
        assert storage.read() == "{broken"


class TestAddItem:
    """Tests for add/merge semantics."""
    
    def test_add_new_line(self, store, red_mug):
        """Test adding to an empty cart."""
        cart = store.add_item(red_mug)
        
        assert len(cart.lines) == 1
        assert cart.lines[0].id == "red_mug_9.99"
        assert store.load() == cart
    
    def test_merge_accumulates_quantity(self, store, red_mug):
        """Test add(X, a); add(X, b) gives one line with a + b."""
        store.add_item(red_mug)
        again = CartLine(id=red_mug.id, title=red_mug.title, price=red_mug.price, image=red_mug.image, quantity=4)
        cart = store.add_item(again)
        
        assert len(cart.lines) == 1
        assert cart.lines[0].quantity == 5
    
    def test_merge_keeps_original_price(self, store, red_mug):
        """Test re-adding the same id never changes the stored price."""
        store.add_item(red_mug)
        store.add_item(CartLine(id=red_mug.id, title="Other", price=Decimal("1.00"), image="", quantity=1))
        
        line = store.load().lines[0]
        assert line.price == Decimal("9.99")
        assert line.title == "Red Mug"
    
    def test_insertion_order(self, store, red_mug, blue_plate):
        """Test new lines are appended and merges keep position."""
        store.add_item(red_mug)
        store.add_item(blue_plate)
        cart = store.add_item(red_mug)
        
        assert [line.id for line in cart.lines] == ["red_mug_9.99", "blue_plate_24.5"]
    
    def test_add_product_derives_id(self, store):
        """Test listing data is turned into a candidate line."""
        store.add_product("  Red Mug ", 9.99, "img/red-mug.jpg")
        cart = store.add_product("red mug", "9.99", "img/red-mug.jpg")
        
        assert len(cart.lines) == 1
        assert cart.lines[0].id == "red_mug_9.99"
        assert cart.lines[0].quantity == 2
    
    def test_add_does_not_share_candidate(self, store, red_mug):
        """Test the stored line is a copy of the candidate."""
        store.add_item(red_mug)
        store.add_item(red_mug)
        
        assert red_mug.quantity == 1
    
    @pytest.mark.parametrize("field,value", [
        ("quantity", 0),
        ("quantity", -3),
        ("price", Decimal("-1.00")),
        ("title", "   "),
        ("id", ""),
    ])
    def test_rejects_invalid_candidate(self, store, storage, red_mug, field, value):
        """Test an invalid candidate raises and the slot stays loadable."""
        store.add_item(red_mug)
        before = storage.read()
        setattr(red_mug, field, value)
        
        with pytest.raises(InvalidInputError):
            store.add_item(red_mug)
        
        assert storage.read() == before
        assert store.load().lines[0].quantity == 1
    
    def test_negative_merge_rejected(self, store, red_mug):
        """Test a negative quantity cannot be merged into an existing line."""
        store.add_item(red_mug)
        again = CartLine(id=red_mug.id, title=red_mug.title, price=red_mug.price, image=red_mug.image, quantity=-5)
        
        with pytest.raises(InvalidInputError):
            store.add_item(again)
        assert store.load().lines[0].quantity == 1
    
    @pytest.mark.parametrize("title,price", [
        ("Red Mug", "abc"),
        ("Red Mug", -2),
        ("   ", "9.99"),
    ])
    def test_add_product_rejects_bad_listing_data(self, store, storage, title, price):
        """Test listing data is parsed strictly, never defaulted to zero."""
        with pytest.raises(InvalidInputError):
            store.add_product(title, price)
        assert storage.read() is None


class TestSetQuantity:
    """Tests for absolute quantity updates."""
    
    def test_sets_exact_quantity(self, store, red_mug):
        """Test the quantity is replaced, not incremented."""
        store.add_item(red_mug)
        cart = store.set_quantity("red_mug_9.99", 7)
        
        assert cart.lines[0].quantity == 7
        assert store.load().lines[0].quantity == 7
    
    @pytest.mark.parametrize("quantity", [0, -1, -50])
    def test_non_positive_removes_line(self, store, red_mug, blue_plate, quantity):
        """Test quantity <= 0 removes the line entirely."""
        store.add_item(red_mug)
        store.add_item(blue_plate)
        cart = store.set_quantity("red_mug_9.99", quantity)
        
        assert cart.find("red_mug_9.99") is None
        assert [line.id for line in store.load().lines] == ["blue_plate_24.5"]
    
    def test_missing_id_is_noop(self, store, red_mug, storage):
        """Test unknown ids neither fail nor write."""
        store.add_item(red_mug)
        storage.write = Mock(wraps=storage.write)
        
        cart = store.set_quantity("nope", 3)
        
        assert cart == store.load()
        storage.write.assert_not_called()


class TestStepButtons:
    """Tests for the +/- buttons."""
    
    def test_increment(self, store, red_mug):
        store.add_item(red_mug)
        assert store.increment("red_mug_9.99").lines[0].quantity == 2
    
    def test_decrement_to_zero_removes(self, store, red_mug):
        store.add_item(red_mug)
        assert store.decrement("red_mug_9.99").is_empty
    
    def test_missing_id_is_noop(self, store, red_mug):
        store.add_item(red_mug)
        assert store.increment("nope").lines[0].quantity == 1
    
    def test_step_reads_slot_once(self, store, storage, red_mug):
        """Test each press is a single read-modify-write."""
        store.add_item(red_mug)
        storage.read = Mock(wraps=storage.read)
        
        store.increment("red_mug_9.99")
        assert storage.read.call_count == 1
        
        storage.read.reset_mock()
        store.decrement("red_mug_9.99")
        assert storage.read.call_count == 1


class TestRemoveItem:
    """Tests for line removal."""
    
    def test_removes_line(self, store, red_mug, blue_plate):
        store.add_item(red_mug)
        store.add_item(blue_plate)
        cart = store.remove_item("blue_plate_24.5")
        
        assert [line.id for line in cart.lines] == ["red_mug_9.99"]
        assert store.load() == cart
    
    def test_missing_id_leaves_cart_unchanged(self, store, red_mug):
        """Test removing an absent id returns the same cart."""
        before = store.add_item(red_mug)
        after = store.remove_item("nope")
        
        assert after == before


class TestSharedSlot:
    """Tests for independent views over one persisted slot."""
    
    def test_store_reads_fresh_state(self, storage, red_mug):
        """Test a second store sees writes made by the first."""
        listing = CartStore(storage)
        cart_page = CartStore(storage)
        
        listing.add_item(red_mug)
        
        assert cart_page.set_quantity("red_mug_9.99", 4).lines[0].quantity == 4
        assert listing.load().lines[0].quantity == 4
    
    def test_last_write_wins(self, storage, red_mug, blue_plate):
        """Test an unsynchronized save overwrites the other context."""
        first = CartStore(storage)
        second = CartStore(storage)
        
        stale = second.load()
        first.add_item(red_mug)
        stale.lines.append(blue_plate)
        second.save(stale)
        
        assert [line.id for line in first.load().lines] == ["blue_plate_24.5"]


class TestEndToEnd:
    """The listing -> cart -> checkout scenario."""
    
    def test_red_mug_scenario(self, store, synchronizer):
        """Test adding, merging, totals, and removal."""
        from storefront.cart import order_total, subtotal, total_item_count
        
        cart = store.add_product("Red Mug", 9.99, quantity=1)
        assert len(cart.lines) == 1
        assert cart.lines[0].id == "red_mug_9.99"
        assert cart.lines[0].quantity == 1
        
        cart = store.add_product("Red Mug", 9.99, quantity=2)
        assert cart.lines[0].quantity == 3
        assert total_item_count(cart) == 3
        assert subtotal(cart) == Decimal("29.97")
        assert order_total(cart, Decimal("15.00")) == Decimal("44.97")
        
        cart = store.set_quantity("red_mug_9.99", 0)
        assert cart.is_empty
        assert total_item_count(cart) == 0
        assert store.load().is_empty
