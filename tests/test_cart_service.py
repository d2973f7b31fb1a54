import pytest

from charmz_store.common.errors import NotFoundError, ValidationError
from charmz_store.common.services.cart_service import CartService


@pytest.fixture
def cart():
    return CartService()


def _add(cart, **overrides):
    data = {
        "session_id": "s1",
        "product_id": "p1",
        "quantity": 2,
        "selected_size": "M",
        "selected_color": "Red",
    }
    data.update(overrides)
    return cart.add_to_cart(**data)


def test_same_key_merges_quantity(cart):
    first = _add(cart, quantity=2)
    second = _add(cart, quantity=3)

    items = cart.get_cart_items("s1")
    assert len(items) == 1
    assert items[0].quantity == 5
    assert second.id == first.id


def test_different_variant_is_separate_line(cart):
    _add(cart)
    _add(cart, selected_color="Blue")
    _add(cart, selected_size=None, selected_color=None)

    assert len(cart.get_cart_items("s1")) == 3


def test_sessions_are_isolated(cart):
    _add(cart, session_id="s1")
    _add(cart, session_id="s2", product_id="p2")

    assert [it.product_id for it in cart.get_cart_items("s2")] == ["p2"]


def test_add_requires_positive_quantity(cart):
    with pytest.raises(ValidationError):
        _add(cart, quantity=0)


def test_add_requires_ids(cart):
    with pytest.raises(ValidationError):
        _add(cart, session_id="")


def test_update_quantity(cart):
    item = _add(cart)

    assert cart.update_cart_item(item.id, quantity=9).quantity == 9
    with pytest.raises(NotFoundError):
        cart.update_cart_item("missing", quantity=1)
    with pytest.raises(ValidationError):
        cart.update_cart_item(item.id, quantity=0)


def test_remove_and_clear(cart):
    keep = _add(cart, session_id="s2")
    item = _add(cart)
    _add(cart, product_id="p9")

    assert cart.remove_from_cart(item.id) is True
    assert cart.remove_from_cart(item.id) is False

    cart.clear_cart("s1")
    cart.clear_cart("unknown")
    assert cart.get_cart_items("s1") == []
    assert cart.get_cart_items("s2") == [keep]
