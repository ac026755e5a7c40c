import pytest

from models import Order, PaymentMethod


def make_order(order_id, value, *promotions):
    """value in cents"""
    return Order(order_id, value, tuple(promotions))


@pytest.fixture
def methods():
    """The sample method set: points plus two promotional cards."""
    return {
        "PUNKTY": PaymentMethod("PUNKTY", 15, 10000),
        "mZysk": PaymentMethod("mZysk", 10, 18000),
        "BosBankrut": PaymentMethod("BosBankrut", 5, 20000),
    }


@pytest.fixture
def sample_orders():
    return [
        make_order("ORDER1", 10000, "mZysk"),
        make_order("ORDER2", 20000, "BosBankrut"),
        make_order("ORDER3", 15000, "mZysk", "BosBankrut"),
        make_order("ORDER4", 5000),
    ]
