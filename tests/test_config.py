import json

import pytest

from config import InputError, dict_to_order, dict_to_payment_method, load_orders, load_payment_methods
from models import Order, PaymentMethod


def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_load_orders(tmp_path):
    path = write_json(tmp_path / "orders.json", [
        {"id": "ORDER1", "value": "100.00", "promotions": ["mZysk"]},
        {"id": "ORDER4", "value": 50},
    ])
    assert load_orders(path) == [
        Order("ORDER1", 10000, ("mZysk",)),
        Order("ORDER4", 5000, ()),
    ]


def test_load_payment_methods(tmp_path):
    path = write_json(tmp_path / "methods.json", [
        {"id": "PUNKTY", "discount": "15", "limit": "100.00"},
        {"id": "mZysk", "discount": 10, "limit": "180.00"},
    ])
    methods = load_payment_methods(path)
    assert list(methods) == ["PUNKTY", "mZysk"]
    assert methods["PUNKTY"] == PaymentMethod("PUNKTY", 15, 10000)
    assert methods["mZysk"].available == 18000


def test_load_payment_methods_keyed_by_id(tmp_path):
    path = write_json(tmp_path / "methods.json", {"PUNKTY": {"discount": 15, "limit": "10.00"}})
    assert load_payment_methods(path) == {"PUNKTY": PaymentMethod("PUNKTY", 15, 1000)}


def test_missing_file(tmp_path):
    with pytest.raises(InputError, match="file not found"):
        load_orders(str(tmp_path / "nope.json"))


def test_invalid_json(tmp_path):
    path = tmp_path / "orders.json"
    path.write_text("[{", encoding="utf-8")
    with pytest.raises(InputError, match="invalid JSON"):
        load_orders(str(path))


def test_duplicate_ids(tmp_path):
    orders = write_json(tmp_path / "orders.json", [{"id": "a", "value": 1}, {"id": "a", "value": 2}])
    with pytest.raises(InputError, match="duplicate order id"):
        load_orders(orders)
    methods = write_json(tmp_path / "methods.json", [
        {"id": "m", "discount": 1, "limit": 1},
        {"id": "m", "discount": 2, "limit": 2},
    ])
    with pytest.raises(InputError, match="duplicate payment method id"):
        load_payment_methods(methods)


@pytest.mark.parametrize("value", ["-1.00", "1.005", "ten", None])
def test_bad_order_value(value):
    with pytest.raises(InputError):
        dict_to_order({"id": "o", "value": value})


def test_order_without_value():
    with pytest.raises(InputError, match="missing 'value'"):
        dict_to_order({"id": "o"})


@pytest.mark.parametrize("discount", [-1, 101, 12.5, "x", True, None])
def test_bad_discount(discount):
    with pytest.raises(InputError, match="discount"):
        dict_to_payment_method({"id": "m", "discount": discount, "limit": "1.00"})


def test_input_error_is_value_error():
    assert issubclass(InputError, ValueError)


def test_non_utf8_file(tmp_path):
    path = tmp_path / "methods.json"
    path.write_bytes(b'[{"id": "\xff", "discount": 1, "limit": 1}]')
    with pytest.raises(InputError, match="not UTF-8"):
        load_payment_methods(str(path))
