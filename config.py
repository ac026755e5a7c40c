"""
Configuration and data loading for PayOptimizer
"""
from __future__ import annotations
import json
import os
from typing import Dict, List

from models import Order, PaymentMethod
from utils import to_cents

POINTS_ID = os.environ.get("PAYOPT_POINTS_ID", "PUNKTY")
POINTS_PARTIAL_DISCOUNT = 10  # percent off the whole order when paying partly with points
MIN_POINTS_PERCENT = 10  # share of face value that must come from points


class InputError(ValueError):
    """Malformed order or payment method input"""


def _read_json(path: str):
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        raise InputError(f"file not found: {path}")
    except json.JSONDecodeError as exc:
        raise InputError(f"invalid JSON in {path}: {exc}")
    except UnicodeDecodeError as exc:
        raise InputError(f"{path} is not UTF-8 text: {exc}")


def _amount(d: dict, key: str, what: str) -> int:
    try:
        cents = to_cents(d[key])
    except KeyError:
        raise InputError(f"{what} is missing '{key}'")
    except ValueError as exc:
        raise InputError(f"{what}: {exc}")
    if cents < 0:
        raise InputError(f"{what}: '{key}' must not be negative")
    return cents


def dict_to_order(d: dict) -> Order:
    """Convert dictionary from JSON to Order object"""
    if not isinstance(d, dict) or "id" not in d:
        raise InputError(f"order without an id: {d!r}")
    oid = str(d["id"])
    promotions = d.get("promotions") or []
    if not isinstance(promotions, list):
        raise InputError(f"order {oid}: 'promotions' must be a list")
    return Order(
        id=oid,
        value=_amount(d, "value", f"order {oid}"),
        promotions=tuple(str(p) for p in promotions),
    )


def dict_to_payment_method(d: dict) -> PaymentMethod:
    """Convert dictionary from JSON to PaymentMethod object"""
    if not isinstance(d, dict) or "id" not in d:
        raise InputError(f"payment method without an id: {d!r}")
    mid = str(d["id"])
    discount = d.get("discount")
    if isinstance(discount, str) and discount.strip().isdigit():
        discount = int(discount)
    if isinstance(discount, bool) or not isinstance(discount, int) or not 0 <= discount <= 100:
        raise InputError(f"payment method {mid}: 'discount' must be an integer 0-100")
    return PaymentMethod(id=mid, discount=discount, limit=_amount(d, "limit", f"payment method {mid}"))


def ensure_unique_ids(orders: List[Order]) -> List[Order]:
    """Reject a batch in which two orders share an id"""
    seen = set()
    for o in orders:
        if o.id in seen:
            raise InputError(f"duplicate order id: {o.id}")
        seen.add(o.id)
    return orders


def load_orders(path: str) -> List[Order]:
    """Load orders list from JSON file"""
    data = _read_json(path)
    if not isinstance(data, list):
        raise InputError(f"{path}: expected a JSON array of orders")
    return ensure_unique_ids([dict_to_order(o) for o in data])


def load_payment_methods(path: str) -> Dict[str, PaymentMethod]:
    """
    Load payment methods from JSON file.
    Accepts an array of {"id", "discount", "limit"} or an object keyed by id.
    """
    data = _read_json(path)
    if isinstance(data, dict):
        data = [dict(v, id=k) if isinstance(v, dict) else v for k, v in data.items()]
    if not isinstance(data, list):
        raise InputError(f"{path}: expected a JSON array of payment methods")

    methods: Dict[str, PaymentMethod] = {}
    for d in data:
        m = dict_to_payment_method(d)
        if m.id in methods:
            raise InputError(f"duplicate payment method id: {m.id}")
        methods[m.id] = m
    return methods
