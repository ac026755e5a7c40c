"""
Discount math and order prioritization for PayOptimizer
"""
from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP
from typing import List

from config import MIN_POINTS_PERCENT, POINTS_PARTIAL_DISCOUNT
from models import Ledger, Order, PaymentPlan
from utils import round_half_up_div

RATIO_PLACES = Decimal("0.0001")


def percent_of(amount: int, percent: int) -> int:
    """percent of amount in cents, rounded half-up"""
    return round_half_up_div(amount * percent, 100)


def apply_discount(amount: int, percent: int) -> int:
    """Amount after subtracting a percentage discount"""
    return amount - percent_of(amount, percent)


def min_points_payment(value: int) -> int:
    """Smallest points contribution that unlocks the partial-points discount"""
    return percent_of(value, MIN_POINTS_PERCENT)


def original_amount(charged: int, percent: int) -> int:
    """Pre-discount magnitude of an amount charged at percent discount"""
    if percent >= 100:
        raise ValueError("no original amount for a 100% discount")
    return round_half_up_div(charged * 100, 100 - percent)


def best_case_discount(order: Order, ledger: Ledger, points_id: str) -> int:
    """
    Largest discount currently affordable for an order, over full points,
    full card on each eligible promotion, and partial points.
    """
    value = order.value
    if value <= 0:
        return 0

    best = 0
    points = ledger.methods.get(points_id)
    if points is not None and points.available >= apply_discount(value, points.discount):
        best = percent_of(value, points.discount)

    for promo in order.promotions:
        method = ledger.methods.get(promo)
        if method is None or promo == points_id:
            continue
        if method.available >= apply_discount(value, method.discount):
            best = max(best, percent_of(value, method.discount))

    if points is not None and points.available >= min_points_payment(value):
        best = max(best, percent_of(value, POINTS_PARTIAL_DISCOUNT))

    return best


def discount_ratio(order: Order, ledger: Ledger, points_id: str) -> Decimal:
    """best-case discount / value, 4 decimal places; 0 for non-positive values"""
    if order.value <= 0:
        return Decimal(0)
    ratio = Decimal(best_case_discount(order, ledger, points_id)) / Decimal(order.value)
    return ratio.quantize(RATIO_PLACES, rounding=ROUND_HALF_UP)


def prioritize_orders(orders: List[Order], ledger: Ledger, points_id: str) -> List[Order]:
    """
    Sort orders by discount ratio, richest first.
    Stable: orders with equal ratio keep their relative order.
    """
    ratios = {i: discount_ratio(o, ledger, points_id) for i, o in enumerate(orders)}
    indexed = sorted(range(len(orders)), key=lambda i: ratios[i], reverse=True)
    return [orders[i] for i in indexed]


def plan_total(plan: PaymentPlan) -> int:
    """What an order is charged under a plan"""
    return sum(plan.values())
