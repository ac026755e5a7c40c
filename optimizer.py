"""
Payment allocation engine for PayOptimizer

Orders are prioritized once, evaluated and committed one at a time against a
shared Ledger, then a single sweep moves card-paid amounts into any points
capacity left over.
"""
from __future__ import annotations
import logging
from decimal import Decimal
from typing import Dict, Iterator, List, Mapping, Sequence, Tuple

from computations import (
    apply_discount,
    min_points_payment,
    original_amount,
    plan_total,
    prioritize_orders,
)
from config import POINTS_ID, POINTS_PARTIAL_DISCOUNT
from models import Ledger, Order, PaymentMethod, PaymentPlan
from utils import format_amount, from_cents

logger = logging.getLogger(__name__)


class PaymentOptimizer:
    """
    Greedy, single-pass allocation of payment methods to a batch of orders.

    One instance owns its Ledger for the duration of a run and is not
    thread-safe. The PaymentMethod objects passed in are updated in place.
    """

    def __init__(
        self,
        orders: Sequence[Order],
        payment_methods: Mapping[str, PaymentMethod],
        points_id: str = POINTS_ID,
    ):
        self.orders: List[Order] = list(orders)
        self.points_id = points_id
        self.ledger = Ledger(dict(payment_methods))
        self._plans: Dict[str, PaymentPlan] = {}
        self._processed: List[str] = []
        self._shortfalls: Dict[str, int] = {}

    # ---------- Run ----------
    def optimize(self) -> Dict[str, Decimal]:
        """
        Allocate every order and return method id -> total amount used,
        covering every known method.
        """
        self.orders = prioritize_orders(self.orders, self.ledger, self.points_id)
        logger.debug("Processing order: %s", [o.id for o in self.orders])

        for order in self.orders:
            self.process_order(order)

        self.post_process_unused_points()

        logger.info(
            "Allocated %d of %d orders, %d underfunded",
            len(self._plans), len(self.orders), len(self._shortfalls),
        )
        return self.summary()

    def process_order(self, order: Order) -> None:
        if order.value <= 0:
            logger.debug("Skipping order %s with non-positive value", order.id)
            return
        plan, shortfall = self.evaluate(order)
        self.commit(order, plan, shortfall)

    # ---------- Strategy evaluation ----------
    def evaluate(self, order: Order) -> Tuple[PaymentPlan, int]:
        """
        Pick the cheapest payment plan for one order without touching the
        Ledger. Returns (plan, shortfall); shortfall is the un-discounted
        balance left when no combination of methods covers the order.
        """
        if order.value <= 0:
            return {}, 0

        best: PaymentPlan = {}
        best_strategy = None
        lowest = order.value
        for strategy, plan in self._candidate_plans(order):
            cost = plan_total(plan)
            if cost < lowest:
                best, best_strategy, lowest = plan, strategy, cost

        if best:
            logger.debug("Order %s: %s plan costs %s", order.id, best_strategy, format_amount(lowest))
            return best, 0

        plan, shortfall = self._blend_plan(order)
        logger.debug("Order %s: multi-method plan %s", order.id, plan)
        return plan, shortfall

    def _candidate_plans(self, order: Order) -> Iterator[Tuple[str, PaymentPlan]]:
        """Plans from the full points, full card and partial points strategies, in that order"""
        for plan in self._full_points_plans(order):
            yield "full points", plan
        for plan in self._full_card_plans(order):
            yield "full card", plan
        for plan in self._partial_points_plans(order):
            yield "partial points", plan

    def _full_points_plans(self, order: Order) -> Iterator[PaymentPlan]:
        points = self.ledger.methods.get(self.points_id)
        if points is None:
            return
        amount = apply_discount(order.value, points.discount)
        if points.available >= amount:
            yield {self.points_id: amount}

    def _full_card_plans(self, order: Order) -> Iterator[PaymentPlan]:
        # listed order decides ties between equally cheap cards
        for promo in order.promotions:
            if promo == self.points_id:
                continue
            card = self.ledger.methods.get(promo)
            if card is None or card.available <= 0:
                continue
            amount = apply_discount(order.value, card.discount)
            if card.available >= amount:
                yield {promo: amount}

    def _partial_points_plans(self, order: Order) -> Iterator[PaymentPlan]:
        points = self.ledger.methods.get(self.points_id)
        if points is None or points.available <= 0:
            return

        discounted = apply_discount(order.value, POINTS_PARTIAL_DISCOUNT)
        min_points = min_points_payment(order.value)
        step = max(min_points, 1)
        ceiling = min(points.available, order.value)
        cards = self._card_candidates(order)

        for contribution in range(min_points, ceiling + 1, step):
            # the remainder is charged at face value whichever card takes it
            remainder = max(0, discounted - contribution)
            for card_id in cards:
                if self.ledger.available(card_id) >= remainder:
                    plan = {self.points_id: contribution}
                    if remainder > 0:
                        plan[card_id] = remainder
                    yield plan

    def _blend_plan(self, order: Order) -> Tuple[PaymentPlan, int]:
        """
        Fallback: spread the order over several methods, richest discount
        first, until it is paid or the methods run out.
        """
        methods = self.ledger.methods
        points = methods.get(self.points_id)
        min_points = min_points_payment(order.value)
        min_affordable = points is not None and points.available >= min_points

        plan: PaymentPlan = {}
        remaining = order.value
        candidates: List[PaymentMethod] = []
        if min_affordable:
            if min_points > 0:
                plan[self.points_id] = min_points
            remaining = apply_discount(order.value, POINTS_PARTIAL_DISCOUNT) - min_points
        elif points is not None:
            candidates.append(points)
        candidates.extend(methods[mid] for mid in self._card_candidates(order))
        candidates.sort(key=lambda m: m.discount, reverse=True)

        card_added = False
        for method in candidates:
            if remaining <= 0:
                break
            available = method.available - plan.get(method.id, 0)
            if available <= 0:
                continue

            if method.id == self.points_id:
                percent = method.discount
            elif not card_added and method.id in order.promotions:
                percent = method.discount
            else:
                percent = 0

            due = apply_discount(remaining, percent)
            charge = min(due, available)
            if charge > 0:
                plan[method.id] = plan.get(method.id, 0) + charge
            if method.id != self.points_id:
                card_added = True

            if percent == 0:
                remaining -= charge
            elif charge < due:
                remaining -= original_amount(charge, percent)
            else:
                remaining = 0

        return plan, max(remaining, 0)

    def _card_candidates(self, order: Order) -> List[str]:
        """Known non-points methods: the order's promotions first, in listed order, then the rest"""
        methods = self.ledger.methods
        out: List[str] = []
        for mid in list(order.promotions) + list(methods):
            if mid == self.points_id or mid not in methods or mid in out:
                continue
            out.append(mid)
        return out

    # ---------- Commit ----------
    def commit(self, order: Order, plan: PaymentPlan, shortfall: int = 0) -> None:
        """Charge a chosen plan to the Ledger and record it against the order"""
        self.ledger.check_capacity(plan)
        for method_id, amount in plan.items():
            if amount > 0 and method_id in self.ledger.methods:
                self.ledger.charge(method_id, amount)
        self._plans[order.id] = dict(plan)
        self._processed.append(order.id)
        if shortfall > 0:
            self._shortfalls[order.id] = shortfall
            logger.warning(
                "Order %s is underfunded by %s after exhausting all payment methods",
                order.id, format_amount(shortfall),
            )

    # ---------- Post-processing ----------
    def post_process_unused_points(self) -> None:
        """
        Move card-paid amounts onto points capacity nobody used, latest
        committed order first. Amount for amount, so no order's total changes.
        """
        points = self.ledger.methods.get(self.points_id)
        if points is None:
            return
        unused = points.available
        if unused <= 0:
            return

        for order_id in reversed(self._processed):
            plan = self._plans.get(order_id)
            if not plan or (len(plan) == 1 and self.points_id in plan):
                continue

            for method_id in list(plan):
                if method_id == self.points_id:
                    continue
                shift = min(plan[method_id], unused)
                if shift <= 0:
                    continue

                plan[method_id] -= shift
                plan[self.points_id] = plan.get(self.points_id, 0) + shift
                if plan[method_id] == 0:
                    del plan[method_id]
                unused -= shift
                logger.debug("Order %s: moved %s from %s to points", order_id, format_amount(shift), method_id)

                self.recalculate_ledger()
                if unused <= 0:
                    return

    def recalculate_ledger(self) -> None:
        """Rebuild every method's used amount from the committed plans"""
        self.ledger.reset()
        for plan in self._plans.values():
            for method_id, amount in plan.items():
                if amount > 0 and method_id in self.ledger.methods:
                    self.ledger.charge(method_id, amount)

    # ---------- Results ----------
    def summary(self) -> Dict[str, Decimal]:
        return {mid: from_cents(used) for mid, used in self.ledger.summary.items()}

    @property
    def plans(self) -> Dict[str, Dict[str, Decimal]]:
        """order id -> committed plan, in processing order"""
        return {
            oid: {mid: from_cents(amount) for mid, amount in self._plans[oid].items()}
            for oid in self._processed
        }

    @property
    def underfunded(self) -> Dict[str, Decimal]:
        """order id -> un-discounted balance no method could absorb"""
        return {oid: from_cents(v) for oid, v in self._shortfalls.items()}

    @property
    def processing_order(self) -> List[str]:
        return list(self._processed)
