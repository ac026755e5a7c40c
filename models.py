"""
Data models for PayOptimizer

All amounts are held in minor units (cents) as ints.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Tuple

PaymentPlan = Dict[str, int]  # method id -> amount charged for one order


@dataclass(frozen=True)
class Order:
    """Single purchase order"""
    id: str
    value: int  # face value in cents
    promotions: Tuple[str, ...] = ()  # method ids eligible for a card discount


@dataclass
class PaymentMethod:
    """Payment method with percentage discount and capacity"""
    id: str
    discount: int  # percent, 0-100
    limit: int  # capacity in cents
    used: int = 0

    @property
    def available(self) -> int:
        return self.limit - self.used


@dataclass
class Ledger:
    """Live usage of every payment method during one optimization run"""
    methods: Dict[str, PaymentMethod]
    summary: Dict[str, int] = field(default_factory=dict)

    def __post_init__(self):
        for method_id in self.methods:
            self.summary.setdefault(method_id, self.methods[method_id].used)

    def available(self, method_id: str) -> int:
        """Available capacity, 0 for unknown methods"""
        method = self.methods.get(method_id)
        return method.available if method else 0

    def check_capacity(self, plan: Dict[str, int]) -> None:
        """Raise ValueError if any entry of a plan exceeds its method's available capacity"""
        for method_id, amount in plan.items():
            if amount > 0 and method_id in self.methods and amount > self.available(method_id):
                raise ValueError(
                    f"charge of {amount} exceeds available capacity {self.available(method_id)} of {method_id}"
                )

    def charge(self, method_id: str, amount: int) -> None:
        method = self.methods[method_id]
        if amount > method.available:
            raise ValueError(
                f"charge of {amount} exceeds available capacity {method.available} of {method_id}"
            )
        method.used += amount
        self.summary[method_id] += amount

    def reset(self) -> None:
        """Zero every used amount and the aggregate summary"""
        for method_id, method in self.methods.items():
            method.used = 0
            self.summary[method_id] = 0
