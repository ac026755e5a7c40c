"""
Text report of per-method usage for PayOptimizer
"""
from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Mapping

from utils import CENT


def report_lines(summary: Mapping[str, Decimal]) -> List[str]:
    """One "methodId amount" line per used method, sorted by method id"""
    return [
        f"{mid} {amount.quantize(CENT, rounding=ROUND_HALF_UP)}"
        for mid, amount in sorted(summary.items())
        if amount > 0
    ]


def generate_report(summary: Mapping[str, Decimal]) -> str:
    return "".join(line + "\n" for line in report_lines(summary))


def print_report(summary: Dict[str, Decimal]) -> None:
    print(generate_report(summary), end="")
