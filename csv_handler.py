"""
CSV export and import functionality for PayOptimizer
"""
from __future__ import annotations
import csv
from decimal import Decimal
from typing import Dict, List

from config import InputError, dict_to_order, ensure_unique_ids
from models import Order


def export_plans_to_csv(plans: Dict[str, Dict[str, Decimal]], filepath: str) -> None:
    """
    Export committed payment plans to CSV file
    CSV columns: order_id, method, amount
    """
    with open(filepath, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(['order_id', 'method', 'amount'])

        for order_id, plan in plans.items():
            for method_id, amount in plan.items():
                writer.writerow([order_id, method_id, f"{amount:.2f}"])


def import_orders_from_csv(filepath: str) -> List[Order]:
    """
    Import orders list from CSV file
    CSV columns: id, value, promotions (';'-separated method ids)
    """
    orders = []

    try:
        with open(filepath, 'r', encoding='utf-8', newline='') as f:
            reader = csv.DictReader(f)

            for line_no, row in enumerate(reader, start=2):
                if not row.get('id'):
                    raise InputError(f"{filepath}:{line_no}: missing order id")
                promotions = [
                    p.strip() for p in (row.get('promotions') or '').split(';') if p.strip()
                ]
                orders.append(dict_to_order({
                    'id': row['id'].strip(),
                    'value': (row.get('value') or '').strip(),
                    'promotions': promotions,
                }))
    except FileNotFoundError:
        raise InputError(f"file not found: {filepath}")
    except UnicodeDecodeError as exc:
        raise InputError(f"{filepath} is not UTF-8 text: {exc}")
    except csv.Error as exc:
        raise InputError(f"malformed CSV in {filepath}: {exc}")

    return ensure_unique_ids(orders)
