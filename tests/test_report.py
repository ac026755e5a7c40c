from decimal import Decimal

import pytest
from openpyxl import load_workbook

from config import InputError
from conftest import make_order
from csv_handler import export_plans_to_csv, import_orders_from_csv
from excel_export import export_excel
from models import Order
from optimizer import PaymentOptimizer
from report import generate_report, report_lines


def test_report_skips_zero_and_sorts_by_id():
    summary = {
        "mZysk": Decimal("165"),
        "PUNKTY": Decimal("100.00"),
        "BosBankrut": Decimal("190.005"),
        "unused": Decimal("0.00"),
    }
    assert report_lines(summary) == ["BosBankrut 190.01", "PUNKTY 100.00", "mZysk 165.00"]
    assert generate_report(summary) == "BosBankrut 190.01\nPUNKTY 100.00\nmZysk 165.00\n"


def test_report_of_nothing():
    assert generate_report({"PUNKTY": Decimal("0")}) == ""


def test_export_plans_to_csv(tmp_path, methods, sample_orders):
    optimizer = PaymentOptimizer(sample_orders, methods)
    optimizer.optimize()
    path = tmp_path / "plans.csv"

    export_plans_to_csv(optimizer.plans, str(path))

    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "order_id,method,amount"
    assert lines[1] == "ORDER1,PUNKTY,85.00"
    assert "ORDER3,PUNKTY,10.00" in lines
    assert len(lines) == 7


def test_import_orders_from_csv(tmp_path):
    path = tmp_path / "orders.csv"
    path.write_text(
        "id,value,promotions\n"
        "ORDER1,100.00,mZysk\n"
        "ORDER3,150.00,mZysk; BosBankrut\n"
        "ORDER4,50,\n",
        encoding="utf-8",
    )
    assert import_orders_from_csv(str(path)) == [
        Order("ORDER1", 10000, ("mZysk",)),
        Order("ORDER3", 15000, ("mZysk", "BosBankrut")),
        Order("ORDER4", 5000, ()),
    ]


def test_import_orders_from_csv_rejects_bad_rows(tmp_path):
    path = tmp_path / "orders.csv"
    path.write_text("id,value,promotions\nORDER1,abc,\n", encoding="utf-8")
    with pytest.raises(InputError):
        import_orders_from_csv(str(path))
    with pytest.raises(InputError, match="file not found"):
        import_orders_from_csv(str(tmp_path / "missing.csv"))


def test_export_excel(tmp_path, methods, sample_orders):
    big = make_order("BIG", 1000000, "mZysk")
    optimizer = PaymentOptimizer(sample_orders + [big], methods)
    optimizer.optimize()
    path = tmp_path / "report.xlsx"

    export_excel(optimizer, str(path))

    wb = load_workbook(str(path))
    assert wb.sheetnames == ["Summary", "Plans", "Underfunded"]

    summary = wb["Summary"]
    assert [c.value for c in summary[1]] == ["Method", "Discount %", "Limit", "Used", "Available"]
    assert summary["A2"].value == "BosBankrut"
    assert summary["A3"].value == "PUNKTY (points)"

    plans = wb["Plans"]
    assert plans["A2"].value == "ORDER1"
    assert plans.cell(plans.max_row, 1).value == "TOTALS"

    underfunded = wb["Underfunded"]
    assert underfunded["A2"].value == "BIG"
    assert underfunded.max_row == 2


def test_import_orders_from_csv_rejects_malformed_csv(tmp_path):
    path = tmp_path / "orders.csv"
    path.write_text("id,value,promotions\nORDER1,10.00," + "x" * 200000 + "\n", encoding="utf-8")
    with pytest.raises(InputError, match="malformed CSV"):
        import_orders_from_csv(str(path))
