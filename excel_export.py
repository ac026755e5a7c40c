"""
Excel export functionality for PayOptimizer
"""
from __future__ import annotations

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter

from optimizer import PaymentOptimizer
from utils import from_cents


def _style_header(ws, row=1):
    """Apply header styling to worksheet row"""
    header_font = Font(bold=True, color="FFFFFF")
    fill = PatternFill("solid", fgColor="4F81BD")
    align = Alignment(horizontal="center", vertical="center")
    thin = Side(style="thin", color="A0A0A0")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    for cell in ws[row]:
        cell.font = header_font
        cell.fill = fill
        cell.alignment = align
        cell.border = border


def _autosize_columns(ws, min_width=10, max_width=45):
    """Auto-size columns based on content"""
    for col in range(1, ws.max_column + 1):
        letter = get_column_letter(col)
        max_len = max((len(str(c.value)) for c in ws[letter] if c.value is not None), default=0)
        ws.column_dimensions[letter].width = max(min_width, min(max_width, max_len + 2))


def _money_columns(ws, columns, first_row=2):
    for r in range(first_row, ws.max_row + 1):
        for c in columns:
            ws.cell(r, c).number_format = "0.00"


def export_excel(optimizer: PaymentOptimizer, filepath: str) -> None:
    """
    Export an optimization run to Excel file with sheets:
    - Summary: per-method discount, limit, used, available
    - Plans: one row per order and method, with totals
    - Underfunded: orders no method combination could cover
    """
    wb = Workbook()
    # remove default sheet
    wb.remove(wb.active)

    ws = wb.create_sheet("Summary")
    ws.append(["Method", "Discount %", "Limit", "Used", "Available"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for mid in sorted(optimizer.ledger.methods):
        m = optimizer.ledger.methods[mid]
        label = f"{mid} (points)" if mid == optimizer.points_id else mid
        ws.append([label, m.discount, from_cents(m.limit), from_cents(m.used), from_cents(m.available)])
    _money_columns(ws, (3, 4, 5))
    _autosize_columns(ws)

    ws = wb.create_sheet("Plans")
    ws.append(["Order", "Method", "Amount"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for order_id, plan in optimizer.plans.items():
        for mid, amount in plan.items():
            ws.append([order_id, mid, amount])
    last_data_row = ws.max_row
    if last_data_row >= 2:
        ws.append(["TOTALS", "", f"=SUM(C2:C{last_data_row})"])
        ws.cell(ws.max_row, 1).font = Font(bold=True)
    _money_columns(ws, (3,))
    _autosize_columns(ws)

    ws = wb.create_sheet("Underfunded")
    ws.append(["Order", "Shortfall"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for order_id, shortfall in optimizer.underfunded.items():
        ws.append([order_id, shortfall])
    _money_columns(ws, (2,))
    _autosize_columns(ws)

    wb.save(filepath)
