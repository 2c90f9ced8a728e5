from __future__ import annotations

from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table, TableStyleInfo

from pos.domain.errors import ValidationError
from pos.domain.models import ClientSales, DaySales
from pos.services.order_query_service import DateLike, to_db_timestamp


class ReportingService:
    def __init__(self, repo):
        self.repo = repo

    @staticmethod
    def _window(start: DateLike, end: DateLike) -> tuple[str, str]:
        start_iso = to_db_timestamp(start, end_of_day=False)
        end_iso = to_db_timestamp(end, end_of_day=True)
        if not start_iso or not end_iso:
            raise ValidationError("Start and end dates are required.")
        if start_iso > end_iso:
            raise ValidationError("Start date must not be after end date.")
        return start_iso, end_iso

    def sales_by_client(self, start: DateLike, end: DateLike, client_id: Optional[int] = None) -> list[ClientSales]:
        start_iso, end_iso = self._window(start, end)
        return self.repo.sales_by_client(start_iso, end_iso, client_id)

    def day_sales(self, start: DateLike, end: DateLike) -> list[DaySales]:
        start_iso, end_iso = self._window(start, end)
        return self.repo.day_sales(start_iso, end_iso)

    def export_sales_report_excel(self, path: str, start: DateLike, end: DateLike) -> None:
        start_iso, end_iso = self._window(start, end)
        wb = Workbook()

        def money(cell):
            cell.number_format = "#,##0.00"

        def bold_row(ws, r):
            for c in ws[r]:
                c.font = Font(bold=True)

        def set_widths(ws, widths: dict[str, int]):
            for col, w in widths.items():
                ws.column_dimensions[col].width = w

        def add_table(ws, name: str, start_row: int, start_col: int, end_row: int, end_col: int):
            ref = f"{get_column_letter(start_col)}{start_row}:{get_column_letter(end_col)}{end_row}"
            tab = Table(displayName=name, ref=ref)
            tab.tableStyleInfo = TableStyleInfo(
                name="TableStyleMedium9",
                showRowStripes=True,
                showColumnStripes=False,
            )
            ws.add_table(tab)

        by_client = self.repo.sales_by_client(start_iso, end_iso)
        by_day = self.repo.day_sales(start_iso, end_iso)
        orders = self.repo.search_orders(start_iso, end_iso)

        # -------- 1) Summary --------
        ws = wb.active
        ws.title = "Summary"
        ws["A1"] = "Sales Summary"
        ws["A1"].font = Font(bold=True, size=14)

        ws["A3"] = "Window"
        ws["B3"] = f"{start_iso}  ->  {end_iso}"

        rows = [
            ("Orders", len(orders), "int"),
            ("Invoiced orders", sum(d.invoiced_orders for d in by_day), "int"),
            ("Items sold", sum(c.total_quantity for c in by_client), "int"),
            ("Revenue", round(sum(c.total_revenue for c in by_client), 2), "money"),
            ("Invoiced revenue", round(sum(d.total_revenue for d in by_day), 2), "money"),
        ]

        start_row = 5
        for i, (label, val, kind) in enumerate(rows):
            r = start_row + i
            ws[f"A{r}"] = label
            ws[f"B{r}"] = val
            if kind == "money":
                money(ws[f"B{r}"])

        set_widths(ws, {"A": 22, "B": 44})

        # -------- 2) By Client --------
        ws2 = wb.create_sheet("By Client")
        ws2.append(["Client", "Quantity", "Revenue"])
        bold_row(ws2, 1)
        for out_row, c in enumerate(by_client, start=2):
            ws2.append([c.client_name, int(c.total_quantity), float(c.total_revenue)])
            money(ws2[f"C{out_row}"])
        ws2.freeze_panes = "A2"
        set_widths(ws2, {"A": 30, "B": 12, "C": 16})
        if ws2.max_row >= 2:
            add_table(ws2, "SalesByClient", 1, 1, ws2.max_row, 3)

        # -------- 3) Day Sales --------
        ws3 = wb.create_sheet("Day Sales")
        ws3.append(["Date", "Invoiced Orders", "Invoiced Items", "Revenue"])
        bold_row(ws3, 1)
        for out_row, d in enumerate(by_day, start=2):
            ws3.append([d.date, int(d.invoiced_orders), int(d.invoiced_items), float(d.total_revenue)])
            money(ws3[f"D{out_row}"])
        ws3.freeze_panes = "A2"
        set_widths(ws3, {"A": 14, "B": 16, "C": 16, "D": 16})
        if ws3.max_row >= 2:
            add_table(ws3, "DaySales", 1, 1, ws3.max_row, 4)

        wb.save(path)
