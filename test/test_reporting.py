from pathlib import Path

import pytest
from openpyxl import load_workbook

from conftest import seed_product
from pos.domain.errors import ValidationError
from pos.repositories.sqlite_repo import SqliteRepository
from pos.services.reporting_service import ReportingService


def _setup(tmp_path: Path):
    repo = SqliteRepository(tmp_path / "report.db")
    repo.init_db()
    a = seed_product(repo, "A-1", qty=100, client="acme")
    b = seed_product(repo, "B-1", qty=100, client="beta")
    o1 = repo.create_order_with_items("2024-01-05 10:00:00", [(a, 2, 5.0), (b, 1, 3.0)])
    o2 = repo.create_order_with_items("2024-01-05 18:00:00", [(a, 1, 5.0)])
    o3 = repo.create_order_with_items("2024-01-07 09:00:00", [(b, 4, 2.5)])
    repo.create_order_with_items("2024-02-01 09:00:00", [(a, 9, 9.0)])
    for oid in (o1, o2, o3):
        repo.set_invoice_path(oid, f"/invoices/{oid}.pdf")
    return repo, ReportingService(repo), a, b


def test_sales_by_client_within_window(tmp_path: Path):
    _repo, reporting, *_ = _setup(tmp_path)

    rows = reporting.sales_by_client("2024-01-01", "2024-01-31")

    assert [(r.client_name, r.total_quantity, r.total_revenue) for r in rows] == [
        ("acme", 3, 15.0),
        ("beta", 5, 13.0),
    ]


def test_sales_by_client_filter(tmp_path: Path):
    repo, reporting, *_ = _setup(tmp_path)
    beta = repo.get_client_by_name("beta")

    rows = reporting.sales_by_client("2024-01-01", "2024-12-31", client_id=beta.id)

    assert [(r.client_name, r.total_quantity) for r in rows] == [("beta", 5)]


def test_day_sales_counts_invoiced_orders_only(tmp_path: Path):
    _repo, reporting, *_ = _setup(tmp_path)

    days = reporting.day_sales("2024-01-01", "2024-02-28")

    assert [(d.date, d.invoiced_orders, d.invoiced_items, d.total_revenue) for d in days] == [
        ("2024-01-05", 2, 4, 18.0),
        ("2024-01-07", 1, 4, 10.0),
    ]


def test_report_window_validation(tmp_path: Path):
    _repo, reporting, *_ = _setup(tmp_path)

    with pytest.raises(ValidationError):
        reporting.day_sales("2024-02-01", "2024-01-01")
    with pytest.raises(ValidationError):
        reporting.sales_by_client(None, "2024-01-01")


def test_export_sales_report_excel(tmp_path: Path):
    _repo, reporting, *_ = _setup(tmp_path)
    out = tmp_path / "report.xlsx"

    reporting.export_sales_report_excel(str(out), "2024-01-01", "2024-01-31")

    wb = load_workbook(out)
    assert wb.sheetnames == ["Summary", "By Client", "Day Sales"]
    summary = {wb["Summary"][f"A{r}"].value: wb["Summary"][f"B{r}"].value for r in range(5, 10)}
    assert summary["Orders"] == 3
    assert summary["Invoiced orders"] == 3
    assert summary["Revenue"] == 28.0
    assert wb["By Client"]["A2"].value == "acme"
    assert wb["Day Sales"].max_row == 3
