from pathlib import Path

from openpyxl import Workbook

from pos.application.container import build_container
from pos.config import get_settings
from pos.main import main


def _env(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("POS_HOME", str(tmp_path / "home"))
    monkeypatch.delenv("POS_DB_PATH", raising=False)
    # keep the CLI from attaching file handlers to the pytest root logger
    monkeypatch.setattr("pos.main.setup_logging", lambda *a, **k: None)


def test_settings_from_environment(tmp_path: Path):
    settings = get_settings(
        env={
            "POS_HOME": str(tmp_path / "h"),
            "POS_DB_PATH": str(tmp_path / "other.db"),
            "POS_INVOICE_SERVICE_URL": "http://pdf:9000/",
            "POS_INVOICE_TIMEOUT": "3",
        }
    )

    assert settings.db_path == tmp_path / "other.db"
    assert settings.invoices_dir == tmp_path / "h" / "invoices"
    assert settings.logs_dir.is_dir()
    assert settings.invoice_service_url == "http://pdf:9000"
    assert settings.invoice_timeout == 3.0
    assert settings.db_timeout == 30.0


def test_container_wires_services(tmp_path: Path):
    settings = get_settings(env={"POS_HOME": str(tmp_path)})
    c = build_container(settings)

    client = c.clients.add_client("acme")
    p = c.products.create_product("111", client.id, "Milk", 2.0)
    c.inventory.add_stock_by_barcode("111", 3)
    result = c.orders.create_order([{"barcode": "111", "quantity": 2, "unit_price": 2.0}])

    assert result.total == 4.0
    assert c.inventory.get_quantity(p.id) == 1
    assert c.invoices.base_url == "http://localhost:9001"


def test_cli_flow(tmp_path: Path, monkeypatch, capsys):
    _env(tmp_path, monkeypatch)

    assert main(["init-db"]) == 0
    assert main(["add-client", "Acme"]) == 0
    assert main(["add-product", "111", "acme", "Milk", "2.5"]) == 0
    assert main(["stock", "111", "--set", "5"]) == 0
    assert main(["order", "111:2:2.5"]) == 0
    out = capsys.readouterr().out
    assert "Total: 5.00" in out

    assert main(["stock", "111"]) == 0
    assert capsys.readouterr().out.split()[-1] == "3"


def test_cli_reports_errors_with_code(tmp_path: Path, monkeypatch, capsys):
    _env(tmp_path, monkeypatch)

    assert main(["order", "nope:1:1"]) == 1
    err = capsys.readouterr().err
    assert err.startswith("not_found:")

    assert main(["order", "broken"]) == 1
    assert capsys.readouterr().err.startswith("validation_error:")


def test_cli_import_inventory(tmp_path: Path, monkeypatch, capsys):
    _env(tmp_path, monkeypatch)
    main(["add-client", "acme"])
    main(["add-product", "111", "acme", "Milk", "2.5"])

    wb = Workbook()
    wb.active.append(["barcode", "quantity"])
    wb.active.append(["111", 12])
    wb.active.append(["222", 1])
    path = tmp_path / "stock.xlsx"
    wb.save(path)
    capsys.readouterr()

    assert main(["import-inventory", str(path)]) == 0
    out = capsys.readouterr().out
    assert "Updated 1 products" in out
    assert "row 3 barcode" in out


def test_cli_import_products(tmp_path: Path, monkeypatch, capsys):
    _env(tmp_path, monkeypatch)
    main(["add-client", "acme"])

    wb = Workbook()
    wb.active.append(["barcode", "client", "name", "mrp"])
    wb.active.append(["111", "acme", "Milk", 2.5])
    wb.active.append(["111", "acme", "Milk", 2.5])
    path = tmp_path / "products.xlsx"
    wb.save(path)
    capsys.readouterr()

    assert main(["import-products", str(path)]) == 0
    out = capsys.readouterr().out
    assert "Created 1 products" in out
    assert "row 3 barcode" in out
