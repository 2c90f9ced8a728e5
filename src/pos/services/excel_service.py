from __future__ import annotations

from dataclasses import dataclass, field
import logging

from openpyxl import load_workbook

from pos.domain.errors import ConflictError, ValidationError
from pos.domain.validation import normalize_client_name, to_int, to_money, validate_product_fields

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RowError:
    row: int
    field: str
    message: str

    def __str__(self) -> str:
        return f"row {self.row} {self.field}: {self.message}"


@dataclass(frozen=True)
class InventoryUploadResult:
    updated: int
    errors: list[RowError] = field(default_factory=list)


@dataclass(frozen=True)
class ProductUploadResult:
    created: int
    errors: list[RowError] = field(default_factory=list)


def _header_map(header, required: tuple[str, ...]) -> dict[str, int]:
    headers = {}
    for col, v in enumerate(header or ()):
        if isinstance(v, str):
            headers[v.strip().lower()] = col
    for r in required:
        if r not in headers:
            raise ValidationError(f"Missing column header: {r}")
    return headers


def _cell(values, headers: dict[str, int], name: str):
    col = headers.get(name)
    if col is None or col >= len(values):
        return None
    return values[col]


def _text(value) -> str:
    return str(value).strip() if value is not None else ""


class ExcelService:
    def __init__(self, repo, inventory_service):
        self.repo = repo
        self.inventory = inventory_service

    def import_inventory_excel(self, path: str) -> InventoryUploadResult:
        """
        Excel holds ABSOLUTE stock per product, not a delta.
        Headers:
          barcode | quantity
        """
        wb = load_workbook(path, read_only=True, data_only=True)
        try:
            ws = wb.active
            rows = ws.iter_rows(values_only=True)
            headers = _header_map(next(rows, None), ("barcode", "quantity"))

            parsed: list[tuple[int, str, int]] = []
            errors: list[RowError] = []
            seen: dict[str, int] = {}

            for row_no, values in enumerate(rows, start=2):
                if values is None or all(v is None for v in values):
                    continue
                barcode = _text(_cell(values, headers, "barcode"))
                qty = _cell(values, headers, "quantity")

                if not barcode:
                    errors.append(RowError(row_no, "barcode", "Barcode is required."))
                    continue
                try:
                    qty = to_int(qty)
                except (TypeError, ValueError):
                    errors.append(RowError(row_no, "quantity", "Quantity must be a whole number."))
                    continue
                if qty < 0:
                    errors.append(RowError(row_no, "quantity", "Quantity must be >= 0."))
                    continue
                if barcode in seen:
                    errors.append(RowError(row_no, "barcode", f"Duplicate barcode {barcode} (first seen on row {seen[barcode]})."))
                    continue
                seen[barcode] = row_no
                parsed.append((row_no, barcode, qty))
        finally:
            wb.close()

        products = self.repo.find_products_by_barcodes(bc for _, bc, _ in parsed)
        updates: list[tuple[int, int]] = []
        for row_no, barcode, qty in parsed:
            p = products.get(barcode)
            if not p:
                errors.append(RowError(row_no, "barcode", f"Product with barcode: {barcode} not found"))
                continue
            updates.append((p.id, qty))

        updated = self.inventory.set_quantities(updates) if updates else 0
        errors.sort(key=lambda e: e.row)
        if errors:
            log.warning("inventory_upload path=%s updated=%s errors=%s", path, updated, len(errors))
        else:
            log.info("inventory_upload path=%s updated=%s", path, updated)
        return InventoryUploadResult(updated=updated, errors=errors)

    def import_products_excel(self, path: str) -> ProductUploadResult:
        """
        Bulk catalog load. Every valid row becomes a product with stock 0.
        Headers:
          barcode | client | name | mrp | image_url (optional)
        """
        wb = load_workbook(path, read_only=True, data_only=True)
        try:
            ws = wb.active
            rows = ws.iter_rows(values_only=True)
            headers = _header_map(next(rows, None), ("barcode", "client", "name", "mrp"))

            parsed: list[tuple[int, str, int, str, float, str | None]] = []
            errors: list[RowError] = []
            seen: dict[str, int] = {}
            clients: dict[str, int | None] = {}

            for row_no, values in enumerate(rows, start=2):
                if values is None or all(v is None for v in values):
                    continue
                barcode = _text(_cell(values, headers, "barcode"))
                client = normalize_client_name(_text(_cell(values, headers, "client")))
                name = _text(_cell(values, headers, "name"))
                mrp = _cell(values, headers, "mrp")
                image_url = _text(_cell(values, headers, "image_url")) or None

                field_errors = validate_product_fields(barcode, name, mrp, image_url)
                if field_errors:
                    errors.extend(RowError(row_no, fe.field, fe.message) for fe in field_errors)
                    continue
                if not client:
                    errors.append(RowError(row_no, "client", "Client name is required."))
                    continue
                if client not in clients:
                    found = self.repo.get_client_by_name(client)
                    clients[client] = found.id if found else None
                if clients[client] is None:
                    errors.append(RowError(row_no, "client", f"Client {client} not found"))
                    continue
                if barcode in seen:
                    errors.append(RowError(row_no, "barcode", f"Duplicate barcode {barcode} (first seen on row {seen[barcode]})."))
                    continue
                seen[barcode] = row_no
                if self.repo.barcode_exists(barcode):
                    errors.append(RowError(row_no, "barcode", f"Product with barcode {barcode} already exists."))
                    continue
                parsed.append((row_no, barcode, clients[client], name, float(to_money(mrp)), image_url))
        finally:
            wb.close()

        created = 0
        for row_no, barcode, client_id, name, mrp, image_url in parsed:
            try:
                self.repo.create_product_with_inventory(barcode, client_id, name, mrp, image_url)
            except ConflictError as e:
                errors.append(RowError(row_no, "barcode", str(e)))
                continue
            created += 1

        errors.sort(key=lambda e: e.row)
        if errors:
            log.warning("product_upload path=%s created=%s errors=%s", path, created, len(errors))
        else:
            log.info("product_upload path=%s created=%s", path, created)
        return ProductUploadResult(created=created, errors=errors)
