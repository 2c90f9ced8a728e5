from __future__ import annotations

import base64
import binascii
import logging
import time
from pathlib import Path

import requests

from pos.domain.errors import ConflictError, InternalError, InvoiceServiceError, NotFoundError
from pos.domain.models import OrderView
from pos.repositories.contracts import OrderStore

log = logging.getLogger("pos.invoice")


class InvoiceService:
    """Renders invoices through the external PDF service and stores them once per order."""

    def __init__(self, repo: OrderStore, queries, invoices_dir: Path | str, base_url: str, timeout: float = 10.0):
        self.repo = repo
        self.queries = queries
        self.invoices_dir = Path(invoices_dir)
        self.base_url = base_url.rstrip("/")
        self.timeout = float(timeout)

    def _post_json(self, url: str, payload: dict) -> dict:
        r = requests.post(url, json=payload, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    @staticmethod
    def build_payload(order: OrderView, client_name: str = "Customer") -> dict:
        return {
            "orderId": order.id,
            "orderTime": order.created_at,
            "clientName": client_name,
            "totalRevenue": order.total,
            "orderItems": [
                {
                    "productName": line.name,
                    "barcode": line.barcode,
                    "quantity": line.quantity,
                    "mrp": line.selling_price,
                    "totalAmount": line.line_total,
                }
                for line in order.items
            ],
        }

    def generate_invoice(self, order_id: int, client_name: str = "Customer") -> Path:
        order = self.queries.get_by_id(order_id)
        if order.invoice_path:
            raise ConflictError(
                f"Invoice already generated for order {order_id}.", field="invoice_path", value=order.invoice_path
            )
        if not order.items:
            raise InternalError(f"Order {order_id} has no items to invoice.")

        url = f"{self.base_url}/invoice/generate"
        try:
            data = self._post_json(url, self.build_payload(order, client_name))
        except (requests.RequestException, ValueError) as e:
            log.warning("invoice_service_failed order_id=%s url=%s error=%s", order_id, url, e)
            raise InvoiceServiceError(f"Invoice service request failed: {e}") from e

        if not data.get("success"):
            raise InvoiceServiceError(f"Invoice service rejected order {order_id}: {data.get('message') or 'unknown error'}")
        encoded = data.get("base64Pdf") or ""
        if not encoded:
            raise InvoiceServiceError(f"Invoice service returned an empty PDF for order {order_id}.")

        try:
            pdf = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvoiceServiceError(f"Invoice service returned invalid base64 for order {order_id}.") from e

        self.invoices_dir.mkdir(parents=True, exist_ok=True)
        path = self.invoices_dir / f"invoice_{order.id}_{int(time.time() * 1000)}.pdf"
        path.write_bytes(pdf)

        if not self.repo.set_invoice_path(order.id, str(path)):
            path.unlink(missing_ok=True)
            raise ConflictError(f"Invoice already generated for order {order_id}.", field="invoice_path")

        log.info("invoice_generated order_id=%s path=%s bytes=%s", order.id, path, len(pdf))
        return path

    def get_invoice_path(self, order_id: int) -> Path:
        order = self.repo.get_order(int(order_id))
        if not order:
            raise NotFoundError(f"Order with id: {order_id} not found", entity="order", entity_id=int(order_id))
        if not order.invoice_path:
            raise NotFoundError(f"No invoice generated for order {order_id}.", entity="invoice", entity_id=int(order_id))
        return Path(order.invoice_path)
