from __future__ import annotations

import logging
from typing import Optional

from pos.domain.errors import NotFoundError
from pos.domain.models import Product
from pos.domain.validation import raise_if_errors, validate_product_fields

log = logging.getLogger(__name__)


def _clean_url(image_url: Optional[str]) -> Optional[str]:
    image_url = (image_url or "").strip()
    return image_url or None


class ProductService:
    def __init__(self, repo):
        self.repo = repo

    def create_product(
        self,
        barcode: str,
        client_id: int,
        name: str,
        mrp: float,
        image_url: Optional[str] = None,
    ) -> Product:
        """Create a catalog product and its inventory record (quantity 0) together."""
        barcode = (barcode or "").strip()
        name = (name or "").strip()
        raise_if_errors(validate_product_fields(barcode, name, mrp, image_url))

        pid = self.repo.create_product_with_inventory(barcode, int(client_id), name, float(mrp), _clean_url(image_url))
        log.info("product_created product_id=%s barcode=%s client_id=%s", pid, barcode, client_id)
        return self.get_product(pid)

    def update_product(self, product_id: int, name: str, mrp: float, image_url: Optional[str] = None) -> Product:
        current = self.get_product(product_id)
        name = (name or "").strip()
        raise_if_errors(validate_product_fields(current.barcode, name, mrp, image_url))
        if not self.repo.update_product(int(product_id), name, float(mrp), _clean_url(image_url)):
            raise NotFoundError(f"Product with id: {product_id} not found", entity="product", entity_id=int(product_id))
        return self.get_product(product_id)

    def get_product(self, product_id: int) -> Product:
        p = self.repo.get_product_by_id(int(product_id))
        if not p:
            raise NotFoundError(f"Product with id: {product_id} not found", entity="product", entity_id=int(product_id))
        return p

    def get_product_by_barcode(self, barcode: str) -> Product:
        barcode = (barcode or "").strip()
        p = self.repo.get_product_by_barcode(barcode)
        if not p:
            raise NotFoundError(f"Product with barcode: {barcode} not found", entity="product", barcodes=[barcode])
        return p

    def search_products(self, barcode: Optional[str] = None, name: Optional[str] = None) -> list[Product]:
        return self.repo.search_products(
            barcode=(barcode or "").strip() or None,
            name_prefix=(name or "").strip() or None,
        )

    def delete_product(self, product_id: int) -> None:
        if not self.repo.deactivate_product(int(product_id)):
            raise NotFoundError(f"Product with id: {product_id} not found", entity="product", entity_id=int(product_id))
        log.info("product_deactivated product_id=%s", product_id)
