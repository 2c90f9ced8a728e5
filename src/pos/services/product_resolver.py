from __future__ import annotations

from typing import Iterable

from pos.domain.errors import FieldError, NotFoundError, ValidationError
from pos.domain.models import ProductInfo
from pos.repositories.contracts import ProductLookup


class ProductResolver:
    """Batch barcode lookup against the active catalog."""

    def __init__(self, repo: ProductLookup):
        self.repo = repo

    def resolve(self, barcodes: Iterable[str]) -> dict[str, ProductInfo]:
        """Map each barcode, exactly as passed, to its active product.

        Lookup uses the trimmed barcode, so `` A-1 `` and ``A-1`` both resolve
        to the same product and both appear as keys when both are passed.
        """
        barcodes = list(barcodes)
        if not barcodes:
            raise ValidationError("At least one barcode is required.")

        errors = [
            FieldError("barcode", "Barcode is required.", idx)
            for idx, b in enumerate(barcodes)
            if b is None or not str(b).strip()
        ]
        if errors:
            raise ValidationError(errors=errors)

        wanted = {str(b).strip() for b in barcodes}
        found = self.repo.find_products_by_barcodes(wanted)

        missing = sorted(wanted - set(found))
        if missing:
            raise NotFoundError(
                f"Products not found for barcodes: {', '.join(missing)}",
                entity="product",
                barcodes=missing,
            )

        infos = {
            bc: ProductInfo(product_id=p.id, barcode=p.barcode, name=p.name, mrp=p.mrp, client_id=p.client_id)
            for bc, p in found.items()
        }
        return {b: infos[str(b).strip()] for b in barcodes}
