from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str
    index: Optional[int] = None

    def __str__(self) -> str:
        if self.index is None:
            return f"{self.field}: {self.message}"
        return f"item[{self.index}].{self.field}: {self.message}"


class AppError(Exception):
    """Base app error."""

    code = "app_error"


class ValidationError(AppError):
    code = "validation_error"

    def __init__(self, message: str | None = None, errors: Iterable[FieldError] = ()):
        self.errors = list(errors)
        if message is None:
            message = "; ".join(str(e) for e in self.errors) or "Invalid input."
        super().__init__(message)


class NotFoundError(AppError):
    code = "not_found"

    def __init__(
        self,
        message: str,
        *,
        entity: str | None = None,
        entity_id: int | None = None,
        barcodes: Iterable[str] = (),
    ):
        self.entity = entity
        self.entity_id = entity_id
        self.barcodes = list(barcodes)
        super().__init__(message)


class InsufficientStockError(AppError):
    code = "insufficient_stock"

    def __init__(self, message: str, *, barcodes: Iterable[str] = (), product_id: int | None = None):
        self.barcodes = list(barcodes)
        self.product_id = product_id
        super().__init__(message)


class ConflictError(AppError):
    code = "conflict"

    def __init__(self, message: str, *, field: str | None = None, value: object = None):
        self.field = field
        self.value = value
        super().__init__(message)


class InternalError(AppError):
    code = "internal_error"


class InvoiceServiceError(AppError):
    code = "bad_gateway"
