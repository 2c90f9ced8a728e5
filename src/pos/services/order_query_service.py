from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Union

from pos.domain.errors import NotFoundError, ValidationError
from pos.domain.models import (
    PRODUCT_NOT_FOUND_BARCODE,
    PRODUCT_NOT_FOUND_NAME,
    Order,
    OrderItem,
    OrderLine,
    OrderView,
)

DateLike = Union[datetime, date, str]


def to_db_timestamp(value: Optional[DateLike], end_of_day: bool) -> Optional[str]:
    """Normalize a date bound to the stored ``YYYY-MM-DD HH:MM:SS`` UTC text."""
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            if len(text) == 10:
                value = date.fromisoformat(text)
            else:
                value = datetime.fromisoformat(text)
        except ValueError as e:
            raise ValidationError(f"Invalid date: {value}") from e
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        # stored times have whole seconds; a fractional start begins at the next one
        if value.microsecond and not end_of_day:
            value = value.replace(microsecond=0) + timedelta(seconds=1)
        return value.replace(microsecond=0).isoformat(sep=" ")
    bound = time(23, 59, 59) if end_of_day else time(0, 0, 0)
    return datetime.combine(value, bound).isoformat(sep=" ")


class OrderQueryService:
    def __init__(self, repo: OrderStore):
        self.repo = repo

    def get_by_id(self, order_id: int) -> OrderView:
        order = self.repo.get_order(int(order_id))
        if not order:
            raise NotFoundError(f"Order with id: {order_id} not found", entity="order", entity_id=int(order_id))
        return self._views([order])[0]

    def search(
        self,
        start: Optional[DateLike] = None,
        end: Optional[DateLike] = None,
        order_id: Optional[int] = None,
    ) -> list[OrderView]:
        start_iso = to_db_timestamp(start, end_of_day=False)
        end_iso = to_db_timestamp(end, end_of_day=True)
        if start_iso and end_iso and start_iso > end_iso:
            raise ValidationError("Start date must not be after end date.")
        orders = self.repo.search_orders(start_iso, end_iso, int(order_id) if order_id is not None else None)
        return self._views(orders)

    def _views(self, orders: list[Order]) -> list[OrderView]:
        if not orders:
            return []
        items_by_order = self.repo.order_items_for_orders([o.id for o in orders])
        product_ids = {it.product_id for items in items_by_order.values() for it in items}
        products = self.repo.products_by_ids(product_ids)

        return [
            OrderView(
                id=o.id,
                created_at=o.created_at,
                invoice_path=o.invoice_path,
                items=[self._line(it, products) for it in items_by_order.get(o.id, [])],
            )
            for o in orders
        ]

    @staticmethod
    def _line(item: OrderItem, products: dict) -> OrderLine:
        p = products.get(item.product_id)
        # deactivated or missing catalog rows are shown with placeholders
        return OrderLine(
            item_id=item.id,
            product_id=item.product_id,
            barcode=p.barcode if p else PRODUCT_NOT_FOUND_BARCODE,
            name=p.name if p else PRODUCT_NOT_FOUND_NAME,
            quantity=item.quantity,
            selling_price=item.selling_price,
        )
