from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Iterable, Protocol

from pos.domain.validation import OrderItemForm


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UnitOfWork(Protocol):
    def __enter__(self) -> "UnitOfWork": ...
    def __exit__(self, exc_type, exc, tb) -> None: ...
    def create_order(self, lines: Iterable[tuple[int, OrderItemForm]]) -> int: ...


@dataclass
class RepositoryUnitOfWork:
    """Unit of Work adapter for the order write path.

    The repository runs the header insert, stock decrements and item insert in a
    single SQL transaction; this class stamps the order time and shapes the
    lines so services stay persistence-agnostic.
    """

    repo: object
    clock: Callable[[], datetime] = field(default=_utc_now)

    def __enter__(self) -> "RepositoryUnitOfWork":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        return None

    def create_order(self, lines: Iterable[tuple[int, OrderItemForm]]) -> int:
        dt_iso = self.clock().replace(microsecond=0, tzinfo=None).isoformat(sep=" ")
        rows = [(int(pid), int(form.quantity), float(form.unit_price)) for pid, form in lines]
        return int(self.repo.create_order_with_items(dt_iso, rows))
