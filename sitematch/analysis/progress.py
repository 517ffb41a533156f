from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal

from sitematch.models import Product

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderLine:
    product_id: str
    quantity_needed: int = 0
    quantity_ordered: int = 0


@dataclass
class CategoryProgress:
    category: str
    needed: int = 0
    ordered: int = 0
    cost: Decimal = Decimal("0")

    @property
    def percent_complete(self) -> float:
        return _percent(self.ordered, self.needed)


@dataclass
class ProgressSummary:
    categories: dict[str, CategoryProgress] = field(default_factory=dict)
    skipped_product_ids: list[str] = field(default_factory=list)

    @property
    def total_needed(self) -> int:
        return sum(c.needed for c in self.categories.values())

    @property
    def total_ordered(self) -> int:
        return sum(c.ordered for c in self.categories.values())

    @property
    def total_cost(self) -> Decimal:
        return sum((c.cost for c in self.categories.values()), Decimal("0"))

    @property
    def overall_percent(self) -> float:
        return _percent(self.total_ordered, self.total_needed)


def summarize_progress(
    catalog: Sequence[Product], orders: Iterable[OrderLine]
) -> ProgressSummary:
    """Roll ordered quantities up into per-category procurement progress.

    Cost is unit price times quantity ordered. Orders for products missing from
    the catalog are skipped and listed in ``skipped_product_ids``.
    """
    by_id = {p.product_id: p for p in catalog}
    summary = ProgressSummary()

    for order in orders:
        product = by_id.get(order.product_id)
        if product is None:
            logger.warning(f"Order references unknown product {order.product_id}, skipping")
            summary.skipped_product_ids.append(order.product_id)
            continue

        progress = summary.categories.setdefault(
            product.category, CategoryProgress(category=product.category)
        )
        progress.needed += order.quantity_needed
        progress.ordered += order.quantity_ordered
        progress.cost += product.price * order.quantity_ordered

    return summary


def _percent(part: int, whole: int) -> float:
    if whole <= 0:
        return 0.0
    return part / whole * 100
