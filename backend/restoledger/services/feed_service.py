# Overview: Merged, signed, newest-first ledger of sales and losses for reporting.

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from ..validation import ValidationError, parse_datetime_field
from restoledger.time_utils import to_utc_z
from .loss_service import list_losses
from .sales_service import list_sales

FEED_KINDS = ("sales", "losses")
UNKNOWN_ITEM = "Unknown"


@dataclass(frozen=True)
class FeedFilter:
    """
    Selection for the transaction feed.

    Unlike SummaryFilter, each date bound works on its own and is compared
    with the record's own date (sale_date / loss_date), not created_at.
    kind: "sales", "losses", or None for both.
    """
    organization_id: int | None = None
    start: datetime | None = None
    end: datetime | None = None
    kind: str | None = None

    def __post_init__(self):
        if self.kind is not None and self.kind not in FEED_KINDS:
            raise ValidationError(f"type must be one of: {', '.join(FEED_KINDS)}")

    def admits(self, organization_id: int, when: datetime) -> bool:
        if self.organization_id is not None and organization_id != self.organization_id:
            return False
        if self.start is not None and when < self.start:
            return False
        if self.end is not None and when > self.end:
            return False
        return True


@dataclass(frozen=True)
class FeedLine:
    kind: str  # "Sale" or "Loss"
    record_id: int
    date: datetime
    amount_cents: int  # +revenue for sales, -total loss for losses
    item_name: str
    organization_name: str | None
    quantity: int

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "id": self.record_id,
            "date": to_utc_z(self.date),
            "amount_cents": self.amount_cents,
            "item_name": self.item_name,
            "organization_name": self.organization_name,
            "quantity": self.quantity,
        }


def sale_line(sale) -> FeedLine:
    menu_item = sale.menu_item
    return FeedLine(
        kind="Sale",
        record_id=sale.id,
        date=sale.sale_date,
        amount_cents=sale.total_revenue_cents,
        item_name=menu_item.name if menu_item is not None else UNKNOWN_ITEM,
        organization_name=sale.organization.name if sale.organization is not None else None,
        quantity=sale.quantity,
    )


def loss_line(loss) -> FeedLine:
    # Menu item name, else stock item name, else the sentinel
    if loss.menu_item is not None:
        item_name = loss.menu_item.name
    elif loss.stock_item is not None:
        item_name = loss.stock_item.name
    else:
        item_name = UNKNOWN_ITEM
    return FeedLine(
        kind="Loss",
        record_id=loss.id,
        date=loss.loss_date,
        amount_cents=-loss.total_loss_cents,
        item_name=item_name,
        organization_name=loss.organization.name if loss.organization is not None else None,
        quantity=loss.quantity,
    )


def compose_feed(
    sales: Iterable,
    losses: Iterable,
    feed_filter: FeedFilter | None = None,
) -> list[FeedLine]:
    """
    Merge sales then losses into one list ordered newest first.

    sorted() is stable (also with reverse=True), so lines sharing a date keep
    their input order: sales in the order given, then losses in the order
    given. Repeated calls on the same input return the same sequence.
    """
    feed_filter = feed_filter or FeedFilter()
    lines: list[FeedLine] = []

    if feed_filter.kind in (None, "sales"):
        lines.extend(
            sale_line(sale) for sale in sales
            if feed_filter.admits(sale.organization_id, sale.sale_date)
        )
    if feed_filter.kind in (None, "losses"):
        lines.extend(
            loss_line(loss) for loss in losses
            if feed_filter.admits(loss.organization_id, loss.loss_date)
        )

    return sorted(lines, key=lambda line: line.date, reverse=True)


def build_feed_filter(
    *,
    organization_id: int | None = None,
    start: str | None = None,
    end: str | None = None,
    kind: str | None = None,
) -> FeedFilter:
    return FeedFilter(
        organization_id=organization_id,
        start=parse_datetime_field("start_date", start) if start else None,
        end=parse_datetime_field("end_date", end) if end else None,
        kind=kind or None,
    )


def get_transaction_feed(feed_filter: FeedFilter | None = None) -> list[FeedLine]:
    feed_filter = feed_filter or FeedFilter()
    sales = list_sales(organization_id=feed_filter.organization_id) if feed_filter.kind != "losses" else []
    losses = list_losses(organization_id=feed_filter.organization_id) if feed_filter.kind != "sales" else []
    return compose_feed(sales, losses, feed_filter)
