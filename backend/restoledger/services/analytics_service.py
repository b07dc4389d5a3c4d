# Overview: Financial summary over a filtered set of sales and losses.

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from ..extensions import db
from ..models import Loss, Sale
from ..validation import parse_datetime_field
from restoledger.time_utils import to_utc_z


@dataclass(frozen=True)
class SummaryFilter:
    """
    Selection for a Summary.

    - organization_id: exact match when set
    - start/end: inclusive range over created_at, applied ONLY when both are
      set. A lone start or end is ignored (no date filter at all).
    """
    organization_id: int | None = None
    start: datetime | None = None
    end: datetime | None = None

    @property
    def has_date_range(self) -> bool:
        return self.start is not None and self.end is not None

    def apply(self, query, model):
        if self.organization_id is not None:
            query = query.filter(model.organization_id == self.organization_id)
        if self.has_date_range:
            query = query.filter(model.created_at >= self.start, model.created_at <= self.end)
        return query


@dataclass(frozen=True)
class Summary:
    total_revenue_cents: int = 0
    total_cost_cents: int = 0
    total_profit_cents: int = 0
    total_loss_cents: int = 0
    sales_count: int = 0
    loss_count: int = 0

    @property
    def net_profit_cents(self) -> int:
        return self.total_profit_cents - self.total_loss_cents

    def __add__(self, other: "Summary") -> "Summary":
        if not isinstance(other, Summary):
            return NotImplemented
        return Summary(
            total_revenue_cents=self.total_revenue_cents + other.total_revenue_cents,
            total_cost_cents=self.total_cost_cents + other.total_cost_cents,
            total_profit_cents=self.total_profit_cents + other.total_profit_cents,
            total_loss_cents=self.total_loss_cents + other.total_loss_cents,
            sales_count=self.sales_count + other.sales_count,
            loss_count=self.loss_count + other.loss_count,
        )

    def to_dict(self) -> dict:
        return {
            "total_revenue_cents": self.total_revenue_cents,
            "total_cost_cents": self.total_cost_cents,
            "total_profit_cents": self.total_profit_cents,
            "total_loss_cents": self.total_loss_cents,
            "net_profit_cents": self.net_profit_cents,
            "sales_count": self.sales_count,
            "loss_count": self.loss_count,
        }


def summarize(sales: Iterable, losses: Iterable) -> Summary:
    """
    Reduce already-filtered sales and losses. Works on anything exposing the
    Sale / Loss total fields; an empty input gives an all-zero Summary.
    """
    revenue = cost = profit = sales_count = 0
    for sale in sales:
        revenue += sale.total_revenue_cents
        cost += sale.total_cost_cents
        profit += sale.profit_cents
        sales_count += 1

    total_loss = loss_count = 0
    for loss in losses:
        total_loss += loss.total_loss_cents
        loss_count += 1

    return Summary(
        total_revenue_cents=revenue,
        total_cost_cents=cost,
        total_profit_cents=profit,
        total_loss_cents=total_loss,
        sales_count=sales_count,
        loss_count=loss_count,
    )


def build_summary_filter(
    *,
    organization_id: int | None = None,
    start: str | None = None,
    end: str | None = None,
) -> SummaryFilter:
    """
    Parse raw query values; blank strings mean "no filter". An inverted
    range is not an error, it simply matches nothing.
    """
    start_dt = parse_datetime_field("start_date", start) if start else None
    end_dt = parse_datetime_field("end_date", end) if end else None
    return SummaryFilter(organization_id=organization_id, start=start_dt, end=end_dt)


def get_summary(summary_filter: SummaryFilter | None = None) -> Summary:
    """Read-only: loads matching sales and losses and reduces them."""
    summary_filter = summary_filter or SummaryFilter()

    sales = summary_filter.apply(db.session.query(Sale), Sale).all()
    losses = summary_filter.apply(db.session.query(Loss), Loss).all()
    return summarize(sales, losses)


def summary_report(summary_filter: SummaryFilter) -> dict:
    """Summary plus the filter that produced it, as returned by the API."""
    summary = get_summary(summary_filter)
    applied_range = summary_filter.has_date_range
    return {
        **summary.to_dict(),
        "filters": {
            "organization_id": summary_filter.organization_id,
            "start_date": to_utc_z(summary_filter.start) if applied_range else None,
            "end_date": to_utc_z(summary_filter.end) if applied_range else None,
            "date_range_applied": applied_range,
        },
    }
