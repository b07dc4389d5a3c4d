# Overview: Derived money fields for sales and losses, computed once at write time.

"""
Derivation rules (all amounts are integer cents, so every result is exact):

    Sale:  total_revenue = quantity * unit_price
           total_cost    = quantity * cost_price
           profit        = total_revenue - total_cost

    Loss:  total_loss    = quantity * (cost_price + expected_profit)

derive_sale / derive_loss are pure. The only function here that reads the
store is resolve_loss_pricing, which turns a LossTarget into the
(cost_price, expected_profit) pair that derive_loss needs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..extensions import db
from ..models import MenuItem, StockItem
from ..validation import InvariantViolation, NotFoundError, ValidationError


@dataclass(frozen=True)
class SaleTotals:
    total_revenue_cents: int
    total_cost_cents: int
    profit_cents: int


@dataclass(frozen=True)
class LossTotals:
    total_loss_cents: int


@dataclass(frozen=True)
class MenuTarget:
    menu_item_id: int


@dataclass(frozen=True)
class StockTarget:
    stock_item_id: int


LossTarget = Union[MenuTarget, StockTarget]


@dataclass(frozen=True)
class LossPricing:
    cost_price_cents: int
    expected_profit_cents: int


def _require_cents(field: str, value, *, allow_negative: bool = False) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer amount of cents")
    if value < 0 and not allow_negative:
        raise ValidationError(f"{field} must be >= 0")
    return value


def _require_quantity(quantity) -> int:
    if not isinstance(quantity, int) or isinstance(quantity, bool):
        raise ValidationError("quantity must be an integer")
    if quantity < 1:
        raise ValidationError("quantity must be >= 1")
    return quantity


def derive_sale(quantity: int, unit_price_cents: int, cost_price_cents: int) -> SaleTotals:
    quantity = _require_quantity(quantity)
    unit_price_cents = _require_cents("unit_price_cents", unit_price_cents)
    cost_price_cents = _require_cents("cost_price_cents", cost_price_cents)

    total_revenue = quantity * unit_price_cents
    total_cost = quantity * cost_price_cents
    return SaleTotals(
        total_revenue_cents=total_revenue,
        total_cost_cents=total_cost,
        profit_cents=total_revenue - total_cost,
    )


def derive_loss(quantity: int, cost_price_cents: int, expected_profit_cents: int) -> LossTotals:
    """
    No item-type branching here: for stock items the caller passes
    expected_profit_cents=0 (see resolve_loss_pricing).
    """
    quantity = _require_quantity(quantity)
    cost_price_cents = _require_cents("cost_price_cents", cost_price_cents)
    # Negative when a menu item sells below cost
    expected_profit_cents = _require_cents("expected_profit_cents", expected_profit_cents, allow_negative=True)

    return LossTotals(total_loss_cents=quantity * (cost_price_cents + expected_profit_cents))


def loss_target_from_ids(
    menu_item_id: int | None,
    stock_item_id: int | None,
    item_type: str | None = None,
) -> LossTarget:
    """
    Build the tagged target of a loss from request fields.

    Exactly one id must be set. item_type ("menu" / "stock") is optional and,
    when given, must name the id that was supplied.
    """
    if menu_item_id is not None and stock_item_id is not None:
        raise ValidationError("Set exactly one of menu_item_id or stock_item_id, not both")
    if menu_item_id is None and stock_item_id is None:
        raise ValidationError("One of menu_item_id or stock_item_id is required")

    if item_type is not None and item_type not in ("menu", "stock"):
        raise ValidationError("item_type must be 'menu' or 'stock'")

    if menu_item_id is not None:
        if item_type == "stock":
            raise ValidationError("item_type 'stock' requires stock_item_id")
        return MenuTarget(menu_item_id=menu_item_id)

    if item_type == "menu":
        raise ValidationError("item_type 'menu' requires menu_item_id")
    return StockTarget(stock_item_id=stock_item_id)


def pricing_for_menu_item(item: MenuItem) -> LossPricing:
    return LossPricing(
        cost_price_cents=item.cost_price_cents,
        expected_profit_cents=item.selling_price_cents - item.cost_price_cents,
    )


def pricing_for_stock_item(item: StockItem) -> LossPricing:
    # Stock items are never sold directly: no forgone profit
    return LossPricing(cost_price_cents=item.cost_per_unit_cents, expected_profit_cents=0)


def resolve_loss_pricing(target: LossTarget) -> LossPricing:
    """Look up the referenced item and snapshot its pricing. NotFoundError if it is gone."""
    if isinstance(target, MenuTarget):
        item = db.session.get(MenuItem, target.menu_item_id)
        if item is None:
            raise NotFoundError("Menu item not found")
        return pricing_for_menu_item(item)

    if isinstance(target, StockTarget):
        item = db.session.get(StockItem, target.stock_item_id)
        if item is None:
            raise NotFoundError("Stock item not found")
        return pricing_for_stock_item(item)

    raise TypeError(f"Unsupported loss target: {target!r}")


def check_sale_invariants(
    *,
    quantity: int,
    unit_price_cents: int,
    cost_price_cents: int,
    total_revenue_cents: int,
    total_cost_cents: int,
    profit_cents: int,
) -> None:
    expected = derive_sale(quantity, unit_price_cents, cost_price_cents)
    actual = SaleTotals(total_revenue_cents, total_cost_cents, profit_cents)
    if actual != expected:
        raise InvariantViolation(f"Sale totals {actual} do not match recomputed {expected}")


def check_loss_invariants(
    *,
    quantity: int,
    cost_price_cents: int,
    expected_profit_cents: int,
    total_loss_cents: int,
) -> None:
    expected = derive_loss(quantity, cost_price_cents, expected_profit_cents)
    if total_loss_cents != expected.total_loss_cents:
        raise InvariantViolation(
            f"Loss total {total_loss_cents} does not match recomputed {expected.total_loss_cents}"
        )
