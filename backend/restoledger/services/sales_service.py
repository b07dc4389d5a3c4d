# Overview: Service-layer operations for sales; snapshots menu pricing and persists derived totals.

from __future__ import annotations

from datetime import datetime

from ..extensions import db
from ..models import MenuItem, Organization, Sale
from ..validation import NotFoundError, ValidationError, enforce_quantity, optional_text
from .concurrency import run_with_retry
from .derivation_service import check_sale_invariants, derive_sale


def list_sales(
    *,
    organization_id: int | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[Sale]:
    """Newest first by sale_date; each bound on sale_date is optional."""
    query = db.session.query(Sale)
    if organization_id is not None:
        query = query.filter(Sale.organization_id == organization_id)
    if start is not None:
        query = query.filter(Sale.sale_date >= start)
    if end is not None:
        query = query.filter(Sale.sale_date <= end)
    return query.order_by(Sale.sale_date.desc(), Sale.id.desc()).all()


def get_sale(sale_id: int) -> Sale:
    sale = db.session.get(Sale, sale_id)
    if sale is None:
        raise NotFoundError("Sale not found")
    return sale


def create_sale(
    *,
    organization_id: int,
    menu_item_id: int,
    quantity,
    notes: str | None = None,
    sale_date: datetime | None = None,
) -> Sale:
    """
    Record a sale of a menu item.

    unit/cost prices are read from the menu item right now and frozen on the
    sale; the derived totals are computed before the row is added, so a
    failure at any step leaves nothing behind.

    Raises:
        ValidationError: bad quantity, missing ids, inactive menu item
        NotFoundError: organization or menu item does not exist
    """
    quantity = enforce_quantity(quantity)
    notes = optional_text("notes", notes)
    if organization_id is None:
        raise ValidationError("organization_id is required")
    if menu_item_id is None:
        raise ValidationError("menu_item_id is required")

    def _op():
        org = db.session.get(Organization, organization_id)
        if org is None:
            raise NotFoundError("Organization not found")

        item = db.session.get(MenuItem, menu_item_id)
        if item is None:
            raise NotFoundError("Menu item not found")
        if not item.is_active:
            raise ValidationError("Menu item is no longer on the menu")

        totals = derive_sale(quantity, item.selling_price_cents, item.cost_price_cents)

        sale = Sale(
            organization_id=org.id,
            menu_item_id=item.id,
            quantity=quantity,
            unit_price_cents=item.selling_price_cents,
            cost_price_cents=item.cost_price_cents,
            total_revenue_cents=totals.total_revenue_cents,
            total_cost_cents=totals.total_cost_cents,
            profit_cents=totals.profit_cents,
            notes=notes,
        )
        if sale_date is not None:
            sale.sale_date = sale_date

        check_sale_invariants(
            quantity=sale.quantity,
            unit_price_cents=sale.unit_price_cents,
            cost_price_cents=sale.cost_price_cents,
            total_revenue_cents=sale.total_revenue_cents,
            total_cost_cents=sale.total_cost_cents,
            profit_cents=sale.profit_cents,
        )

        db.session.add(sale)
        db.session.commit()
        return sale

    return run_with_retry(_op)


def delete_sale(sale_id: int) -> None:
    def _op():
        sale = db.session.get(Sale, sale_id)
        if sale is None:
            raise NotFoundError("Sale not found")
        db.session.delete(sale)
        db.session.commit()

    run_with_retry(_op)
