# Overview: Service-layer operations for losses (write-offs of menu or stock items).

from __future__ import annotations

from datetime import datetime

from ..extensions import db
from ..models import LOSS_TYPES, Loss, Organization
from ..validation import NotFoundError, ValidationError, enforce_quantity, optional_text
from .concurrency import run_with_retry
from .derivation_service import (
    MenuTarget,
    StockTarget,
    check_loss_invariants,
    derive_loss,
    loss_target_from_ids,
    resolve_loss_pricing,
)


def list_losses(
    *,
    organization_id: int | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[Loss]:
    """Newest first by loss_date; each bound on loss_date is optional."""
    query = db.session.query(Loss)
    if organization_id is not None:
        query = query.filter(Loss.organization_id == organization_id)
    if start is not None:
        query = query.filter(Loss.loss_date >= start)
    if end is not None:
        query = query.filter(Loss.loss_date <= end)
    return query.order_by(Loss.loss_date.desc(), Loss.id.desc()).all()


def get_loss(loss_id: int) -> Loss:
    loss = db.session.get(Loss, loss_id)
    if loss is None:
        raise NotFoundError("Loss not found")
    return loss


def create_loss(
    *,
    type: str,
    quantity,
    organization_id: int,
    menu_item_id: int | None = None,
    stock_item_id: int | None = None,
    item_type: str | None = None,
    reason: str | None = None,
    loss_date: datetime | None = None,
) -> Loss:
    """
    Record a write-off.

    The referenced item's pricing is snapshot through resolve_loss_pricing
    (menu: cost + forgone profit, stock: cost only) and total_loss_cents is
    derived before anything is added to the session.

    A menu item that was soft-deleted can still be written off.

    Raises:
        ValidationError: unknown type, bad quantity, neither/both item ids
        NotFoundError: organization or referenced item does not exist
    """
    if type not in LOSS_TYPES:
        raise ValidationError(f"type must be one of: {', '.join(LOSS_TYPES)}")
    quantity = enforce_quantity(quantity)
    if organization_id is None:
        raise ValidationError("organization_id is required")
    target = loss_target_from_ids(menu_item_id, stock_item_id, item_type)
    reason = optional_text("reason", reason, max_length=255)

    def _op():
        org = db.session.get(Organization, organization_id)
        if org is None:
            raise NotFoundError("Organization not found")

        pricing = resolve_loss_pricing(target)
        totals = derive_loss(quantity, pricing.cost_price_cents, pricing.expected_profit_cents)

        loss = Loss(
            organization_id=org.id,
            type=type,
            menu_item_id=target.menu_item_id if isinstance(target, MenuTarget) else None,
            stock_item_id=target.stock_item_id if isinstance(target, StockTarget) else None,
            quantity=quantity,
            cost_price_cents=pricing.cost_price_cents,
            expected_profit_cents=pricing.expected_profit_cents,
            total_loss_cents=totals.total_loss_cents,
            reason=reason,
        )
        if loss_date is not None:
            loss.loss_date = loss_date

        check_loss_invariants(
            quantity=loss.quantity,
            cost_price_cents=loss.cost_price_cents,
            expected_profit_cents=loss.expected_profit_cents,
            total_loss_cents=loss.total_loss_cents,
        )

        db.session.add(loss)
        db.session.commit()
        return loss

    return run_with_retry(_op)


def delete_loss(loss_id: int) -> None:
    def _op():
        loss = db.session.get(Loss, loss_id)
        if loss is None:
            raise NotFoundError("Loss not found")
        db.session.delete(loss)
        db.session.commit()

    run_with_retry(_op)
