from __future__ import annotations

from ..extensions import db
from ..models import Loss, Organization, StockItem
from ..validation import NotFoundError, ValidationError
from .concurrency import lock_for_update, run_with_retry

STOCK_ITEM_MUTABLE_FIELDS = {
    "name",
    "category",
    "unit",
    "cost_per_unit_cents",
    "current_stock",
    "min_stock_level",
    "organization_id",
}


def _require_organization(organization_id) -> Organization:
    if organization_id is None:
        raise ValidationError("organization_id is required")
    org = db.session.get(Organization, organization_id)
    if org is None:
        raise NotFoundError("Organization not found")
    return org


def apply_stock_item_patch(item: StockItem, patch: dict) -> None:
    for k, v in patch.items():
        if k not in STOCK_ITEM_MUTABLE_FIELDS:
            continue
        setattr(item, k, v)


def list_stock_items(*, organization_id: int | None = None) -> list[StockItem]:
    query = db.session.query(StockItem)
    if organization_id is not None:
        query = query.filter(StockItem.organization_id == organization_id)
    return query.order_by(StockItem.name.asc(), StockItem.id.asc()).all()


def list_low_stock(*, organization_id: int | None = None) -> list[StockItem]:
    """Items at or below their minimum level (restock candidates)."""
    query = db.session.query(StockItem).filter(StockItem.current_stock <= StockItem.min_stock_level)
    if organization_id is not None:
        query = query.filter(StockItem.organization_id == organization_id)
    return query.order_by(StockItem.name.asc(), StockItem.id.asc()).all()


def get_stock_item(stock_item_id: int) -> StockItem:
    item = db.session.get(StockItem, stock_item_id)
    if item is None:
        raise NotFoundError("Stock item not found")
    return item


def create_stock_item(*, patch: dict) -> StockItem:
    def _op():
        _require_organization(patch.get("organization_id"))
        item = StockItem(current_stock=0.0, min_stock_level=0.0)
        apply_stock_item_patch(item, patch)
        db.session.add(item)
        db.session.commit()
        return item

    return run_with_retry(_op)


def update_stock_item(stock_item_id: int, *, patch: dict) -> StockItem:
    def _op():
        item = lock_for_update(db.session.query(StockItem).filter_by(id=stock_item_id)).first()
        if not item:
            raise NotFoundError("Stock item not found")
        if "organization_id" in patch:
            _require_organization(patch["organization_id"])
        apply_stock_item_patch(item, patch)
        db.session.commit()
        return item

    return run_with_retry(_op)


def delete_stock_item(stock_item_id: int) -> None:
    """
    Hard delete. Losses that wrote this item off keep their amounts and
    lose the link (stock_item_id -> NULL).
    """
    def _op():
        item = db.session.get(StockItem, stock_item_id)
        if item is None:
            raise NotFoundError("Stock item not found")

        # SQLite does not enforce ON DELETE SET NULL unless foreign keys are on
        db.session.query(Loss).filter(Loss.stock_item_id == stock_item_id).update(
            {Loss.stock_item_id: None}, synchronize_session="fetch"
        )
        db.session.delete(item)
        db.session.commit()

    run_with_retry(_op)
