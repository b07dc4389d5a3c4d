# backend/restoledger/services/menu_service.py
"""
Menu Service

Menu items are shared by every branch. Prices are plain integer cents.

SOFT DELETE: delete_menu_item only flips is_active to False. Inactive items
disappear from the default listing and cannot be sold any more, but past
sales and losses keep pointing at them.
"""
from __future__ import annotations

from ..extensions import db
from ..models import MenuItem
from ..validation import NotFoundError
from .concurrency import lock_for_update, run_with_retry

MENU_ITEM_MUTABLE_FIELDS = {"name", "category", "description", "cost_price_cents", "selling_price_cents", "is_active"}


def apply_menu_item_patch(item: MenuItem, patch: dict) -> None:
    for k, v in patch.items():
        if k not in MENU_ITEM_MUTABLE_FIELDS:
            continue
        setattr(item, k, v)


def list_menu_items(*, include_inactive: bool = False) -> list[MenuItem]:
    query = db.session.query(MenuItem)
    if not include_inactive:
        query = query.filter(MenuItem.is_active.is_(True))
    return query.order_by(MenuItem.name.asc(), MenuItem.id.asc()).all()


def get_menu_item(menu_item_id: int) -> MenuItem:
    item = db.session.get(MenuItem, menu_item_id)
    if item is None:
        raise NotFoundError("Menu item not found")
    return item


def create_menu_item(*, patch: dict) -> MenuItem:
    def _op():
        item = MenuItem(is_active=True)
        apply_menu_item_patch(item, patch)
        db.session.add(item)
        db.session.commit()
        return item

    return run_with_retry(_op)


def update_menu_item(menu_item_id: int, *, patch: dict) -> MenuItem:
    """
    Price changes apply to future sales/losses only; recorded ones keep
    their snapshot.
    """
    def _op():
        item = lock_for_update(db.session.query(MenuItem).filter_by(id=menu_item_id)).first()
        if not item:
            raise NotFoundError("Menu item not found")
        apply_menu_item_patch(item, patch)
        db.session.commit()
        return item

    return run_with_retry(_op)


def delete_menu_item(menu_item_id: int) -> MenuItem:
    def _op():
        item = lock_for_update(db.session.query(MenuItem).filter_by(id=menu_item_id)).first()
        if not item:
            raise NotFoundError("Menu item not found")
        item.is_active = False
        db.session.commit()
        return item

    return run_with_retry(_op)
