from __future__ import annotations

from ..extensions import db
from restoledger.time_utils import to_utc_z, utcnow


# Loss categories offered to staff when writing items off
LOSS_TYPES = (
    "staff_consumption",
    "spoilage",
    "waste",
    "damaged",
    "theft",
    "other",
)


class Loss(db.Model):
    """
    A write-off of either a menu item or a stock item (all amounts in cents).

    PRICING SNAPSHOT (taken at creation):
    - menu item:  cost_price = item cost, expected_profit = selling - cost
    - stock item: cost_price = cost per unit, expected_profit = 0

    Derived: total_loss_cents = quantity * (cost_price_cents + expected_profit_cents)

    Exactly one of menu_item_id / stock_item_id is set when the loss is
    recorded. Deleting the stock item later clears stock_item_id; the
    snapshot amounts stay.
    """
    __tablename__ = "losses"
    __table_args__ = (
        db.Index("ix_losses_org_created", "organization_id", "created_at"),
        db.Index("ix_losses_org_loss_date", "organization_id", "loss_date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    organization_id = db.Column(db.Integer, db.ForeignKey("organizations.id"), nullable=False, index=True)

    type = db.Column(db.String(32), nullable=False, index=True)  # one of LOSS_TYPES

    menu_item_id = db.Column(db.Integer, db.ForeignKey("menu_items.id"), nullable=True, index=True)
    stock_item_id = db.Column(
        db.Integer,
        db.ForeignKey("stock_items.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    quantity = db.Column(db.Integer, nullable=False)
    cost_price_cents = db.Column(db.Integer, nullable=False)
    expected_profit_cents = db.Column(db.Integer, nullable=False, default=0)  # negative for loss leaders
    total_loss_cents = db.Column(db.Integer, nullable=False)

    reason = db.Column(db.String(255), nullable=True)

    loss_date = db.Column(db.DateTime, nullable=False, default=utcnow)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    organization = db.relationship("Organization", backref=db.backref("losses", lazy=True))
    menu_item = db.relationship("MenuItem", backref=db.backref("losses", lazy=True))
    stock_item = db.relationship("StockItem", backref=db.backref("losses", lazy=True, passive_deletes=True))

    @property
    def item_name(self) -> str | None:
        if self.menu_item is not None:
            return self.menu_item.name
        if self.stock_item is not None:
            return self.stock_item.name
        return None

    def __repr__(self) -> str:
        return f"<Loss id={self.id} org_id={self.organization_id} type={self.type!r} qty={self.quantity}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "organization_id": self.organization_id,
            "organization_name": self.organization.name if self.organization else None,
            "type": self.type,
            "item_type": "menu" if self.menu_item_id is not None else ("stock" if self.stock_item_id is not None else None),
            "menu_item_id": self.menu_item_id,
            "stock_item_id": self.stock_item_id,
            "item_name": self.item_name,
            "quantity": self.quantity,
            "cost_price_cents": self.cost_price_cents,
            "expected_profit_cents": self.expected_profit_cents,
            "total_loss_cents": self.total_loss_cents,
            "reason": self.reason,
            "loss_date": to_utc_z(self.loss_date),
            "created_at": to_utc_z(self.created_at),
        }
