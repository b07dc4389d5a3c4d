from __future__ import annotations

from ..extensions import db
from restoledger.time_utils import to_utc_z, utcnow

class Sale(db.Model):
    """
    A recorded sale of one menu item (all amounts in cents).

    PRICE SNAPSHOT: unit_price_cents and cost_price_cents are copied from
    the menu item when the sale is created. Later menu price changes never
    touch existing sales.

    Derived (written once, at creation):
    - total_revenue_cents = quantity * unit_price_cents
    - total_cost_cents    = quantity * cost_price_cents
    - profit_cents        = total_revenue_cents - total_cost_cents

    Sales are never updated in place; they can only be deleted.
    """
    __tablename__ = "sales"
    __table_args__ = (
        # Summary filters on organization + created_at, the ledger on sale_date
        db.Index("ix_sales_org_created", "organization_id", "created_at"),
        db.Index("ix_sales_org_sale_date", "organization_id", "sale_date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    organization_id = db.Column(db.Integer, db.ForeignKey("organizations.id"), nullable=False, index=True)
    menu_item_id = db.Column(db.Integer, db.ForeignKey("menu_items.id"), nullable=False, index=True)

    quantity = db.Column(db.Integer, nullable=False)
    unit_price_cents = db.Column(db.Integer, nullable=False)
    cost_price_cents = db.Column(db.Integer, nullable=False)

    total_revenue_cents = db.Column(db.Integer, nullable=False)
    total_cost_cents = db.Column(db.Integer, nullable=False)
    profit_cents = db.Column(db.Integer, nullable=False)

    notes = db.Column(db.Text, nullable=True)

    # Timestamps
    sale_date = db.Column(db.DateTime, nullable=False, default=utcnow)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    organization = db.relationship("Organization", backref=db.backref("sales", lazy=True))
    menu_item = db.relationship("MenuItem", backref=db.backref("sales", lazy=True))

    def __repr__(self) -> str:
        return f"<Sale id={self.id} org_id={self.organization_id} menu_item_id={self.menu_item_id} qty={self.quantity}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "organization_id": self.organization_id,
            "organization_name": self.organization.name if self.organization else None,
            "menu_item_id": self.menu_item_id,
            "menu_item_name": self.menu_item.name if self.menu_item else None,
            "quantity": self.quantity,
            "unit_price_cents": self.unit_price_cents,
            "cost_price_cents": self.cost_price_cents,
            "total_revenue_cents": self.total_revenue_cents,
            "total_cost_cents": self.total_cost_cents,
            "profit_cents": self.profit_cents,
            "notes": self.notes,
            "sale_date": to_utc_z(self.sale_date),
            "created_at": to_utc_z(self.created_at),
        }
