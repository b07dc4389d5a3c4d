from __future__ import annotations

from ..extensions import db
from restoledger.time_utils import to_utc_z


class MenuItem(db.Model):
    """
    A sellable dish (all amounts in cents).

    SOFT DELETE: "deleting" a menu item only clears is_active. The row stays
    so that historical sales and losses keep resolving their item name.

    Selling price may be below cost price; negative margins are valid.
    """
    __tablename__ = "menu_items"
    __table_args__ = (
        db.Index("ix_menu_items_active_name", "is_active", "name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    category = db.Column(db.String(64), nullable=False)
    description = db.Column(db.Text, nullable=True)

    cost_price_cents = db.Column(db.Integer, nullable=False, default=0)
    selling_price_cents = db.Column(db.Integer, nullable=False, default=0)

    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)

    version_id = db.Column(db.Integer, nullable=False, default=1)
    created_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return f"<MenuItem id={self.id} name={self.name!r} active={self.is_active}>"

    @property
    def profit_per_unit_cents(self) -> int:
        return (self.selling_price_cents or 0) - (self.cost_price_cents or 0)

    @property
    def margin_pct(self) -> float | None:
        """Profit as a percentage of the selling price; None for free items."""
        if not self.selling_price_cents:
            return None
        return round(self.profit_per_unit_cents / self.selling_price_cents * 100.0, 2)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "cost_price_cents": self.cost_price_cents,
            "selling_price_cents": self.selling_price_cents,
            "profit_per_unit_cents": self.profit_per_unit_cents,
            "margin_pct": self.margin_pct,
            "is_active": self.is_active,
            "version_id": self.version_id,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class StockItem(db.Model):
    """
    Raw inventory tracked per organization (flour, tomatoes, oil...).

    Stock items have no selling price, so writing one off never carries
    forgone profit.
    """
    __tablename__ = "stock_items"
    __table_args__ = (
        db.Index("ix_stock_items_org_name", "organization_id", "name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    organization_id = db.Column(db.Integer, db.ForeignKey("organizations.id"), nullable=False, index=True)

    name = db.Column(db.String(120), nullable=False)
    category = db.Column(db.String(64), nullable=False)
    unit = db.Column(db.String(32), nullable=False)  # kg, liters, pieces...

    cost_per_unit_cents = db.Column(db.Integer, nullable=False, default=0)
    current_stock = db.Column(db.Float, nullable=False, default=0.0)
    min_stock_level = db.Column(db.Float, nullable=False, default=0.0)

    version_id = db.Column(db.Integer, nullable=False, default=1)
    created_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    organization = db.relationship("Organization", backref=db.backref("stock_items", lazy=True))

    __mapper_args__ = {"version_id_col": version_id}

    @property
    def is_low_stock(self) -> bool:
        return (self.current_stock or 0.0) <= (self.min_stock_level or 0.0)

    def __repr__(self) -> str:
        return f"<StockItem id={self.id} name={self.name!r} org_id={self.organization_id}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "organization_id": self.organization_id,
            "organization_name": self.organization.name if self.organization else None,
            "name": self.name,
            "category": self.category,
            "unit": self.unit,
            "cost_per_unit_cents": self.cost_per_unit_cents,
            "current_stock": self.current_stock,
            "min_stock_level": self.min_stock_level,
            "is_low_stock": self.is_low_stock,
            "version_id": self.version_id,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
