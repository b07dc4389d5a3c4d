# Overview: Flask API routes for sales operations; parses input and returns JSON responses.

# backend/restoledger/routes/sales.py
"""Sales API routes. Sales are created and deleted, never edited."""

from flask import Blueprint, request, jsonify, current_app

from ..services import sales_service
from ..validation import (
    ValidationError,
    NotFoundError,
    optional_int,
    parse_datetime_field,
)

SALE_FIELDS = {"quantity", "menu_item_id", "organization_id", "notes", "sale_date"}

sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


@sales_bp.get("")
def list_sales_route():
    """
    Query params (all optional):
    - organization_id: int
    - start_date / end_date: ISO-8601, each bound applied on its own to sale_date
    """
    try:
        sales = sales_service.list_sales(
            organization_id=optional_int("organization_id", request.args.get("organization_id")),
            start=parse_datetime_field("start_date", request.args.get("start_date")),
            end=parse_datetime_field("end_date", request.args.get("end_date")),
        )
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify([sale.to_dict() for sale in sales]), 200


@sales_bp.post("")
def create_sale_route():
    """
    Record a sale.

    Body: {quantity, menu_item_id, organization_id, notes?, sale_date?}
    Prices come from the menu item, never from the request.
    """
    data = request.get_json(silent=True) or {}
    try:
        unknown = sorted(set(data) - SALE_FIELDS)
        if unknown:
            raise ValidationError(f"Field not allowed: {unknown[0]}")

        sale = sales_service.create_sale(
            organization_id=optional_int("organization_id", data.get("organization_id")),
            menu_item_id=optional_int("menu_item_id", data.get("menu_item_id")),
            quantity=data.get("quantity"),
            notes=data.get("notes"),
            sale_date=parse_datetime_field("sale_date", data.get("sale_date")),
        )
        return jsonify(sale.to_dict()), 201

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to create sale")
        return jsonify({"error": "Internal server error"}), 500


@sales_bp.get("/<int:sale_id>")
def get_sale_route(sale_id: int):
    try:
        sale = sales_service.get_sale(sale_id)
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    return jsonify(sale.to_dict()), 200


@sales_bp.delete("/<int:sale_id>")
def delete_sale_route(sale_id: int):
    try:
        sales_service.delete_sale(sale_id)
        return jsonify({"ok": True}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to delete sale")
        return jsonify({"error": "Internal server error"}), 500
