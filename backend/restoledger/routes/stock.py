# Overview: Flask API routes for stock items; parses input and returns JSON responses.

from flask import Blueprint, current_app, jsonify, request

from ..models import StockItem
from ..services import stock_service
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_stock_item,
    optional_int,
    ValidationError,
    NotFoundError,
)

STOCK_ITEM_POLICY = ModelValidationPolicy(
    writable_fields={
        "name",
        "category",
        "unit",
        "cost_per_unit_cents",
        "current_stock",
        "min_stock_level",
        "organization_id",
    },
    required_on_create={"name", "category", "unit", "cost_per_unit_cents", "organization_id"},
)

stock_bp = Blueprint("stock", __name__, url_prefix="/api/stock")


@stock_bp.get("")
def list_stock_items():
    """
    Query params:
    - organization_id: int (optional) - only this branch's items
    - low_stock: "true" (optional) - only items at or below min_stock_level
    """
    try:
        organization_id = optional_int("organization_id", request.args.get("organization_id"))
    except ValidationError as exc:
        return jsonify({"error": str(exc)}), 400
    low_stock = request.args.get("low_stock", "false").lower() == "true"

    if low_stock:
        items = stock_service.list_low_stock(organization_id=organization_id)
    else:
        items = stock_service.list_stock_items(organization_id=organization_id)
    return jsonify([item.to_dict() for item in items]), 200


@stock_bp.post("")
def create_stock_item():
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(model=StockItem, payload=payload, policy=STOCK_ITEM_POLICY, partial=False)
        enforce_rules_stock_item(patch)
        item = stock_service.create_stock_item(patch=patch)
        return jsonify(item.to_dict()), 201
    except ValidationError as exc:
        return jsonify({"error": str(exc)}), 400
    except NotFoundError as exc:
        return jsonify({"error": str(exc)}), 404
    except Exception:
        current_app.logger.exception("Failed to create stock item")
        return jsonify({"error": "Internal server error"}), 500


@stock_bp.get("/<int:stock_item_id>")
def get_stock_item(stock_item_id: int):
    try:
        item = stock_service.get_stock_item(stock_item_id)
    except NotFoundError as exc:
        return jsonify({"error": str(exc)}), 404
    return jsonify(item.to_dict()), 200


@stock_bp.put("/<int:stock_item_id>")
def update_stock_item(stock_item_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(model=StockItem, payload=payload, policy=STOCK_ITEM_POLICY, partial=True)
        enforce_rules_stock_item(patch)
        item = stock_service.update_stock_item(stock_item_id, patch=patch)
        return jsonify(item.to_dict()), 200
    except ValidationError as exc:
        return jsonify({"error": str(exc)}), 400
    except NotFoundError as exc:
        return jsonify({"error": str(exc)}), 404
    except Exception:
        current_app.logger.exception("Failed to update stock item")
        return jsonify({"error": "Internal server error"}), 500


@stock_bp.delete("/<int:stock_item_id>")
def delete_stock_item(stock_item_id: int):
    try:
        stock_service.delete_stock_item(stock_item_id)
        return jsonify({"ok": True}), 200
    except NotFoundError as exc:
        return jsonify({"error": str(exc)}), 404
    except Exception:
        current_app.logger.exception("Failed to delete stock item")
        return jsonify({"error": "Internal server error"}), 500
