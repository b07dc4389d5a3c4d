# backend/restoledger/routes/menu.py
"""
Menu item routes.

Prices are integer cents. DELETE is a soft delete: the item is hidden from
the default listing and can no longer be sold, but history keeps it.
"""
from flask import Blueprint, current_app, jsonify, request

from ..models import MenuItem
from ..services import menu_service
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_menu_item,
    ValidationError,
    NotFoundError,
)

MENU_ITEM_POLICY = ModelValidationPolicy(
    writable_fields={"name", "category", "description", "cost_price_cents", "selling_price_cents", "is_active"},
    required_on_create={"name", "category", "cost_price_cents", "selling_price_cents"},
)

menu_bp = Blueprint("menu", __name__, url_prefix="/api/menu")


@menu_bp.get("")
def list_menu_items():
    """
    List menu items, active ones only unless include_inactive=true.
    """
    include_inactive = request.args.get("include_inactive", "false").lower() == "true"
    items = menu_service.list_menu_items(include_inactive=include_inactive)
    return jsonify([item.to_dict() for item in items]), 200


@menu_bp.post("")
def create_menu_item():
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(model=MenuItem, payload=payload, policy=MENU_ITEM_POLICY, partial=False)
        enforce_rules_menu_item(patch)
        item = menu_service.create_menu_item(patch=patch)
        return jsonify(item.to_dict()), 201
    except ValidationError as exc:
        return jsonify({"error": str(exc)}), 400
    except Exception:
        current_app.logger.exception("Failed to create menu item")
        return jsonify({"error": "Internal server error"}), 500


@menu_bp.get("/<int:menu_item_id>")
def get_menu_item(menu_item_id: int):
    try:
        item = menu_service.get_menu_item(menu_item_id)
    except NotFoundError as exc:
        return jsonify({"error": str(exc)}), 404
    return jsonify(item.to_dict()), 200


@menu_bp.put("/<int:menu_item_id>")
def update_menu_item(menu_item_id: int):
    """
    Update a menu item. New prices only affect sales and losses recorded
    afterwards.
    """
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(model=MenuItem, payload=payload, policy=MENU_ITEM_POLICY, partial=True)
        enforce_rules_menu_item(patch)
        item = menu_service.update_menu_item(menu_item_id, patch=patch)
        return jsonify(item.to_dict()), 200
    except ValidationError as exc:
        return jsonify({"error": str(exc)}), 400
    except NotFoundError as exc:
        return jsonify({"error": str(exc)}), 404
    except Exception:
        current_app.logger.exception("Failed to update menu item")
        return jsonify({"error": "Internal server error"}), 500


@menu_bp.delete("/<int:menu_item_id>")
def delete_menu_item(menu_item_id: int):
    try:
        menu_service.delete_menu_item(menu_item_id)
        return jsonify({"ok": True}), 200
    except NotFoundError as exc:
        return jsonify({"error": str(exc)}), 404
    except Exception:
        current_app.logger.exception("Failed to deactivate menu item")
        return jsonify({"error": "Internal server error"}), 500
