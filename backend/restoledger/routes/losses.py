# Overview: Flask API routes for losses (write-offs); parses input and returns JSON responses.

"""
Loss routes.

A loss names exactly one item: a menu item (cost + forgone profit) or a
stock item (cost only). Pricing is looked up server-side at creation.
"""

from flask import Blueprint, request, jsonify, current_app

from ..models import LOSS_TYPES
from ..services import loss_service
from ..validation import (
    ValidationError,
    NotFoundError,
    optional_int,
    parse_datetime_field,
)

LOSS_FIELDS = {
    "type",
    "quantity",
    "organization_id",
    "item_type",
    "menu_item_id",
    "stock_item_id",
    "reason",
    "loss_date",
}

losses_bp = Blueprint("losses", __name__, url_prefix="/api/losses")


@losses_bp.get("/types")
def list_loss_types_route():
    return jsonify(list(LOSS_TYPES)), 200


@losses_bp.get("")
def list_losses_route():
    try:
        losses = loss_service.list_losses(
            organization_id=optional_int("organization_id", request.args.get("organization_id")),
            start=parse_datetime_field("start_date", request.args.get("start_date")),
            end=parse_datetime_field("end_date", request.args.get("end_date")),
        )
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify([loss.to_dict() for loss in losses]), 200


@losses_bp.post("")
def create_loss_route():
    """
    Body: {type, quantity, organization_id, item_type?, menu_item_id | stock_item_id,
           reason?, loss_date?}
    """
    data = request.get_json(silent=True) or {}
    try:
        unknown = sorted(set(data) - LOSS_FIELDS)
        if unknown:
            raise ValidationError(f"Field not allowed: {unknown[0]}")

        loss = loss_service.create_loss(
            type=data.get("type"),
            quantity=data.get("quantity"),
            organization_id=optional_int("organization_id", data.get("organization_id")),
            menu_item_id=optional_int("menu_item_id", data.get("menu_item_id")),
            stock_item_id=optional_int("stock_item_id", data.get("stock_item_id")),
            item_type=data.get("item_type") or None,
            reason=data.get("reason"),
            loss_date=parse_datetime_field("loss_date", data.get("loss_date")),
        )
        return jsonify(loss.to_dict()), 201

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to create loss")
        return jsonify({"error": "Internal server error"}), 500


@losses_bp.get("/<int:loss_id>")
def get_loss_route(loss_id: int):
    try:
        loss = loss_service.get_loss(loss_id)
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    return jsonify(loss.to_dict()), 200


@losses_bp.delete("/<int:loss_id>")
def delete_loss_route(loss_id: int):
    try:
        loss_service.delete_loss(loss_id)
        return jsonify({"ok": True}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to delete loss")
        return jsonify({"error": "Internal server error"}), 500
