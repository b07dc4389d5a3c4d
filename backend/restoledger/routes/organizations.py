# Overview: Flask API routes for organizations (restaurant branches); parses input and returns JSON responses.

from flask import Blueprint, current_app, jsonify, request

from ..models import Organization
from ..services import organization_service
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    ValidationError,
    NotFoundError,
    ConflictError,
)

ORGANIZATION_POLICY = ModelValidationPolicy(
    writable_fields={"name", "address"},
    required_on_create={"name"},
)

organizations_bp = Blueprint("organizations", __name__, url_prefix="/api/organizations")


@organizations_bp.get("")
def list_organizations():
    orgs = organization_service.list_organizations()
    return jsonify([org.to_dict() for org in orgs]), 200


@organizations_bp.post("")
def create_organization():
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(model=Organization, payload=payload, policy=ORGANIZATION_POLICY, partial=False)
        org = organization_service.create_organization(patch=patch)
        return jsonify(org.to_dict()), 201
    except ValidationError as exc:
        return jsonify({"error": str(exc)}), 400
    except Exception:
        current_app.logger.exception("Failed to create organization")
        return jsonify({"error": "Internal server error"}), 500


@organizations_bp.get("/<int:organization_id>")
def get_organization(organization_id: int):
    try:
        org = organization_service.get_organization(organization_id)
    except NotFoundError as exc:
        return jsonify({"error": str(exc)}), 404
    return jsonify(org.to_dict()), 200


@organizations_bp.put("/<int:organization_id>")
def update_organization(organization_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(model=Organization, payload=payload, policy=ORGANIZATION_POLICY, partial=True)
        org = organization_service.update_organization(organization_id, patch=patch)
        return jsonify(org.to_dict()), 200
    except ValidationError as exc:
        return jsonify({"error": str(exc)}), 400
    except NotFoundError as exc:
        return jsonify({"error": str(exc)}), 404
    except Exception:
        current_app.logger.exception("Failed to update organization")
        return jsonify({"error": "Internal server error"}), 500


@organizations_bp.delete("/<int:organization_id>")
def delete_organization(organization_id: int):
    try:
        organization_service.delete_organization(organization_id)
        return jsonify({"ok": True}), 200
    except NotFoundError as exc:
        return jsonify({"error": str(exc)}), 404
    except ConflictError as exc:
        return jsonify({"error": str(exc)}), 409
    except Exception:
        current_app.logger.exception("Failed to delete organization")
        return jsonify({"error": "Internal server error"}), 500
