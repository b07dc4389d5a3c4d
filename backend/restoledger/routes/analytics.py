# Overview: Flask API routes for analytics; parses input and returns JSON responses.

"""
Analytics Routes

- /summary: revenue, cost, profit, losses and net profit for a selection
- /transactions: merged sales/losses ledger, newest first
"""

from flask import Blueprint, request, jsonify

from ..services import analytics_service, feed_service
from ..validation import ValidationError, optional_int


analytics_bp = Blueprint("analytics", __name__, url_prefix="/api/analytics")


@analytics_bp.get("/summary")
def summary_route():
    """
    Query params (all optional):
    - organization_id: int
    - start_date, end_date: ISO-8601. The range over created_at is applied
      only when BOTH are given; a single bound means no date filter.
    """
    try:
        summary_filter = analytics_service.build_summary_filter(
            organization_id=optional_int("organization_id", request.args.get("organization_id")),
            start=request.args.get("start_date"),
            end=request.args.get("end_date"),
        )
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    return jsonify(analytics_service.summary_report(summary_filter)), 200


@analytics_bp.get("/transactions")
def transactions_route():
    """
    Query params (all optional):
    - organization_id: int
    - start_date / end_date: ISO-8601, each bound applied to sale_date / loss_date
    - type: "sales" or "losses" (default: both)
    """
    try:
        feed_filter = feed_service.build_feed_filter(
            organization_id=optional_int("organization_id", request.args.get("organization_id")),
            start=request.args.get("start_date"),
            end=request.args.get("end_date"),
            kind=request.args.get("type"),
        )
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    lines = feed_service.get_transaction_feed(feed_filter)
    return jsonify({
        "items": [line.to_dict() for line in lines],
        "count": len(lines),
        "net_amount_cents": sum(line.amount_cents for line in lines),
    }), 200
