# routes/funnel.py
from flask import jsonify, request
from flask_login import login_required
from marshmallow import ValidationError

from . import funnel_bp, current_state, validation_error
from ..schemas.deal_schema import DealSchema, MoveDealSchema
from ..services.funnel_service import FunnelService, funnel_board, funnel_summary
from ..services.insight_service import InsightService

from clinic import logger


@funnel_bp.route("", methods=["GET"])
@login_required
def board():
    state = current_state()
    return jsonify(funnel_board(state.deals.all(), state.clients.all())), 200


@funnel_bp.route("/deals", methods=["POST"])
@login_required
def create_deal():
    try:
        data = DealSchema().load(request.get_json() or {})
    except ValidationError as e:
        logger.error(f"Validation error: {str(e)}")
        return validation_error(e)

    data['id'] = None
    deal = current_state().deals.save(data)
    return jsonify({"message": "Deal created successfully", "deal": deal}), 201


@funnel_bp.route("/deals/<deal_id>", methods=["PUT"])
@login_required
def replace_deal(deal_id):
    state = current_state()
    state.deals.require(deal_id)
    try:
        data = DealSchema().load(request.get_json() or {})
    except ValidationError as e:
        logger.error(f"Validation error: {str(e)}")
        return validation_error(e)

    data['id'] = deal_id
    return jsonify({"message": "Deal updated successfully", "deal": state.deals.save(data)}), 200


@funnel_bp.route("/deals/<deal_id>", methods=["DELETE"])
@login_required
def delete_deal(deal_id):
    current_state().deals.delete(deal_id)
    return jsonify({"message": "Deal deleted"}), 200


@funnel_bp.route("/deals/<deal_id>/move", methods=["POST"])
@login_required
def move_deal(deal_id):
    try:
        data = MoveDealSchema().load(request.get_json() or {})
    except ValidationError as e:
        return validation_error(e)

    deal = FunnelService.move_deal(current_state(), deal_id, data['stage_id'])
    return jsonify({"deal": deal}), 200


@funnel_bp.route("/insights", methods=["POST"])
@login_required
def insights():
    state = current_state()
    with state.insight_call('funnel'):
        text = InsightService.from_config().get_smart_insights(funnel_summary(state.deals.all()))
    return jsonify({"insight": text}), 200
