# routes/chat.py
from flask import jsonify, request
from flask_login import login_required
from marshmallow import ValidationError

from . import chat_bp, current_state, validation_error
from ..fixtures import PlaceholderData
from ..schemas.chat_schemas import SuggestReplySchema, ComposeMessageSchema
from ..services.insight_service import InsightService
from ..services.reminder_service import generate_whatsapp_link


@chat_bp.route("/conversations", methods=["GET"])
@login_required
def conversations():
    return jsonify(PlaceholderData.conversations(request.args.get('q'))), 200


@chat_bp.route("/suggest-reply", methods=["POST"])
@login_required
def suggest_reply():
    try:
        data = SuggestReplySchema().load(request.get_json() or {})
    except ValidationError as e:
        return validation_error(e)

    with current_state().insight_call('chat'):
        reply = InsightService.from_config().suggest_reply(data['message'])
    return jsonify({"reply": reply}), 200


@chat_bp.route("/compose", methods=["POST"])
@login_required
def compose():
    """WhatsApp compose link for a free-text message"""
    try:
        data = ComposeMessageSchema().load(request.get_json() or {})
    except ValidationError as e:
        return validation_error(e)
    return jsonify({"link": generate_whatsapp_link(data['phone'], data['text'])}), 200
