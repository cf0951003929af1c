# routes/clients.py
from flask import current_app, jsonify, request
from flask_login import login_required, current_user
from marshmallow import ValidationError

from . import clients_bp, current_state, validation_error
from ..schemas.client_schema import ClientSchema, ClinicalEvolutionSchema
from ..services.client_service import ClientService

from clinic import logger


@clients_bp.route("", methods=["GET"])
@login_required
def list_clients():
    """
    Clients filtered by ``q`` (name or CPF substring) and ``status``
    (ALL, ACTIVE, LEAD, INACTIVE).
    """
    clients = ClientService.search(
        current_state(),
        term=request.args.get('q'),
        status=request.args.get('status')
    )
    return jsonify(clients), 200


@clients_bp.route("/<client_id>", methods=["GET"])
@login_required
def get_client(client_id):
    return jsonify(current_state().clients.require(client_id)), 200


@clients_bp.route("", methods=["POST"])
@login_required
def create_client():
    schema = ClientSchema()
    try:
        data = schema.load(request.get_json() or {})
    except ValidationError as e:
        logger.error(f"Validation error: {str(e)}")
        return validation_error(e)

    data['id'] = None
    client = ClientService.save_client(current_state(), data)
    return jsonify({"message": "Client created successfully", "client": client}), 201


@clients_bp.route("/<client_id>", methods=["PUT"])
@login_required
def replace_client(client_id):
    state = current_state()
    state.clients.require(client_id)
    try:
        data = ClientSchema().load(request.get_json() or {})
    except ValidationError as e:
        logger.error(f"Validation error: {str(e)}")
        return validation_error(e)

    data['id'] = client_id
    client = ClientService.save_client(state, data)
    return jsonify({"message": "Client updated successfully", "client": client}), 200


@clients_bp.route("/<client_id>", methods=["DELETE"])
@login_required
def delete_client(client_id):
    current_state().clients.delete(client_id)
    logger.info(f"Client deleted: {client_id}")
    return jsonify({"message": "Client deleted"}), 200


@clients_bp.route("/<client_id>/history", methods=["POST"])
@login_required
def add_clinical_evolution(client_id):
    try:
        entry = ClinicalEvolutionSchema().load(request.get_json() or {})
    except ValidationError as e:
        logger.error(f"Validation error: {str(e)}")
        return validation_error(e)

    client = ClientService.add_clinical_evolution(
        current_state(),
        client_id,
        entry,
        professional_name=current_user.profile.get('name')
    )
    return jsonify({"message": "Clinical evolution added", "client": client}), 201


@clients_bp.route("/<client_id>/photos", methods=["POST"])
@login_required
def upload_photos(client_id):
    """
    Upload before/after photos (multipart field ``files``). The returned URLs
    are meant to be attached to a clinical evolution.
    """
    files = [f for f in request.files.getlist('files') if f and f.filename]
    if not files:
        return jsonify({"error": {"files": ["At least one file is required."]}}), 400

    urls = ClientService.upload_photos(
        current_state(),
        client_id,
        files,
        bucket=current_app.config['PHOTO_BUCKET']
    )
    return jsonify({"urls": urls}), 201
