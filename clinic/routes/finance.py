# routes/finance.py
from flask import current_app, jsonify, request
from flask_login import login_required
from marshmallow import ValidationError

from . import finance_bp, current_state, validation_error
from ..schemas.finance_schemas import TransactionSchema, ProcedurePackageSchema
from ..services.finance_service import FINANCE_TABS, client_name, finance_stats, transactions_for_tab

from clinic import logger


@finance_bp.route("", methods=["GET"])
@login_required
def ledger():
    """
    Transactions of the selected ``tab`` (flow, payable, receivable) and the
    summary cards. Stats always cover the whole ledger.
    """
    tab = request.args.get('tab', 'flow')
    if tab not in FINANCE_TABS:
        return jsonify({"error": {"tab": [f"Must be one of: {', '.join(FINANCE_TABS)}."]}}), 400

    state = current_state()
    transactions = state.transactions.all()
    clients = state.clients.all()
    rows = [
        dict(t, client_name=client_name(clients, t.get('client_id')))
        for t in transactions_for_tab(transactions, tab)
    ]
    stats = finance_stats(
        transactions,
        net_margin=current_app.config.get('FINANCE_NET_MARGIN'),
        average_ticket=current_app.config.get('FINANCE_AVERAGE_TICKET')
    )
    return jsonify({"tab": tab, "stats": stats, "transactions": rows}), 200


@finance_bp.route("/transactions", methods=["POST"])
@login_required
def create_transaction():
    try:
        data = TransactionSchema().load(request.get_json() or {})
    except ValidationError as e:
        logger.error(f"Validation error: {str(e)}")
        return validation_error(e)

    data['id'] = None
    transaction = current_state().transactions.save(data)
    return jsonify({"message": "Transaction created successfully", "transaction": transaction}), 201


@finance_bp.route("/transactions/<transaction_id>", methods=["PUT"])
@login_required
def replace_transaction(transaction_id):
    state = current_state()
    state.transactions.require(transaction_id)
    try:
        data = TransactionSchema().load(request.get_json() or {})
    except ValidationError as e:
        logger.error(f"Validation error: {str(e)}")
        return validation_error(e)

    data['id'] = transaction_id
    transaction = state.transactions.save(data)
    return jsonify({"message": "Transaction updated successfully", "transaction": transaction}), 200


@finance_bp.route("/transactions/<transaction_id>", methods=["DELETE"])
@login_required
def delete_transaction(transaction_id):
    current_state().transactions.delete(transaction_id)
    return jsonify({"message": "Transaction deleted"}), 200


@finance_bp.route("/packages", methods=["GET"])
@login_required
def list_packages():
    return jsonify(current_state().packages.all()), 200


@finance_bp.route("/packages", methods=["POST"])
@login_required
def create_package():
    try:
        data = ProcedurePackageSchema().load(request.get_json() or {})
    except ValidationError as e:
        logger.error(f"Validation error: {str(e)}")
        return validation_error(e)

    data['id'] = None
    package = current_state().packages.save(data)
    return jsonify({"message": "Package created successfully", "package": package}), 201


@finance_bp.route("/packages/<package_id>", methods=["PUT"])
@login_required
def replace_package(package_id):
    state = current_state()
    state.packages.require(package_id)
    try:
        data = ProcedurePackageSchema().load(request.get_json() or {})
    except ValidationError as e:
        logger.error(f"Validation error: {str(e)}")
        return validation_error(e)

    data['id'] = package_id
    return jsonify({"message": "Package updated successfully", "package": state.packages.save(data)}), 200


@finance_bp.route("/packages/<package_id>", methods=["DELETE"])
@login_required
def delete_package(package_id):
    current_state().packages.delete(package_id)
    return jsonify({"message": "Package deleted"}), 200
