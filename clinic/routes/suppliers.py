# routes/suppliers.py
from flask import jsonify, request
from flask_login import login_required
from marshmallow import ValidationError

from . import suppliers_bp, current_state, validation_error
from ..schemas.supplier_schema import SupplierSchema
from ..services.supplier_service import SupplierService

from clinic import logger


@suppliers_bp.route("", methods=["GET"])
@login_required
def list_suppliers():
    """
    Suppliers filtered by ``q`` (name or contact person) and ``category``
    ('Todos' lists every category).
    """
    suppliers = SupplierService.search(
        current_state(),
        term=request.args.get('q'),
        category=request.args.get('category')
    )
    return jsonify(suppliers), 200


@suppliers_bp.route("", methods=["POST"])
@login_required
def create_supplier():
    try:
        data = SupplierSchema().load(request.get_json() or {})
    except ValidationError as e:
        logger.error(f"Validation error: {str(e)}")
        return validation_error(e)

    data['id'] = None
    supplier = SupplierService.save_supplier(current_state(), data)
    return jsonify({"message": "Supplier created successfully", "supplier": supplier}), 201


@suppliers_bp.route("/<supplier_id>", methods=["PUT"])
@login_required
def replace_supplier(supplier_id):
    state = current_state()
    state.suppliers.require(supplier_id)
    try:
        data = SupplierSchema().load(request.get_json() or {})
    except ValidationError as e:
        logger.error(f"Validation error: {str(e)}")
        return validation_error(e)

    data['id'] = supplier_id
    supplier = SupplierService.save_supplier(state, data)
    return jsonify({"message": "Supplier updated successfully", "supplier": supplier}), 200


@suppliers_bp.route("/<supplier_id>", methods=["DELETE"])
@login_required
def delete_supplier(supplier_id):
    SupplierService.delete_supplier(current_state(), supplier_id)
    return jsonify({"message": "Supplier deleted"}), 200
