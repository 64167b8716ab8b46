"""
GrowthMindz Admin - Staff Routes
Staff accounts are the role='Staff' rows of the admins table
"""
from flask import Blueprint, jsonify, request
from ..middleware.auth_middleware import require_auth
from ..middleware.rbac_middleware import require_roles
from ..services import AccountService


staff_bp = Blueprint('staff', __name__)


@staff_bp.route('', methods=['GET'])
@require_auth
@require_roles(['Admin', 'Staff'])
def list_staff():
    return jsonify(AccountService().list_staff())


@staff_bp.route('', methods=['POST'])
@require_auth
@require_roles(['Admin', 'Staff'])
def create_staff():
    """Create a staff account; the password is stored hashed"""
    data = request.get_json(silent=True) or {}
    return jsonify(AccountService().create_staff(data))


@staff_bp.route('/<int:staff_id>', methods=['PUT'])
@require_auth
@require_roles(['Admin', 'Staff'])
def update_staff(staff_id):
    data = request.get_json(silent=True) or {}
    return jsonify(AccountService().update_staff(staff_id, data))


@staff_bp.route('', methods=['DELETE'])
@require_auth
@require_roles(['Admin', 'Staff'])
def delete_staff():
    """Bulk delete, body {"ids": [...]}"""
    data = request.get_json(silent=True) or {}
    return jsonify(AccountService().delete_staff(data.get('ids')))
