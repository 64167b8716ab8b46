"""
GrowthMindz Admin - Authentication & Profile Routes
Email/password login and self-service profile management
"""
from flask import Blueprint, request, jsonify, g
from ..middleware.auth_middleware import require_auth
from ..middleware.rbac_middleware import require_roles
from ..services import AuthService, AccountService
from ..utils.exceptions import UnauthorizedException

auth_bp = Blueprint('auth', __name__)

ADMIN_AND_STAFF = ['Admin', 'Staff']


@auth_bp.route('/login', methods=['POST'])
def login():
    """Exchange email, password and role for a bearer token"""
    data = request.get_json(silent=True) or {}

    service = AuthService()
    result = service.login(data.get('email'), data.get('password'), data.get('role'))

    return jsonify(result)


# ============================================================================
# PROFILE
# ============================================================================

@auth_bp.route('/profile', methods=['GET'])
@require_auth
@require_roles(ADMIN_AND_STAFF)
def get_profile():
    account_id = g.current_user.get('id')
    if not account_id:
        raise UnauthorizedException('Unauthorized')

    return jsonify(AccountService().get_profile(account_id))


@auth_bp.route('/profile', methods=['PUT'])
@require_auth
@require_roles(ADMIN_AND_STAFF)
def update_profile():
    """Update the caller's name, email, phone, password and (Admin only) role"""
    account_id = g.current_user.get('id')
    if not account_id:
        raise UnauthorizedException('Unauthorized')

    data = request.get_json(silent=True) or {}
    return jsonify(AccountService().update_profile(account_id, data))


@auth_bp.route('/profile/<path:email>', methods=['PUT'])
@require_auth
@require_roles(ADMIN_AND_STAFF)
def update_profile_by_email(email):
    """Update the account currently registered under the given email"""
    data = request.get_json(silent=True) or {}
    return jsonify(AccountService().update_profile_by_email(email, data))
